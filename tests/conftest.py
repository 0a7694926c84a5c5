# File: tests/conftest.py

import io
import os
import tempfile

# Configuration de test, avant tout import de l'application
os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="cat-api-uploads-")

import pytest
from fastapi.testclient import TestClient
from PIL import Image
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from app.main import app
from app.db.session import enable_sqlite_foreign_keys, get_session
from app.db.repositories.users import UserRepository
from app.security.password import hash_password

API = "/api/v1"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(engine):
    def _session_override():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _session_override
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


# -----------------------------
# Helpers
# -----------------------------
def png_bytes() -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (4, 4), "white").save(buf, format="PNG")
    return buf.getvalue()


def register(client, user_name="alice", email="alice@example.com", password="secret1"):
    return client.post(f"{API}/users", json={"user_name": user_name, "email": email, "password": password})


def login_headers(client, username, password):
    resp = client.post(f"{API}/auth/login", json={"username": username, "password": password})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['token']}"}


def create_cat(client, headers, *, cat_name="Miuku", lat=None, lng=None, **extra):
    data = {"cat_name": cat_name, "weight": "4.2", "birthdate": "2020-01-01", **extra}
    if lat is not None:
        data["lat"] = str(lat)
    if lng is not None:
        data["lng"] = str(lng)
    files = {"file": ("cat.png", png_bytes(), "image/png")}
    return client.post(f"{API}/cats", data=data, files=files, headers=headers)


@pytest.fixture
def alice(client):
    user_id = register(client).json()["data"]["_id"]
    return {"id": user_id, "headers": login_headers(client, "alice", "secret1")}


@pytest.fixture
def bob(client):
    user_id = register(client, "bob", "bob@example.com", "secret2").json()["data"]["_id"]
    return {"id": user_id, "headers": login_headers(client, "bob", "secret2")}


@pytest.fixture
def admin(client, session):
    user = UserRepository(session).create(
        user_name="root",
        email="root@example.com",
        password=hash_password("rootpass", rounds=4),
        role="admin",
    )
    return {"id": user.id, "headers": login_headers(client, "root", "rootpass")}
