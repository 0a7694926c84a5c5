# File: tests/test_seed.py

from app.db.repositories.cats import CatRepository
from app.db.repositories.users import UserRepository
from app.db.seed import seed_all
from app.security.password import verify_password

SEED = """
users:
  - user_name: admin
    email: admin@example.com
    password: adminpass
    role: admin
  - user_name: demo
    email: demo@example.com
    password: demopass
cats:
  - cat_name: Miuku
    owner: demo
    weight: 4.2
    birthdate: 2019-05-01
    location: [24.94, 60.17]
"""


def test_seed_is_idempotent(session, tmp_path):
    path = tmp_path / "seed.yaml"
    path.write_text(SEED, encoding="utf-8")

    seed_all(session=session, seed_path=path, rounds=4)
    seed_all(session=session, seed_path=path, rounds=4)

    users = UserRepository(session)
    assert users.count() == 2
    admin = users.get_by_user_name("admin")
    assert admin.role == "admin"
    assert verify_password("adminpass", admin.password)
    assert users.get_by_user_name("demo").role == "user"

    cats = CatRepository(session).list()
    assert len(cats) == 1
    assert cats[0].owner_id == users.get_by_user_name("demo").id
    assert (cats[0].longitude, cats[0].latitude) == (24.94, 60.17)
