# File: tests/test_users_api.py

from conftest import API, create_cat, login_headers, register


def test_create_user_returns_minimal_envelope(client):
    resp = register(client, "alice", "a@x.com", "pw")
    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "User created"
    assert set(body["data"]) == {"_id", "user_name", "email"}
    assert body["data"]["user_name"] == "alice"
    assert body["data"]["email"] == "a@x.com"

    # un mot de passe court suffit pour se connecter
    assert login_headers(client, "alice", "pw")


def test_create_user_with_empty_password_is_rejected(client):
    resp = register(client, "alice", "a@x.com", "")
    assert resp.status_code == 400
    assert resp.json()["message"].endswith(": password")


def test_create_user_duplicate_is_conflict(client):
    register(client)
    resp = register(client, "alice", "other@example.com")
    assert resp.status_code == 409
    assert "message" in resp.json()

    resp = register(client, "alice2", "alice@example.com")
    assert resp.status_code == 409


def test_create_user_validation_lists_every_field(client):
    resp = client.post(f"{API}/users", json={"user_name": "al", "password": "pw"})
    assert resp.status_code == 400
    message = resp.json()["message"]
    assert "user_name" in message
    assert "email" in message
    assert ", " in message


def test_get_user_never_exposes_password_or_role(client):
    user_id = register(client).json()["data"]["_id"]
    resp = client.get(f"{API}/users/{user_id}")
    assert resp.status_code == 200
    body = resp.json()
    assert body == {"_id": user_id, "user_name": "alice", "email": "alice@example.com"}


def test_get_missing_user_is_always_not_found(client):
    for _ in range(3):
        resp = client.get(f"{API}/users/999")
        assert resp.status_code == 404
        assert resp.json() == {"message": "No user found"}


def test_get_user_with_bad_id_is_validation_error(client):
    resp = client.get(f"{API}/users/abc")
    assert resp.status_code == 400
    assert "user_id" in resp.json()["message"]


def test_list_users(client):
    assert client.get(f"{API}/users").json() == []
    register(client)
    register(client, "bob", "bob@example.com")
    users = client.get(f"{API}/users").json()
    assert [u["user_name"] for u in users] == ["alice", "bob"]
    for u in users:
        assert "password" not in u
        assert "role" not in u


def test_check_token_without_session_is_forbidden(client):
    resp = client.get(f"{API}/users/token")
    assert resp.status_code == 403
    assert resp.json() == {"message": "token not valid"}


def test_check_token_with_garbage_token_is_forbidden(client):
    resp = client.get(f"{API}/users/token", headers={"Authorization": "Bearer nope"})
    assert resp.status_code == 403


def test_check_token_echoes_identity(client, alice):
    resp = client.get(f"{API}/users/token", headers=alice["headers"])
    assert resp.status_code == 200
    assert resp.json() == {"_id": alice["id"], "user_name": "alice", "email": "alice@example.com"}


def test_update_current_user_hashes_new_password(client, alice):
    resp = client.put(
        f"{API}/users",
        json={"email": "new@example.com", "password": "changed1"},
        headers=alice["headers"],
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "User updated"
    assert body["data"] == {"_id": alice["id"], "user_name": "alice", "email": "new@example.com"}

    # l'ancien mot de passe ne marche plus, le nouveau oui
    old = client.post(f"{API}/auth/login", json={"username": "alice", "password": "secret1"})
    assert old.status_code == 401
    login_headers(client, "new@example.com", "changed1")


def test_update_current_user_duplicate_name_is_conflict(client, alice, bob):
    resp = client.put(f"{API}/users", json={"user_name": "bob"}, headers=alice["headers"])
    assert resp.status_code == 409


def test_update_current_user_requires_session(client):
    resp = client.put(f"{API}/users", json={"user_name": "zed"})
    assert resp.status_code == 403


def test_delete_current_user(client, alice):
    resp = client.delete(f"{API}/users", headers=alice["headers"])
    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "User deleted"
    assert body["data"]["_id"] == alice["id"]
    assert "password" not in body["data"]

    assert client.get(f"{API}/users/{alice['id']}").status_code == 404
    # le token pointe maintenant vers un utilisateur disparu
    assert client.get(f"{API}/users/token", headers=alice["headers"]).status_code == 403


def test_delete_user_keeps_cats_without_owner(client, alice):
    cat_id = create_cat(client, alice["headers"]).json()["data"]["_id"]

    resp = client.delete(f"{API}/users", headers=alice["headers"])
    assert resp.status_code == 200
    assert resp.json()["message"] == "User deleted"

    cat = client.get(f"{API}/cats/{cat_id}").json()
    assert cat["_id"] == cat_id
    assert cat["owner"] is None


def test_login_with_wrong_password(client):
    register(client)
    resp = client.post(f"{API}/auth/login", json={"username": "alice", "password": "wrong"})
    assert resp.status_code == 401
    assert resp.json() == {"message": "Incorrect username/password"}


def test_login_returns_token_and_user(client):
    user_id = register(client).json()["data"]["_id"]
    resp = client.post(f"{API}/auth/login", json={"username": "alice@example.com", "password": "secret1"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Login successful"
    assert body["token"]
    assert body["user"] == {"_id": user_id, "user_name": "alice", "email": "alice@example.com"}

    me = client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {body['token']}"})
    assert me.json()["user_name"] == "alice"
