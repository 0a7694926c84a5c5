# File: tests/test_security.py

from datetime import timedelta

import pytest
from jose import JWTError

from app.security.password import hash_password, verify_password
from app.security.tokens import JWTSettings, create_access_token, decode_token


def test_hash_uses_given_cost():
    hashed = hash_password("secret1", rounds=4)
    assert hashed.startswith("$2b$04$")
    assert hashed != "secret1"
    assert verify_password("secret1", hashed)
    assert not verify_password("secret2", hashed)


def test_verify_password_with_garbage_hash():
    assert not verify_password("secret1", "not-a-hash")
    assert not verify_password("", "")


def test_hash_empty_password_is_refused():
    with pytest.raises(ValueError):
        hash_password("", rounds=4)


def test_access_token_round_trip():
    settings = JWTSettings(secret="s3cret", issuer="cat-api")
    token = create_access_token(user_id=7, user_name="alice", role="user", settings=settings)
    decoded = decode_token(token, settings)
    assert decoded["sub"] == "7"
    assert decoded["user_name"] == "alice"
    assert decoded["typ"] == "access"


def test_expired_or_foreign_tokens_are_rejected():
    settings = JWTSettings(secret="s3cret", issuer="cat-api", access_ttl=timedelta(seconds=-10))
    expired = create_access_token(user_id=7, user_name="alice", role="user", settings=settings)
    with pytest.raises(JWTError):
        decode_token(expired, settings)

    other = JWTSettings(secret="other", issuer="cat-api")
    token = create_access_token(user_id=7, user_name="alice", role="user", settings=other)
    with pytest.raises(JWTError):
        decode_token(token, JWTSettings(secret="s3cret", issuer="cat-api"))
