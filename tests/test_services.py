# File: tests/test_services.py

import pytest
from jose import jwt
from sqlalchemy.exc import IntegrityError

from app.core.errors import ConflictError, ForbiddenError, InternalError, ValidationError
from app.db.models.users import ROLE_ADMIN, User
from app.features.authentication import services as auth_services
from app.features.authentication.services import AuthService
from app.features.cats.services import CatService
from app.features.users.schemas import UserUpdate
from app.features.users.services import UserService
from app.security.tokens import JWTSettings


def _cat_service(exif=None):
    return CatService(
        repo=None,
        user_repo=None,
        upload_dir="unused",
        max_upload_mb=1,
        default_location=(24.94, 60.17),
        exif_reader=lambda raw: exif,
    )


def test_location_priority_form_then_exif_then_default():
    svc = _cat_service()
    assert svc.resolve_location(lat=61.5, lng=23.7, exif=(10.0, 50.0)) == (23.7, 61.5)
    assert svc.resolve_location(lat=None, lng=None, exif=(10.0, 50.0)) == (10.0, 50.0)
    assert svc.resolve_location(lat=None, lng=None, exif=None) == (24.94, 60.17)


def test_out_of_range_exif_falls_back_to_default():
    svc = _cat_service()
    assert svc.resolve_location(lat=None, lng=None, exif=(24.9, 95.0)) == (24.94, 60.17)
    assert svc.resolve_location(lat=None, lng=None, exif=(190.0, 60.0)) == (24.94, 60.17)


def test_location_out_of_range():
    with pytest.raises(ValidationError) as exc:
        _cat_service().resolve_location(lat=120.0, lng=23.7, exif=None)
    assert exc.value.status_code == 400
    assert exc.value.message.endswith(": location")


def test_admin_check_is_exact_role_comparison():
    with pytest.raises(ForbiddenError):
        CatService._ensure_admin(User(id=1, user_name="x", email="x@x.com", password="h", role="Admin"))
    CatService._ensure_admin(User(id=2, user_name="y", email="y@x.com", password="h", role=ROLE_ADMIN))


def test_check_token_needs_no_store():
    svc = UserService(repo=None)
    with pytest.raises(ForbiddenError):
        svc.check_token(None)


def test_validation_error_message_joins_fields():
    err = ValidationError([("Field required", "cat_name"), ("Input should be a valid number", "weight")])
    assert err.message == "Field required: cat_name, Input should be a valid number: weight"
    assert err.status_code == 400


class _FailingUserRepo:
    """Repo minimal : toute écriture viole une contrainte."""

    def __init__(self):
        self.user = User(id=1, user_name="alice", email="alice@example.com", password="h")
        self.rolled_back = False

    def get(self, user_id):
        return self.user

    def _fail(self, *args, **kwargs):
        raise IntegrityError("stmt", {}, Exception("constraint failed"))

    create = update = delete = _fail

    def rollback(self):
        self.rolled_back = True


def test_integrity_error_on_delete_is_not_a_duplicate():
    repo = _FailingUserRepo()
    with pytest.raises(InternalError):
        UserService(repo, password_rounds=4).delete_current(1)
    assert repo.rolled_back


def test_integrity_error_on_update_is_a_conflict():
    with pytest.raises(ConflictError):
        UserService(_FailingUserRepo(), password_rounds=4).update_current(1, UserUpdate(user_name="bob"))


def test_token_with_non_numeric_subject_is_forbidden():
    settings = JWTSettings(secret="s3cret", issuer="cat-api")
    token = jwt.encode({"iss": "cat-api", "sub": "alice", "typ": "access"}, "s3cret", algorithm="HS256")
    with pytest.raises(ForbiddenError):
        AuthService(user_repo=None, jwt_settings=settings).get_current_user(access_token=token)


def test_unexpected_decoding_fault_is_not_hidden(monkeypatch):
    def broken(token, settings):
        raise RuntimeError("key store down")

    monkeypatch.setattr(auth_services, "decode_token", broken)
    svc = AuthService(user_repo=None, jwt_settings=JWTSettings(secret="s3cret"))
    with pytest.raises(RuntimeError):
        svc.get_current_user(access_token="whatever")
