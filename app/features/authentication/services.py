import logging
from typing import Optional

from jose import JWTError

from app.core.errors import ForbiddenError, NotAuthorizedError
from app.db.models.users import User
from app.db.repositories.users import UserRepository
from app.security.password import verify_password
from app.security.tokens import JWTSettings, create_access_token, decode_token
from app.features.authentication.schemas import LoginIn, LoginOut
from app.features.users.schemas import UserOut

logger = logging.getLogger(__name__)


class AuthService:
    """
    Service d'authentification : orchestre le repository User + tokens.
    Ne contient pas d'accès SQL direct et lève des erreurs typées.
    """

    def __init__(self, *, user_repo: UserRepository, jwt_settings: JWTSettings):
        self.user_repo = user_repo
        self.jwt = jwt_settings

    # ---------- Login ----------
    def login(self, payload: LoginIn) -> LoginOut:
        user = self.user_repo.get_by_login(payload.username)
        if not user or not verify_password(payload.password, user.password):
            # Ne pas révéler si l'utilisateur existe
            logger.warning("Failed login for %r", payload.username)
            raise NotAuthorizedError("Incorrect username/password")

        token = create_access_token(
            user_id=user.id,
            user_name=user.user_name,
            role=user.role,
            settings=self.jwt,
        )
        return LoginOut(message="Login successful", token=token, user=UserOut.model_validate(user))

    # ---------- Current user depuis access token ----------
    def get_current_user(self, *, access_token: str) -> User:
        try:
            decoded = decode_token(access_token, self.jwt)
            user_id = int(decoded["sub"])
        except (JWTError, KeyError, TypeError, ValueError):
            raise ForbiddenError("token not valid")

        user = self.user_repo.get(user_id)
        if not user:
            # utilisateur supprimé depuis l'émission du token
            raise ForbiddenError("token not valid")
        return user

    def get_current_user_or_none(self, *, access_token: Optional[str]) -> Optional[User]:
        if not access_token:
            return None
        try:
            return self.get_current_user(access_token=access_token)
        except ForbiddenError:
            return None
