"""
➡️ But : Centraliser les dépendances réutilisables des routes.

Exemples :

get_user_service() : crée un UserService à partir d’une session DB.

get_current_user() : résout l'utilisateur courant depuis le bearer token.

🔹 Avantages :

Routes plus propres (pas de code dupliqué).

Facile à injecter dans plusieurs endpoints (Depends()).
"""

from typing import Optional

from fastapi import Depends, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlmodel import Session

from app.core.config import jwt_settings, settings
from app.core.errors import ForbiddenError
from app.db.session import get_session

from app.db.models.users import User
from app.db.repositories.users import UserRepository
from app.db.repositories.cats import CatRepository

from app.features.authentication.services import AuthService
from app.features.users.services import UserService
from app.features.cats.services import CatService


# -----------------------------
# Repositories
# -----------------------------
def get_user_repository(session: Session = Depends(get_session)) -> UserRepository:
    return UserRepository(session)

def get_cat_repository(session: Session = Depends(get_session)) -> CatRepository:
    return CatRepository(session)


# -----------------------------
# Services
# -----------------------------
def get_user_service(user_repo: UserRepository = Depends(get_user_repository)) -> UserService:
    return UserService(user_repo, password_rounds=settings.BCRYPT_ROUNDS)


def get_auth_service(user_repo: UserRepository = Depends(get_user_repository)) -> AuthService:
    return AuthService(user_repo=user_repo, jwt_settings=jwt_settings)


def get_cat_service(
    cat_repo: CatRepository = Depends(get_cat_repository),
    user_repo: UserRepository = Depends(get_user_repository),
) -> CatService:
    return CatService(
        repo=cat_repo,
        user_repo=user_repo,
        upload_dir=settings.UPLOAD_DIR,
        max_upload_mb=settings.MAX_UPLOAD_MB,
        default_location=(settings.DEFAULT_LONGITUDE, settings.DEFAULT_LATITUDE),
    )


# -----------------------------
# Authentication data
# -----------------------------
# auto_error=False : l'absence de token est traitée ici (403 uniforme)
bearer_scheme = HTTPBearer(auto_error=False)

def get_access_token_from_bearer(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
) -> Optional[str]:
    if not credentials or credentials.scheme.lower() != "bearer":
        return None
    return credentials.credentials


def get_optional_user(
    access_token: Optional[str] = Depends(get_access_token_from_bearer),
    auth_svc: AuthService = Depends(get_auth_service),
) -> Optional[User]:
    return auth_svc.get_current_user_or_none(access_token=access_token)


def get_current_user(
    access_token: Optional[str] = Depends(get_access_token_from_bearer),
    auth_svc: AuthService = Depends(get_auth_service),
) -> User:
    if not access_token:
        raise ForbiddenError("token not valid")
    return auth_svc.get_current_user(access_token=access_token)
