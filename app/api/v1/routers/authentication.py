from fastapi import APIRouter, Depends

from app.api.v1.dependencies import get_auth_service, get_current_user
from app.db.models.users import User
from app.features.authentication.services import AuthService
from app.features.authentication.schemas import LoginIn, LoginOut
from app.features.common.schemas import ErrorOut
from app.features.users.schemas import UserOut

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
    responses={404: {"model": ErrorOut, "description": "Not Found"}},
)

# -----------------------------
# Login
# -----------------------------
@router.post(
    "/login",
    summary="Se connecter",
    description="`username` accepte le nom d'utilisateur ou l'email. Retourne un access token (bearer).",
    response_model=LoginOut,
    responses={401: {"model": ErrorOut, "description": "Identifiants invalides"}},
)
def login(payload: LoginIn, svc: AuthService = Depends(get_auth_service)):
    return svc.login(payload)

# -----------------------------
# Me (profil courant)
# -----------------------------
@router.get(
    "/me",
    summary="Récupérer l'utilisateur courant",
    response_model=UserOut,
    responses={
        200: {"description": "Utilisateur courant"},
        403: {"model": ErrorOut, "description": "Token absent, invalide ou expiré"},
    },
)
def me(user: User = Depends(get_current_user)):
    return UserOut.model_validate(user)
