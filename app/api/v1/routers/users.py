"""
➡️ But : Définir les endpoints de l’API.

C’est la couche la plus proche du web :

Réceptionne les requêtes HTTP (GET, POST, PUT, DELETE…)

Appelle le service correspondant

Retourne les schémas de sortie (response_model)

Chaque fonction représente une route.

🔹 Avantages :

Automatiquement documentée dans Swagger :

summary, description, response_model, examples

Isolation totale du reste du code : les routes ne contiennent ni SQL ni logique métier.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Path

from app.api.v1.dependencies import get_current_user, get_optional_user, get_user_service
from app.db.models.users import User
from app.features.common.schemas import ErrorOut, MessageOut
from app.features.users.schemas import UserCreate, UserOut, UserUpdate
from app.features.users.services import UserService

router = APIRouter(
    prefix="/users",
    tags=["users"],
    responses={404: {"model": ErrorOut, "description": "Not Found"}},
)

@router.get(
    "",
    summary="Lister les utilisateurs",
    description="Retourne tous les utilisateurs, sans mot de passe ni rôle.",
    response_model=List[UserOut],
    responses={
        200: {
            "description": "Liste des utilisateurs",
            "content": {
                "application/json": {
                    "example": [
                        {"_id": 1, "user_name": "alice", "email": "alice@example.com"},
                        {"_id": 2, "user_name": "bob", "email": "bob@example.com"},
                    ]
                }
            },
        }
    },
)
def list_users(svc: UserService = Depends(get_user_service)):
    return svc.list()

@router.post(
    "",
    summary="Créer un compte",
    response_model=MessageOut[UserOut],
    responses={400: {"model": ErrorOut}, 409: {"model": ErrorOut}},
)
def create_user(payload: UserCreate, svc: UserService = Depends(get_user_service)):
    return svc.create(payload)

@router.put(
    "",
    summary="Mettre à jour l'utilisateur courant",
    response_model=MessageOut[UserOut],
    responses={403: {"model": ErrorOut}, 409: {"model": ErrorOut}},
)
def update_current_user(
    payload: UserUpdate,
    user: User = Depends(get_current_user),
    svc: UserService = Depends(get_user_service),
):
    return svc.update_current(user.id, payload)

@router.delete(
    "",
    summary="Supprimer l'utilisateur courant",
    response_model=MessageOut[UserOut],
    responses={403: {"model": ErrorOut}},
)
def delete_current_user(
    user: User = Depends(get_current_user),
    svc: UserService = Depends(get_user_service),
):
    return svc.delete_current(user.id)

@router.get(
    "/token",
    summary="Vérifier le token courant",
    description="Renvoie l'identité portée par le token, sans requête supplémentaire sur les utilisateurs.",
    response_model=UserOut,
    responses={403: {"model": ErrorOut, "description": "Token absent ou invalide"}},
)
def check_token(
    user: Optional[User] = Depends(get_optional_user),
    svc: UserService = Depends(get_user_service),
):
    return svc.check_token(user)

@router.get(
    "/{user_id}",
    summary="Récupérer un utilisateur",
    response_model=UserOut,
)
def get_user(user_id: int = Path(..., ge=1), svc: UserService = Depends(get_user_service)):
    return svc.get(user_id)
