"""
➡️ But : Définir les formats d’entrée/sortie de l’API (couche validation).

Contient les modèles Pydantic utilisés par FastAPI :

UserCreate → corps de requête POST

UserUpdate → corps PUT (utilisateur courant)

UserOut → réponse de l’API

Sépare les modèles "de stockage" (ORM) de ceux "de transfert" (I/O API).

🔹 Avantages :

Validation automatique.

Documente les champs dans Swagger (types, exemples...).

Empêche d’exposer par erreur des infos sensibles (ici : hash de mot de passe et rôle).
"""

from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from app.features.common.schemas import id_field


class UserCreate(BaseModel):
    user_name: str = Field(..., min_length=3, max_length=64, examples=["alice"])
    email: EmailStr = Field(..., examples=["alice@example.com"])
    password: str = Field(..., min_length=1, max_length=72)


class UserUpdate(BaseModel):
    user_name: Optional[str] = Field(None, min_length=3, max_length=64)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=1, max_length=72)


class UserOut(BaseModel):
    id: int = id_field()
    user_name: str
    email: str

    model_config = {"from_attributes": True}
