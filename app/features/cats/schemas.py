from datetime import date
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from app.features.common.schemas import id_field
from app.features.users.schemas import UserOut


class CatCreate(BaseModel):
    """Champs texte du formulaire multipart ; le fichier et la position arrivent à part."""
    cat_name: str = Field(..., min_length=1, max_length=100)
    weight: float = Field(..., gt=0)
    birthdate: date


class CatUpdate(BaseModel):
    cat_name: Optional[str] = Field(None, min_length=1, max_length=100)
    weight: Optional[float] = Field(None, gt=0)
    birthdate: Optional[date] = None


class CatAdminUpdate(CatUpdate):
    owner: Optional[int] = Field(None, ge=1, description="Nouvel identifiant de propriétaire")


class PointOut(BaseModel):
    type: Literal["Point"] = "Point"
    coordinates: List[float] = Field(..., min_length=2, max_length=2, examples=[[24.94, 60.17]])


class CatOut(BaseModel):
    id: int = id_field()
    cat_name: str
    weight: float
    filename: str
    birthdate: date
    location: PointOut
    owner: Optional[UserOut] = None
