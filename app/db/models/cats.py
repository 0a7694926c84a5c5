from datetime import date
from typing import Optional

from sqlmodel import Field
from sqlalchemy import Column, ForeignKey, Integer

from .base import BaseModelDB


class Cat(BaseModelDB, table=True):
    """Chat enregistré par un utilisateur, avec sa photo et sa position."""

    cat_name: str = Field(index=True)
    weight: float
    filename: str = Field(description="Nom du fichier uploadé (dans UPLOAD_DIR)")
    birthdate: date

    # Point géographique (WGS84)
    longitude: float = Field(index=True)
    latitude: float = Field(index=True)

    # Pas de cascade : supprimer un utilisateur garde ses chats, sans propriétaire
    owner_id: Optional[int] = Field(
        default=None,
        sa_column=Column(
            Integer,
            ForeignKey("user.id", ondelete="SET NULL"),
            nullable=True,
            index=True,
        ),
        description="Propriétaire du chat (NULL si le compte a été supprimé)",
    )
