"""
Schémas partagés : identifiant exposé en `_id` et enveloppe {message, data}.
"""

from typing import Generic, TypeVar

from pydantic import AliasChoices, BaseModel, Field

T = TypeVar("T")


def id_field():
    # attribut ORM `id`, exposé `_id` dans le JSON (relu depuis l'un ou l'autre)
    return Field(validation_alias=AliasChoices("id", "_id"), serialization_alias="_id")


class MessageOut(BaseModel, Generic[T]):
    """Enveloppe de réponse des mutations."""
    message: str
    data: T


class ErrorOut(BaseModel):
    message: str
