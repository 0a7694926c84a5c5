"""
➡️ But : Définir la structure des tables de la base (ORM).

Représente les objets persistés. Ici on représente les tables ayant un rapport avec les users.

Le mot de passe est toujours stocké haché (bcrypt), jamais en clair.
"""

from sqlmodel import Field

from .base import BaseModelDB

ROLE_USER = "user"
ROLE_ADMIN = "admin"


class User(BaseModelDB, table=True):
    user_name: str = Field(index=True, unique=True)
    email: str = Field(index=True, unique=True)
    password: str
    role: str = Field(default=ROLE_USER, description="user | admin")

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN
