"""
➡️ But : Contenir la logique métier : orchestrer les repos, appliquer des règles, gérer les erreurs.

UserService : inscription, lecture, mise à jour / suppression de l'utilisateur courant.

Lève des erreurs typées (app.core.errors) que les handlers transforment en réponses HTTP.

🔹 Avantages :

Code métier découplé du web.

Test unitaire possible sans passer par FastAPI.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.core.errors import ConflictError, ForbiddenError, InternalError, NotFoundError
from app.db.models.users import User
from app.db.repositories.users import UserRepository
from app.features.common.schemas import MessageOut
from app.features.users.schemas import UserCreate, UserOut, UserUpdate
from app.security.password import DEFAULT_ROUNDS, hash_password

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, repo: UserRepository, *, password_rounds: int = DEFAULT_ROUNDS):
        self.repo = repo
        self.password_rounds = password_rounds

    # --------------- Helpers ---------------
    def _hash(self, password: str) -> str:
        return hash_password(password, rounds=self.password_rounds)

    def _write(self, action, *args, unique_conflict: bool = False, **kwargs):
        """
        Exécute une écriture ; erreur store -> 500.
        Avec unique_conflict=True, une IntegrityError devient un 409 (doublon user_name/email).
        """
        try:
            return action(*args, **kwargs)
        except IntegrityError as e:
            self.repo.rollback()
            if unique_conflict:
                raise ConflictError("User name or email already in use")
            raise InternalError(str(e))
        except SQLAlchemyError as e:
            self.repo.rollback()
            raise InternalError(str(e))

    # --------------- Queries ---------------
    def list(self) -> List[UserOut]:
        return [UserOut.model_validate(u) for u in self.repo.list()]

    def get(self, user_id: int) -> UserOut:
        user = self.repo.get(user_id)
        if not user:
            raise NotFoundError("No user found")
        return UserOut.model_validate(user)

    def check_token(self, user: Optional[User]) -> UserOut:
        # aucune lecture en base : l'identité vient du token déjà validé
        if user is None:
            raise ForbiddenError("token not valid")
        return UserOut.model_validate(user)

    # --------------- Commands ---------------
    def create(self, payload: UserCreate) -> MessageOut[UserOut]:
        user = self._write(
            self.repo.create,
            user_name=payload.user_name,
            email=payload.email,
            password=self._hash(payload.password),
            unique_conflict=True,
        )
        logger.info("User created id=%s user_name=%s", user.id, user.user_name)
        return MessageOut[UserOut](message="User created", data=UserOut.model_validate(user))

    def update_current(self, user_id: int, payload: UserUpdate) -> MessageOut[UserOut]:
        user = self.repo.get(user_id)
        if not user:
            raise NotFoundError("No user found")

        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        if "password" in changes:
            changes["password"] = self._hash(changes["password"])
        changes["updated_at"] = datetime.now(timezone.utc)

        user = self._write(self.repo.update, user, unique_conflict=True, **changes)
        return MessageOut[UserOut](message="User updated", data=UserOut.model_validate(user))

    def delete_current(self, user_id: int) -> MessageOut[UserOut]:
        user = self.repo.get(user_id)
        if not user:
            raise NotFoundError("No user found")
        out = UserOut.model_validate(user)
        # les chats restent, owner_id passe à NULL côté base (ON DELETE SET NULL)
        self._write(self.repo.delete, user)
        logger.info("User deleted id=%s", user_id)
        return MessageOut[UserOut](message="User deleted", data=out)
