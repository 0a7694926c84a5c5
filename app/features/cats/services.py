"""
➡️ But : Logique métier des chats.

CatService :
- lectures publiques (liste, détail, zone géographique) avec le propriétaire déplié ;
- lecture des chats de l'utilisateur courant ;
- création (photo + position) et mutations réservées au propriétaire ;
- variantes admin (changer le propriétaire, supprimer n'importe quel chat).

Règles de propriété :
- propriétaire : une seule requête filtrée sur (id, owner_id) ; pas de ligne -> 404.
- admin : lecture par id, contrôle du rôle, puis mutation.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

from fastapi import UploadFile
from shapely.geometry import Polygon
from sqlalchemy.exc import SQLAlchemyError

from app.core.errors import ForbiddenError, InternalError, NotFoundError, ValidationError
from app.db.models.cats import Cat
from app.db.models.users import User
from app.db.repositories.cats import CatRepository, CatWithOwner
from app.db.repositories.users import UserRepository
from app.features.cats.schemas import CatAdminUpdate, CatCreate, CatOut, CatUpdate, PointOut
from app.features.common.schemas import MessageOut
from app.features.users.schemas import UserOut
from app.utils.geo import point_in_polygon, validate_point
from app.utils.media_files import exif_coordinates, save_upload, validate_bytes

logger = logging.getLogger(__name__)

Coords = Tuple[float, float]  # (longitude, latitude)


class CatService:
    def __init__(
        self,
        *,
        repo: CatRepository,
        user_repo: UserRepository,
        upload_dir: str,
        max_upload_mb: int,
        default_location: Coords,
        exif_reader: Callable[[bytes], Optional[Coords]] = exif_coordinates,
    ):
        self.repo = repo
        self.users = user_repo
        self.upload_dir = upload_dir
        self.max_upload_mb = max_upload_mb
        self.default_location = default_location
        self._exif_reader = exif_reader

    # --------------- Helpers ---------------
    @staticmethod
    def _to_out(cat: Cat, owner: Optional[User]) -> CatOut:
        return CatOut(
            id=cat.id,
            cat_name=cat.cat_name,
            weight=cat.weight,
            filename=cat.filename,
            birthdate=cat.birthdate,
            location=PointOut(coordinates=[cat.longitude, cat.latitude]),
            owner=UserOut.model_validate(owner) if owner else None,
        )

    def _rows_out(self, rows: Sequence[CatWithOwner]) -> List[CatOut]:
        return [self._to_out(cat, owner) for cat, owner in rows]

    def _out(self, cat: Cat) -> CatOut:
        owner = self.users.get(cat.owner_id) if cat.owner_id is not None else None
        return self._to_out(cat, owner)

    def _write(self, action, *args, **kwargs):
        try:
            return action(*args, **kwargs)
        except SQLAlchemyError as e:
            self.repo.rollback()
            raise InternalError(str(e))

    @staticmethod
    def _ensure_admin(user: User) -> None:
        if not user.is_admin:
            logger.warning("Admin-only cat operation refused for user id=%s", user.id)
            raise ForbiddenError("Admin only")

    # --------------- Upload & position ---------------
    async def upload(self, file: UploadFile) -> Tuple[str, Optional[Coords]]:
        """
        Valide et enregistre la photo.
        Retourne (filename, coordonnées EXIF ou None).
        """
        raw = await file.read()
        try:
            _, ext = validate_bytes(raw, max_mb=self.max_upload_mb)
        except ValueError as e:
            raise ValidationError([(str(e), "file")])
        filename = save_upload(raw, upload_dir=self.upload_dir, ext_with_dot=ext)
        return filename, self._exif_reader(raw)

    def resolve_location(
        self,
        *,
        lat: Optional[float],
        lng: Optional[float],
        exif: Optional[Coords],
    ) -> Coords:
        """Formulaire (lat + lng) > EXIF GPS > point par défaut."""
        if (lat is None) != (lng is None):
            missing = "lng" if lng is None else "lat"
            raise ValidationError([("Both lat and lng are required", missing)])
        if lat is not None and lng is not None:
            try:
                validate_point(lng, lat)
            except ValueError as e:
                raise ValidationError([(str(e), "location")])
            return lng, lat
        if exif is not None:
            try:
                validate_point(*exif)
                return exif
            except ValueError as e:
                logger.warning("Ignoring out-of-range EXIF GPS %s: %s", exif, e)
        return self.default_location

    def discard_upload(self, filename: str) -> None:
        (Path(self.upload_dir) / filename).unlink(missing_ok=True)

    # --------------- Queries ---------------
    def list(self) -> List[CatOut]:
        return self._rows_out(self.repo.list_with_owner())

    def get(self, cat_id: int) -> CatOut:
        row = self.repo.get_with_owner(cat_id)
        if not row:
            raise NotFoundError("No cat found")
        return self._to_out(*row)

    def list_by_owner(self, user_id: int) -> List[CatOut]:
        return self._rows_out(self.repo.list_by_owner(user_id))

    def list_within(self, polygon: Polygon) -> List[CatOut]:
        min_lng, min_lat, max_lng, max_lat = polygon.bounds
        rows = self.repo.list_in_envelope(
            min_lng=min_lng, min_lat=min_lat, max_lng=max_lng, max_lat=max_lat
        )
        return self._rows_out(
            [(cat, owner) for cat, owner in rows if point_in_polygon(polygon, cat.longitude, cat.latitude)]
        )

    # --------------- Commands (propriétaire) ---------------
    def create(
        self,
        payload: CatCreate,
        *,
        filename: str,
        location: Coords,
        owner_id: int,
    ) -> MessageOut[CatOut]:
        lng, lat = location
        try:
            cat = self._write(
                self.repo.create,
                cat_name=payload.cat_name,
                weight=payload.weight,
                birthdate=payload.birthdate,
                filename=filename,
                longitude=lng,
                latitude=lat,
                owner_id=owner_id,
            )
        except InternalError:
            self.discard_upload(filename)
            raise
        logger.info("Cat created id=%s owner_id=%s", cat.id, owner_id)
        return MessageOut[CatOut](message="Cat created", data=self._out(cat))

    def update_by_owner(self, cat_id: int, payload: CatUpdate, *, user_id: int) -> MessageOut[CatOut]:
        cat = self.repo.get_owned(cat_id, user_id)
        if not cat:
            raise NotFoundError("No cat found")
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        changes["updated_at"] = datetime.now(timezone.utc)
        cat = self._write(self.repo.update, cat, **changes)
        return MessageOut[CatOut](message="Cat updated", data=self._out(cat))

    def delete_by_owner(self, cat_id: int, *, user_id: int) -> MessageOut[CatOut]:
        cat = self.repo.get_owned(cat_id, user_id)
        if not cat:
            raise NotFoundError("No cat found")
        out = self._out(cat)
        self._write(self.repo.delete, cat)
        logger.info("Cat deleted id=%s by owner_id=%s", cat_id, user_id)
        return MessageOut[CatOut](message="Cat deleted", data=out)

    # --------------- Commands (admin) ---------------
    def update_admin(self, cat_id: int, payload: CatAdminUpdate, *, user: User) -> MessageOut[CatOut]:
        self._ensure_admin(user)
        cat = self.repo.get(cat_id)
        if not cat:
            raise NotFoundError("No cat found")

        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        new_owner = changes.pop("owner", None)
        if new_owner is not None:
            if not self.users.get(new_owner):
                raise NotFoundError("No user found")
            changes["owner_id"] = new_owner
        changes["updated_at"] = datetime.now(timezone.utc)

        cat = self._write(self.repo.update, cat, **changes)
        logger.info("Cat id=%s updated by admin id=%s", cat_id, user.id)
        return MessageOut[CatOut](message="Cat updated", data=self._out(cat))

    def delete_admin(self, cat_id: int, *, user: User) -> MessageOut[CatOut]:
        self._ensure_admin(user)
        cat = self.repo.get(cat_id)
        if not cat:
            raise NotFoundError("No cat found")
        out = self._out(cat)
        self._write(self.repo.delete, cat)
        logger.info("Cat id=%s deleted by admin id=%s", cat_id, user.id)
        return MessageOut[CatOut](message="Cat deleted", data=out)
