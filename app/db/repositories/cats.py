from typing import Optional, Sequence, Tuple

from sqlmodel import select

from app.db.repositories.base import BaseRepository
from app.db.models.cats import Cat
from app.db.models.users import User

CatWithOwner = Tuple[Cat, Optional[User]]


class CatRepository(BaseRepository[Cat]):
    """CRUD Cats + requêtes avec propriétaire et filtres géographiques."""
    model = Cat

    def _with_owner(self):
        # outer join : un chat peut survivre à son propriétaire
        return select(Cat, User).join(User, User.id == Cat.owner_id, isouter=True)

    def list_with_owner(self) -> Sequence[CatWithOwner]:
        return self.session.exec(self._with_owner().order_by(Cat.id)).all()

    def get_with_owner(self, cat_id: int) -> Optional[CatWithOwner]:
        return self.session.exec(self._with_owner().where(Cat.id == cat_id)).first()

    def list_by_owner(self, owner_id: int) -> Sequence[CatWithOwner]:
        return self.session.exec(
            self._with_owner().where(Cat.owner_id == owner_id).order_by(Cat.id)
        ).all()

    def list_in_envelope(
        self, *, min_lng: float, min_lat: float, max_lng: float, max_lat: float
    ) -> Sequence[CatWithOwner]:
        """Pré-filtre SQL sur le rectangle englobant ; le test exact se fait côté service."""
        stmt = (
            self._with_owner()
            .where(Cat.longitude >= min_lng, Cat.longitude <= max_lng)
            .where(Cat.latitude >= min_lat, Cat.latitude <= max_lat)
            .order_by(Cat.id)
        )
        return self.session.exec(stmt).all()

    def get_owned(self, cat_id: int, owner_id: int) -> Optional[Cat]:
        """Le chat `cat_id` seulement s'il appartient à `owner_id`."""
        return self.session.exec(
            select(Cat).where(Cat.id == cat_id, Cat.owner_id == owner_id)
        ).first()
