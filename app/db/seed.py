import logging
from datetime import date
from pathlib import Path
from typing import Any, Dict, List

import yaml
from sqlmodel import Session

from app.db.repositories.cats import CatRepository
from app.db.repositories.users import UserRepository
from app.db.models.users import ROLE_ADMIN, ROLE_USER
from app.security.password import hash_password

logger = logging.getLogger(__name__)


# -----------------------------
# YAML loader
# -----------------------------
def load_seed_yaml(seed_path: str | Path) -> Dict[str, Any]:
    path = Path(seed_path)
    if not path.exists():
        raise FileNotFoundError(f"Seed YAML introuvable: {path}")

    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("Le YAML de seed doit contenir un objet racine (mapping).")
    return data


# -----------------------------
# Seeders
# -----------------------------
def seed_users(session: Session, users_yaml: List[Dict[str, Any]], *, rounds: int) -> Dict[str, int]:
    """Crée les utilisateurs absents. Retourne user_name -> id (existants compris)."""
    repo = UserRepository(session)
    ids: Dict[str, int] = {}
    for u in users_yaml:
        existing = repo.get_by_user_name(u["user_name"])
        if existing:
            ids[existing.user_name] = existing.id
            continue
        role = u.get("role", ROLE_USER)
        if role not in (ROLE_USER, ROLE_ADMIN):
            raise ValueError(f"Rôle inconnu pour {u['user_name']}: {role}")
        user = repo.create(
            user_name=u["user_name"],
            email=u["email"],
            password=hash_password(u["password"], rounds=rounds),
            role=role,
        )
        ids[user.user_name] = user.id
        logger.info("Seed: user %s (%s)", user.user_name, role)
    return ids


def seed_cats(session: Session, cats_yaml: List[Dict[str, Any]], user_ids: Dict[str, int]) -> int:
    """Crée les chats du YAML, rattachés à leur propriétaire par user_name."""
    repo = CatRepository(session)
    created = 0
    for c in cats_yaml:
        owner = c["owner"]
        if owner not in user_ids:
            raise ValueError(f"Propriétaire inconnu pour {c['cat_name']}: {owner}")
        lng, lat = c["location"]
        birthdate = c["birthdate"]
        repo.create(
            cat_name=c["cat_name"],
            weight=float(c["weight"]),
            birthdate=birthdate if isinstance(birthdate, date) else date.fromisoformat(str(birthdate)),
            filename=c.get("filename", "placeholder.jpg"),
            longitude=float(lng),
            latitude=float(lat),
            owner_id=user_ids[owner],
        )
        created += 1
    return created


def seed_all(*, session: Session, seed_path: str | Path, rounds: int) -> None:
    data = load_seed_yaml(seed_path)
    user_ids = seed_users(session, data.get("users", []), rounds=rounds)

    # Les chats ne sont semés que pour une base sans chats (seed rejouable)
    if CatRepository(session).count() == 0:
        n = seed_cats(session, data.get("cats", []), user_ids)
        logger.info("Seed: %d cats", n)
