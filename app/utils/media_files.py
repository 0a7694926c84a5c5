import io
import datetime
from pathlib import Path
from typing import Tuple, Set
from uuid import uuid4

import filetype
from PIL import Image, UnidentifiedImageError

from app.utils.geo import coords_from_gps_ifd

# Allow-list des photos de chats
ALLOWED_IMAGE_MIME: Set[str] = {"image/jpeg", "image/png", "image/webp", "image/gif"}

GPS_IFD_TAG = 0x8825


def detect_mime_and_ext(file_bytes: bytes) -> Tuple[str, str]:
    """
    Détecte le type réel via 'filetype'.
    Retourne (real_mime, ext_with_dot).
    """
    kind = filetype.guess(file_bytes)
    real_mime = kind.mime if kind else "application/octet-stream"
    ext = "." + (kind.extension if kind else "bin")
    return real_mime, ext


def validate_bytes(
    file_bytes: bytes,
    *,
    max_mb: int,
    allowed_mime: Set[str] = ALLOWED_IMAGE_MIME,
) -> Tuple[str, str]:
    """
    Retourne (real_mime, ext_with_dot).
    Lève ValueError si invalide.
    """
    size = len(file_bytes)
    if size == 0:
        raise ValueError("Empty file")
    if size > max_mb * 1024 * 1024:
        raise ValueError(f"File too large (max {max_mb} MB)")

    real_mime, ext = detect_mime_and_ext(file_bytes)

    if real_mime not in allowed_mime:
        raise ValueError(f"File type not allowed ({real_mime})")

    return real_mime, ext


def build_filename(ext_with_dot: str) -> str:
    """
    Nom de fichier unique et lisible.
    Exemple : 2025-12-18_<uuid>.png
    """
    today = datetime.date.today().isoformat()
    ext = ext_with_dot if ext_with_dot.startswith(".") else f".{ext_with_dot}"
    return f"{today}_{uuid4().hex}{ext}"


def save_upload(file_bytes: bytes, *, upload_dir: str, ext_with_dot: str) -> str:
    """Écrit le fichier dans upload_dir et retourne son nom."""
    directory = Path(upload_dir)
    directory.mkdir(parents=True, exist_ok=True)
    filename = build_filename(ext_with_dot)
    (directory / filename).write_bytes(file_bytes)
    return filename


def exif_coordinates(file_bytes: bytes) -> Tuple[float, float] | None:
    """(longitude, latitude) depuis les tags GPS EXIF de l'image, sinon None."""
    try:
        with Image.open(io.BytesIO(file_bytes)) as img:
            gps = img.getexif().get_ifd(GPS_IFD_TAG)
    except (UnidentifiedImageError, OSError):
        return None
    return coords_from_gps_ifd(dict(gps)) if gps else None
