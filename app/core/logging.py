"""
➡️ But : Configurer le logging de l'application une seule fois.

Chaque module déclare son logger avec logging.getLogger(__name__) ;
configure_logging() fixe le niveau et le format à partir des settings.
"""

import logging

from app.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    level_name = (level or settings.LOG_LEVEL or "INFO").upper()
    logging.basicConfig(level=level_name, format=LOG_FORMAT)
    logging.getLogger("app").setLevel(level_name)
