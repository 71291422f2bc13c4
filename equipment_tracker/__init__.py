"""Local equipment inventory tracker: record store, queries and reports."""

import logging

from .core.config import settings
from .core.errors import NotFound, StorageUnavailable, TrackerError, ValidationError
from .core.logging_config import setup_logging
from .models import EquipmentRead, EquipmentStatus
from .services.store import EquipmentStore

__version__ = settings.app_version


def create_store(database_url: str | None = None) -> EquipmentStore:
    """Configure logging and return an opened store (caller owns close())."""
    setup_logging()
    logger = logging.getLogger(__name__)
    store = EquipmentStore(database_url).open()
    logger.info("%s %s ready", settings.app_name, settings.app_version)
    return store


__all__ = [
    "create_store",
    "EquipmentStore",
    "EquipmentRead",
    "EquipmentStatus",
    "TrackerError",
    "ValidationError",
    "NotFound",
    "StorageUnavailable",
]
