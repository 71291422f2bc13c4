"""JSON logging setup shared by the library entry points and the CLI."""

from __future__ import annotations

import logging
import os
from typing import Optional

from pythonjsonlogger import jsonlogger

_CONFIGURED = False
_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s %(service)s"


class _ServiceNameFilter(logging.Filter):
    def __init__(self, service_name: str) -> None:
        super().__init__()
        self.service_name = service_name

    def filter(self, record: logging.LogRecord) -> bool:
        record.service = self.service_name
        return True


def setup_logging(service_name: Optional[str] = None, level: Optional[str] = None) -> None:
    """Send root log records to stderr as JSON lines tagged with ``service``.

    ``level`` wins over ``LOG_LEVEL`` (default WARNING, so CLI output stays
    clean). Only the first call has an effect.
    """

    global _CONFIGURED
    if _CONFIGURED:
        return

    log_level = (level or os.getenv("LOG_LEVEL", "WARNING")).upper()
    service = service_name or os.getenv("SERVICE_NAME", "equipment-tracker")

    handler = logging.StreamHandler()
    handler.setFormatter(jsonlogger.JsonFormatter(_FORMAT))
    handler.addFilter(_ServiceNameFilter(service))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(log_level)
    logging.captureWarnings(True)
    _CONFIGURED = True


def reset_logging() -> None:
    """Forget a previous setup_logging() call (used by tests)."""

    global _CONFIGURED
    _CONFIGURED = False


__all__ = ["setup_logging", "reset_logging"]
