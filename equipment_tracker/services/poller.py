"""
Periodic inventory polling.

Re-reads the whole store on a fixed interval and hands each snapshot to a
callback, the way the browser dashboard refreshed itself every few seconds.
Every poll opens and releases its own session, so long-running loops do not
accumulate connections or duplicate records.
"""

import logging
import time
from typing import Callable, Optional

from equipment_tracker.core.config import settings
from equipment_tracker.models import EquipmentRead
from equipment_tracker.services.store import EquipmentStore

logger = logging.getLogger(__name__)


def poll_inventory(
    store: EquipmentStore,
    on_snapshot: Callable[[list[EquipmentRead]], None],
    interval: Optional[float] = None,
    iterations: Optional[int] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """
    Poll ``store.list_all()`` and pass every snapshot to ``on_snapshot``.

    Args:
        store: An opened equipment store
        on_snapshot: Called with the freshly read records after every poll
        interval: Seconds between polls (defaults to settings.refresh_interval_seconds)
        iterations: Stop after this many polls; None polls until interrupted
        sleep: Sleep function, replaceable in tests

    Returns:
        Number of polls performed
    """
    delay = settings.refresh_interval_seconds if interval is None else interval
    polls = 0

    logger.info(f"Polling equipment store every {delay}s")
    try:
        while iterations is None or polls < iterations:
            on_snapshot(store.list_all())
            polls += 1
            if iterations is not None and polls >= iterations:
                break
            sleep(delay)
    except KeyboardInterrupt:
        logger.info(f"Polling interrupted after {polls} polls")

    return polls


__all__ = ["poll_inventory"]
