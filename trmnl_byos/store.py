"""
In-memory screen registry.

Maps the normalized screen id to its `ScreenRecord`. State lives for the
lifetime of the process; nothing is persisted.
"""

import logging
import threading
from typing import Callable, Dict, Optional

from trmnl_byos.models import ScreenRecord

logger = logging.getLogger(__name__)


def normalize_screen_id(device_id: str) -> str:
    """Screen ids are device ids matched case-insensitively."""
    return device_id.lower()


class ScreenRegistry:
    """
    Thread-safe registry of screen records.

    Every read-modify-write runs under a single lock, so concurrent setup,
    display and upload requests for the same id never lose an update.
    """

    def __init__(self) -> None:
        self._screens: Dict[str, ScreenRecord] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._screens)

    def __contains__(self, device_id: object) -> bool:
        if not isinstance(device_id, str):
            return False
        with self._lock:
            return normalize_screen_id(device_id) in self._screens

    def get(self, device_id: str) -> Optional[ScreenRecord]:
        """Return the record for `device_id`, or None if it was never seen."""
        with self._lock:
            return self._screens.get(normalize_screen_id(device_id))

    def get_or_create(
        self, device_id: str, description: Optional[str] = None
    ) -> ScreenRecord:
        """
        Return the record for `device_id`, creating it if absent.

        A new record has no image and has never been updated. `description`
        is only used when the record is created.
        """
        screen_id = normalize_screen_id(device_id)
        with self._lock:
            return self._get_or_create_locked(screen_id, description)

    def update(
        self, device_id: str, fn: Callable[[ScreenRecord], ScreenRecord]
    ) -> ScreenRecord:
        """
        Replace the record for `device_id` with `fn(old)`.

        The record is created first if needed. The stored record always keeps
        the normalized id, whatever `fn` returns for it.
        """
        screen_id = normalize_screen_id(device_id)
        with self._lock:
            current = self._get_or_create_locked(screen_id, None)
            updated = fn(current)
            if updated.id != screen_id:
                updated = updated.model_copy(update={"id": screen_id})
            self._screens[screen_id] = updated
            return updated

    def _get_or_create_locked(
        self, screen_id: str, description: Optional[str]
    ) -> ScreenRecord:
        screen = self._screens.get(screen_id)
        if screen is None:
            screen = ScreenRecord(
                id=screen_id,
                display_name=f"Screen {screen_id}",
                description=description,
            )
            self._screens[screen_id] = screen
            logger.info(f"Registered new screen {screen_id}")
        return screen
