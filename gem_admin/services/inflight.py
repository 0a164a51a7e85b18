import logging
import threading
from contextlib import contextmanager
from typing import Hashable, Set, Tuple

from fastapi import HTTPException

logger = logging.getLogger(__name__)


class InFlightGuard:
    """Rejects a second identical action while the first one is still running."""

    def __init__(self):
        self._lock = threading.Lock()
        self._active: Set[Tuple[str, Hashable]] = set()

    @contextmanager
    def hold(self, action: str, record_id: Hashable):
        key = (action, record_id)
        with self._lock:
            if key in self._active:
                logger.info("Rejected duplicate %s for %s", action, record_id)
                raise HTTPException(status_code=409, detail="This action is already in progress")
            self._active.add(key)
        try:
            yield
        finally:
            with self._lock:
                self._active.discard(key)

    def is_active(self, action: str, record_id: Hashable) -> bool:
        with self._lock:
            return (action, record_id) in self._active


guard = InFlightGuard()
