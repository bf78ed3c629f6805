"""Per-theme critical sections for writes."""
import threading
from contextlib import contextmanager

from loguru import logger

from revisor.errors import ConcurrentModification


class ThemeLocks:
    """One lock per theme id; writes to different themes never wait on each other.

    A theme's lock only exists while someone holds or waits for it.
    """

    def __init__(self, timeout_seconds: float = 5.0):
        self.timeout_seconds = timeout_seconds
        # theme id -> [lock, holders and waiters]
        self._locks: dict = {}
        self._registry_lock = threading.Lock()

    def _checkout(self, theme_id) -> threading.Lock:
        with self._registry_lock:
            entry = self._locks.get(theme_id)
            if entry is None:
                entry = self._locks[theme_id] = [threading.Lock(), 0]
            entry[1] += 1
            return entry[0]

    def _checkin(self, theme_id) -> None:
        with self._registry_lock:
            entry = self._locks[theme_id]
            entry[1] -= 1
            if entry[1] == 0:
                del self._locks[theme_id]

    @contextmanager
    def hold(self, theme_id):
        lock = self._checkout(theme_id)
        try:
            if not lock.acquire(timeout=self.timeout_seconds):
                logger.warning(f"Timed out waiting for theme {theme_id} lock")
                raise ConcurrentModification(f"Theme {theme_id} is being modified by another request")
            try:
                yield
            finally:
                lock.release()
        finally:
            self._checkin(theme_id)

    def is_held(self, theme_id) -> bool:
        with self._registry_lock:
            entry = self._locks.get(theme_id)
        return entry is not None and entry[0].locked()

    def __len__(self) -> int:
        with self._registry_lock:
            return len(self._locks)
