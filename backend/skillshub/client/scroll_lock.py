"""
Reference-counted page scroll lock.

Every open overlay holds a lease; the page stays locked while any lease is
outstanding, so nested modals compose.
"""
import logging
from contextlib import contextmanager
from typing import Iterator

logger = logging.getLogger(__name__)


class Lease:
    """One-shot handle on a ScrollLock. Releasing twice is a no-op."""

    def __init__(self, lock: "ScrollLock"):
        self._lock = lock
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        if self._released:
            return
        self._released = True
        self._lock._release()

    def __enter__(self) -> "Lease":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()


class ScrollLock:
    def __init__(self):
        self._count = 0

    @property
    def locked(self) -> bool:
        return self._count > 0

    @property
    def holders(self) -> int:
        return self._count

    def acquire(self) -> Lease:
        self._count += 1
        logger.debug(f"Scroll lock acquired (holders={self._count})")
        return Lease(self)

    def _release(self) -> None:
        self._count -= 1
        logger.debug(f"Scroll lock released (holders={self._count})")

    @contextmanager
    def hold(self) -> Iterator[Lease]:
        """Hold a lease for the duration of the block, whatever the exit path."""
        lease = self.acquire()
        try:
            yield lease
        finally:
            lease.release()
