"""Single-value expiring cache for the room record.

One lock guards the stored value for the whole of ``get()``, including the
upstream fetch, so a burst of requests after expiry results in one fetch
while the other callers wait for it and then read the fresh value. Callers
that were waiting on a refresh that failed get that same error.

Note: Each uvicorn worker has its own cache instance. With --workers 2,
the census may be fetched twice per window (once per worker).
"""

import logging
import threading
import time
from typing import Callable

from services.census import RoomRecord

logger = logging.getLogger(__name__)

DEFAULT_EXPIRY_SECONDS = 5.0


class ExpiringCache:
    def __init__(
        self,
        fetch: Callable[[], RoomRecord],
        expiry: float = DEFAULT_EXPIRY_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._fetch = fetch
        self._expiry = expiry
        self._clock = clock
        self._lock = threading.Lock()
        self._value: RoomRecord | None = None
        self._last_updated: float | None = None
        # Completed fetch attempts, and the error of the latest one if it failed
        self._attempts = 0
        self._last_error: Exception | None = None

    @property
    def expiry(self) -> float:
        return self._expiry

    @property
    def value(self) -> RoomRecord | None:
        return self._value

    @property
    def last_updated(self) -> float | None:
        return self._last_updated

    def is_fresh(self) -> bool:
        if self._last_updated is None:
            return False
        return self._clock() - self._last_updated < self._expiry

    def get(self) -> RoomRecord:
        """Return the cached record, refreshing it first if it has expired.

        Errors from the fetch propagate; the previous value is kept and the
        entry stays stale.
        """
        attempts_seen = self._attempts
        with self._lock:
            if self.is_fresh():
                return self._value

            # A refresh finished while we waited for the lock and it failed
            if self._attempts != attempts_seen and self._last_error is not None:
                raise self._last_error.with_traceback(None)

            try:
                value = self._fetch()
            except Exception as e:
                self._attempts += 1
                self._last_error = e
                logger.warning("Room census refresh failed: %s", e)
                raise

            self._attempts += 1
            self._last_error = None
            self._value = value
            self._last_updated = self._clock()
            logger.debug("Room census refreshed: %s", value)
            return value

    def invalidate(self) -> None:
        """Mark the entry stale; the next ``get()`` fetches again."""
        with self._lock:
            self._last_updated = None
