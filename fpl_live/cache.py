from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Future
from typing import Any, Callable

logger = logging.getLogger(__name__)


class TTLCache:
    """In-memory cache with a freshness window and single-flight fetches.

    Only one caller runs ``fetch`` for a missing or stale key; concurrent callers
    for the same key wait for that result. Failed fetches are not stored.
    """

    def __init__(self, ttl: float):
        self.ttl = ttl
        self._values: dict[str, tuple[Any, float]] = {}
        self._inflight: dict[str, Future] = {}
        self._lock = threading.Lock()

    def _fresh(self, key: str, now: float) -> tuple[bool, Any]:
        stored = self._values.get(key)
        if stored is not None and now - stored[1] < self.ttl:
            return True, stored[0]
        return False, None

    def get_or_fetch(self, key: str, fetch: Callable[[], Any]) -> Any:
        with self._lock:
            hit, value = self._fresh(key, time.monotonic())
            if hit:
                logger.debug("Cache hit for %s", key)
                return value
            future = self._inflight.get(key)
            owner = future is None
            if owner:
                future = Future()
                self._inflight[key] = future

        if not owner:
            logger.debug("Waiting on in-flight fetch for %s", key)
            return future.result()

        logger.debug("Cache miss for %s", key)
        try:
            value = fetch()
        except BaseException as exc:
            with self._lock:
                del self._inflight[key]
            future.set_exception(exc)
            raise

        with self._lock:
            self._values[key] = (value, time.monotonic())
            del self._inflight[key]
        future.set_result(value)
        return value

    def age(self, key: str) -> float | None:
        """Seconds since ``key`` was stored, or None if it never was."""
        with self._lock:
            stored = self._values.get(key)
        if stored is None:
            return None
        return time.monotonic() - stored[1]

    def clear(self) -> None:
        with self._lock:
            self._values.clear()
