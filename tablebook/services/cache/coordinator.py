"""
Read-through cache over a primary backend (Redis) with an in-process fallback.

- Reads: get -> on miss or any cache error, run the loader -> set with a fixed TTL.
- Writes that change reservation/table state call invalidate_restaurant() before returning.
- Primary unreachable -> degraded: serve from the fallback, queue invalidations, and replay them on
  the primary before switching back (check_health, driven by the scheduler and by lazy re-probes).
- The cache is an accelerant only. Nothing here ever raises a cache failure to the caller.
"""
import json
import logging
import threading
import time
from typing import Any, Callable

from tablebook.core.constants import RESTAURANT_CACHE_KINDS
from tablebook.core.errors import CacheUnavailableError
from tablebook.services.cache.base import CacheBackend
from tablebook.services.cache.keys import prefix_of, restaurant_prefix
from tablebook.services.cache.memory import MemoryCacheBackend

logger = logging.getLogger(__name__)


class CacheCoordinator:
    def __init__(
        self,
        primary: CacheBackend | None,
        fallback: CacheBackend | None = None,
        *,
        ttl_seconds: int = 60,
        retry_seconds: float = 30,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._primary = primary
        self._fallback = fallback if fallback is not None else MemoryCacheBackend()
        self.ttl_seconds = ttl_seconds
        self._retry_seconds = retry_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._degraded = primary is None
        self._degraded_since = clock()
        # Prefixes invalidated while degraded; replayed on the primary before it is trusted again
        self._pending_prefixes: set[str] = set()
        # Per-prefix invalidation counter: a load that raced an invalidation must not write back
        self._epochs: dict[str, int] = {}

    @property
    def degraded(self) -> bool:
        return self._degraded

    def _active(self) -> CacheBackend:
        if self._degraded and self._primary is not None:
            if self._clock() - self._degraded_since >= self._retry_seconds:
                self.check_health()
        return self._fallback if self._degraded else self._primary

    def _mark_degraded(self, exc: Exception) -> None:
        with self._lock:
            if not self._degraded:
                logger.warning("Cache primary unreachable, using in-process fallback: %s", exc)
            self._degraded = True
            self._degraded_since = self._clock()

    def check_health(self) -> bool:
        """Ping the primary; on recovery replay queued invalidations, then switch back. Returns True if healthy."""
        if self._primary is None:
            return False
        try:
            self._primary.ping()
            with self._lock:
                pending = sorted(self._pending_prefixes)
            for prefix in pending:
                self._primary.delete_keys(self._primary.scan_keys_by_prefix(prefix))
                with self._lock:
                    self._pending_prefixes.discard(prefix)
        except CacheUnavailableError as e:
            self._mark_degraded(e)
            return False
        with self._lock:
            if self._pending_prefixes:
                # Invalidated again while replaying; next probe finishes the job
                return False
            if self._degraded:
                logger.info("Cache primary reachable again; leaving degraded mode")
            self._degraded = False
        return True

    def get_or_set(self, key: str, loader: Callable[[], Any], ttl_seconds: int | None = None) -> Any:
        """Return the cached JSON value for key, or compute it with loader and cache it."""
        prefix = prefix_of(key)
        backend = self._active()
        try:
            raw = backend.get(key)
        except CacheUnavailableError as e:
            self._mark_degraded(e)
            backend = self._fallback
            raw = backend.get(key)
        if raw is not None:
            try:
                return json.loads(raw)
            except (TypeError, json.JSONDecodeError):
                logger.debug("Discarding undecodable cache entry %s", key)

        epoch = self._epochs.get(prefix, 0)
        value = loader()
        if self._epochs.get(prefix, 0) != epoch:
            return value
        payload = json.dumps(value)
        ttl = ttl_seconds or self.ttl_seconds
        try:
            backend.set(key, payload, ttl)
        except CacheUnavailableError as e:
            self._mark_degraded(e)
            backend = self._fallback
            backend.set(key, payload, ttl)
        if self._epochs.get(prefix, 0) != epoch:
            # Invalidated while writing: the invalidation may have missed this key
            self._discard(backend, key, prefix)
        return value

    def _discard(self, backend: CacheBackend, key: str, prefix: str) -> None:
        try:
            backend.delete_keys([key])
        except CacheUnavailableError as e:
            self._mark_degraded(e)
            with self._lock:
                self._pending_prefixes.add(prefix)

    def invalidate_prefix(self, prefix: str) -> int:
        """Delete every entry whose key starts with prefix, in both stores. Returns entries deleted."""
        with self._lock:
            self._epochs[prefix] = self._epochs.get(prefix, 0) + 1
        deleted = self._fallback.delete_keys(self._fallback.scan_keys_by_prefix(prefix))
        if self._primary is None:
            return deleted
        if self._degraded:
            with self._lock:
                self._pending_prefixes.add(prefix)
            return deleted
        try:
            deleted += self._primary.delete_keys(self._primary.scan_keys_by_prefix(prefix))
        except CacheUnavailableError as e:
            self._mark_degraded(e)
            with self._lock:
                self._pending_prefixes.add(prefix)
        return deleted

    def invalidate_restaurant(self, restaurant_id: int) -> int:
        """Drop availability, time-slot and reservation-list entries for one restaurant."""
        return sum(self.invalidate_prefix(restaurant_prefix(kind, restaurant_id)) for kind in RESTAURANT_CACHE_KINDS)

    def clear(self) -> None:
        self._fallback.flush_all()
        if self._primary is None:
            return
        try:
            self._primary.flush_all()
        except CacheUnavailableError as e:
            self._mark_degraded(e)
            for kind in RESTAURANT_CACHE_KINDS:
                with self._lock:
                    self._pending_prefixes.add(f"{kind}:")
