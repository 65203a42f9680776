"""Process-local cache store: same TTL and prefix contract as Redis, not shared across processes."""
import threading
import time


class MemoryCacheBackend:
    """Dict-backed store; expired entries are dropped lazily on read/scan."""

    def __init__(self, clock=time.monotonic) -> None:
        self._entries: dict[str, tuple[str, float]] = {}
        self._lock = threading.Lock()
        self._clock = clock

    def get(self, key: str) -> str | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
            return value

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        with self._lock:
            self._entries[key] = (value, self._clock() + ttl_seconds)

    def scan_keys_by_prefix(self, prefix: str) -> list[str]:
        now = self._clock()
        with self._lock:
            return [k for k, (_, expires_at) in self._entries.items() if k.startswith(prefix) and expires_at > now]

    def delete_keys(self, keys: list[str]) -> int:
        deleted = 0
        with self._lock:
            for key in keys:
                if self._entries.pop(key, None) is not None:
                    deleted += 1
        return deleted

    def flush_all(self) -> None:
        with self._lock:
            self._entries.clear()

    def ping(self) -> bool:
        return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
