"""Protocol for cache backends. Redis and the in-process store expose the same contract."""
from typing import Protocol


class CacheBackend(Protocol):
    """Key/value store of JSON strings with per-key TTL. Unreachable backends raise CacheUnavailableError."""

    def get(self, key: str) -> str | None:
        """Return the stored value, or None on miss/expiry."""
        ...

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        ...

    def scan_keys_by_prefix(self, prefix: str) -> list[str]:
        """All live keys starting with prefix."""
        ...

    def delete_keys(self, keys: list[str]) -> int:
        """Delete keys; returns how many existed."""
        ...

    def flush_all(self) -> None:
        ...

    def ping(self) -> bool:
        ...
