"""Redis cache backend. Every redis-py failure surfaces as CacheUnavailableError."""
import logging

import redis

from tablebook.core.constants import CACHE_DELETE_BATCH, CACHE_SCAN_COUNT
from tablebook.core.errors import CacheUnavailableError

logger = logging.getLogger(__name__)


class RedisCacheBackend:
    """Shared cache in Redis. Short socket timeouts so an outage degrades fast instead of blocking requests."""

    def __init__(self, client: redis.Redis) -> None:
        self._client = client

    @classmethod
    def from_url(cls, url: str, *, socket_timeout: float = 0.5) -> "RedisCacheBackend":
        client = redis.Redis.from_url(
            url,
            socket_timeout=socket_timeout,
            socket_connect_timeout=socket_timeout,
            decode_responses=True,
        )
        return cls(client)

    def get(self, key: str) -> str | None:
        try:
            return self._client.get(key)
        except redis.RedisError as e:
            raise CacheUnavailableError(f"redis get failed: {e}") from e

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        try:
            self._client.set(key, value, ex=ttl_seconds)
        except redis.RedisError as e:
            raise CacheUnavailableError(f"redis set failed: {e}") from e

    def scan_keys_by_prefix(self, prefix: str) -> list[str]:
        try:
            return list(self._client.scan_iter(match=f"{prefix}*", count=CACHE_SCAN_COUNT))
        except redis.RedisError as e:
            raise CacheUnavailableError(f"redis scan failed: {e}") from e

    def delete_keys(self, keys: list[str]) -> int:
        deleted = 0
        try:
            for i in range(0, len(keys), CACHE_DELETE_BATCH):
                deleted += self._client.delete(*keys[i : i + CACHE_DELETE_BATCH])
        except redis.RedisError as e:
            raise CacheUnavailableError(f"redis delete failed: {e}") from e
        return deleted

    def flush_all(self) -> None:
        # Scoped to the configured logical DB, not the whole server
        try:
            self._client.flushdb()
        except redis.RedisError as e:
            raise CacheUnavailableError(f"redis flush failed: {e}") from e

    def ping(self) -> bool:
        try:
            return bool(self._client.ping())
        except redis.RedisError as e:
            raise CacheUnavailableError(f"redis ping failed: {e}") from e
