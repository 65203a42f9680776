"""
Availability cache: Redis primary with an in-process fallback behind one coordinator.
"""
import logging

from tablebook.services.cache.base import CacheBackend
from tablebook.services.cache.coordinator import CacheCoordinator
from tablebook.services.cache.memory import MemoryCacheBackend
from tablebook.services.cache.redis_backend import RedisCacheBackend

logger = logging.getLogger(__name__)


def build_cache_coordinator(settings) -> CacheCoordinator:
    """Coordinator from settings. Without REDIS_URL it runs on the in-process store only."""
    primary = None
    if settings.redis_url:
        primary = RedisCacheBackend.from_url(settings.redis_url, socket_timeout=settings.cache_socket_timeout_seconds)
    else:
        logger.info("REDIS_URL not set; availability cache is process-local")
    coordinator = CacheCoordinator(
        primary,
        MemoryCacheBackend(),
        ttl_seconds=settings.cache_ttl_seconds,
        retry_seconds=settings.cache_retry_seconds,
    )
    coordinator.check_health()
    return coordinator


__all__ = [
    "CacheBackend",
    "CacheCoordinator",
    "MemoryCacheBackend",
    "RedisCacheBackend",
    "build_cache_coordinator",
]
