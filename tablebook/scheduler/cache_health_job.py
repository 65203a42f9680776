"""
Cache health: every CACHE_HEALTH_INTERVAL_SECONDS, ping Redis. A degraded coordinator replays the
invalidations it queued while Redis was unreachable and switches back to it.
"""
import logging

from tablebook.services.cache.coordinator import CacheCoordinator

logger = logging.getLogger(__name__)


def run_cache_health_check(coordinator: CacheCoordinator) -> None:
    was_degraded = coordinator.degraded
    healthy = coordinator.check_health()
    if was_degraded and healthy:
        logger.info("Cache health job: primary restored")
    elif not healthy:
        logger.debug("Cache health job: still on in-process fallback")
