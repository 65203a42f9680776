"""
Centralized constants for caching and scheduling (Encapsulate What Changes).

Cache key kinds must match the keys built in tablebook.services.cache.keys; invalidation is
always by prefix "{kind}:{restaurant_id}:".
"""

# Cache key kinds
CACHE_KIND_AVAILABILITY = "availability"
CACHE_KIND_TIMESLOTS = "timeslots"
CACHE_KIND_RESERVATIONS = "reservations"

# Every kind derived from reservation/table state; all are dropped on any mutation for a restaurant
RESTAURANT_CACHE_KINDS = (
    CACHE_KIND_AVAILABILITY,
    CACHE_KIND_TIMESLOTS,
    CACHE_KIND_RESERVATIONS,
)

# Redis SCAN page size and DEL batch size for prefix invalidation
CACHE_SCAN_COUNT = 100
CACHE_DELETE_BATCH = 100

# Scheduler job IDs (must match ids used in main.py add_job)
CACHE_HEALTH_JOB_ID = "cache_health"

# Pagination caps for list endpoints
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

# Time-slot generator default step
DEFAULT_SLOT_INTERVAL_MINUTES = 30
