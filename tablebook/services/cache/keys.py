"""Cache key scheme. Keys must start with "{kind}:{restaurant_id}:" so prefix invalidation finds them."""
from datetime import datetime

from tablebook.core.constants import (
    CACHE_KIND_AVAILABILITY,
    CACHE_KIND_RESERVATIONS,
    CACHE_KIND_TIMESLOTS,
)
from tablebook.core.time_window import iso_instant


def restaurant_prefix(kind: str, restaurant_id: int) -> str:
    return f"{kind}:{restaurant_id}:"


def availability_key(restaurant_id: int, start: datetime, duration_minutes: int, party_size: int) -> str:
    return f"{CACHE_KIND_AVAILABILITY}:{restaurant_id}:{iso_instant(start)}:{duration_minutes}:{party_size}"


def timeslots_key(
    restaurant_id: int, date_str: str, party_size: int, duration_minutes: int, interval_minutes: int
) -> str:
    return f"{CACHE_KIND_TIMESLOTS}:{restaurant_id}:{date_str}:{party_size}:{duration_minutes}:{interval_minutes}"


def reservations_key(restaurant_id: int, date_str: str, page: int, page_size: int) -> str:
    return f"{CACHE_KIND_RESERVATIONS}:{restaurant_id}:{date_str}:{page}:{page_size}"


def prefix_of(key: str) -> str:
    """'availability:7:2024-01-01T...' -> 'availability:7:'"""
    kind, restaurant_id, _ = key.split(":", 2)
    return f"{kind}:{restaurant_id}:"
