"""
Availability engine: which tables can seat a party for a window.

Tables with capacity >= min_capacity, minus any table holding an active reservation that overlaps
[start, end), smallest first. Smallest-fit first keeps big tables free for big parties.
"""
from datetime import datetime
from typing import Any

from sqlalchemy.orm import Session

from tablebook.core.time_window import compute_end
from tablebook.models import RestaurantTable
from tablebook.services import ledger
from tablebook.services.cache.keys import availability_key
from tablebook.services.deps import ReservationDeps
from tablebook.services.serializers import table_to_dict


def find_available_tables(
    db: Session, restaurant_id: int, start: datetime, end: datetime, min_capacity: int
) -> list[RestaurantTable]:
    """Free tables for [start, end) seating min_capacity, ascending capacity. Read-only."""
    tables = ledger.tables_with_capacity(db, restaurant_id, min_capacity)
    if not tables:
        return []
    blocked = ledger.blocked_table_ids(db, restaurant_id, start, end)
    return [t for t in tables if t.id not in blocked]


def cached_available_tables(
    deps: ReservationDeps, restaurant_id: int, start: datetime, duration_minutes: int, party_size: int
) -> list[dict[str, Any]]:
    """find_available_tables through the cache, keyed by availability:{rid}:{startISO}:{duration}:{party}."""
    ledger.get_restaurant(deps.db, restaurant_id)
    end = compute_end(start, duration_minutes)
    key = availability_key(restaurant_id, start, duration_minutes, party_size)
    return deps.cache.get_or_set(
        key,
        lambda: [table_to_dict(t) for t in find_available_tables(deps.db, restaurant_id, start, end, party_size)],
    )
