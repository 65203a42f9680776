"""
Booking workflow: validate -> peak-hour cap -> pick table -> guarded commit -> invalidate + notify.

- Windows are half-open [start, end) in UTC and must sit inside the restaurant's operating hours on
  the calendar day of start.
- Starting inside the peak window [peak_start, peak_end) clamps the duration to max_peak_duration_minutes.
- No explicit table: smallest free table that seats the party. None free -> the request goes on the
  waitlist and the waitlist entry is returned (a successful alternate outcome, not an error).
- The freedom check here is advisory; ledger.commit_reservation re-checks under a row lock.
"""
import logging
import math
from datetime import date, datetime
from typing import Any

from tablebook.core.errors import CapacityExceededError, ConflictError, InvalidTableError, InvalidWindowError
from tablebook.core.time_window import (
    compute_end,
    day_bounds,
    in_peak_window,
    parse_day,
    to_utc,
    within_operating_hours,
)
from tablebook.models import Reservation, ReservationStatus, Restaurant, WaitlistEntry
from tablebook.services import ledger
from tablebook.services.availability_service import find_available_tables
from tablebook.services.cache.keys import reservations_key
from tablebook.services.deps import ReservationDeps
from tablebook.services.serializers import reservation_to_dict
from tablebook.services.waitlist_service import add_to_waitlist

logger = logging.getLogger(__name__)

MSG_TABLE_UNAVAILABLE = "Table not available for requested time"


def effective_duration(restaurant: Restaurant, start: datetime, duration_minutes: int) -> int:
    """Requested duration, clamped to the peak cap when start falls in the peak window."""
    cap = restaurant.max_peak_duration_minutes
    if cap and cap < duration_minutes and in_peak_window(start, restaurant.peak_hour_start, restaurant.peak_hour_end):
        return cap
    return duration_minutes


def resolve_window(restaurant: Restaurant, start: datetime, duration_minutes: int, *, message: str) -> tuple[datetime, datetime]:
    """Validate the nominal window against operating hours, then apply the peak cap. Returns (start, end)."""
    if duration_minutes <= 0:
        raise InvalidWindowError("Duration must be positive")
    start = to_utc(start)
    nominal_end = compute_end(start, duration_minutes)
    if not within_operating_hours(start, nominal_end, restaurant.open_time, restaurant.close_time):
        raise InvalidWindowError(message)
    actual = effective_duration(restaurant, start, duration_minutes)
    if actual != duration_minutes:
        logger.info(
            "Peak hours at restaurant %s: duration %s clamped to %s minutes", restaurant.id, duration_minutes, actual
        )
    return start, compute_end(start, actual)


def create_reservation(
    deps: ReservationDeps,
    restaurant_id: int,
    *,
    customer_name: str,
    phone: str,
    party_size: int,
    start_time: datetime,
    duration_minutes: int,
    table_id: int | None = None,
) -> Reservation | WaitlistEntry:
    """Book a table, or waitlist the party when none is free. See module docstring for the steps."""
    db = deps.db
    restaurant = ledger.get_restaurant(db, restaurant_id)
    start, end = resolve_window(restaurant, start_time, duration_minutes, message="Reservation outside operating hours")

    if table_id is not None:
        table = ledger.get_table(db, table_id)
        if table.restaurant_id != restaurant_id:
            raise InvalidTableError("Table does not belong to restaurant")
        if party_size > table.capacity:
            raise CapacityExceededError("Party size exceeds table capacity")
        if not ledger.is_table_free(db, table.id, restaurant_id, start, end):
            raise ConflictError(MSG_TABLE_UNAVAILABLE)
    else:
        options = find_available_tables(db, restaurant_id, start, end, party_size)
        if not options:
            logger.info("No table for party of %s at restaurant %s %s; adding to waitlist", party_size, restaurant_id, start)
            return add_to_waitlist(
                deps,
                restaurant_id,
                customer_name=customer_name,
                phone=phone,
                party_size=party_size,
                preferred_date=start.date(),
            )
        table = options[0]

    reservation = Reservation(
        restaurant_id=restaurant_id,
        table_id=table.id,
        customer_name=customer_name,
        phone=phone,
        party_size=party_size,
        start_time=start,
        end_time=end,
        status=ReservationStatus.PENDING.value,
        notified=False,
    )
    ledger.commit_reservation(db, reservation, conflict_message=MSG_TABLE_UNAVAILABLE)
    logger.info(
        "Reservation %s: table %s at restaurant %s, %s..%s, party %s",
        reservation.id,
        table.table_number,
        restaurant_id,
        start,
        end,
        party_size,
    )

    deps.cache.invalidate_restaurant(restaurant_id)
    deps.notifier.confirmation(
        customer_name=reservation.customer_name,
        phone=reservation.phone,
        reservation_id=reservation.id,
        restaurant_name=restaurant.name,
        start_time=start,
        party_size=reservation.party_size,
    )
    return reservation


def reservations_for_date(deps: ReservationDeps, restaurant_id: int, day: date, page: int, page_size: int) -> dict[str, Any]:
    """Uncached page of reservations starting on day (any status), by start time then id."""
    day_start, day_end = day_bounds(day)
    q = (
        deps.db.query(Reservation)
        .filter(
            Reservation.restaurant_id == restaurant_id,
            Reservation.start_time >= day_start,
            Reservation.start_time < day_end,
        )
        .order_by(Reservation.start_time.asc(), Reservation.id.asc())
    )
    rows, total = ledger.fetch_page(q, page, page_size)
    return {
        "data": [reservation_to_dict(r) for r in rows],
        "total": total,
        "page": page,
        "page_size": page_size,
        "total_pages": math.ceil(total / page_size),
    }


def list_reservations_for_date(
    deps: ReservationDeps, restaurant_id: int, day: date | str, page: int, page_size: int
) -> dict[str, Any]:
    """Paged reservations for a date, cached under reservations:{rid}:{date}:{page}:{page_size}."""
    day = parse_day(day)
    ledger.get_restaurant(deps.db, restaurant_id)
    key = reservations_key(restaurant_id, day.isoformat(), page, page_size)
    return deps.cache.get_or_set(key, lambda: reservations_for_date(deps, restaurant_id, day, page, page_size))
