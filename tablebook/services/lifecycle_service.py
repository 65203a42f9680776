"""
Reservation lifecycle: pending -> confirmed | cancelled. confirmed and cancelled never return to pending.

- confirm: pending only; sends the confirmation once (notified flag).
- cancel: pending or confirmed; frees the table.
- modify: pending only; new start and/or duration, re-validated exactly like a new booking (operating
  hours, peak cap, freedom on the same table excluding the reservation's own window).
"""
import logging
from datetime import datetime

from tablebook.core.errors import InvalidStateError
from tablebook.core.time_window import span_minutes, to_utc
from tablebook.models import Reservation, ReservationStatus
from tablebook.services import ledger
from tablebook.services.deps import ReservationDeps
from tablebook.services.reservation_service import resolve_window

logger = logging.getLogger(__name__)

MSG_NEW_SLOT_UNAVAILABLE = "New time slot not available"


def confirm_reservation(deps: ReservationDeps, reservation_id: int, restaurant_id: int) -> Reservation:
    db = deps.db
    reservation = ledger.get_reservation(db, reservation_id, restaurant_id)
    if reservation.status != ReservationStatus.PENDING.value:
        raise InvalidStateError("Can only confirm pending reservations")
    restaurant = ledger.get_restaurant(db, restaurant_id)
    send = not reservation.notified
    reservation.status = ReservationStatus.CONFIRMED.value
    if send:
        reservation.notified = True
    db.commit()
    db.refresh(reservation)
    logger.info("Reservation %s confirmed", reservation.id)

    deps.cache.invalidate_restaurant(restaurant_id)
    if send:
        deps.notifier.confirmation(
            customer_name=reservation.customer_name,
            phone=reservation.phone,
            reservation_id=reservation.id,
            restaurant_name=restaurant.name,
            start_time=reservation.start_time,
            party_size=reservation.party_size,
        )
    return reservation


def cancel_reservation(deps: ReservationDeps, reservation_id: int, restaurant_id: int) -> Reservation:
    db = deps.db
    reservation = ledger.get_reservation(db, reservation_id, restaurant_id)
    if reservation.status == ReservationStatus.CANCELLED.value:
        raise InvalidStateError("Reservation already cancelled")
    restaurant = ledger.get_restaurant(db, restaurant_id)
    reservation.status = ReservationStatus.CANCELLED.value
    db.commit()
    db.refresh(reservation)
    logger.info("Reservation %s cancelled; table %s freed", reservation.id, reservation.table_id)

    deps.cache.invalidate_restaurant(restaurant_id)
    deps.notifier.cancellation(
        customer_name=reservation.customer_name,
        phone=reservation.phone,
        reservation_id=reservation.id,
        restaurant_name=restaurant.name,
    )
    return reservation


def modify_reservation(
    deps: ReservationDeps,
    reservation_id: int,
    restaurant_id: int,
    *,
    start_time: datetime | None = None,
    duration_minutes: int | None = None,
) -> Reservation:
    """Move and/or resize a pending reservation on its current table."""
    db = deps.db
    reservation = ledger.get_reservation(db, reservation_id, restaurant_id)
    if reservation.status != ReservationStatus.PENDING.value:
        raise InvalidStateError("Can only modify pending reservations")
    restaurant = ledger.get_restaurant(db, restaurant_id)

    new_start = to_utc(start_time) if start_time is not None else to_utc(reservation.start_time)
    if duration_minutes is None:
        duration_minutes = span_minutes(reservation.start_time, reservation.end_time)
    start, end = resolve_window(restaurant, new_start, duration_minutes, message="New time slot outside operating hours")

    reservation.start_time = start
    reservation.end_time = end
    ledger.commit_reservation(db, reservation, conflict_message=MSG_NEW_SLOT_UNAVAILABLE)
    logger.info("Reservation %s moved to %s..%s on table %s", reservation.id, start, end, reservation.table_id)

    deps.cache.invalidate_restaurant(restaurant_id)
    return reservation
