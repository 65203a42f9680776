"""
Ledger repository: loaders, overlap queries, paging and the guarded reservation commit.

The guarded commit is the only place a reservation window is written. It locks the target table row,
re-runs the overlap query inside the same transaction, then writes. On PostgreSQL the exclusion
constraint from migration 001 backs this up; a violation is rolled back and raised as ConflictError,
so the loser of a booking race never double-books.
"""
import logging
from datetime import datetime

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session

from tablebook.core.errors import ConflictError, NotFoundError
from tablebook.core.time_window import to_utc
from tablebook.db.tables import ACTIVE_STATUSES
from tablebook.models import Reservation, Restaurant, RestaurantTable, WaitlistEntry

logger = logging.getLogger(__name__)


def get_restaurant(db: Session, restaurant_id: int) -> Restaurant:
    row = db.query(Restaurant).filter(Restaurant.id == restaurant_id).first()
    if not row:
        raise NotFoundError("Restaurant not found")
    return row


def get_table(db: Session, table_id: int) -> RestaurantTable:
    row = db.query(RestaurantTable).filter(RestaurantTable.id == table_id).first()
    if not row:
        raise NotFoundError("Table not found")
    return row


def get_reservation(db: Session, reservation_id: int, restaurant_id: int) -> Reservation:
    """Reservation owned by restaurant_id. Another restaurant's reservation is reported as not found."""
    row = db.query(Reservation).filter(Reservation.id == reservation_id).first()
    if not row or row.restaurant_id != restaurant_id:
        raise NotFoundError("Reservation not found")
    return row


def get_waitlist_entry(db: Session, waitlist_id: int, restaurant_id: int) -> WaitlistEntry:
    row = db.query(WaitlistEntry).filter(WaitlistEntry.id == waitlist_id).first()
    if not row or row.restaurant_id != restaurant_id:
        raise NotFoundError("Waitlist entry not found")
    return row


def tables_with_capacity(db: Session, restaurant_id: int, min_capacity: int) -> list[RestaurantTable]:
    """Tables seating at least min_capacity, smallest first (ties by id)."""
    return (
        db.query(RestaurantTable)
        .filter(RestaurantTable.restaurant_id == restaurant_id, RestaurantTable.capacity >= min_capacity)
        .order_by(RestaurantTable.capacity.asc(), RestaurantTable.id.asc())
        .all()
    )


def overlapping_active(
    db: Session,
    restaurant_id: int,
    start: datetime,
    end: datetime,
    *,
    table_id: int | None = None,
    exclude_id: int | None = None,
) -> Query:
    """Active reservations whose [start_time, end_time) overlaps [start, end). Selects (id, table_id)."""
    q = db.query(Reservation.id, Reservation.table_id).filter(
        Reservation.restaurant_id == restaurant_id,
        Reservation.status.in_(ACTIVE_STATUSES),
        Reservation.start_time < to_utc(end),
        Reservation.end_time > to_utc(start),
    )
    if table_id is not None:
        q = q.filter(Reservation.table_id == table_id)
    if exclude_id is not None:
        q = q.filter(Reservation.id != exclude_id)
    return q


def blocked_table_ids(db: Session, restaurant_id: int, start: datetime, end: datetime) -> set[int]:
    return {row.table_id for row in overlapping_active(db, restaurant_id, start, end).all()}


def is_table_free(
    db: Session,
    table_id: int,
    restaurant_id: int,
    start: datetime,
    end: datetime,
    *,
    exclude_id: int | None = None,
) -> bool:
    q = overlapping_active(db, restaurant_id, start, end, table_id=table_id, exclude_id=exclude_id)
    return q.first() is None


def commit_reservation(db: Session, reservation: Reservation, *, conflict_message: str) -> Reservation:
    """
    Write a new reservation, or the new window of an existing one, only if its table is still free.
    Lock table row -> re-check overlap (excluding the reservation itself) -> commit.
    Raises ConflictError (after rollback) when another active reservation holds the window.
    """
    exclude_id = reservation.id
    try:
        db.query(RestaurantTable.id).filter(RestaurantTable.id == reservation.table_id).with_for_update().one()
        free = is_table_free(
            db,
            reservation.table_id,
            reservation.restaurant_id,
            reservation.start_time,
            reservation.end_time,
            exclude_id=exclude_id,
        )
        if not free:
            db.rollback()
            logger.warning(
                "Lost booking race on table %s for %s..%s",
                reservation.table_id,
                reservation.start_time,
                reservation.end_time,
            )
            raise ConflictError(conflict_message)
        if exclude_id is None:
            db.add(reservation)
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning("Exclusion constraint rejected window on table %s: %s", reservation.table_id, e.orig)
        raise ConflictError(conflict_message) from e
    db.refresh(reservation)
    return reservation


def fetch_page(query: Query, page: int, page_size: int) -> tuple[list, int]:
    """
    One ordered page plus the total row count, read in a single statement (count(*) over ()) so
    the total always matches the page it came with. query must already be ordered.
    """
    rows = query.add_columns(func.count().over().label("total")).offset((page - 1) * page_size).limit(page_size).all()
    if rows:
        return [row[0] for row in rows], rows[0].total
    # Past the last page: no rows to disagree with, plain count is enough
    return [], query.order_by(None).count()
