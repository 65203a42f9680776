"""
Restaurant administration: create restaurants, add and list tables.
"""
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tablebook.core.errors import DuplicateTableError, InvalidTableError, InvalidWindowError
from tablebook.core.time_window import minute_of_day
from tablebook.models import Restaurant, RestaurantTable
from tablebook.services import ledger
from tablebook.services.deps import ReservationDeps

logger = logging.getLogger(__name__)


def _minutes(value: str, field: str) -> int:
    try:
        return minute_of_day(value)
    except ValueError:
        raise InvalidWindowError(f"Invalid {field} {value!r}. Use HH:MM.") from None


def validate_hours(
    open_time: str,
    close_time: str,
    peak_hour_start: str | None = None,
    peak_hour_end: str | None = None,
    max_peak_duration_minutes: int | None = None,
) -> None:
    """openTime < closeTime; a peak window, if given, is complete and lies within [open, close)."""
    open_m = _minutes(open_time, "open_time")
    close_m = _minutes(close_time, "close_time")
    if open_m >= close_m:
        raise InvalidWindowError("open_time must be before close_time")
    if (peak_hour_start is None) != (peak_hour_end is None):
        raise InvalidWindowError("peak_hour_start and peak_hour_end must be set together")
    if peak_hour_start is not None:
        peak_start_m = _minutes(peak_hour_start, "peak_hour_start")
        peak_end_m = _minutes(peak_hour_end, "peak_hour_end")
        if not (open_m <= peak_start_m < peak_end_m <= close_m):
            raise InvalidWindowError("Peak window must lie within operating hours")
    if max_peak_duration_minutes is not None and max_peak_duration_minutes <= 0:
        raise InvalidWindowError("max_peak_duration_minutes must be positive")


def create_restaurant(
    db: Session,
    name: str,
    open_time: str,
    close_time: str,
    total_tables: int = 0,
    *,
    peak_hour_start: str | None = None,
    peak_hour_end: str | None = None,
    max_peak_duration_minutes: int | None = None,
) -> Restaurant:
    validate_hours(open_time, close_time, peak_hour_start, peak_hour_end, max_peak_duration_minutes)
    row = Restaurant(
        name=name,
        open_time=open_time,
        close_time=close_time,
        total_tables=total_tables,
        peak_hour_start=peak_hour_start,
        peak_hour_end=peak_hour_end,
        max_peak_duration_minutes=max_peak_duration_minutes,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info("Created restaurant %s (%s) open %s-%s", row.id, row.name, row.open_time, row.close_time)
    return row


def get_restaurant(db: Session, restaurant_id: int) -> Restaurant:
    return ledger.get_restaurant(db, restaurant_id)


def add_table(deps: ReservationDeps, restaurant_id: int, table_number: str, capacity: int) -> RestaurantTable:
    """Add a table. Table numbers are unique per restaurant; new capacity invalidates cached availability."""
    db = deps.db
    ledger.get_restaurant(db, restaurant_id)
    if capacity <= 0:
        raise InvalidTableError("Table capacity must be positive")
    row = RestaurantTable(restaurant_id=restaurant_id, table_number=table_number, capacity=capacity)
    db.add(row)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise DuplicateTableError("Table number already exists for this restaurant") from e
    db.refresh(row)
    deps.cache.invalidate_restaurant(restaurant_id)
    logger.info("Added table %s (capacity %s) to restaurant %s", row.table_number, row.capacity, restaurant_id)
    return row


def get_table(db: Session, table_id: int) -> RestaurantTable:
    return ledger.get_table(db, table_id)


def list_tables(db: Session, restaurant_id: int) -> list[RestaurantTable]:
    ledger.get_restaurant(db, restaurant_id)
    return (
        db.query(RestaurantTable)
        .filter(RestaurantTable.restaurant_id == restaurant_id)
        .order_by(RestaurantTable.table_number.asc(), RestaurantTable.id.asc())
        .all()
    )
