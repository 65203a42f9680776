"""
Time slots: start instants on a day, every interval_minutes from opening up to and including closing,
where the window fits operating hours and at least one table seating the party is free.

One availability query per candidate, so repeated identical queries should go through
available_time_slots (cached under timeslots:{rid}:{date}:{party}:{duration}:{interval}).
"""
from datetime import date, datetime, timedelta
from typing import Iterator

from sqlalchemy.orm import Session

from tablebook.core.constants import DEFAULT_SLOT_INTERVAL_MINUTES
from tablebook.core.errors import InvalidWindowError
from tablebook.core.time_window import compute_end, iso_instant, parse_day, time_on_date, within_operating_hours
from tablebook.models import Restaurant
from tablebook.services import ledger
from tablebook.services.availability_service import find_available_tables
from tablebook.services.cache.keys import timeslots_key
from tablebook.services.deps import ReservationDeps


class TimeSlotSequence:
    """Lazy, finite, restartable: each iteration re-walks the day against the current ledger."""

    def __init__(
        self,
        db: Session,
        restaurant: Restaurant,
        day: date,
        party_size: int,
        duration_minutes: int,
        interval_minutes: int = DEFAULT_SLOT_INTERVAL_MINUTES,
    ):
        if interval_minutes <= 0:
            raise InvalidWindowError("interval_minutes must be positive")
        if duration_minutes <= 0:
            raise InvalidWindowError("Duration must be positive")
        self.db = db
        self.restaurant = restaurant
        self.day = day
        self.party_size = party_size
        self.duration_minutes = duration_minutes
        self.interval_minutes = interval_minutes

    def candidates(self) -> Iterator[datetime]:
        """Every step from opening to closing (inclusive), before any filtering."""
        cursor = time_on_date(self.day, self.restaurant.open_time)
        closing = time_on_date(self.day, self.restaurant.close_time)
        step = timedelta(minutes=self.interval_minutes)
        while cursor <= closing:
            yield cursor
            cursor += step

    def __iter__(self) -> Iterator[datetime]:
        r = self.restaurant
        for start in self.candidates():
            end = compute_end(start, self.duration_minutes)
            if not within_operating_hours(start, end, r.open_time, r.close_time):
                continue
            if find_available_tables(self.db, r.id, start, end, self.party_size):
                yield start


def time_slots(
    db: Session,
    restaurant_id: int,
    day: date | str,
    party_size: int,
    duration_minutes: int,
    interval_minutes: int = DEFAULT_SLOT_INTERVAL_MINUTES,
) -> TimeSlotSequence:
    restaurant = ledger.get_restaurant(db, restaurant_id)
    return TimeSlotSequence(db, restaurant, parse_day(day), party_size, duration_minutes, interval_minutes)


def available_time_slots(
    deps: ReservationDeps,
    restaurant_id: int,
    day: date | str,
    party_size: int,
    duration_minutes: int,
    interval_minutes: int = DEFAULT_SLOT_INTERVAL_MINUTES,
) -> list[str]:
    """Cached list of free slot starts as ISO instants."""
    sequence = time_slots(deps.db, restaurant_id, day, party_size, duration_minutes, interval_minutes)
    key = timeslots_key(restaurant_id, sequence.day.isoformat(), party_size, duration_minutes, interval_minutes)
    return deps.cache.get_or_set(key, lambda: [iso_instant(s) for s in sequence])
