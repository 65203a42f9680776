"""
Time & interval helpers. Pure functions, no state.

All instants are timezone-aware UTC datetimes; naive values (e.g. read back from SQLite) are
treated as UTC. Intervals are half-open: [start, end).
"""
from datetime import date, datetime, time, timedelta, timezone

from tablebook.core.errors import InvalidWindowError


def to_utc(dt: datetime) -> datetime:
    """Normalize to aware UTC. Naive datetimes are assumed to already be UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_hhmm(value: str) -> time:
    """'19:30' -> time(19, 30). Raises ValueError on anything else."""
    hours, minutes = value.split(":")
    if len(hours) != 2 or len(minutes) != 2:
        raise ValueError(f"Invalid time {value!r}. Use HH:MM.")
    return time(int(hours), int(minutes))


def minute_of_day(value: str | datetime) -> int:
    if isinstance(value, datetime):
        value = to_utc(value)
        return value.hour * 60 + value.minute
    t = parse_hhmm(value)
    return t.hour * 60 + t.minute


def time_on_date(day: date, hhmm: str) -> datetime:
    """Wall-clock 'HH:MM' on a calendar day, as a UTC instant."""
    return datetime.combine(day, parse_hhmm(hhmm), tzinfo=timezone.utc)


def compute_end(start: datetime, duration_minutes: int) -> datetime:
    return to_utc(start) + timedelta(minutes=duration_minutes)


def overlaps(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    """Half-open overlap: [a_start, a_end) and [b_start, b_end) share at least one instant."""
    return to_utc(a_start) < to_utc(b_end) and to_utc(a_end) > to_utc(b_start)


def within_operating_hours(start: datetime, end: datetime, open_time: str, close_time: str) -> bool:
    """True when [start, end) lies inside [open, close] on the UTC calendar day of start."""
    start = to_utc(start)
    end = to_utc(end)
    day = start.date()
    return time_on_date(day, open_time) <= start and end <= time_on_date(day, close_time)


def in_peak_window(start: datetime, peak_start: str | None, peak_end: str | None) -> bool:
    """Minute-of-day test of start against the half-open peak window [peak_start, peak_end)."""
    if not peak_start or not peak_end:
        return False
    minutes = minute_of_day(start)
    return minute_of_day(peak_start) <= minutes < minute_of_day(peak_end)


def span_minutes(start: datetime, end: datetime) -> int:
    """Length of [start, end) rounded to whole minutes."""
    return round((to_utc(end) - to_utc(start)).total_seconds() / 60)


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """[00:00, next day 00:00) of a UTC calendar day."""
    start = datetime.combine(day, time(0, 0), tzinfo=timezone.utc)
    return start, start + timedelta(days=1)


def iso_instant(dt: datetime) -> str:
    """UTC instant as 'YYYY-MM-DDTHH:MM:SS.mmmZ' (cache keys and API output)."""
    dt = to_utc(dt)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def parse_day(value: date | str) -> date:
    """Calendar day from a date, datetime (its UTC day) or 'YYYY-MM-DD'."""
    if isinstance(value, datetime):
        return to_utc(value).date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise InvalidWindowError(f"Invalid date {value}. Use YYYY-MM-DD.") from None
