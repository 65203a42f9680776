"""Plain-dict views of ledger rows (API responses and cached values must be JSON-serializable)."""
from typing import Any

from tablebook.core.time_window import iso_instant
from tablebook.models import Reservation, Restaurant, RestaurantTable, WaitlistEntry


def restaurant_to_dict(r: Restaurant) -> dict[str, Any]:
    return {
        "id": r.id,
        "name": r.name,
        "open_time": r.open_time,
        "close_time": r.close_time,
        "total_tables": r.total_tables,
        "peak_hour_start": r.peak_hour_start,
        "peak_hour_end": r.peak_hour_end,
        "max_peak_duration_minutes": r.max_peak_duration_minutes,
    }


def table_to_dict(t: RestaurantTable) -> dict[str, Any]:
    return {
        "id": t.id,
        "restaurant_id": t.restaurant_id,
        "table_number": t.table_number,
        "capacity": t.capacity,
    }


def reservation_to_dict(r: Reservation) -> dict[str, Any]:
    return {
        "id": r.id,
        "restaurant_id": r.restaurant_id,
        "table_id": r.table_id,
        "customer_name": r.customer_name,
        "phone": r.phone,
        "party_size": r.party_size,
        "start_time": iso_instant(r.start_time),
        "end_time": iso_instant(r.end_time),
        "status": r.status,
        "notified": bool(r.notified),
        "on_waitlist": False,
    }


def waitlist_entry_to_dict(w: WaitlistEntry) -> dict[str, Any]:
    return {
        "id": w.id,
        "restaurant_id": w.restaurant_id,
        "customer_name": w.customer_name,
        "phone": w.phone,
        "party_size": w.party_size,
        "preferred_date": w.preferred_date,
        "created_at": iso_instant(w.created_at) if w.created_at else None,
        "on_waitlist": True,
    }


def booking_to_dict(outcome: Reservation | WaitlistEntry) -> dict[str, Any]:
    if outcome.on_waitlist:
        return waitlist_entry_to_dict(outcome)
    return reservation_to_dict(outcome)
