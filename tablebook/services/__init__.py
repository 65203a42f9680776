from tablebook.services.availability_service import cached_available_tables, find_available_tables
from tablebook.services.deps import ReservationDeps
from tablebook.services.lifecycle_service import cancel_reservation, confirm_reservation, modify_reservation
from tablebook.services.reservation_service import create_reservation, list_reservations_for_date
from tablebook.services.restaurant_service import add_table, create_restaurant, list_tables
from tablebook.services.time_slot_service import available_time_slots, time_slots
from tablebook.services.waitlist_service import add_to_waitlist, list_waitlist, remove_from_waitlist

__all__ = [
    "ReservationDeps",
    "add_table",
    "add_to_waitlist",
    "available_time_slots",
    "cached_available_tables",
    "cancel_reservation",
    "confirm_reservation",
    "create_reservation",
    "create_restaurant",
    "find_available_tables",
    "list_reservations_for_date",
    "list_tables",
    "list_waitlist",
    "modify_reservation",
    "remove_from_waitlist",
    "time_slots",
]
