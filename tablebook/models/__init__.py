from tablebook.models.reservation import Reservation, ReservationStatus
from tablebook.models.restaurant import Restaurant
from tablebook.models.restaurant_table import RestaurantTable
from tablebook.models.waitlist_entry import WaitlistEntry

__all__ = [
    "Reservation",
    "ReservationStatus",
    "Restaurant",
    "RestaurantTable",
    "WaitlistEntry",
]
