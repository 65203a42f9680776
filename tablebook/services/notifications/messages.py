"""Human-readable notification texts shared by every sink."""
from datetime import datetime

from tablebook.core.time_window import iso_instant


def confirmation_message(
    customer_name: str, phone: str, reservation_id: int, restaurant_name: str, start_time: datetime, party_size: int
) -> str:
    return (
        f"[RESERVATION CONFIRMED] Hi {customer_name}, your reservation (ID: {reservation_id}) at {restaurant_name} "
        f"for {party_size} people is confirmed at {iso_instant(start_time)}. Contact: {phone}"
    )


def cancellation_message(customer_name: str, phone: str, reservation_id: int, restaurant_name: str) -> str:
    return (
        f"[RESERVATION CANCELLED] Hi {customer_name}, your reservation (ID: {reservation_id}) at {restaurant_name} "
        f"has been cancelled. Contact: {phone}"
    )


def waitlist_message(customer_name: str, phone: str, restaurant_name: str, party_size: int, preferred_date: str) -> str:
    return (
        f"[WAITLIST] Hi {customer_name}, you've been added to the waitlist at {restaurant_name} for {party_size} "
        f"people on {preferred_date}. We'll contact you if a table becomes available. Contact: {phone}"
    )
