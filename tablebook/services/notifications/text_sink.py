"""Base for sinks that deliver one plain-text message per event."""
from datetime import datetime

from tablebook.services.notifications.messages import (
    cancellation_message,
    confirmation_message,
    waitlist_message,
)


class TextNotificationSink:
    """Formats each event and hands (phone, subject, message) to deliver()."""

    def deliver(self, phone: str, subject: str, message: str) -> bool:
        raise NotImplementedError

    def notify_confirmation(
        self,
        *,
        customer_name: str,
        phone: str,
        reservation_id: int,
        restaurant_name: str,
        start_time: datetime,
        party_size: int,
    ) -> bool:
        message = confirmation_message(customer_name, phone, reservation_id, restaurant_name, start_time, party_size)
        return self.deliver(phone, f"Reservation {reservation_id} confirmed", message)

    def notify_cancellation(
        self, *, customer_name: str, phone: str, reservation_id: int, restaurant_name: str
    ) -> bool:
        message = cancellation_message(customer_name, phone, reservation_id, restaurant_name)
        return self.deliver(phone, f"Reservation {reservation_id} cancelled", message)

    def notify_waitlisted(
        self, *, customer_name: str, phone: str, restaurant_name: str, party_size: int, preferred_date: str
    ) -> bool:
        message = waitlist_message(customer_name, phone, restaurant_name, party_size, preferred_date)
        return self.deliver(phone, f"Waitlist: {restaurant_name} {preferred_date}", message)
