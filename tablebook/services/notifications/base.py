"""Protocol for notification sinks. Return values are only logged; failures never reach the booking."""
from datetime import datetime
from typing import Any, Protocol


class NotificationSink(Protocol):
    def notify_confirmation(
        self,
        *,
        customer_name: str,
        phone: str,
        reservation_id: int,
        restaurant_name: str,
        start_time: datetime,
        party_size: int,
    ) -> Any:
        ...

    def notify_cancellation(
        self,
        *,
        customer_name: str,
        phone: str,
        reservation_id: int,
        restaurant_name: str,
    ) -> Any:
        ...

    def notify_waitlisted(
        self,
        *,
        customer_name: str,
        phone: str,
        restaurant_name: str,
        party_size: int,
        preferred_date: str,
    ) -> Any:
        ...
