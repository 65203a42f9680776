"""
Fire-and-forget delivery of sink calls. Issued after the ledger commit; a failing or slow sink
never blocks or rolls back the booking.
"""
import logging
import threading
from datetime import datetime
from typing import Any

from tablebook.services.notifications.base import NotificationSink

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Runs each sink call on a daemon thread (or inline when background=False, e.g. tests)."""

    def __init__(self, sink: NotificationSink, *, background: bool = True) -> None:
        self.sink = sink
        self._background = background

    def _deliver(self, method: str, facts: dict[str, Any]) -> None:
        try:
            result = getattr(self.sink, method)(**facts)
            logger.debug("Notification %s delivered: %s", method, result)
        except Exception as e:
            logger.warning("Notification %s failed: %s", method, e, exc_info=True)

    def _dispatch(self, method: str, **facts: Any) -> None:
        if not self._background:
            self._deliver(method, facts)
            return
        thread = threading.Thread(target=self._deliver, args=(method, facts), daemon=True)
        thread.start()

    def confirmation(
        self,
        *,
        customer_name: str,
        phone: str,
        reservation_id: int,
        restaurant_name: str,
        start_time: datetime,
        party_size: int,
    ) -> None:
        self._dispatch(
            "notify_confirmation",
            customer_name=customer_name,
            phone=phone,
            reservation_id=reservation_id,
            restaurant_name=restaurant_name,
            start_time=start_time,
            party_size=party_size,
        )

    def cancellation(self, *, customer_name: str, phone: str, reservation_id: int, restaurant_name: str) -> None:
        self._dispatch(
            "notify_cancellation",
            customer_name=customer_name,
            phone=phone,
            reservation_id=reservation_id,
            restaurant_name=restaurant_name,
        )

    def waitlisted(
        self, *, customer_name: str, phone: str, restaurant_name: str, party_size: int, preferred_date: str
    ) -> None:
        self._dispatch(
            "notify_waitlisted",
            customer_name=customer_name,
            phone=phone,
            restaurant_name=restaurant_name,
            party_size=party_size,
            preferred_date=preferred_date,
        )
