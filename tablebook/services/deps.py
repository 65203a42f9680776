"""
Dependencies for core operations (injected per request).
"""
from sqlalchemy.orm import Session

from tablebook.services.cache.coordinator import CacheCoordinator
from tablebook.services.notifications.dispatcher import NotificationDispatcher


class ReservationDeps:
    """Deps passed to booking operations: DB session, availability cache and notification dispatcher."""

    def __init__(self, db: Session, cache: CacheCoordinator, notifier: NotificationDispatcher):
        self.db = db
        self.cache = cache
        self.notifier = notifier
