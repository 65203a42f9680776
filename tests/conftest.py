"""Shared fixtures: in-memory SQLite ledger, memory-only cache, recording notifier."""

import os

# Before any tablebook import: the engine and settings are built at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["REDIS_URL"] = ""
os.environ["NOTIFY_CHANNEL"] = "log"

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import tablebook.models  # noqa: F401  (registers tables on Base.metadata)
from tablebook.db.base import Base
from tablebook.services import ReservationDeps, add_table, create_restaurant
from tablebook.services.cache import CacheCoordinator, MemoryCacheBackend
from tablebook.services.notifications import NotificationDispatcher


class RecordingSink:
    """Notification sink that remembers every call."""

    def __init__(self):
        self.calls = []

    def _record(self, kind, facts):
        self.calls.append((kind, facts))
        return True

    def notify_confirmation(self, **facts):
        return self._record("confirmation", facts)

    def notify_cancellation(self, **facts):
        return self._record("cancellation", facts)

    def notify_waitlisted(self, **facts):
        return self._record("waitlisted", facts)

    def kinds(self):
        return [kind for kind, _ in self.calls]


@pytest.fixture
def engine():
    """Fresh in-memory schema per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def cache():
    """Coordinator without a remote primary: runs on the in-process store."""
    return CacheCoordinator(None, MemoryCacheBackend())


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def notifier(sink):
    return NotificationDispatcher(sink, background=False)


@pytest.fixture
def deps(db, cache, notifier):
    return ReservationDeps(db, cache, notifier)


@pytest.fixture
def make_restaurant(deps):
    """Factory: restaurant open 10:00-22:00 (by default) with one table per capacity."""

    def _make(capacities=(4,), open_time="10:00", close_time="22:00", name="Trattoria", **kwargs):
        restaurant = create_restaurant(deps.db, name, open_time, close_time, len(capacities), **kwargs)
        tables = [add_table(deps, restaurant.id, f"T{i}", capacity) for i, capacity in enumerate(capacities, 1)]
        return restaurant, tables

    return _make
