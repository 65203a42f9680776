"""Tests for the cache backends and coordinator."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
import redis

from tablebook.core.errors import CacheUnavailableError
from tablebook.scheduler.cache_health_job import run_cache_health_check
from tablebook.services import add_table, create_reservation
from tablebook.services.cache import CacheCoordinator, MemoryCacheBackend, RedisCacheBackend
from tablebook.services.cache.keys import availability_key, prefix_of, reservations_key, timeslots_key


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


class FlakyBackend(MemoryCacheBackend):
    """Memory store that raises CacheUnavailableError while down."""

    def __init__(self):
        super().__init__()
        self.down = False

    def _check(self):
        if self.down:
            raise CacheUnavailableError("connection refused")

    def get(self, key):
        self._check()
        return super().get(key)

    def set(self, key, value, ttl_seconds):
        self._check()
        super().set(key, value, ttl_seconds)

    def scan_keys_by_prefix(self, prefix):
        self._check()
        return super().scan_keys_by_prefix(prefix)

    def delete_keys(self, keys):
        self._check()
        return super().delete_keys(keys)

    def flush_all(self):
        self._check()
        super().flush_all()

    def ping(self):
        self._check()
        return True


class TestKeys:
    def test_key_formats(self):
        assert availability_key(7, utc(2030, 1, 1, 19), 90, 4) == "availability:7:2030-01-01T19:00:00.000Z:90:4"
        assert timeslots_key(7, "2030-01-01", 4, 90, 30) == "timeslots:7:2030-01-01:4:90:30"
        assert reservations_key(7, "2030-01-01", 2, 20) == "reservations:7:2030-01-01:2:20"

    def test_prefix_of(self):
        assert prefix_of("availability:7:2030-01-01T19:00:00.000Z:90:4") == "availability:7:"

    def test_restaurant_prefix_does_not_match_longer_ids(self):
        """Prefix for restaurant 1 must not pick up restaurant 12's keys."""
        store = MemoryCacheBackend()
        store.set(reservations_key(1, "2030-01-01", 1, 20), "1", 60)
        store.set(reservations_key(12, "2030-01-01", 1, 20), "12", 60)

        assert store.scan_keys_by_prefix("reservations:1:") == ["reservations:1:2030-01-01:1:20"]


class TestMemoryCacheBackend:
    def test_entries_expire(self):
        clock = FakeClock()
        store = MemoryCacheBackend(clock)
        store.set("availability:1:x", "[]", 60)

        clock.now = 59
        assert store.get("availability:1:x") == "[]"
        clock.now = 60
        assert store.get("availability:1:x") is None

    def test_delete_and_flush(self):
        store = MemoryCacheBackend()
        store.set("a:1:x", "1", 60)
        store.set("a:1:y", "2", 60)
        store.set("b:1:x", "3", 60)

        assert store.delete_keys(store.scan_keys_by_prefix("a:1:")) == 2
        assert len(store) == 1
        store.flush_all()
        assert len(store) == 0


class TestCacheCoordinator:
    def test_read_through(self):
        cache = CacheCoordinator(MemoryCacheBackend(), MemoryCacheBackend())
        calls = []

        def loader():
            calls.append(1)
            return [{"id": 1}]

        assert cache.get_or_set("availability:1:k", loader) == [{"id": 1}]
        assert cache.get_or_set("availability:1:k", loader) == [{"id": 1}]
        assert len(calls) == 1

    def test_invalidate_restaurant_drops_all_kinds(self):
        primary = MemoryCacheBackend()
        cache = CacheCoordinator(primary, MemoryCacheBackend())
        for key in ("availability:1:a", "timeslots:1:b", "reservations:1:c", "availability:2:a"):
            cache.get_or_set(key, lambda: "v")

        assert cache.invalidate_restaurant(1) == 3
        assert primary.scan_keys_by_prefix("availability:2:") == ["availability:2:a"]
        assert primary.scan_keys_by_prefix("timeslots:1:") == []

    def test_primary_failure_degrades_to_fallback(self):
        primary = FlakyBackend()
        fallback = MemoryCacheBackend()
        cache = CacheCoordinator(primary, fallback)
        primary.down = True

        assert cache.get_or_set("availability:1:k", lambda: [1]) == [1]

        assert cache.degraded is True
        assert fallback.get("availability:1:k") == "[1]"

    def test_no_primary_starts_degraded(self):
        cache = CacheCoordinator(None, MemoryCacheBackend())

        assert cache.degraded is True
        assert cache.check_health() is False
        assert cache.get_or_set("availability:1:k", lambda: 5) == 5

    def test_invalidations_while_degraded_are_replayed_on_recovery(self):
        """Primary keeps a stale entry through the outage; recovery deletes it before reads return there."""
        primary = FlakyBackend()
        cache = CacheCoordinator(primary, MemoryCacheBackend())
        cache.get_or_set("availability:1:k", lambda: "stale")
        primary.down = True

        cache.invalidate_restaurant(1)
        assert cache.degraded is True

        primary.down = False
        assert cache.check_health() is True
        assert cache.degraded is False
        assert primary.get("availability:1:k") is None
        assert cache.get_or_set("availability:1:k", lambda: "fresh") == "fresh"

    def test_lazy_reprobe_after_retry_interval(self):
        clock = FakeClock()
        primary = FlakyBackend()
        cache = CacheCoordinator(primary, MemoryCacheBackend(), retry_seconds=30, clock=clock)
        primary.down = True
        cache.get_or_set("availability:1:k", lambda: 1)
        assert cache.degraded is True

        primary.down = False
        clock.now = 10
        cache.get_or_set("availability:1:other", lambda: 2)
        assert cache.degraded is True

        clock.now = 31
        cache.get_or_set("availability:1:other", lambda: 2)
        assert cache.degraded is False
        assert primary.get("availability:1:other") == "2"

    def test_failed_health_check_stays_degraded(self):
        primary = FlakyBackend()
        cache = CacheCoordinator(primary, MemoryCacheBackend())
        primary.down = True

        assert cache.check_health() is False
        assert cache.degraded is True

    def test_load_racing_an_invalidation_is_not_written_back(self):
        """A value computed before an invalidation must not repopulate the cache."""
        primary = MemoryCacheBackend()
        cache = CacheCoordinator(primary, MemoryCacheBackend())

        def loader():
            cache.invalidate_restaurant(1)
            return "computed-before-write"

        assert cache.get_or_set("availability:1:k", loader) == "computed-before-write"
        assert primary.get("availability:1:k") is None

    def test_invalidation_during_write_drops_the_written_value(self):
        """An invalidation landing while the loaded value is being stored must still win."""
        state = {"free": ["T1"]}

        class InvalidatingStore(MemoryCacheBackend):
            def set(self, key, value, ttl_seconds):
                if not hasattr(self, "fired"):
                    self.fired = True
                    state["free"] = []
                    cache.invalidate_restaurant(1)
                super().set(key, value, ttl_seconds)

        store = InvalidatingStore()
        cache = CacheCoordinator(None, store)

        first = cache.get_or_set("availability:1:k", lambda: list(state["free"]))
        second = cache.get_or_set("availability:1:k", lambda: list(state["free"]))

        assert first == ["T1"]
        assert second == []
        assert store.get("availability:1:k") == "[]"

    def test_invalidation_during_primary_write(self):
        primary = MemoryCacheBackend()
        cache = CacheCoordinator(primary, MemoryCacheBackend())
        original_set = primary.set

        def invalidate_then_set(key, value, ttl_seconds):
            cache.invalidate_restaurant(1)
            original_set(key, value, ttl_seconds)

        primary.set = invalidate_then_set

        cache.get_or_set("availability:1:k", lambda: "stale")

        assert primary.get("availability:1:k") is None

    def test_clear(self):
        primary = MemoryCacheBackend()
        fallback = MemoryCacheBackend()
        cache = CacheCoordinator(primary, fallback)
        cache.get_or_set("availability:1:k", lambda: 1)

        cache.clear()

        assert len(primary) == 0
        assert len(fallback) == 0


class TestInvalidationThroughServices:
    """Every mutation drops the restaurant's cached reads."""

    @pytest.fixture
    def restaurant(self, make_restaurant):
        restaurant, _ = make_restaurant(capacities=(4,))
        return restaurant

    def _seed(self, cache, restaurant_id):
        for key in (
            f"availability:{restaurant_id}:x",
            f"timeslots:{restaurant_id}:x",
            f"reservations:{restaurant_id}:x",
        ):
            cache.get_or_set(key, lambda: "cached")

    def _cached(self, cache, restaurant_id):
        return {
            key: cache.get_or_set(key, lambda: "reloaded")
            for key in (
                f"availability:{restaurant_id}:x",
                f"timeslots:{restaurant_id}:x",
                f"reservations:{restaurant_id}:x",
            )
        }

    def test_create_reservation_invalidates(self, deps, restaurant):
        self._seed(deps.cache, restaurant.id)

        create_reservation(
            deps,
            restaurant.id,
            customer_name="Ada",
            phone="+15550100",
            party_size=2,
            start_time=utc(2030, 1, 1, 19),
            duration_minutes=60,
        )

        assert set(self._cached(deps.cache, restaurant.id).values()) == {"reloaded"}

    def test_add_table_invalidates(self, deps, restaurant):
        self._seed(deps.cache, restaurant.id)

        add_table(deps, restaurant.id, "T9", 8)

        assert set(self._cached(deps.cache, restaurant.id).values()) == {"reloaded"}


class TestRedisCacheBackend:
    """redis-py errors surface as CacheUnavailableError."""

    def test_connection_error_is_wrapped(self):
        client = MagicMock()
        client.get.side_effect = redis.ConnectionError("refused")
        backend = RedisCacheBackend(client)

        with pytest.raises(CacheUnavailableError):
            backend.get("availability:1:k")

    def test_set_uses_ttl(self):
        client = MagicMock()
        RedisCacheBackend(client).set("availability:1:k", "[]", 60)

        client.set.assert_called_once_with("availability:1:k", "[]", ex=60)

    def test_delete_in_batches(self):
        client = MagicMock()
        client.delete.side_effect = lambda *keys: len(keys)
        keys = [f"availability:1:{i}" for i in range(250)]

        assert RedisCacheBackend(client).delete_keys(keys) == 250
        assert client.delete.call_count == 3

    def test_unreachable_redis_degrades_coordinator(self):
        client = MagicMock()
        client.ping.side_effect = redis.TimeoutError("timed out")
        cache = CacheCoordinator(RedisCacheBackend(client), MemoryCacheBackend())

        assert cache.check_health() is False
        assert cache.degraded is True


class TestCacheHealthJob:
    def test_job_restores_primary(self):
        primary = FlakyBackend()
        cache = CacheCoordinator(primary, MemoryCacheBackend())
        primary.down = True
        run_cache_health_check(cache)
        assert cache.degraded is True

        primary.down = False
        run_cache_health_check(cache)

        assert cache.degraded is False
