"""Tests for the HTTP adapter."""

import pytest
from fastapi.testclient import TestClient

from tablebook.db.session import get_db
from tablebook.main import create_app
from tablebook.services.notifications import NotificationDispatcher

DAY = "2030-01-01"


@pytest.fixture
def client(db, cache, sink):
    """App wired to the test session, memory cache and recording notifier (lifespan not started)."""
    app = create_app()
    app.state.cache = cache
    app.state.notifier = NotificationDispatcher(sink, background=False)

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def restaurant_id(client):
    resp = client.post(
        "/restaurants",
        json={
            "name": "Trattoria",
            "open_time": "10:00",
            "close_time": "22:00",
            "total_tables": 2,
            "peak_hour_start": "18:00",
            "peak_hour_end": "20:00",
            "max_peak_duration_minutes": 90,
        },
    )
    assert resp.status_code == 201
    return resp.json()["id"]


@pytest.fixture
def table_id(client, restaurant_id):
    resp = client.post(f"/restaurants/{restaurant_id}/tables", json={"table_number": "T1", "capacity": 4})
    assert resp.status_code == 201
    return resp.json()["id"]


def reservation_body(start="2030-01-01T20:00:00Z", minutes=60, party=4, **extra):
    body = {
        "customer_name": "Ada",
        "phone": "+15550100",
        "party_size": party,
        "start_time": start,
        "duration_minutes": minutes,
    }
    body.update(extra)
    return body


class TestRestaurants:
    def test_create_and_get(self, client, restaurant_id, table_id):
        resp = client.get(f"/restaurants/{restaurant_id}")

        assert resp.status_code == 200
        data = resp.json()
        assert data["restaurant"]["name"] == "Trattoria"
        assert [t["id"] for t in data["tables"]] == [table_id]
        assert data["available_tables"] == []

    def test_get_with_availability_query(self, client, restaurant_id, table_id):
        resp = client.get(
            f"/restaurants/{restaurant_id}",
            params={"start_time": "2030-01-01T12:00:00Z", "duration_minutes": 60, "party_size": 2},
        )

        assert [t["id"] for t in resp.json()["available_tables"]] == [table_id]

    def test_bad_hours(self, client):
        resp = client.post("/restaurants", json={"name": "Late", "open_time": "22:00", "close_time": "10:00"})

        assert resp.status_code == 400

    def test_unknown_restaurant(self, client):
        resp = client.get("/restaurants/999")

        assert resp.status_code == 404
        assert resp.json() == {"detail": "Restaurant not found"}

    def test_duplicate_table_number(self, client, restaurant_id, table_id):
        resp = client.post(f"/restaurants/{restaurant_id}/tables", json={"table_number": "T1", "capacity": 2})

        assert resp.status_code == 409

    def test_list_tables(self, client, restaurant_id, table_id):
        client.post(f"/restaurants/{restaurant_id}/tables", json={"table_number": "T2", "capacity": 6})

        resp = client.get(f"/restaurants/{restaurant_id}/tables")

        assert [t["table_number"] for t in resp.json()] == ["T1", "T2"]

    def test_availability_and_time_slots(self, client, restaurant_id, table_id):
        availability = client.get(
            f"/restaurants/{restaurant_id}/availability",
            params={"start_time": "2030-01-01T12:00:00Z", "duration_minutes": 60, "party_size": 4},
        )
        slots = client.get(
            f"/restaurants/{restaurant_id}/time-slots",
            params={"date": DAY, "party_size": 4, "duration_minutes": 60, "interval_minutes": 30},
        )

        assert availability.status_code == 200
        assert [t["id"] for t in availability.json()["available_tables"]] == [table_id]
        assert slots.status_code == 200
        assert len(slots.json()["slots"]) == 23
        assert slots.json()["slots"][0] == "2030-01-01T10:00:00.000Z"


class TestReservations:
    def test_book_then_conflict(self, client, restaurant_id, table_id):
        first = client.post(f"/restaurants/{restaurant_id}/reservations", json=reservation_body(table_id=table_id))
        second = client.post(
            f"/restaurants/{restaurant_id}/reservations",
            json=reservation_body(start="2030-01-01T20:30:00Z", table_id=table_id),
        )

        assert first.status_code == 201
        assert first.json()["on_waitlist"] is False
        assert first.json()["status"] == "pending"
        assert first.json()["end_time"] == "2030-01-01T21:00:00.000Z"
        assert second.status_code == 409
        assert second.json() == {"detail": "Table not available for requested time"}

    def test_capacity_exceeded(self, client, restaurant_id, table_id):
        resp = client.post(
            f"/restaurants/{restaurant_id}/reservations", json=reservation_body(party=6, table_id=table_id)
        )

        assert resp.status_code == 400
        assert resp.json() == {"detail": "Party size exceeds table capacity"}

    def test_full_house_is_waitlisted(self, client, restaurant_id, table_id):
        client.post(f"/restaurants/{restaurant_id}/reservations", json=reservation_body())

        resp = client.post(
            f"/restaurants/{restaurant_id}/reservations", json=reservation_body(start="2030-01-01T20:30:00Z")
        )

        assert resp.status_code == 201
        assert resp.json()["on_waitlist"] is True
        assert resp.json()["preferred_date"] == DAY
        waitlist = client.get(f"/restaurants/{restaurant_id}/waitlist", params={"date": DAY})
        assert waitlist.json()["total"] == 1

    def test_peak_cap(self, client, restaurant_id, table_id):
        resp = client.post(
            f"/restaurants/{restaurant_id}/reservations",
            json=reservation_body(start="2030-01-01T18:30:00Z", minutes=120),
        )

        assert resp.json()["end_time"] == "2030-01-01T20:00:00.000Z"

    def test_outside_hours(self, client, restaurant_id, table_id):
        resp = client.post(
            f"/restaurants/{restaurant_id}/reservations", json=reservation_body(start="2030-01-01T21:30:00Z")
        )

        assert resp.status_code == 400

    def test_invalid_body(self, client, restaurant_id):
        resp = client.post(f"/restaurants/{restaurant_id}/reservations", json=reservation_body(party=0))

        assert resp.status_code == 422

    def test_lifecycle(self, client, restaurant_id, table_id, sink):
        created = client.post(f"/restaurants/{restaurant_id}/reservations", json=reservation_body()).json()
        base = f"/restaurants/{restaurant_id}/reservations/{created['id']}"

        moved = client.patch(base, json={"start_time": "2030-01-01T20:30:00Z"})
        confirmed = client.post(f"{base}/confirm")
        again = client.post(f"{base}/confirm")
        late_move = client.patch(base, json={"duration_minutes": 30})
        cancelled = client.delete(base)

        assert moved.status_code == 200
        assert moved.json()["start_time"] == "2030-01-01T20:30:00.000Z"
        assert confirmed.json()["status"] == "confirmed"
        assert confirmed.json()["notified"] is True
        assert again.status_code == 400
        assert late_move.status_code == 400
        assert cancelled.json()["status"] == "cancelled"
        assert sink.kinds() == ["confirmation", "confirmation", "cancellation"]

    def test_list_for_date(self, client, restaurant_id, table_id):
        client.post(f"/restaurants/{restaurant_id}/reservations", json=reservation_body())

        resp = client.get(f"/restaurants/{restaurant_id}/reservations", params={"date": DAY, "page_size": 10})

        assert resp.status_code == 200
        assert resp.json()["total"] == 1
        assert resp.json()["page_size"] == 10

    def test_reservation_of_other_restaurant(self, client, restaurant_id, table_id):
        created = client.post(f"/restaurants/{restaurant_id}/reservations", json=reservation_body()).json()
        other = client.post("/restaurants", json={"name": "Other", "open_time": "10:00", "close_time": "22:00"})

        resp = client.post(f"/restaurants/{other.json()['id']}/reservations/{created['id']}/confirm")

        assert resp.status_code == 404


class TestWaitlist:
    def test_add_list_remove(self, client, restaurant_id):
        created = client.post(
            f"/restaurants/{restaurant_id}/waitlist",
            json={"customer_name": "Ada", "phone": "+15550100", "party_size": 4, "preferred_date": DAY},
        )
        assert created.status_code == 201

        removed = client.delete(f"/restaurants/{restaurant_id}/waitlist/{created.json()['id']}")
        missing = client.delete(f"/restaurants/{restaurant_id}/waitlist/{created.json()['id']}")
        listed = client.get(f"/restaurants/{restaurant_id}/waitlist", params={"date": DAY})

        assert removed.json() == {"ok": True, "message": "Waitlist entry removed"}
        assert missing.status_code == 404
        assert listed.json()["total"] == 0


def test_health(client):
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "cache": "degraded"}
