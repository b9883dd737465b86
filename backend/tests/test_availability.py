"""Tests for availability reads, bulk saves and clearing.

Covers:
- tri-state semantics (true / false / absent, null deletes)
- per-date result ledger on bulk save, including a failing date
- saved default range and range validation
"""
from datetime import date

from sqlalchemy.exc import OperationalError

from tabletop_scheduler.models.availability import Availability
from tabletop_scheduler.models.user import User
from tabletop_scheduler.services import availability_service
from tests.conftest import auth_headers, create_test_user

RANGE = {"start_date": "2024-03-01", "end_date": "2024-03-03"}


def _save(client, user, availabilities, **range_fields):
    payload = {"availabilities": availabilities}
    payload.update(range_fields or RANGE)
    return client.post("/api/availability/", json=payload, headers=auth_headers(user))


def _read(client, user, params=RANGE):
    resp = client.get("/api/availability/", params=params, headers=auth_headers(user))
    assert resp.status_code == 200, resp.text
    return resp.json()


def _mine(body, user):
    return next(u for u in body["users"] if u["user_id"] == user["user_id"])["availabilities"]


class TestAvailabilityRead:

    def test_round_trip_example(self, client):
        alice = create_test_user(client, name="Alice")
        resp = _save(client, alice, {"2024-03-01": True, "2024-03-02": False})
        assert resp.status_code == 200

        body = _read(client, alice)
        assert body["dates"] == ["2024-03-01", "2024-03-02", "2024-03-03"]
        assert body["start_date"] == "2024-03-01"
        assert body["end_date"] == "2024-03-03"
        assert _mine(body, alice) == {"2024-03-01": True, "2024-03-02": False}

    def test_lists_every_user_sorted_by_name(self, client):
        bob = create_test_user(client, name="Bob")
        create_test_user(client, name="Alice")
        body = _read(client, bob)
        assert [u["display_name"] for u in body["users"]] == ["Alice", "Bob"]
        assert all(u["availabilities"] == {} for u in body["users"])

    def test_only_dates_in_range_returned(self, client):
        alice = create_test_user(client, name="Alice")
        _save(client, alice, {"2024-03-01": True, "2024-03-03": True})
        body = _read(client, alice, {"start_date": "2024-03-02", "end_date": "2024-03-03"})
        assert _mine(body, alice) == {"2024-03-03": True}

    def test_inverted_range_rejected(self, client):
        alice = create_test_user(client, name="Alice")
        resp = client.get(
            "/api/availability/",
            params={"start_date": "2024-03-05", "end_date": "2024-03-01"},
            headers=auth_headers(alice),
        )
        assert resp.status_code == 400
        assert resp.json()["success"] is False

    def test_malformed_date_rejected(self, client):
        alice = create_test_user(client, name="Alice")
        resp = client.get(
            "/api/availability/",
            params={"start_date": "March 1st", "end_date": "2024-03-01"},
            headers=auth_headers(alice),
        )
        assert resp.status_code == 400

    def test_saved_range_becomes_default(self, client):
        alice = create_test_user(client, name="Alice")
        _save(client, alice, {}, start_date="2024-04-10", end_date="2024-04-12")
        body = _read(client, alice, params={})
        assert body["start_date"] == "2024-04-10"
        assert body["dates"] == ["2024-04-10", "2024-04-11", "2024-04-12"]


class TestAvailabilitySave:

    def test_ledger_reports_each_action(self, client):
        alice = create_test_user(client, name="Alice")
        _save(client, alice, {"2024-03-01": True, "2024-03-02": True})

        resp = _save(client, alice, {"2024-03-01": False, "2024-03-02": None, "2024-03-03": None})
        assert resp.status_code == 200
        results = {r["date"]: r["action"] for r in resp.json()["results"]}
        assert results == {"2024-03-01": "updated", "2024-03-02": "deleted", "2024-03-03": "no-op"}
        assert _mine(_read(client, alice), alice) == {"2024-03-01": False}

    def test_first_save_creates(self, client):
        alice = create_test_user(client, name="Alice")
        resp = _save(client, alice, {"2024-03-01": True})
        assert resp.json() == {
            "success": True,
            "results": [{"date": "2024-03-01", "action": "created", "error": None}],
        }

    def test_dates_outside_range_ignored(self, client):
        alice = create_test_user(client, name="Alice")
        resp = _save(client, alice, {"2024-03-01": True, "2024-05-01": True})
        assert [r["date"] for r in resp.json()["results"]] == ["2024-03-01"]

    def test_only_touches_own_rows(self, client):
        alice = create_test_user(client, name="Alice")
        bob = create_test_user(client, name="Bob")
        _save(client, alice, {"2024-03-01": True})
        _save(client, bob, {"2024-03-01": None})
        assert _mine(_read(client, alice), alice) == {"2024-03-01": True}

    def test_invalid_payload_rejected(self, client):
        alice = create_test_user(client, name="Alice")
        resp = client.post(
            "/api/availability/",
            json={"availabilities": "yes please"},
            headers=auth_headers(alice),
        )
        assert resp.status_code == 400

    def test_one_failing_date_does_not_abort_others(self, db, monkeypatch):
        user = User(email="a@example.com", display_name="A")
        db.add(user)
        db.commit()

        real_set = availability_service.set_availability

        def _flaky(session, user_id, day, value):
            if day == date(2024, 3, 2):
                session.add(Availability(user_id=user_id, date=day, is_available=True))
                session.flush()
                raise OperationalError("INSERT", {}, Exception("disk I/O error"))
            return real_set(session, user_id, day, value)

        monkeypatch.setattr(availability_service, "set_availability", _flaky)
        dates = [date(2024, 3, 1), date(2024, 3, 2), date(2024, 3, 3)]
        results = availability_service.save_availability(
            db, user.user_id, {d: True for d in dates}, dates,
        )

        assert [r["action"] for r in results] == ["created", "error", "created"]
        assert "disk I/O error" in results[1]["error"]
        stored = {a.date for a in db.query(Availability).filter(Availability.user_id == user.user_id)}
        # The failed day's partial insert was rolled back with its savepoint
        assert stored == {date(2024, 3, 1), date(2024, 3, 3)}


class TestAvailabilityClear:

    def test_clear_range(self, client):
        alice = create_test_user(client, name="Alice")
        _save(client, alice, {"2024-03-01": True, "2024-03-02": False, "2024-03-03": True})
        resp = client.delete(
            "/api/availability/",
            params={"start_date": "2024-03-01", "end_date": "2024-03-02"},
            headers=auth_headers(alice),
        )
        assert resp.status_code == 200
        assert resp.json()["deleted"] == 2
        assert _mine(_read(client, alice), alice) == {"2024-03-03": True}

    def test_clear_leaves_other_users(self, client):
        alice = create_test_user(client, name="Alice")
        bob = create_test_user(client, name="Bob")
        _save(client, alice, {"2024-03-01": True})
        _save(client, bob, {"2024-03-01": True})
        client.delete("/api/availability/", params=RANGE, headers=auth_headers(alice))
        body = _read(client, bob)
        assert _mine(body, alice) == {}
        assert _mine(body, bob) == {"2024-03-01": True}
