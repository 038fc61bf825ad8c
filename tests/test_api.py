#!/usr/bin/env python3
"""
HTTP-level tests for slot listing, booking and availability management.
"""

import pytest

from factories import (
    API_KEY,
    COACH_HEADERS,
    COACH_ID,
    OTHER_COACH_ID,
    add_booking,
    add_event,
    add_session,
    add_weekly_window,
    utc,
)

pytestmark = pytest.mark.integration

MONDAY = "2024-06-03"


def booking_body(**overrides):
    body = {
        "coach": COACH_ID,
        "scheduled_at": "2024-06-03T07:00:00.000Z",
        "email": "Client@Example.com ",
        "name": "Petr Svoboda",
        "source": "landing_page",
    }
    body.update(overrides)
    return body


class TestSlotsEndpoint:
    async def test_lists_coach_slots(self, api_client, db_session):
        await add_weekly_window(db_session)
        response = await api_client.get("/bookings/slots", params={"from": MONDAY, "to": MONDAY, "coach": COACH_ID})
        assert response.status_code == 200
        assert response.json() == {"slots": [
            {"slot_at": "2024-06-03T07:00:00.000Z", "duration_minutes": 30},
            {"slot_at": "2024-06-03T07:30:00.000Z", "duration_minutes": 30},
        ]}

    async def test_lists_event_slots(self, api_client, db_session):
        event = await add_event(db_session, duration=60, windows=[(1, "09:00", "10:00")])
        response = await api_client.get("/bookings/slots", params={"from": MONDAY, "to": MONDAY, "event_id": event.id})
        assert response.json()["slots"] == [{"slot_at": "2024-06-03T07:00:00.000Z", "duration_minutes": 60}]

    @pytest.mark.parametrize("params", [
        {"from": "03/06/2024", "to": MONDAY, "coach": COACH_ID},
        {"from": "2024-06-04", "to": MONDAY, "coach": COACH_ID},
        {"from": "2024-01-01", "to": "2024-06-30", "coach": COACH_ID},
        {"from": MONDAY, "to": MONDAY},
    ])
    async def test_rejects_bad_queries(self, api_client, db_engine, params):
        response = await api_client.get("/bookings/slots", params=params)
        assert response.status_code == 400
        assert "error" in response.json()


class TestCreateBooking:
    async def test_public_booking_of_offered_slot(self, api_client, db_session):
        await add_weekly_window(db_session)
        response = await api_client.post("/bookings", json=booking_body())
        assert response.status_code == 200
        data = response.json()
        assert data["ok"] is True
        assert data["booking_id"]

        slots = await api_client.get("/bookings/slots", params={"from": MONDAY, "to": MONDAY, "coach": COACH_ID})
        assert [s["slot_at"] for s in slots.json()["slots"]] == ["2024-06-03T07:30:00.000Z"]

    async def test_taken_slot_conflicts(self, api_client, db_session):
        await add_weekly_window(db_session)
        await add_booking(db_session, utc(2024, 6, 3, 7, 0))
        response = await api_client.post("/bookings", json=booking_body())
        assert response.status_code == 409
        assert response.json() == {"error": "Slot is no longer available"}

    async def test_second_booking_of_same_slot_conflicts(self, api_client, db_session):
        await add_weekly_window(db_session)
        first = await api_client.post("/bookings", json=booking_body())
        second = await api_client.post("/bookings", json=booking_body(email="other@example.com"))
        assert first.status_code == 200
        assert second.status_code == 409

    async def test_public_caller_cannot_book_unoffered_time(self, api_client, db_session):
        await add_weekly_window(db_session)
        response = await api_client.post("/bookings", json=booking_body(scheduled_at="2024-06-03T07:15:00Z"))
        assert response.status_code == 400
        assert response.json() == {"error": "Slot is not offered"}

    async def test_coach_may_book_any_free_time(self, api_client, db_session):
        response = await api_client.post(
            "/bookings",
            json=booking_body(scheduled_at="2024-06-03T13:15:00Z", duration_minutes=45),
            headers=COACH_HEADERS,
        )
        assert response.status_code == 200

    async def test_coach_still_blocked_by_session(self, api_client, db_session):
        await add_session(db_session, utc(2024, 6, 3, 13, 0), duration=60)
        response = await api_client.post(
            "/bookings", json=booking_body(scheduled_at="2024-06-03T13:15:00Z"), headers=COACH_HEADERS
        )
        assert response.status_code == 409

    async def test_missing_fields(self, api_client, db_engine):
        response = await api_client.post("/bookings", json=booking_body(email=None))
        assert response.status_code == 400
        assert response.json() == {"error": "scheduled_at, email, and name are required"}

    async def test_missing_coach_and_event(self, api_client, db_engine):
        response = await api_client.post("/bookings", json=booking_body(coach=None))
        assert response.status_code == 400

    async def test_invalid_timestamp(self, api_client, db_engine):
        response = await api_client.post("/bookings", json=booking_body(scheduled_at="tomorrow"))
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid scheduled_at"}

    async def test_unknown_event(self, api_client, db_engine):
        response = await api_client.post("/bookings", json=booking_body(event_id="missing"))
        assert response.status_code == 404

    async def test_event_booking_uses_event_owner(self, api_client, db_session):
        event = await add_event(db_session, user_id=OTHER_COACH_ID, duration=60, windows=[(1, "09:00", "10:00")])
        response = await api_client.post(
            "/bookings", json=booking_body(coach=None, event_id=event.id)
        )
        assert response.status_code == 200

        slots = await api_client.get(
            "/bookings/slots", params={"from": MONDAY, "to": MONDAY, "event_id": event.id}
        )
        assert slots.json()["slots"] == []

    async def test_one_booking_per_email(self, api_client, db_session):
        event = await add_event(
            db_session, duration=30, windows=[(1, "09:00", "10:00")], one_booking_per_email=True
        )
        first = await api_client.post("/bookings", json=booking_body(coach=None, event_id=event.id))
        second = await api_client.post(
            "/bookings",
            json=booking_body(coach=None, event_id=event.id, scheduled_at="2024-06-03T07:30:00Z",
                              email="client@example.com"),
        )
        assert first.status_code == 200
        assert second.status_code == 409
        assert "e-mail" in second.json()["error"]


class TestWeeklyAvailability:
    async def test_requires_coach_identity(self, api_client, db_engine):
        response = await api_client.get("/availability/weekly", headers={"X-API-Key": API_KEY})
        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}

    async def test_replace_and_read_back(self, api_client, db_session):
        await add_weekly_window(db_session, day_of_week=5)
        body = {"windows": [
            {"day_of_week": 1, "start_time": "09:00", "end_time": "12:00", "slot_duration_minutes": 60},
            {"day_of_week": 3, "start_time": "14:00", "end_time": "16:00"},
        ]}
        put = await api_client.put("/availability/weekly", json=body, headers=COACH_HEADERS)
        assert put.status_code == 200

        response = await api_client.get("/availability/weekly", headers=COACH_HEADERS)
        windows = response.json()
        assert [(w["day_of_week"], w["start_time"], w["end_time"], w["slot_duration_minutes"]) for w in windows] == [
            (1, "09:00", "12:00", 60),
            (3, "14:00", "16:00", 30),
        ]

    async def test_rejects_inverted_window(self, api_client, db_engine):
        body = {"windows": [{"day_of_week": 1, "start_time": "12:00", "end_time": "09:00"}]}
        response = await api_client.put("/availability/weekly", json=body, headers=COACH_HEADERS)
        assert response.status_code == 422

    async def test_rejects_bad_weekday(self, api_client, db_engine):
        body = {"windows": [{"day_of_week": 7, "start_time": "09:00", "end_time": "10:00"}]}
        response = await api_client.put("/availability/weekly", json=body, headers=COACH_HEADERS)
        assert response.status_code == 422


class TestEventAvailability:
    async def test_replace_event_windows(self, api_client, db_session):
        event = await add_event(db_session, windows=[(2, "08:00", "09:00")])
        body = {"windows": [{"day_of_week": 1, "start_time": "10:00", "end_time": "11:00"}]}
        put = await api_client.put(f"/events/{event.id}/availability", json=body, headers=COACH_HEADERS)
        assert put.status_code == 200

        response = await api_client.get(f"/events/{event.id}/availability", headers=COACH_HEADERS)
        assert [(w["day_of_week"], w["start_time"]) for w in response.json()] == [(1, "10:00")]

    async def test_other_coach_event_not_found(self, api_client, db_session):
        event = await add_event(db_session, user_id=OTHER_COACH_ID)
        response = await api_client.get(f"/events/{event.id}/availability", headers=COACH_HEADERS)
        assert response.status_code == 404
        assert response.json() == {"error": "Not found"}


class TestSessionChecks:
    async def test_check_conflicts(self, api_client, db_session):
        session = await add_session(db_session, utc(2024, 6, 3, 7, 0), duration=60, title="Kickoff")
        response = await api_client.post(
            "/sessions/check-conflicts",
            json={"scheduled_at": "2024-06-03T07:30:00Z", "duration_minutes": 30},
            headers=COACH_HEADERS,
        )
        assert response.status_code == 200
        conflicts = response.json()["conflicts"]
        assert [(c["type"], c["id"], c["title"]) for c in conflicts] == [("session", session.id, "Kickoff")]

    async def test_check_slot_moving_a_session(self, api_client, db_session):
        session = await add_session(db_session, utc(2024, 6, 3, 7, 0), duration=60)
        body = {"scheduled_at": "2024-06-03T07:30:00Z", "duration_minutes": 30}

        taken = await api_client.post("/sessions/check-slot", json=body, headers=COACH_HEADERS)
        moved = await api_client.post(
            "/sessions/check-slot", json={**body, "exclude_session_id": session.id}, headers=COACH_HEADERS
        )
        assert taken.json() == {"free": False}
        assert moved.json() == {"free": True}

    async def test_requires_api_key(self, api_client, db_engine):
        response = await api_client.post(
            "/sessions/check-slot",
            json={"scheduled_at": "2024-06-03T07:30:00Z"},
            headers={"X-User-Id": COACH_ID},
        )
        assert response.status_code == 401
        assert response.json() == {"error": "Invalid or missing API key"}
