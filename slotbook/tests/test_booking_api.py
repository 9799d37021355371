"""Booking router over the in-memory store, plus app-level error handling and auth."""
from __future__ import annotations

import unittest
from datetime import datetime, time, timedelta, timezone
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch
from uuid import uuid4

from fastapi import FastAPI
from fastapi.testclient import TestClient

from fake_store import InMemoryStore

from slotbook.api import dependencies as deps
from slotbook.api.routers import booking
from slotbook.config import BookingConfig
from slotbook.core.exceptions import NotFoundError, ProjectError
from slotbook.scheduling.types import ServiceSpec, WeeklyRule

NOW = datetime(2026, 10, 19, 8, 0)
HAIRCUT = ServiceSpec(id=uuid4(), name="Haircut", duration_minutes=30, buffer_after_minutes=5, price=Decimal("25.00"))


def _make_test_app(store, *, appointments=None):
    from slotbook.api.main import project_error_handler

    app = FastAPI()
    app.include_router(booking.router, prefix="/api/v1")
    app.add_exception_handler(ProjectError, project_error_handler)
    app.dependency_overrides[deps.get_store] = lambda: store
    app.dependency_overrides[deps.get_booking_config] = lambda: BookingConfig()
    app.dependency_overrides[deps.get_notifier] = lambda: None
    app.dependency_overrides[deps.get_clock] = lambda: (lambda: NOW)
    if appointments is not None:
        app.dependency_overrides[deps.get_appointment_service] = lambda: appointments
    return app


def _booking_body(start="2026-10-19T10:10:00", **kwargs):
    body = {
        "service_id": str(HAIRCUT.id),
        "start": start,
        "customer_name": "Ada Lovelace",
        "customer_email": "ada@example.com",
    }
    body.update(kwargs)
    return body


class TestBookingRouter(unittest.TestCase):
    def setUp(self):
        self._limiter_enabled = booking.limiter.enabled
        booking.limiter.enabled = False
        self.store = InMemoryStore(
            services=[HAIRCUT],
            rules=[WeeklyRule(weekday=1, start_time=time(9, 0), end_time=time(18, 0))],
        )
        self.client = TestClient(_make_test_app(self.store), raise_server_exceptions=False)

    def tearDown(self):
        booking.limiter.enabled = self._limiter_enabled

    def test_slots(self):
        resp = self.client.get(
            "/api/v1/booking/slots", params={"service_id": str(HAIRCUT.id), "date": "2026-10-19"},
        )
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(len(data["slots"]), 15)
        self.assertEqual(data["slots"][0]["time"], "09:00")
        self.assertEqual(data["slots"][0]["end"], "2026-10-19T09:30:00")
        self.assertEqual(data["slots"][-1]["time"], "17:10")

    def test_slots_read_the_service_once(self):
        self.store.get_service = AsyncMock(wraps=self.store.get_service)
        resp = self.client.get(
            "/api/v1/booking/slots", params={"service_id": str(HAIRCUT.id), "date": "2026-10-19"},
        )
        self.assertEqual(resp.status_code, 200)
        self.store.get_service.assert_awaited_once_with(HAIRCUT.id)

    def test_unknown_service_is_404_with_code(self):
        resp = self.client.get(
            "/api/v1/booking/slots", params={"service_id": str(uuid4()), "date": "2026-10-19"},
        )
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["code"], "NOT_FOUND")

    def test_open_dates(self):
        resp = self.client.get("/api/v1/booking/open-dates", params={"start": "2026-10-18", "end": "2026-10-27"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["dates"], ["2026-10-19", "2026-10-26"])

    def test_reversed_range_is_400(self):
        resp = self.client.get("/api/v1/booking/open-dates", params={"start": "2026-10-27", "end": "2026-10-18"})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["code"], "VALIDATION_ERROR")

    def test_book_then_same_slot_again(self):
        first = self.client.post("/api/v1/booking/appointments", json=_booking_body())
        self.assertEqual(first.status_code, 201)
        self.assertEqual(first.json()["status"], "confirmed")
        self.assertEqual(first.json()["service_name"], "Haircut")
        self.assertEqual(first.json()["end_at"], "2026-10-19T10:40:00")

        second = self.client.post("/api/v1/booking/appointments", json=_booking_body())
        self.assertEqual(second.status_code, 409)
        self.assertEqual(second.json()["code"], "SLOT_UNAVAILABLE")
        self.assertEqual(second.json()["details"]["reason"], "taken")

    def test_offset_start_is_converted_to_local_time(self):
        local = datetime(2026, 10, 19, 10, 10)
        sent = local.astimezone(timezone(timedelta(hours=5))).isoformat()

        resp = self.client.post("/api/v1/booking/appointments", json=_booking_body(start=sent))

        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()["start_at"], "2026-10-19T10:10:00")
        self.assertEqual(self.store.rows[0].start_at, local)

    def test_off_grid_start_is_409(self):
        resp = self.client.post("/api/v1/booking/appointments", json=_booking_body(start="2026-10-19T10:00:00"))
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(self.store.rows, [])

    def test_bad_email_is_400(self):
        resp = self.client.post("/api/v1/booking/appointments", json=_booking_body(customer_email="nobody"))
        self.assertEqual(resp.status_code, 400)


class TestConfirmationLookup(unittest.TestCase):
    def test_returns_appointment_with_service(self):
        appt = SimpleNamespace(
            id=uuid4(),
            service_id=HAIRCUT.id,
            service=SimpleNamespace(name="Haircut", price=Decimal("25.00"), duration_minutes=30),
            start_at=datetime(2026, 10, 19, 10, 10),
            end_at=datetime(2026, 10, 19, 10, 40),
            customer_name="Ada Lovelace",
            customer_email="ada@example.com",
            customer_phone=None,
            notes=None,
            status="confirmed",
            created_at=datetime(2026, 10, 1, 12, 0),
        )
        svc = SimpleNamespace(get_appointment=AsyncMock(return_value=appt))
        client = TestClient(_make_test_app(InMemoryStore(), appointments=svc))

        resp = client.get(f"/api/v1/booking/appointments/{appt.id}")

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["service_duration"], 30)
        svc.get_appointment.assert_awaited_once_with(appt.id)

    def test_unknown_is_404(self):
        svc = SimpleNamespace(get_appointment=AsyncMock(side_effect=NotFoundError("Appointment not found")))
        client = TestClient(_make_test_app(InMemoryStore(), appointments=svc), raise_server_exceptions=False)

        resp = client.get(f"/api/v1/booking/appointments/{uuid4()}")

        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["detail"], "Appointment not found")


class TestAdminApiKey(unittest.TestCase):
    def test_admin_routes_require_key_when_configured(self):
        from slotbook.api import main

        with patch.object(main, "_ADMIN_API_KEY", "k3y"):
            client = TestClient(main.app)
            self.assertEqual(client.get("/api/v1/admin/dashboard").status_code, 401)
            self.assertEqual(client.get("/health").status_code, 200)


if __name__ == "__main__":
    unittest.main()
