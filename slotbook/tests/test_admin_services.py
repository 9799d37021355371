"""Admin-side services with mocked repositories."""
from __future__ import annotations

import asyncio
import unittest
from datetime import date, datetime, time
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

from slotbook.core.exceptions import NotFoundError, ValidationError
from slotbook.scheduling.types import AppointmentQuery, DateRange
from slotbook.services.appointment_service import AppointmentService
from slotbook.services.catalog_service import CatalogService
from slotbook.services.dashboard_service import DashboardService, week_bounds
from slotbook.services.notification_service import BOOKING_CANCELLED
from slotbook.services.schedule_service import ScheduleService


def _run(coro):
    return asyncio.run(coro)


def _session():
    session = MagicMock()
    session.commit = AsyncMock()
    return session


def _fake_appointment(**kwargs):
    defaults = {
        "id": uuid4(),
        "service_id": uuid4(),
        "service": SimpleNamespace(name="Haircut", price=Decimal("25.00"), duration_minutes=30),
        "start_at": datetime(2026, 10, 19, 10, 10),
        "end_at": datetime(2026, 10, 19, 10, 40),
        "customer_name": "Ada Lovelace",
        "customer_email": "ada@example.com",
        "customer_phone": None,
        "notes": None,
        "status": "confirmed",
        "created_at": datetime(2026, 10, 1, 12, 0),
    }
    defaults.update(kwargs)
    return SimpleNamespace(**defaults)


class TestAppointmentService(unittest.TestCase):
    def test_get_unknown_raises(self):
        svc = AppointmentService(_session())
        svc._repo.get_by_id = AsyncMock(return_value=None)
        with self.assertRaises(NotFoundError):
            _run(svc.get_appointment(uuid4()))

    def test_list_passes_query_through(self):
        svc = AppointmentService(_session())
        rows = [_fake_appointment()]
        svc._repo.list_by_query = AsyncMock(return_value=rows)
        query = AppointmentQuery(date_range=DateRange.single(date(2026, 10, 19)))

        self.assertEqual(_run(svc.list_appointments(query)), rows)
        svc._repo.list_by_query.assert_awaited_once_with(query)

    def test_cancel_updates_commits_and_notifies(self):
        session = _session()
        notifier = MagicMock()
        notifier.notify = AsyncMock(return_value=True)
        svc = AppointmentService(session, notifier=notifier)
        appt = _fake_appointment()
        cancelled = _fake_appointment(id=appt.id, status="cancelled")
        svc._repo.get_by_id = AsyncMock(return_value=appt)
        svc._repo.update_status = AsyncMock(return_value=cancelled)

        result = _run(svc.cancel(appt.id))

        self.assertEqual(result.status, "cancelled")
        svc._repo.update_status.assert_awaited_once_with(appt.id, "cancelled")
        session.commit.assert_awaited_once()
        notice = notifier.notify.await_args.args[0]
        self.assertEqual(notice.event, BOOKING_CANCELLED)
        self.assertEqual(notice.service_name, "Haircut")
        self.assertEqual(notice.start, appt.start_at)

    def test_cancel_twice_is_a_no_op(self):
        session = _session()
        svc = AppointmentService(session)
        appt = _fake_appointment(status="cancelled")
        svc._repo.get_by_id = AsyncMock(return_value=appt)
        svc._repo.update_status = AsyncMock()

        self.assertIs(_run(svc.cancel(appt.id)), appt)
        svc._repo.update_status.assert_not_awaited()
        session.commit.assert_not_awaited()

    def test_notifier_failure_does_not_undo_cancel(self):
        session = _session()
        notifier = MagicMock()
        notifier.notify = AsyncMock(side_effect=RuntimeError("boom"))
        svc = AppointmentService(session, notifier=notifier)
        appt = _fake_appointment()
        svc._repo.get_by_id = AsyncMock(return_value=appt)
        svc._repo.update_status = AsyncMock(return_value=_fake_appointment(id=appt.id, status="cancelled"))

        with self.assertLogs("slotbook.services.appointment_service", level="ERROR"):
            result = _run(svc.cancel(appt.id))
        self.assertEqual(result.status, "cancelled")
        session.commit.assert_awaited_once()


class TestCatalogService(unittest.TestCase):
    def test_create_rejects_bad_numbers(self):
        svc = CatalogService(_session())
        svc._repo.create = AsyncMock()
        for bad in ({"duration_minutes": 0}, {"buffer_after_minutes": -5}, {"price": Decimal("-1")}):
            with self.assertRaises(ValidationError):
                _run(svc.create_service({"name": "X", "duration_minutes": 30, **bad}))
        svc._repo.create.assert_not_awaited()

    def test_deactivate_sets_flag(self):
        svc = CatalogService(_session())
        service_id = uuid4()
        svc._repo.update = AsyncMock(return_value=SimpleNamespace(id=service_id, active=False))

        result = _run(svc.deactivate_service(service_id))

        self.assertFalse(result.active)
        svc._repo.update.assert_awaited_once_with(service_id, {"active": False})

    def test_update_unknown_raises(self):
        svc = CatalogService(_session())
        svc._repo.update = AsyncMock(return_value=None)
        with self.assertRaises(NotFoundError):
            _run(svc.update_service(uuid4(), {"name": "New"}))

    def test_update_rejects_explicit_nulls(self):
        svc = CatalogService(_session())
        svc._repo.update = AsyncMock()
        for field in ("duration_minutes", "buffer_after_minutes", "price", "name", "active"):
            with self.assertRaises(ValidationError) as ctx:
                _run(svc.update_service(uuid4(), {field: None}))
            self.assertEqual(ctx.exception.details, {"field": field})
            self.assertEqual(ctx.exception.http_status, 400)
        svc._repo.update.assert_not_awaited()

    def test_update_allows_clearing_description(self):
        svc = CatalogService(_session())
        service_id = uuid4()
        svc._repo.update = AsyncMock(return_value=SimpleNamespace(id=service_id, description=None))
        result = _run(svc.update_service(service_id, {"description": None}))
        self.assertIsNone(result.description)


class TestScheduleService(unittest.TestCase):
    def test_create_rule_validates(self):
        svc = ScheduleService(_session())
        svc._rules.create = AsyncMock()
        with self.assertRaises(ValidationError):
            _run(svc.create_rule({"weekday": 7, "start_time": time(9, 0), "end_time": time(17, 0)}))
        with self.assertRaises(ValidationError):
            _run(svc.create_rule({"weekday": 1, "start_time": time(17, 0), "end_time": time(9, 0)}))
        svc._rules.create.assert_not_awaited()

    def test_update_rule_checks_merged_fields(self):
        svc = ScheduleService(_session())
        rule = SimpleNamespace(id=uuid4(), weekday=1, start_time=time(9, 0), end_time=time(12, 0))
        svc._rules.get_by_id = AsyncMock(return_value=rule)
        svc._rules.update = AsyncMock()
        with self.assertRaises(ValidationError):
            _run(svc.update_rule(rule.id, {"start_time": time(13, 0)}))
        svc._rules.update.assert_not_awaited()

    def test_update_rule_rejects_explicit_nulls(self):
        svc = ScheduleService(_session())
        rule = SimpleNamespace(id=uuid4(), weekday=1, start_time=time(9, 0), end_time=time(12, 0))
        svc._rules.get_by_id = AsyncMock(return_value=rule)
        svc._rules.update = AsyncMock()
        for field in ("weekday", "start_time", "end_time", "is_active"):
            with self.assertRaises(ValidationError) as ctx:
                _run(svc.update_rule(rule.id, {field: None}))
            self.assertEqual(ctx.exception.details, {"field": field})
        svc._rules.update.assert_not_awaited()

    def test_update_exception_rejects_null_date_but_clears_times(self):
        svc = ScheduleService(_session())
        exc = SimpleNamespace(
            id=uuid4(), exception_date=date(2026, 12, 24), exception_type="blocked",
            start_time=time(9, 0), end_time=time(12, 0),
        )
        svc._exceptions.get_by_id = AsyncMock(return_value=exc)
        svc._exceptions.update = AsyncMock(return_value=exc)
        with self.assertRaises(ValidationError):
            _run(svc.update_exception(exc.id, {"exception_date": None}))
        svc._exceptions.update.assert_not_awaited()

        _run(svc.update_exception(exc.id, {"start_time": None, "end_time": None}))
        svc._exceptions.update.assert_awaited_once_with(exc.id, {"start_time": None, "end_time": None})

    def test_delete_unknown_rule(self):
        svc = ScheduleService(_session())
        svc._rules.delete = AsyncMock(return_value=False)
        with self.assertRaises(NotFoundError):
            _run(svc.delete_rule(uuid4()))

    def test_create_exception_validates(self):
        svc = ScheduleService(_session())
        svc._exceptions.create = AsyncMock()
        with self.assertRaises(ValidationError):
            _run(svc.create_exception({"exception_date": date(2026, 12, 24), "exception_type": "extra"}))
        with self.assertRaises(ValidationError):
            _run(svc.create_exception({
                "exception_date": date(2026, 12, 24),
                "exception_type": "blocked",
                "end_time": time(12, 0),
            }))
        svc._exceptions.create.assert_not_awaited()

    def test_create_full_day_closure(self):
        svc = ScheduleService(_session())
        created = SimpleNamespace(id=uuid4(), exception_type="blocked", exception_date=date(2026, 12, 25))
        svc._exceptions.create = AsyncMock(return_value=created)

        result = _run(svc.create_exception({
            "exception_date": date(2026, 12, 25),
            "exception_type": "blocked",
            "start_time": None,
            "end_time": None,
            "note": "Christmas",
        }))

        self.assertIs(result, created)

    def test_list_exceptions_by_range(self):
        svc = ScheduleService(_session())
        svc._exceptions.list_for_range = AsyncMock(return_value=[])
        _run(svc.list_exceptions(DateRange(date(2026, 12, 1), date(2026, 12, 31))))
        svc._exceptions.list_for_range.assert_awaited_once_with(date(2026, 12, 1), date(2026, 12, 31))


class TestDashboardService(unittest.TestCase):
    def test_week_is_monday_to_sunday(self):
        week = week_bounds(date(2026, 10, 22))
        self.assertEqual(week.start, date(2026, 10, 19))
        self.assertEqual(week.end, date(2026, 10, 25))

    def test_stats(self):
        svc = DashboardService(_session())
        today = [_fake_appointment(), _fake_appointment(start_at=datetime(2026, 10, 18, 23, 30))]
        svc._appointments.list_by_query = AsyncMock(return_value=today)
        svc._appointments.count_starting_between = AsyncMock(return_value=7)
        svc._services.count_active = AsyncMock(return_value=4)

        stats = _run(svc.stats(datetime(2026, 10, 19, 9, 0)))

        self.assertEqual(len(stats.today), 1)
        self.assertEqual(stats.week_count, 7)
        self.assertEqual(stats.active_services, 4)
        svc._appointments.count_starting_between.assert_awaited_once_with(
            datetime(2026, 10, 19, 0, 0), datetime(2026, 10, 26, 0, 0)
        )


if __name__ == "__main__":
    unittest.main()
