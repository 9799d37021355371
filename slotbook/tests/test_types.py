"""Validation rules of the scheduling value types."""
from __future__ import annotations

import unittest
from datetime import date, datetime, time
from uuid import uuid4

from slotbook.core.exceptions import ValidationError
from slotbook.scheduling.types import (
    AppointmentQuery,
    AppointmentStatus,
    BookedInterval,
    Customer,
    DateException,
    DateRange,
    ExceptionType,
    ServiceSpec,
    WeeklyRule,
    weekday_of,
)


class TestWeekday(unittest.TestCase):
    def test_sunday_is_zero(self):
        self.assertEqual(weekday_of(date(2026, 10, 18)), 0)
        self.assertEqual(weekday_of(date(2026, 10, 19)), 1)
        self.assertEqual(weekday_of(date(2026, 10, 24)), 6)


class TestServiceSpec(unittest.TestCase):
    def test_step_is_duration_plus_buffer(self):
        svc = ServiceSpec(id=uuid4(), name="Cut", duration_minutes=30, buffer_after_minutes=5)
        self.assertEqual(svc.step.total_seconds(), 35 * 60)

    def test_non_positive_duration_rejected(self):
        with self.assertRaises(ValidationError):
            ServiceSpec(id=uuid4(), name="Cut", duration_minutes=0)

    def test_negative_buffer_rejected(self):
        with self.assertRaises(ValidationError):
            ServiceSpec(id=uuid4(), name="Cut", duration_minutes=30, buffer_after_minutes=-1)


class TestWeeklyRule(unittest.TestCase):
    def test_weekday_out_of_range(self):
        with self.assertRaises(ValidationError) as ctx:
            WeeklyRule(weekday=7, start_time=time(9, 0), end_time=time(10, 0))
        self.assertEqual(ctx.exception.http_status, 400)

    def test_start_must_precede_end(self):
        with self.assertRaises(ValidationError):
            WeeklyRule(weekday=1, start_time=time(10, 0), end_time=time(10, 0))


class TestDateException(unittest.TestCase):
    def test_string_type_is_coerced(self):
        exc = DateException(date=date(2026, 10, 19), exception_type="blocked")
        self.assertIs(exc.exception_type, ExceptionType.BLOCKED)
        self.assertTrue(exc.closes_whole_day)

    def test_unknown_type_rejected(self):
        with self.assertRaises(ValidationError):
            DateException(date=date(2026, 10, 19), exception_type="holiday")

    def test_times_must_come_in_pairs(self):
        with self.assertRaises(ValidationError):
            DateException(date=date(2026, 10, 19), exception_type="blocked", start_time=time(9, 0))

    def test_extra_requires_times(self):
        with self.assertRaises(ValidationError):
            DateException(date=date(2026, 10, 19), exception_type="extra")

    def test_reversed_times_rejected(self):
        with self.assertRaises(ValidationError):
            DateException(
                date=date(2026, 10, 19), exception_type="extra",
                start_time=time(14, 0), end_time=time(10, 0),
            )


class TestDateRange(unittest.TestCase):
    def test_inclusive_days(self):
        r = DateRange(date(2026, 10, 30), date(2026, 11, 2))
        self.assertEqual(r.num_days, 4)
        self.assertEqual(list(r.days())[-1], date(2026, 11, 2))
        self.assertEqual(r.upper_bound(), datetime(2026, 11, 3, 0, 0))

    def test_reversed_range_rejected(self):
        with self.assertRaises(ValidationError):
            DateRange(date(2026, 10, 20), date(2026, 10, 19))


class TestMisc(unittest.TestCase):
    def test_overlap_is_half_open(self):
        iv = BookedInterval(datetime(2026, 10, 19, 10, 0), datetime(2026, 10, 19, 10, 30))
        self.assertFalse(iv.overlaps(datetime(2026, 10, 19, 10, 30), datetime(2026, 10, 19, 11, 0)))
        self.assertTrue(iv.overlaps(datetime(2026, 10, 19, 10, 29), datetime(2026, 10, 19, 10, 59)))

    def test_customer_validation(self):
        with self.assertRaises(ValidationError):
            Customer(name="  ", email="a@b.c")
        with self.assertRaises(ValidationError):
            Customer(name="Ada", email="not-an-email")

    def test_query_defaults_exclude_cancelled(self):
        q = AppointmentQuery()
        self.assertIs(q.exclude_status, AppointmentStatus.CANCELLED)
        with self.assertRaises(ValidationError):
            AppointmentQuery(limit=0)


if __name__ == "__main__":
    unittest.main()
