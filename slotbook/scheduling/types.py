"""Value types shared by the slot engine, the store interface and the services."""
from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Iterator, Optional
from uuid import UUID

from slotbook.core.exceptions import ValidationError


class ExceptionType(str, Enum):
    BLOCKED = "blocked"
    EXTRA = "extra"


class AppointmentStatus(str, Enum):
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class AppointmentOrder(str, Enum):
    """Columns appointment listings may be ordered by."""
    START = "start"
    CREATED = "created"


def weekday_of(day: _dt.date) -> int:
    """Weekday number with 0=Sunday .. 6=Saturday."""
    return (day.weekday() + 1) % 7


@dataclass(frozen=True)
class ServiceSpec:
    """The parts of a service the booking flow needs."""

    id: UUID
    name: str
    duration_minutes: int
    buffer_after_minutes: int = 0
    price: Decimal = Decimal("0")
    is_active: bool = True

    def __post_init__(self) -> None:
        if self.duration_minutes <= 0:
            raise ValidationError(
                "Service duration must be positive",
                details={"field": "duration_minutes", "value": self.duration_minutes},
            )
        if self.buffer_after_minutes < 0:
            raise ValidationError(
                "Service buffer must not be negative",
                details={"field": "buffer_after_minutes", "value": self.buffer_after_minutes},
            )

    @property
    def duration(self) -> _dt.timedelta:
        return _dt.timedelta(minutes=self.duration_minutes)

    @property
    def step(self) -> _dt.timedelta:
        """Spacing between consecutive candidate starts: duration + buffer."""
        return _dt.timedelta(minutes=self.duration_minutes + self.buffer_after_minutes)


@dataclass(frozen=True)
class WeeklyRule:
    weekday: int
    start_time: _dt.time
    end_time: _dt.time
    is_active: bool = True
    id: Optional[UUID] = None

    def __post_init__(self) -> None:
        if not 0 <= self.weekday <= 6:
            raise ValidationError(
                "weekday must be between 0 (Sunday) and 6 (Saturday)",
                details={"field": "weekday", "value": self.weekday},
            )
        if self.start_time >= self.end_time:
            raise ValidationError(
                "Rule start_time must be before end_time",
                details={"start_time": str(self.start_time), "end_time": str(self.end_time)},
            )


@dataclass(frozen=True)
class DateException:
    date: _dt.date
    exception_type: ExceptionType
    start_time: Optional[_dt.time] = None
    end_time: Optional[_dt.time] = None
    note: Optional[str] = None
    id: Optional[UUID] = None

    def __post_init__(self) -> None:
        # Accept plain strings from the DB layer.
        if not isinstance(self.exception_type, ExceptionType):
            try:
                object.__setattr__(self, "exception_type", ExceptionType(self.exception_type))
            except ValueError as exc:
                raise ValidationError(
                    f"Unknown exception type {self.exception_type!r}",
                    details={"field": "exception_type"},
                    cause=exc,
                ) from exc
        if (self.start_time is None) != (self.end_time is None):
            raise ValidationError(
                "start_time and end_time must be given together",
                details={"date": self.date.isoformat()},
            )
        if self.start_time is not None and self.start_time >= self.end_time:  # type: ignore[operator]
            raise ValidationError(
                "Exception start_time must be before end_time",
                details={"start_time": str(self.start_time), "end_time": str(self.end_time)},
            )
        if self.exception_type is ExceptionType.EXTRA and self.start_time is None:
            raise ValidationError(
                "An extra opening needs start_time and end_time",
                details={"date": self.date.isoformat()},
            )

    @property
    def has_times(self) -> bool:
        return self.start_time is not None

    @property
    def closes_whole_day(self) -> bool:
        return self.exception_type is ExceptionType.BLOCKED and not self.has_times


@dataclass(frozen=True)
class BookedInterval:
    """An existing appointment's occupied interval, [start, end)."""

    start: _dt.datetime
    end: _dt.datetime
    status: AppointmentStatus = AppointmentStatus.CONFIRMED

    def overlaps(self, start: _dt.datetime, end: _dt.datetime) -> bool:
        return start < self.end and end > self.start


@dataclass(frozen=True)
class DateRange:
    """Inclusive range of calendar days."""

    start: _dt.date
    end: _dt.date

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValidationError(
                "Date range start must not be after its end",
                details={"start": self.start.isoformat(), "end": self.end.isoformat()},
            )

    @classmethod
    def single(cls, day: _dt.date) -> "DateRange":
        return cls(day, day)

    @property
    def num_days(self) -> int:
        return (self.end - self.start).days + 1

    def days(self) -> Iterator[_dt.date]:
        day = self.start
        while day <= self.end:
            yield day
            day += _dt.timedelta(days=1)

    def lower_bound(self) -> _dt.datetime:
        """First instant of the range."""
        return _dt.datetime.combine(self.start, _dt.time.min)

    def upper_bound(self) -> _dt.datetime:
        """First instant after the range (exclusive)."""
        return _dt.datetime.combine(self.end + _dt.timedelta(days=1), _dt.time.min)


@dataclass(frozen=True)
class Customer:
    name: str
    email: str
    phone: Optional[str] = None
    notes: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValidationError("Customer name is required", details={"field": "name"})
        if "@" not in self.email:
            raise ValidationError("Customer email is invalid", details={"field": "email"})


@dataclass(frozen=True)
class NewAppointment:
    service_id: UUID
    start: _dt.datetime
    end: _dt.datetime
    customer: Customer
    status: AppointmentStatus = AppointmentStatus.CONFIRMED


@dataclass
class AppointmentQuery:
    """Typed filter for appointment reads; the store never builds queries from field names."""

    date_range: Optional[DateRange] = None
    """Appointments whose interval touches the range."""

    exclude_status: Optional[AppointmentStatus] = AppointmentStatus.CANCELLED
    status: Optional[AppointmentStatus] = None
    service_id: Optional[UUID] = None
    order_by: AppointmentOrder = AppointmentOrder.START
    descending: bool = False
    skip: int = 0
    limit: Optional[int] = None

    def __post_init__(self) -> None:
        if self.skip < 0:
            raise ValidationError("skip must be >= 0", details={"field": "skip"})
        if self.limit is not None and self.limit < 1:
            raise ValidationError("limit must be >= 1", details={"field": "limit"})

    @classmethod
    def blocking(cls, date_range: DateRange) -> "AppointmentQuery":
        """Non-cancelled appointments that may collide with slots in the range."""
        return cls(date_range=date_range, exclude_status=AppointmentStatus.CANCELLED)


@dataclass(frozen=True)
class BookingNotice:
    """Denormalized appointment details handed to the notifier."""

    event: str
    appointment_id: UUID
    service_name: str
    service_price: Decimal
    service_duration: int
    start: _dt.datetime
    customer_name: str
    customer_email: str
    customer_phone: Optional[str] = None
    notes: Optional[str] = None
    extra: dict = field(default_factory=dict)
