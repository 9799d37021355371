"""In-memory AvailabilityStore for service and router tests."""
from __future__ import annotations

import asyncio
import datetime as _dt
from types import SimpleNamespace
from typing import Dict, Iterable, List, Optional
from uuid import UUID, uuid4

from slotbook.core.exceptions import ConflictError, NotFoundError
from slotbook.scheduling.store import AvailabilityStore
from slotbook.scheduling.types import (
    AppointmentQuery,
    AppointmentStatus,
    BookedInterval,
    DateException,
    DateRange,
    NewAppointment,
    ServiceSpec,
    WeeklyRule,
)


class InMemoryStore(AvailabilityStore):
    """Reads yield to the event loop so concurrent bookings interleave; inserts are
    serialized by a lock and reject overlaps the way the database constraint does."""

    def __init__(
        self,
        services: Iterable[ServiceSpec] = (),
        rules: Iterable[WeeklyRule] = (),
        exceptions: Iterable[DateException] = (),
    ) -> None:
        self.services: Dict[UUID, ServiceSpec] = {s.id: s for s in services}
        self.rules: List[WeeklyRule] = list(rules)
        self.exceptions: List[DateException] = list(exceptions)
        self.rows: List[SimpleNamespace] = []
        self.commits = 0
        self._lock = asyncio.Lock()

    async def get_service(self, service_id: UUID) -> ServiceSpec:
        await asyncio.sleep(0)
        try:
            return self.services[service_id]
        except KeyError:
            raise NotFoundError("Service not found", details={"service_id": str(service_id)}) from None

    async def get_active_weekly_rules(self) -> List[WeeklyRule]:
        await asyncio.sleep(0)
        return [r for r in self.rules if r.is_active]

    async def get_exceptions(self, date_range: DateRange) -> List[DateException]:
        await asyncio.sleep(0)
        return [e for e in self.exceptions if date_range.start <= e.date <= date_range.end]

    async def get_appointments(self, query: AppointmentQuery) -> List[BookedInterval]:
        await asyncio.sleep(0)
        rows = self.rows
        if query.date_range is not None:
            lower, upper = query.date_range.lower_bound(), query.date_range.upper_bound()
            rows = [r for r in rows if r.start_at < upper and r.end_at > lower]
        if query.exclude_status is not None:
            rows = [r for r in rows if r.status != query.exclude_status.value]
        if query.status is not None:
            rows = [r for r in rows if r.status == query.status.value]
        if query.service_id is not None:
            rows = [r for r in rows if r.service_id == query.service_id]
        return [
            BookedInterval(start=r.start_at, end=r.end_at, status=AppointmentStatus(r.status))
            for r in sorted(rows, key=lambda r: r.start_at)
        ]

    async def insert_appointment(self, appointment: NewAppointment) -> SimpleNamespace:
        async with self._lock:
            for row in self.rows:
                if (
                    row.status != AppointmentStatus.CANCELLED.value
                    and appointment.start < row.end_at
                    and appointment.end > row.start_at
                ):
                    raise ConflictError("Another appointment was booked for this time")
            service = self.services[appointment.service_id]
            row = SimpleNamespace(
                id=uuid4(),
                service_id=appointment.service_id,
                service=SimpleNamespace(
                    name=service.name,
                    price=service.price,
                    duration_minutes=service.duration_minutes,
                ),
                start_at=appointment.start,
                end_at=appointment.end,
                customer_name=appointment.customer.name,
                customer_email=appointment.customer.email,
                customer_phone=appointment.customer.phone,
                notes=appointment.customer.notes,
                status=appointment.status.value,
                created_at=_dt.datetime(2026, 10, 1, 12, 0),
            )
            self.rows.append(row)
            return row

    async def commit(self) -> None:
        self.commits += 1

    def cancel(self, appointment_id: UUID) -> Optional[SimpleNamespace]:
        for row in self.rows:
            if row.id == appointment_id:
                row.status = AppointmentStatus.CANCELLED.value
                return row
        return None
