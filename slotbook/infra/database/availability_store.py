"""SqlAvailabilityStore: the AvailabilityStore interface over the PostgreSQL repositories."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, List
from uuid import UUID

from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncSession

from slotbook.core.exceptions import ExternalServiceError, NotFoundError
from slotbook.infra.database.models import Appointment, AvailabilityException, AvailabilityRule, Service
from slotbook.infra.database.repositories import (
    AppointmentRepository,
    AvailabilityExceptionRepository,
    AvailabilityRuleRepository,
    ServiceRepository,
)
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

logger = logging.getLogger(__name__)


def service_spec(row: Service) -> ServiceSpec:
    return ServiceSpec(
        id=row.id,
        name=row.name,
        duration_minutes=row.duration_minutes,
        buffer_after_minutes=row.buffer_after_minutes,
        price=row.price,
        is_active=row.active,
    )


def weekly_rule(row: AvailabilityRule) -> WeeklyRule:
    return WeeklyRule(
        id=row.id,
        weekday=row.weekday,
        start_time=row.start_time,
        end_time=row.end_time,
        is_active=row.is_active,
    )


def date_exception(row: AvailabilityException) -> DateException:
    return DateException(
        id=row.id,
        date=row.exception_date,
        exception_type=row.exception_type,  # type: ignore[arg-type]
        start_time=row.start_time,
        end_time=row.end_time,
        note=row.note,
    )


def booked_interval(row: Appointment) -> BookedInterval:
    return BookedInterval(start=row.start_at, end=row.end_at, status=AppointmentStatus(row.status))


@asynccontextmanager
async def _connectivity(operation: str) -> AsyncIterator[None]:
    """Lost connections and pool timeouts become ExternalServiceError (HTTP 502)."""
    try:
        yield
    except (OperationalError, InterfaceError, PoolTimeoutError, OSError) as exc:
        logger.error("SqlAvailabilityStore: %s failed: %s", operation, exc)
        raise ExternalServiceError(
            "Booking database is unavailable, please try again",
            details={"operation": operation},
            cause=exc,
        ) from exc


class SqlAvailabilityStore(AvailabilityStore):
    """Reads always hit the database; nothing is cached between calls."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._services = ServiceRepository(session)
        self._rules = AvailabilityRuleRepository(session)
        self._exceptions = AvailabilityExceptionRepository(session)
        self._appointments = AppointmentRepository(session)

    async def get_service(self, service_id: UUID) -> ServiceSpec:
        async with _connectivity("get_service"):
            row = await self._services.get_by_id(service_id)
        if row is None:
            raise NotFoundError("Service not found", details={"service_id": str(service_id)})
        return service_spec(row)

    async def get_active_weekly_rules(self) -> List[WeeklyRule]:
        async with _connectivity("get_active_weekly_rules"):
            rows = await self._rules.list_all(active_only=True)
        return [weekly_rule(r) for r in rows]

    async def get_exceptions(self, date_range: DateRange) -> List[DateException]:
        async with _connectivity("get_exceptions"):
            rows = await self._exceptions.list_for_range(date_range.start, date_range.end)
        return [date_exception(r) for r in rows]

    async def get_appointments(self, query: AppointmentQuery) -> List[BookedInterval]:
        async with _connectivity("get_appointments"):
            rows = await self._appointments.list_by_query(query)
        return [booked_interval(r) for r in rows]

    async def insert_appointment(self, appointment: NewAppointment) -> Appointment:
        async with _connectivity("insert_appointment"):
            row = await self._appointments.insert_guarded({
                "service_id": appointment.service_id,
                "start_at": appointment.start,
                "end_at": appointment.end,
                "customer_name": appointment.customer.name,
                "customer_email": appointment.customer.email,
                "customer_phone": appointment.customer.phone,
                "notes": appointment.customer.notes,
                "status": appointment.status.value,
            })
        logger.info(
            "SqlAvailabilityStore: stored appointment %s (%s)",
            row.id, appointment.start.isoformat(),
        )
        return row

    async def commit(self) -> None:
        async with _connectivity("commit"):
            await self._session.commit()
