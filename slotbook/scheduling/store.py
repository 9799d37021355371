"""Data-access interface consumed by the availability and booking services."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List
from uuid import UUID

from slotbook.scheduling.types import (
    AppointmentQuery,
    BookedInterval,
    DateException,
    DateRange,
    NewAppointment,
    ServiceSpec,
    WeeklyRule,
)


class AvailabilityStore(ABC):
    """Reads for slot computation plus the one guarded write.

    Implementations must make insert_appointment atomic with respect to the
    overlap check: of two racing inserts for overlapping intervals, exactly
    one succeeds and the other raises ConflictError.
    """

    @abstractmethod
    async def get_service(self, service_id: UUID) -> ServiceSpec:
        """Raise NotFoundError for unknown ids."""

    @abstractmethod
    async def get_active_weekly_rules(self) -> List[WeeklyRule]:
        ...

    @abstractmethod
    async def get_exceptions(self, date_range: DateRange) -> List[DateException]:
        """Exceptions dated inside the range, oldest first per date."""

    @abstractmethod
    async def get_appointments(self, query: AppointmentQuery) -> List[BookedInterval]:
        ...

    @abstractmethod
    async def insert_appointment(self, appointment: NewAppointment):
        """Persist and return the stored appointment, or raise ConflictError."""

    @abstractmethod
    async def commit(self) -> None:
        """Make previous writes durable and visible to other requests."""
