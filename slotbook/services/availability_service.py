"""AvailabilityService: open dates and bookable slots, recomputed from the store on every call."""
from __future__ import annotations

import datetime as _dt
import logging
from typing import Callable, List, Optional, Tuple
from uuid import UUID

from slotbook.config import BookingConfig
from slotbook.core.exceptions import NotFoundError, ValidationError
from slotbook.scheduling import engine
from slotbook.scheduling.store import AvailabilityStore
from slotbook.scheduling.types import AppointmentQuery, DateRange, ServiceSpec

logger = logging.getLogger(__name__)

Clock = Callable[[], _dt.datetime]


class AvailabilityService:
    def __init__(
        self,
        store: AvailabilityStore,
        *,
        config: Optional[BookingConfig] = None,
        clock: Clock = _dt.datetime.now,
    ) -> None:
        self._store = store
        self._config = config or BookingConfig()
        self._clock = clock

    async def bookable_service(self, service_id: UUID) -> ServiceSpec:
        """Load a service the booking flow may use; inactive services count as missing."""
        service = await self._store.get_service(service_id)
        if not service.is_active:
            raise NotFoundError("Service not available", details={"service_id": str(service_id)})
        return service

    async def list_open_dates(self, date_range: DateRange) -> List[_dt.date]:
        if date_range.num_days > self._config.max_range_days:
            raise ValidationError(
                f"Date range may span at most {self._config.max_range_days} days",
                details={"days": date_range.num_days},
            )
        rules = await self._store.get_active_weekly_rules()
        exceptions = await self._store.get_exceptions(date_range)
        return engine.list_open_dates(date_range, rules, exceptions, self._clock())

    async def list_slots(self, service_id: UUID, day: _dt.date) -> List[_dt.datetime]:
        _, slots = await self.day_slots(service_id, day)
        return slots

    async def day_slots(self, service_id: UUID, day: _dt.date) -> Tuple[ServiceSpec, List[_dt.datetime]]:
        """Slot starts for *day* together with the service they were computed for."""
        service = await self.bookable_service(service_id)
        day_range = DateRange.single(day)
        rules = await self._store.get_active_weekly_rules()
        exceptions = await self._store.get_exceptions(day_range)
        appointments = await self._store.get_appointments(AppointmentQuery.blocking(day_range))
        slots = engine.compute_day_slots(
            day, service, rules, exceptions, appointments, self._clock(),
            blocked_mode=self._config.blocked_window_mode,
        )
        logger.debug("AvailabilityService: %d slots for %s on %s", len(slots), service.name, day)
        return service, slots
