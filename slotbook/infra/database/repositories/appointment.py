"""Appointment repository: typed listing, guarded insert, status updates."""
from __future__ import annotations

import datetime as _dt
import logging
from typing import Any, List, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from slotbook.core.exceptions import ConflictError
from slotbook.infra.database.models.appointment import NO_OVERLAP_CONSTRAINT, Appointment
from slotbook.infra.database.repositories.base import BaseRepository
from slotbook.scheduling.types import AppointmentOrder, AppointmentQuery

logger = logging.getLogger(__name__)

_ORDER_COLUMNS = {
    AppointmentOrder.START: Appointment.start_at,
    AppointmentOrder.CREATED: Appointment.created_at,
}


class AppointmentRepository(BaseRepository[Appointment]):
    model = Appointment

    async def list_by_query(self, query: AppointmentQuery) -> List[Appointment]:
        column = _ORDER_COLUMNS[query.order_by]
        stmt = select(Appointment).order_by(column.desc() if query.descending else column.asc())
        if query.date_range is not None:
            # Any interval touching the range, including ones crossing midnight.
            stmt = stmt.where(Appointment.start_at < query.date_range.upper_bound())
            stmt = stmt.where(Appointment.end_at > query.date_range.lower_bound())
        if query.exclude_status is not None:
            stmt = stmt.where(Appointment.status != query.exclude_status.value)
        if query.status is not None:
            stmt = stmt.where(Appointment.status == query.status.value)
        if query.service_id is not None:
            stmt = stmt.where(Appointment.service_id == query.service_id)
        if query.skip:
            stmt = stmt.offset(query.skip)
        if query.limit is not None:
            stmt = stmt.limit(query.limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().unique().all())

    async def count_starting_between(
        self,
        start: _dt.datetime,
        end: _dt.datetime,
        *,
        exclude_status: Optional[str] = "cancelled",
    ) -> int:
        stmt = (
            select(func.count())
            .select_from(Appointment)
            .where(Appointment.start_at >= start)
            .where(Appointment.start_at < end)
        )
        if exclude_status is not None:
            stmt = stmt.where(Appointment.status != exclude_status)
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def insert_guarded(self, data: dict[str, Any]) -> Appointment:
        """Insert inside a savepoint; an overlap rejected by the database becomes ConflictError.

        The exclusion constraint makes the overlap check and the insert one
        atomic step, so concurrent requests cannot both commit.
        """
        try:
            async with self.session.begin_nested():
                instance = Appointment(**data)
                self.session.add(instance)
                await self.session.flush()
        except IntegrityError as exc:
            if NO_OVERLAP_CONSTRAINT in str(exc.orig):
                logger.warning(
                    "AppointmentRepository: overlap rejected for %s-%s",
                    data.get("start_at"), data.get("end_at"),
                )
                raise ConflictError(
                    "This time was just booked by someone else, please pick another time",
                    details={"start": str(data.get("start_at")), "end": str(data.get("end_at"))},
                    cause=exc,
                ) from exc
            raise
        await self.session.refresh(instance)
        await self.session.refresh(instance, ["service"])
        return instance

    async def update_status(self, id: UUID, status: str) -> Optional[Appointment]:
        return await self.update(id, {"status": status})
