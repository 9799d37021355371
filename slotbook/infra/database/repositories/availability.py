"""Repositories for weekly rules and date exceptions."""
from __future__ import annotations

import datetime as _dt
from typing import List, Optional

from sqlalchemy import select

from slotbook.infra.database.models.availability import AvailabilityException, AvailabilityRule
from slotbook.infra.database.repositories.base import BaseRepository


class AvailabilityRuleRepository(BaseRepository[AvailabilityRule]):
    model = AvailabilityRule

    async def list_all(
        self,
        *,
        active_only: bool = False,
        weekday: Optional[int] = None,
    ) -> List[AvailabilityRule]:
        stmt = select(AvailabilityRule).order_by(AvailabilityRule.weekday, AvailabilityRule.start_time)
        if active_only:
            stmt = stmt.where(AvailabilityRule.is_active.is_(True))
        if weekday is not None:
            stmt = stmt.where(AvailabilityRule.weekday == weekday)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class AvailabilityExceptionRepository(BaseRepository[AvailabilityException]):
    model = AvailabilityException

    async def list_for_range(
        self,
        start_date: Optional[_dt.date] = None,
        end_date: Optional[_dt.date] = None,
    ) -> List[AvailabilityException]:
        """Ordered by date, then creation, so the first row per date is the one that applies."""
        stmt = select(AvailabilityException).order_by(
            AvailabilityException.exception_date,
            AvailabilityException.created_at,
            AvailabilityException.id,
        )
        if start_date is not None:
            stmt = stmt.where(AvailabilityException.exception_date >= start_date)
        if end_date is not None:
            stmt = stmt.where(AvailabilityException.exception_date <= end_date)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
