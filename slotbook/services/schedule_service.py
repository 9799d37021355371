"""ScheduleService: admin CRUD for weekly rules and date exceptions.

Field rules are enforced by building the scheduling value types, so the
admin API and the slot engine share one definition of a valid rule.
"""
from __future__ import annotations

import datetime as _dt
import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from slotbook.core.exceptions import NotFoundError
from slotbook.infra.database.models.availability import AvailabilityException, AvailabilityRule
from slotbook.infra.database.repositories import (
    AvailabilityExceptionRepository,
    AvailabilityRuleRepository,
)
from slotbook.scheduling.types import DateException, DateRange, WeeklyRule
from slotbook.services.catalog_service import reject_nulls

logger = logging.getLogger(__name__)


class ScheduleService:
    def __init__(self, session: AsyncSession) -> None:
        self._rules = AvailabilityRuleRepository(session)
        self._exceptions = AvailabilityExceptionRepository(session)

    # ── Weekly rules ──────────────────────────────────────────────

    async def list_rules(self, *, active_only: bool = False, weekday: Optional[int] = None) -> List[AvailabilityRule]:
        return await self._rules.list_all(active_only=active_only, weekday=weekday)

    async def create_rule(self, data: Dict[str, Any]) -> AvailabilityRule:
        WeeklyRule(
            weekday=data["weekday"],
            start_time=data["start_time"],
            end_time=data["end_time"],
            is_active=data.get("is_active", True),
        )
        rule = await self._rules.create(data)
        logger.info("ScheduleService: created rule %s (weekday %d)", rule.id, rule.weekday)
        return rule

    async def update_rule(self, rule_id: UUID, data: Dict[str, Any]) -> AvailabilityRule:
        rule = await self._rules.get_by_id(rule_id)
        if rule is None:
            raise NotFoundError("Rule not found", details={"rule_id": str(rule_id)})
        reject_nulls(data, ("weekday", "start_time", "end_time", "is_active"))
        WeeklyRule(
            weekday=data.get("weekday", rule.weekday),
            start_time=data.get("start_time", rule.start_time),
            end_time=data.get("end_time", rule.end_time),
        )
        return await self._rules.update(rule_id, data)  # type: ignore[return-value]

    async def delete_rule(self, rule_id: UUID) -> None:
        if not await self._rules.delete(rule_id):
            raise NotFoundError("Rule not found", details={"rule_id": str(rule_id)})

    # ── Date exceptions ───────────────────────────────────────────

    async def list_exceptions(self, date_range: Optional[DateRange] = None) -> List[AvailabilityException]:
        if date_range is None:
            return await self._exceptions.list_for_range()
        return await self._exceptions.list_for_range(date_range.start, date_range.end)

    async def create_exception(self, data: Dict[str, Any]) -> AvailabilityException:
        checked = _checked_exception(data)
        exc = await self._exceptions.create({**data, "exception_type": checked.exception_type.value})
        logger.info(
            "ScheduleService: created %s exception %s on %s",
            exc.exception_type, exc.id, exc.exception_date,
        )
        return exc

    async def update_exception(self, exception_id: UUID, data: Dict[str, Any]) -> AvailabilityException:
        exc = await self._exceptions.get_by_id(exception_id)
        if exc is None:
            raise NotFoundError("Exception not found", details={"exception_id": str(exception_id)})
        reject_nulls(data, ("exception_date", "exception_type"))
        merged = {
            "exception_date": exc.exception_date,
            "exception_type": exc.exception_type,
            "start_time": exc.start_time,
            "end_time": exc.end_time,
            **data,
        }
        checked = _checked_exception(merged)
        if "exception_type" in data:
            data = {**data, "exception_type": checked.exception_type.value}
        return await self._exceptions.update(exception_id, data)  # type: ignore[return-value]

    async def delete_exception(self, exception_id: UUID) -> None:
        if not await self._exceptions.delete(exception_id):
            raise NotFoundError("Exception not found", details={"exception_id": str(exception_id)})


def _checked_exception(data: Dict[str, Any]) -> DateException:
    exception_date: _dt.date = data["exception_date"]
    return DateException(
        date=exception_date,
        exception_type=data["exception_type"],
        start_time=data.get("start_time"),
        end_time=data.get("end_time"),
        note=data.get("note"),
    )
