"""Admin rules router: weekly working-hour rules."""
from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from slotbook.api.dependencies import get_session
from slotbook.api.schemas.admin import RuleCreateRequest, RuleResponse, RuleUpdateRequest
from slotbook.services.schedule_service import ScheduleService

router = APIRouter(prefix="/admin/rules", tags=["admin-rules"])


@router.get("", response_model=List[RuleResponse])
async def list_rules(
    active_only: bool = False,
    weekday: Optional[int] = None,
    session: AsyncSession = Depends(get_session),
):
    return await ScheduleService(session).list_rules(active_only=active_only, weekday=weekday)


@router.post("", response_model=RuleResponse, status_code=status.HTTP_201_CREATED)
async def create_rule(body: RuleCreateRequest, session: AsyncSession = Depends(get_session)):
    return await ScheduleService(session).create_rule(body.model_dump())


@router.patch("/{rule_id}", response_model=RuleResponse)
async def update_rule(
    rule_id: UUID,
    body: RuleUpdateRequest,
    session: AsyncSession = Depends(get_session),
):
    return await ScheduleService(session).update_rule(rule_id, body.model_dump(exclude_unset=True))


@router.delete("/{rule_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_rule(rule_id: UUID, session: AsyncSession = Depends(get_session)):
    await ScheduleService(session).delete_rule(rule_id)
