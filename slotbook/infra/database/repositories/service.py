"""Service repository: ordered listings and the active count."""
from __future__ import annotations

from typing import List

from sqlalchemy import func, select

from slotbook.infra.database.models.service import Service
from slotbook.infra.database.repositories.base import BaseRepository


class ServiceRepository(BaseRepository[Service]):
    model = Service

    async def list_all(
        self,
        *,
        active_only: bool = False,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Service]:
        stmt = select(Service).order_by(Service.display_order, Service.name)
        if active_only:
            stmt = stmt.where(Service.active.is_(True))
        stmt = stmt.offset(skip).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_active(self) -> int:
        stmt = select(func.count()).select_from(Service).where(Service.active.is_(True))
        result = await self.session.execute(stmt)
        return result.scalar_one()
