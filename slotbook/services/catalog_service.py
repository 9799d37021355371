"""CatalogService: admin management of bookable services."""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from slotbook.core.exceptions import NotFoundError, ValidationError
from slotbook.infra.database.models.service import Service
from slotbook.infra.database.repositories import ServiceRepository

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = ("name", "duration_minutes", "buffer_after_minutes", "price", "active", "display_order")


def reject_nulls(data: Dict[str, Any], fields: Iterable[str]) -> None:
    """A partial update may omit a column but may not set a NOT NULL one to None."""
    for field in fields:
        if field in data and data[field] is None:
            raise ValidationError(f"{field} must not be null", details={"field": field})


def _check_numbers(data: Dict[str, Any]) -> None:
    reject_nulls(data, _REQUIRED_FIELDS)
    if "duration_minutes" in data and data["duration_minutes"] <= 0:
        raise ValidationError("duration_minutes must be positive", details={"field": "duration_minutes"})
    if "buffer_after_minutes" in data and data["buffer_after_minutes"] < 0:
        raise ValidationError("buffer_after_minutes must not be negative", details={"field": "buffer_after_minutes"})
    if "price" in data and data["price"] < 0:
        raise ValidationError("price must not be negative", details={"field": "price"})


class CatalogService:
    def __init__(self, session: AsyncSession) -> None:
        self._repo = ServiceRepository(session)

    async def list_services(self, *, active_only: bool = False, skip: int = 0, limit: int = 100) -> List[Service]:
        return await self._repo.list_all(active_only=active_only, skip=skip, limit=limit)

    async def get_service(self, service_id: UUID) -> Service:
        service = await self._repo.get_by_id(service_id)
        if service is None:
            raise NotFoundError("Service not found", details={"service_id": str(service_id)})
        return service

    async def create_service(self, data: Dict[str, Any]) -> Service:
        _check_numbers(data)
        service = await self._repo.create(data)
        logger.info("CatalogService: created service %s (%s)", service.id, service.name)
        return service

    async def update_service(self, service_id: UUID, data: Dict[str, Any]) -> Service:
        _check_numbers(data)
        service = await self._repo.update(service_id, data)
        if service is None:
            raise NotFoundError("Service not found", details={"service_id": str(service_id)})
        return service

    async def deactivate_service(self, service_id: UUID) -> Service:
        """Hide from booking; existing appointments keep pointing at it."""
        service = await self.update_service(service_id, {"active": False})
        logger.info("CatalogService: deactivated service %s", service_id)
        return service
