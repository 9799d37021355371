"""Service ORM model: something a customer can book (haircut, beard trim, ...)."""
from __future__ import annotations

import uuid
from decimal import Decimal
from typing import Optional

from sqlalchemy import CheckConstraint, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from slotbook.infra.database.models.base import Base, TimestampMixin, _uuid_pk


class Service(Base, TimestampMixin):
    """
    Never deleted: deactivating hides it from booking while past
    appointments keep their reference.
    """

    __tablename__ = "services"
    __table_args__ = (
        CheckConstraint("duration_minutes > 0", name="ck_services_duration_positive"),
        CheckConstraint("buffer_after_minutes >= 0", name="ck_services_buffer_nonnegative"),
        CheckConstraint("price >= 0", name="ck_services_price_nonnegative"),
        Index("ix_services_active_display_order", "active", "display_order"),
    )

    id: Mapped[uuid.UUID] = _uuid_pk()
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False)
    buffer_after_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    active: Mapped[bool] = mapped_column(nullable=False, default=True)
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
