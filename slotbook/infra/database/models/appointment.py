"""Appointment ORM model."""
from __future__ import annotations

import datetime as _dt
import uuid
from typing import Optional

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from slotbook.infra.database.models.base import Base, TimestampMixin, _uuid_pk
from slotbook.infra.database.models.service import Service

# Installed by init_db(); see engine._migrate_db.
NO_OVERLAP_CONSTRAINT = "ex_appointments_no_overlap"


class Appointment(Base, TimestampMixin):
    """A booked interval. Cancelled rows stay for audit and stop blocking slots."""

    __tablename__ = "appointments"
    __table_args__ = (
        CheckConstraint("start_at < end_at", name="ck_appointments_interval"),
        CheckConstraint("status IN ('confirmed', 'cancelled')", name="ck_appointments_status"),
        Index("ix_appointments_start_at", "start_at"),
        Index("ix_appointments_status", "status"),
    )

    id: Mapped[uuid.UUID] = _uuid_pk()
    service_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("services.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    # Local wall-clock time, no timezone
    start_at: Mapped[_dt.datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    end_at: Mapped[_dt.datetime] = mapped_column(DateTime(timezone=False), nullable=False)

    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    customer_email: Mapped[str] = mapped_column(String(255), nullable=False)
    customer_phone: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    status: Mapped[str] = mapped_column(String(16), nullable=False, default="confirmed")

    service: Mapped[Service] = relationship(lazy="joined")
