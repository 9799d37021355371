"""Weekly working-hour rules and date-specific exceptions."""
from __future__ import annotations

import datetime as _dt
import uuid
from typing import Optional

from sqlalchemy import CheckConstraint, Date, Index, SmallInteger, String, Text, Time
from sqlalchemy.orm import Mapped, mapped_column

from slotbook.infra.database.models.base import Base, TimestampMixin, _uuid_pk


class AvailabilityRule(Base, TimestampMixin):
    """One recurring working window. weekday: 0=Sunday .. 6=Saturday."""

    __tablename__ = "availability_rules"
    __table_args__ = (
        CheckConstraint("weekday BETWEEN 0 AND 6", name="ck_availability_rules_weekday"),
        CheckConstraint("start_time < end_time", name="ck_availability_rules_window"),
        Index("ix_availability_rules_weekday_active", "weekday", "is_active"),
    )

    id: Mapped[uuid.UUID] = _uuid_pk()
    weekday: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    start_time: Mapped[_dt.time] = mapped_column(Time, nullable=False)
    end_time: Mapped[_dt.time] = mapped_column(Time, nullable=False)
    is_active: Mapped[bool] = mapped_column(nullable=False, default=True)


class AvailabilityException(Base, TimestampMixin):
    """
    A closure or extra opening on one date.
    exception_type: "blocked" | "extra"; times are both set or both null.
    """

    __tablename__ = "availability_exceptions"
    __table_args__ = (
        CheckConstraint(
            "exception_type IN ('blocked', 'extra')",
            name="ck_availability_exceptions_type",
        ),
        CheckConstraint(
            "(start_time IS NULL AND end_time IS NULL) "
            "OR (start_time IS NOT NULL AND end_time IS NOT NULL AND start_time < end_time)",
            name="ck_availability_exceptions_window",
        ),
        Index("ix_availability_exceptions_date", "exception_date"),
    )

    id: Mapped[uuid.UUID] = _uuid_pk()
    exception_date: Mapped[_dt.date] = mapped_column(Date, nullable=False)
    exception_type: Mapped[str] = mapped_column(String(16), nullable=False)
    start_time: Mapped[Optional[_dt.time]] = mapped_column(Time, nullable=True)
    end_time: Mapped[Optional[_dt.time]] = mapped_column(Time, nullable=True)
    note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
