"""
slotbook.infra.database.models – SQLAlchemy 2.0 ORM models.

Exports Base, mixins, and all model classes.
"""
from slotbook.infra.database.models.appointment import NO_OVERLAP_CONSTRAINT, Appointment
from slotbook.infra.database.models.availability import AvailabilityException, AvailabilityRule
from slotbook.infra.database.models.base import Base, TimestampMixin, _uuid_pk
from slotbook.infra.database.models.service import Service

__all__ = [
    "Base",
    "TimestampMixin",
    "_uuid_pk",
    "Service",
    "AvailabilityRule",
    "AvailabilityException",
    "Appointment",
    "NO_OVERLAP_CONSTRAINT",
]
