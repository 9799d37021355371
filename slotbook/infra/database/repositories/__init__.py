"""Repositories for the slotbook database."""
from slotbook.infra.database.repositories.appointment import AppointmentRepository
from slotbook.infra.database.repositories.availability import (
    AvailabilityExceptionRepository,
    AvailabilityRuleRepository,
)
from slotbook.infra.database.repositories.base import BaseRepository
from slotbook.infra.database.repositories.service import ServiceRepository

__all__ = [
    "BaseRepository",
    "ServiceRepository",
    "AvailabilityRuleRepository",
    "AvailabilityExceptionRepository",
    "AppointmentRepository",
]
