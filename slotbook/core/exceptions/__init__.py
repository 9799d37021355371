"""
Project exception system.

Usage:
    from slotbook.core.exceptions import SlotUnavailableError, ValidationError

    raise ValidationError("start must be before end", details={"field": "start_time"})
    raise SlotUnavailableError("Slot is no longer available", details={"start": "2026-03-02T10:00"})
"""
from slotbook.core.exceptions.base import ProjectError
from slotbook.core.exceptions.errors import (
    ConfigurationError,
    ConflictError,
    ExternalServiceError,
    NotFoundError,
    SlotUnavailableError,
    ValidationError,
)

__all__ = [
    "ProjectError",
    "ConfigurationError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "SlotUnavailableError",
    "ExternalServiceError",
]
