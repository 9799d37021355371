"""
Built-in exception types. Add new ones here or via exception_factory().
"""
from __future__ import annotations

from slotbook.core.exceptions.base import ProjectError


class ConfigurationError(ProjectError):
    """Invalid or missing configuration."""

    default_code = "CONFIGURATION_ERROR"
    default_http_status = 500


class ValidationError(ProjectError):
    """Request or input validation failed."""

    default_code = "VALIDATION_ERROR"
    default_http_status = 400


class NotFoundError(ProjectError):
    """Requested resource not found."""

    default_code = "NOT_FOUND"
    default_http_status = 404


class ConflictError(ProjectError):
    """Resource state conflict (e.g. an overlapping appointment was stored first)."""

    default_code = "CONFLICT"
    default_http_status = 409


class SlotUnavailableError(ProjectError):
    """The requested start time is not (or no longer) a bookable slot."""

    default_code = "SLOT_UNAVAILABLE"
    default_http_status = 409


class ExternalServiceError(ProjectError):
    """External service (database, notification webhook) failed."""

    default_code = "EXTERNAL_SERVICE_ERROR"
    default_http_status = 502
