"""
slotbook.infra.database – PostgreSQL async engine, session, models and repositories.

Public API
──────────
  build_engine, build_session_factory, init_db, close_engine
  Base, Service, AvailabilityRule, AvailabilityException, Appointment (models)
  ServiceRepository, AvailabilityRuleRepository,
  AvailabilityExceptionRepository, AppointmentRepository
"""
from slotbook.infra.database.engine import (
    build_engine,
    build_session_factory,
    close_engine,
    ensure_database_exists,
    init_db,
)
from slotbook.infra.database.models import (
    Appointment,
    AvailabilityException,
    AvailabilityRule,
    Base,
    Service,
)
from slotbook.infra.database.repositories import (
    AppointmentRepository,
    AvailabilityExceptionRepository,
    AvailabilityRuleRepository,
    BaseRepository,
    ServiceRepository,
)

__all__ = [
    "build_engine",
    "build_session_factory",
    "ensure_database_exists",
    "init_db",
    "close_engine",
    "Base",
    "Service",
    "AvailabilityRule",
    "AvailabilityException",
    "Appointment",
    "BaseRepository",
    "ServiceRepository",
    "AvailabilityRuleRepository",
    "AvailabilityExceptionRepository",
    "AppointmentRepository",
]
