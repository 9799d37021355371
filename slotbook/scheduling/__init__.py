"""
slotbook.scheduling – slot engine, its value types and the store interface.

    from slotbook.scheduling import compute_day_slots, validate_booking
"""
from slotbook.scheduling.engine import (
    compute_day_slots,
    is_date_open,
    list_open_dates,
    validate_booking,
    working_windows,
)
from slotbook.scheduling.store import AvailabilityStore
from slotbook.scheduling.types import (
    AppointmentOrder,
    AppointmentQuery,
    AppointmentStatus,
    BookedInterval,
    BookingNotice,
    Customer,
    DateException,
    DateRange,
    ExceptionType,
    NewAppointment,
    ServiceSpec,
    WeeklyRule,
    weekday_of,
)

__all__ = [
    "compute_day_slots",
    "is_date_open",
    "list_open_dates",
    "validate_booking",
    "working_windows",
    "AvailabilityStore",
    "AppointmentOrder",
    "AppointmentQuery",
    "AppointmentStatus",
    "BookedInterval",
    "BookingNotice",
    "Customer",
    "DateException",
    "DateRange",
    "ExceptionType",
    "NewAppointment",
    "ServiceSpec",
    "WeeklyRule",
    "weekday_of",
]
