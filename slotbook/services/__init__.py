"""Service layer: availability, booking, appointments, catalog, schedule, dashboard and notifications."""
from slotbook.services.appointment_service import AppointmentService
from slotbook.services.availability_service import AvailabilityService
from slotbook.services.booking_service import BookingService
from slotbook.services.catalog_service import CatalogService
from slotbook.services.dashboard_service import DashboardService
from slotbook.services.notification_service import WebhookNotifier
from slotbook.services.schedule_service import ScheduleService

__all__ = [
    "AppointmentService",
    "AvailabilityService",
    "BookingService",
    "CatalogService",
    "DashboardService",
    "ScheduleService",
    "WebhookNotifier",
]
