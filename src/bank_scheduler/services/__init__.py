"""Business logic services."""

from bank_scheduler.services.appointment_queries_service import (
    AppointmentQueriesService,
    get_appointment_queries_service,
)
from bank_scheduler.services.appointments_service import (
    AppointmentsService,
    get_appointments_service,
)
from bank_scheduler.services.availability_service import AvailabilityResult, AvailabilityService
from bank_scheduler.services.slot_lock import SlotLock, SlotLockRegistry

__all__ = [
    "AppointmentsService",
    "get_appointments_service",
    "AppointmentQueriesService",
    "get_appointment_queries_service",
    "AvailabilityService",
    "AvailabilityResult",
    "SlotLock",
    "SlotLockRegistry",
]
