"""Domain enumerations and their persisted forms."""

from __future__ import annotations

from enum import Enum
from typing import Dict


class AppointmentStatus(str, Enum):
    """Lifecycle states of an appointment."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CHECKED_IN = "checked_in"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"


class WeekDay(str, Enum):
    """Days a branch schedule can be published for."""

    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"


# Version 1 of the text stored in appointments.status. Changing a value here
# requires a data migration; add a new version instead.
STATUS_STORAGE_VERSION = 1
STATUS_STORAGE_V1: Dict[AppointmentStatus, str] = {
    AppointmentStatus.PENDING: "Pending",
    AppointmentStatus.CONFIRMED: "Confirmed",
    AppointmentStatus.CHECKED_IN: "CheckedIn",
    AppointmentStatus.COMPLETED: "Completed",
    AppointmentStatus.CANCELLED: "Cancelled",
    AppointmentStatus.NO_SHOW: "NoShow",
}
_STATUS_FROM_STORAGE_V1: Dict[str, AppointmentStatus] = {
    text: status for status, text in STATUS_STORAGE_V1.items()
}

# Statuses that no longer hold a counter at their slot
SLOT_RELEASING_STATUSES = frozenset({AppointmentStatus.CANCELLED})


def status_to_storage(status: AppointmentStatus) -> str:
    """Return the persisted text for a status."""
    return STATUS_STORAGE_V1[AppointmentStatus(status)]


def status_from_storage(value: str) -> AppointmentStatus:
    """Parse persisted text back into a status."""
    try:
        return _STATUS_FROM_STORAGE_V1[value]
    except KeyError:
        raise ValueError(f"Unknown stored appointment status: {value!r}") from None
