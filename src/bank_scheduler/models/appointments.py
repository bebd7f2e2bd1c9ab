"""Pydantic models for appointment operations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from bank_scheduler.models.enums import AppointmentStatus


class AppointmentKey(BaseModel):
    """Composite identity of an appointment."""

    model_config = ConfigDict(frozen=True)

    user_id: str = Field(..., min_length=1, description="Requesting user ID")
    branch_id: str = Field(..., min_length=1, description="Branch ID")
    service_id: str = Field(..., min_length=1, description="Service ID")

    def as_tuple(self) -> tuple[str, str, str]:
        return (self.user_id, self.branch_id, self.service_id)


class ScheduleAppointmentRequest(AppointmentKey):
    """Request model for booking an appointment."""

    arrival_date: Union[datetime, date] = Field(
        ..., description="Arrival date; its time-of-day is used when arrival_time is omitted"
    )
    arrival_time: Optional[time] = Field(None, description="Arrival time-of-day")
    status: AppointmentStatus = Field(
        AppointmentStatus.PENDING, description="Initial appointment status"
    )


class UpdateAppointmentRequest(AppointmentKey):
    """Request model for moving an existing appointment."""

    arrival_date: Union[datetime, date] = Field(
        ..., description="Arrival date; its time-of-day is used when arrival_time is omitted"
    )
    arrival_time: Optional[time] = Field(None, description="Arrival time-of-day")
    status: Optional[AppointmentStatus] = Field(
        None, description="New status (unchanged when omitted)"
    )


class ChangeAppointmentStatusRequest(AppointmentKey):
    """Request model for changing the status of one appointment."""

    status: AppointmentStatus = Field(..., description="New appointment status")


class BulkChangeAppointmentStatusRequest(BaseModel):
    """Request model for changing the status of several appointments."""

    keys: List[AppointmentKey] = Field(default_factory=list, description="Appointments to change")
    status: AppointmentStatus = Field(..., description="New appointment status")


class PaginatedAppointmentsQuery(BaseModel):
    """Filters and paging for the appointment listing.

    An empty ID list means "no filter" on that dimension.
    """

    user_ids: List[str] = Field(default_factory=list, description="Restrict to these users")
    service_ids: List[str] = Field(default_factory=list, description="Restrict to these services")
    branch_ids: List[str] = Field(default_factory=list, description="Restrict to these branches")
    page: int = Field(1, ge=1, description="1-based page number")
    take: Optional[int] = Field(None, ge=1, description="Page size (configured default when omitted)")


class AppointmentResponse(BaseModel):
    """Response model for a stored appointment."""

    model_config = ConfigDict(from_attributes=True)

    user_id: str = Field(..., description="User ID")
    branch_id: str = Field(..., description="Branch ID")
    service_id: str = Field(..., description="Service ID")
    arrival_date: date = Field(..., description="Arrival date")
    arrival_time: time = Field(..., description="Arrival time-of-day")
    status: AppointmentStatus = Field(..., description="Appointment status")


class AppointmentListResponse(BaseModel):
    """A page of appointments plus the total matching the filters."""

    appointments: List[AppointmentResponse] = Field(default_factory=list)
    total_number_of_elements: int = Field(0, ge=0, description="Matches across all pages")


class AppointmentDetails(AppointmentResponse):
    """Detailed view of one appointment."""

    branch_name: str = Field(..., description="Branch name")
    service_name: str = Field(..., description="Service name")
    created_at: datetime = Field(..., description="Created at timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")


@dataclass(frozen=True)
class SlotKey:
    """The branch/service/date/time tuple candidates compete for."""

    branch_id: str
    service_id: str
    arrival_date: date
    arrival_time: time

    def __str__(self) -> str:
        return (
            f"{self.branch_id}/{self.service_id}/"
            f"{self.arrival_date.isoformat()}T{self.arrival_time.isoformat()}"
        )


@dataclass(frozen=True)
class AppointmentCandidate:
    """Fully populated appointment ready for validation and persistence."""

    user_id: str
    branch_id: str
    service_id: str
    arrival_date: date
    arrival_time: time

    @classmethod
    def from_request(
        cls, request: Union[ScheduleAppointmentRequest, UpdateAppointmentRequest]
    ) -> "AppointmentCandidate":
        """Normalize a request, defaulting arrival_time from arrival_date."""
        arrival_date, arrival_time = normalize_arrival(request.arrival_date, request.arrival_time)
        return cls(
            user_id=request.user_id,
            branch_id=request.branch_id,
            service_id=request.service_id,
            arrival_date=arrival_date,
            arrival_time=arrival_time,
        )

    @property
    def slot(self) -> SlotKey:
        return SlotKey(self.branch_id, self.service_id, self.arrival_date, self.arrival_time)


def normalize_arrival(
    arrival_date: Union[datetime, date], arrival_time: Optional[time] = None
) -> tuple[date, time]:
    """Split an arrival into (calendar date, naive time-of-day).

    A plain date has a time-of-day of midnight.
    """
    if isinstance(arrival_date, datetime):
        day = arrival_date.date()
        default_time = arrival_date.time()
    else:
        day = arrival_date
        default_time = time(0, 0)

    resolved = arrival_time if arrival_time is not None else default_time
    return day, resolved.replace(tzinfo=None)
