"""Pydantic models for branch-level appointment views."""

from __future__ import annotations

from datetime import date, time
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from bank_scheduler.models.enums import AppointmentStatus


class BranchAppointment(BaseModel):
    """An appointment as listed on a branch's day sheet."""

    model_config = ConfigDict(from_attributes=True)

    user_id: str = Field(..., description="User ID")
    service_id: str = Field(..., description="Service ID")
    arrival_date: date = Field(..., description="Arrival date")
    arrival_time: time = Field(..., description="Arrival time-of-day")
    status: AppointmentStatus = Field(..., description="Appointment status")


class BranchAppointmentList(BaseModel):
    """A branch together with its appointments on one date."""

    model_config = ConfigDict(from_attributes=True)

    branch_id: str = Field(..., description="Branch ID")
    name: str = Field(..., description="Branch name")
    address: Optional[str] = Field(None, description="Branch address")
    search_date: date = Field(..., description="Date the appointments were listed for")
    appointments: List[BranchAppointment] = Field(default_factory=list)
