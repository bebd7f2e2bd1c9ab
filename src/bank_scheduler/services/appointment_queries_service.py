"""Read-only appointment queries."""

from __future__ import annotations

import asyncio
from datetime import date
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from bank_scheduler.config import get_settings
from bank_scheduler.exceptions import NotFoundError, ValidationError
from bank_scheduler.models.appointments import (
    AppointmentDetails,
    AppointmentListResponse,
    AppointmentResponse,
    PaginatedAppointmentsQuery,
)
from bank_scheduler.models.branches import BranchAppointment, BranchAppointmentList
from bank_scheduler.models.enums import AppointmentStatus
from bank_scheduler.repositories.appointments_repository import AppointmentsRepository
from bank_scheduler.repositories.branches_repository import BranchesRepository
from bank_scheduler.utils.enums import list_enum_values


class AppointmentQueriesService:
    """Service for appointment listings and lookups."""

    def __init__(self, session: AsyncSession) -> None:
        self._appointments = AppointmentsRepository(session)
        self._branches = BranchesRepository(session)
        self._settings = get_settings().scheduling

    async def get_appointment_statuses(self) -> List[AppointmentStatus]:
        """Return every appointment status in declaration order."""
        return await asyncio.to_thread(list_enum_values, AppointmentStatus)

    async def get_paginated_appointments(
        self, query: PaginatedAppointmentsQuery
    ) -> AppointmentListResponse:
        """Return one page of appointments and the total matching the filters."""
        take = query.take or self._settings.default_page_size
        if take > self._settings.max_page_size:
            raise ValidationError(
                f"take must not exceed {self._settings.max_page_size}",
                errors={"take": take},
            )

        filters = {
            "user_ids": query.user_ids,
            "service_ids": query.service_ids,
            "branch_ids": query.branch_ids,
        }
        appointments = await self._appointments.list_filtered(
            **filters, skip=(query.page - 1) * take, limit=take
        )
        total = await self._appointments.count_filtered(**filters)

        return AppointmentListResponse(
            appointments=[AppointmentResponse.model_validate(a) for a in appointments],
            total_number_of_elements=total,
        )

    async def get_appointment_details(
        self, user_id: str, branch_id: str, service_id: str
    ) -> Optional[AppointmentDetails]:
        """Return the detail view of an appointment, or None if there is none."""
        row = await self._appointments.get_details(user_id, branch_id, service_id)
        if row is None:
            return None

        appointment, branch_name, service_name = row
        return AppointmentDetails(
            user_id=appointment.user_id,
            branch_id=appointment.branch_id,
            service_id=appointment.service_id,
            arrival_date=appointment.arrival_date,
            arrival_time=appointment.arrival_time,
            status=appointment.status,
            branch_name=branch_name,
            service_name=service_name,
            created_at=appointment.created_at,
            updated_at=appointment.updated_at,
        )

    async def get_branch_appointments(
        self, branch_id: str, search_date: date
    ) -> BranchAppointmentList:
        """Return a branch with all of its appointments on a date.

        Raises:
            NotFoundError: the branch does not exist
        """
        branch = await self._branches.get_by_branch_id(branch_id)
        if branch is None:
            raise NotFoundError(resource="Branch", resource_id=branch_id)

        appointments = await self._appointments.list_for_branch_on_date(branch_id, search_date)
        return BranchAppointmentList(
            branch_id=branch.branch_id,
            name=branch.name,
            address=branch.address,
            search_date=search_date,
            appointments=[BranchAppointment.model_validate(a) for a in appointments],
        )


def get_appointment_queries_service(session: AsyncSession) -> AppointmentQueriesService:
    """Factory for AppointmentQueriesService."""
    return AppointmentQueriesService(session=session)
