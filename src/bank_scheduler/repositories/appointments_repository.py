"""Appointments repository for data access operations."""

from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, List, Optional, Sequence, Tuple

from sqlalchemy import and_, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from bank_scheduler.database.models import Appointment, Branch, Service
from bank_scheduler.exceptions import DatabaseError
from bank_scheduler.models.appointments import SlotKey
from bank_scheduler.models.enums import SLOT_RELEASING_STATUSES, AppointmentStatus
from bank_scheduler.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class AppointmentsRepository(BaseRepository[Appointment]):
    """Repository for appointment data access operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(Appointment, session)

    async def get_by_appointment_key(
        self, user_id: str, branch_id: str, service_id: str
    ) -> Optional[Appointment]:
        """Return the appointment stored under a (user, branch, service) key."""
        return await self.get_by_key((user_id, branch_id, service_id))

    async def find_by_key_fields(
        self,
        user_ids: Iterable[str],
        branch_ids: Iterable[str],
        service_ids: Iterable[str],
        exclude_status: Optional[AppointmentStatus] = None,
    ) -> List[Appointment]:
        """Return appointments whose key fields are each in the given sets.

        Each field is matched independently, so the result can include key
        combinations that were never asked for. Callers narrow it down.
        """
        try:
            query = select(Appointment).where(
                Appointment.user_id.in_(list(user_ids)),
                Appointment.branch_id.in_(list(branch_ids)),
                Appointment.service_id.in_(list(service_ids)),
            )
            if exclude_status is not None:
                query = query.where(Appointment.status != exclude_status)

            result = await self._execute("find_by_key_fields", query)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Error getting appointments by key fields: {e}")
            raise DatabaseError("Failed to retrieve appointments") from e

    async def list_filtered(
        self,
        user_ids: Sequence[str] = (),
        service_ids: Sequence[str] = (),
        branch_ids: Sequence[str] = (),
        skip: int = 0,
        limit: int = 20,
    ) -> List[Appointment]:
        """Get a page of appointments ordered by arrival date."""
        try:
            query = (
                select(Appointment)
                .where(*self._filter_conditions(user_ids, service_ids, branch_ids))
                .order_by(
                    Appointment.arrival_date.asc(),
                    Appointment.arrival_time.asc(),
                    Appointment.branch_id,
                    Appointment.service_id,
                    Appointment.user_id,
                )
                .offset(skip)
                .limit(limit)
            )
            result = await self._execute("list_filtered", query)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Error listing appointments: {e}")
            raise DatabaseError("Failed to retrieve appointments") from e

    async def count_filtered(
        self,
        user_ids: Sequence[str] = (),
        service_ids: Sequence[str] = (),
        branch_ids: Sequence[str] = (),
    ) -> int:
        """Count appointments matching the same filters as list_filtered."""
        try:
            query = (
                select(func.count())
                .select_from(Appointment)
                .where(*self._filter_conditions(user_ids, service_ids, branch_ids))
            )
            result = await self._execute("count_filtered", query)
            return result.scalar_one() or 0
        except SQLAlchemyError as e:
            logger.error(f"Error counting appointments: {e}")
            raise DatabaseError("Failed to count appointments") from e

    async def get_details(
        self, user_id: str, branch_id: str, service_id: str
    ) -> Optional[Tuple[Appointment, str, str]]:
        """Return (appointment, branch name, service name) for a key, if present."""
        try:
            result = await self._execute(
                "get_details",
                select(Appointment, Branch.name, Service.name)
                .join(Branch, Branch.branch_id == Appointment.branch_id)
                .join(Service, Service.service_id == Appointment.service_id)
                .where(
                    Appointment.user_id == user_id,
                    Appointment.branch_id == branch_id,
                    Appointment.service_id == service_id,
                )
            )
            row = result.first()
            if row is None:
                return None
            return row[0], row[1], row[2]
        except SQLAlchemyError as e:
            logger.error(f"Error getting appointment details: {e}")
            raise DatabaseError("Failed to retrieve appointment details") from e

    async def list_for_branch_on_date(self, branch_id: str, day: date) -> List[Appointment]:
        """Get all appointments at a branch on a calendar date, earliest first."""
        try:
            result = await self._execute(
                "list_for_branch_on_date",
                select(Appointment)
                .where(Appointment.branch_id == branch_id, Appointment.arrival_date == day)
                .order_by(Appointment.arrival_time.asc(), Appointment.user_id)
            )
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Error listing appointments for branch {branch_id} on {day}: {e}")
            raise DatabaseError("Failed to retrieve branch appointments") from e

    async def count_slot_holders(self, slot: SlotKey, exclude_user_id: str) -> int:
        """Count distinct other users holding the slot with a slot-holding status."""
        try:
            result = await self._execute(
                "count_slot_holders",
                select(func.count(func.distinct(Appointment.user_id))).where(
                    Appointment.branch_id == slot.branch_id,
                    Appointment.service_id == slot.service_id,
                    Appointment.arrival_date == slot.arrival_date,
                    Appointment.arrival_time == slot.arrival_time,
                    Appointment.user_id != exclude_user_id,
                    Appointment.status.not_in(list(SLOT_RELEASING_STATUSES)),
                )
            )
            return result.scalar_one() or 0
        except SQLAlchemyError as e:
            logger.error(f"Error counting holders of slot {slot}: {e}")
            raise DatabaseError("Failed to check slot occupancy") from e

    @staticmethod
    def _filter_conditions(
        user_ids: Sequence[str], service_ids: Sequence[str], branch_ids: Sequence[str]
    ) -> list:
        conditions = []
        if user_ids:
            conditions.append(Appointment.user_id.in_(list(user_ids)))
        if service_ids:
            conditions.append(Appointment.service_id.in_(list(service_ids)))
        if branch_ids:
            conditions.append(Appointment.branch_id.in_(list(branch_ids)))
        return [and_(*conditions)] if conditions else []
