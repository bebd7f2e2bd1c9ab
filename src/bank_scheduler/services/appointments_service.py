"""Appointment lifecycle: booking, moving and status changes.

Booking, moving and reactivating a cancelled appointment validate availability
and commit while the slot lock is held, so two callers cannot both pass the
capacity check for the last free counter. Every method runs in the caller's
session and either commits all of its changes or rolls them back, including
when the slot lock fails and on task cancellation.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import AsyncExitStack, asynccontextmanager
from typing import AsyncIterator, Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from bank_scheduler.database.models import Appointment
from bank_scheduler.exceptions import DatabaseError, NotFoundError
from bank_scheduler.models.appointments import (
    AppointmentCandidate,
    AppointmentKey,
    AppointmentResponse,
    BulkChangeAppointmentStatusRequest,
    ChangeAppointmentStatusRequest,
    ScheduleAppointmentRequest,
    SlotKey,
    UpdateAppointmentRequest,
)
from bank_scheduler.models.enums import SLOT_RELEASING_STATUSES, AppointmentStatus
from bank_scheduler.repositories.appointments_repository import AppointmentsRepository
from bank_scheduler.services.availability_service import AvailabilityService
from bank_scheduler.services.slot_lock import SlotLock
from bank_scheduler.utils.logging import log_error

logger = logging.getLogger(__name__)


class AppointmentsService:
    """Service for appointment write operations."""

    def __init__(
        self,
        session: AsyncSession,
        availability: Optional[AvailabilityService] = None,
        slot_lock: Optional[SlotLock] = None,
    ) -> None:
        self._session = session
        self._repo = AppointmentsRepository(session)
        self._availability = availability or AvailabilityService(session)
        self._slot_lock = slot_lock or SlotLock(session)

    async def schedule(self, request: ScheduleAppointmentRequest) -> AppointmentResponse:
        """Book an appointment.

        The (user, branch, service) key identifies the row, so booking a key
        that already exists overwrites its date, time and status.

        Raises:
            AppointmentTimeInvalidError: branch closed or no free counter
        """
        candidate = AppointmentCandidate.from_request(request)

        async with self._rollback_on_error(), self._slot_lock.hold(candidate.slot):
            await self._availability.validate(candidate)

            appointment = await self._repo.get_by_appointment_key(*request.as_tuple())
            if appointment is None:
                appointment = await self._repo.add(
                    Appointment(
                        user_id=candidate.user_id,
                        branch_id=candidate.branch_id,
                        service_id=candidate.service_id,
                        arrival_date=candidate.arrival_date,
                        arrival_time=candidate.arrival_time,
                        status=request.status,
                    )
                )
            else:
                appointment.arrival_date = candidate.arrival_date
                appointment.arrival_time = candidate.arrival_time
                appointment.status = request.status
                await self._repo.save(appointment)

            response = AppointmentResponse.model_validate(appointment)
            await self._commit()

        logger.info(f"Scheduled appointment for user {candidate.user_id} at slot {candidate.slot}")
        return response

    async def update(self, request: UpdateAppointmentRequest) -> AppointmentResponse:
        """Move an existing appointment (and optionally change its status).

        The appointment is validated after the changes are applied; a
        rejected move is rolled back.

        Raises:
            NotFoundError: no appointment under the key
            AppointmentTimeInvalidError: branch closed or no free counter
        """
        candidate = AppointmentCandidate.from_request(request)

        async with self._rollback_on_error(), self._slot_lock.hold(candidate.slot):
            appointment = await self._get_or_raise(request)

            appointment.arrival_date = candidate.arrival_date
            appointment.arrival_time = candidate.arrival_time
            if request.status is not None:
                appointment.status = request.status

            await self._availability.validate(self._candidate_from_entity(appointment))
            await self._repo.save(appointment)

            response = AppointmentResponse.model_validate(appointment)
            await self._commit()

        logger.info(f"Updated appointment for user {candidate.user_id} to slot {candidate.slot}")
        return response

    async def change_status(self, request: ChangeAppointmentStatusRequest) -> AppointmentResponse:
        """Change the status of one appointment.

        Only reactivating a cancelled appointment takes the slot again, so
        only that transition is validated (under the slot lock).

        Raises:
            NotFoundError: no appointment under the key
            AppointmentTimeInvalidError: reactivation into a closed or full slot
        """
        async with self._rollback_on_error():
            appointment = await self._get_or_raise(request)
            reactivated = [appointment] if self._reactivates(appointment, request.status) else []

            async with self._hold_slots(self._slots_of(reactivated)):
                appointment.status = request.status
                await self._repo.save(appointment)
                for entity in reactivated:
                    await self._availability.validate(self._candidate_from_entity(entity))

                response = AppointmentResponse.model_validate(appointment)
                await self._commit()

        logger.info(
            f"Changed status of appointment {request.as_tuple()} to {request.status.value}"
        )
        return response

    async def bulk_change_status(self, request: BulkChangeAppointmentStatusRequest) -> int:
        """Change the status of every listed appointment not already in it.

        Keys that match nothing are ignored. Returns the number of
        appointments changed. Reactivated appointments are validated one at
        a time, each against the slot as left by the ones before it; a single
        rejection rolls back the whole batch.

        Raises:
            NotFoundError: the key list is empty
            AppointmentTimeInvalidError: a reactivation into a closed or full slot
        """
        if not request.keys:
            raise NotFoundError(resource="Appointment", keys=[])

        requested = {key.as_tuple() for key in request.keys}

        async with self._rollback_on_error():
            matches = await self._repo.find_by_key_fields(
                user_ids={key.user_id for key in request.keys},
                branch_ids={key.branch_id for key in request.keys},
                service_ids={key.service_id for key in request.keys},
                exclude_status=request.status,
            )
            # the field-wise IN filter also matches key combinations nobody asked for
            appointments = [
                appointment
                for appointment in matches
                if (appointment.user_id, appointment.branch_id, appointment.service_id) in requested
            ]
            if not appointments:
                return 0

            reactivated = [a for a in appointments if self._reactivates(a, request.status)]
            others = [a for a in appointments if a not in reactivated]

            async with self._hold_slots(self._slots_of(reactivated)):
                for appointment in others:
                    appointment.status = request.status
                await self._repo.save(*others)

                for appointment in reactivated:
                    appointment.status = request.status
                    await self._repo.save(appointment)
                    await self._availability.validate(self._candidate_from_entity(appointment))

                await self._commit()

        logger.info(f"Changed status of {len(appointments)} appointment(s) to {request.status.value}")
        return len(appointments)

    @staticmethod
    def _reactivates(appointment: Appointment, status: AppointmentStatus) -> bool:
        """Whether the change makes a released appointment hold its slot again."""
        return (
            appointment.status in SLOT_RELEASING_STATUSES
            and status not in SLOT_RELEASING_STATUSES
        )

    @classmethod
    def _slots_of(cls, appointments: Iterable[Appointment]) -> list[SlotKey]:
        return [cls._candidate_from_entity(a).slot for a in appointments]

    @asynccontextmanager
    async def _hold_slots(self, slots: Iterable[SlotKey]) -> AsyncIterator[None]:
        # fixed acquisition order, so two batches cannot deadlock on each other
        async with AsyncExitStack() as stack:
            for slot in sorted(set(slots), key=str):
                await stack.enter_async_context(self._slot_lock.hold(slot))
            yield

    async def _get_or_raise(self, key: AppointmentKey) -> Appointment:
        appointment = await self._repo.get_by_appointment_key(*key.as_tuple())
        if appointment is None:
            raise NotFoundError(
                resource="Appointment",
                keys={
                    "user_id": key.user_id,
                    "branch_id": key.branch_id,
                    "service_id": key.service_id,
                },
            )
        return appointment

    @staticmethod
    def _candidate_from_entity(appointment: Appointment) -> AppointmentCandidate:
        return AppointmentCandidate(
            user_id=appointment.user_id,
            branch_id=appointment.branch_id,
            service_id=appointment.service_id,
            arrival_date=appointment.arrival_date,
            arrival_time=appointment.arrival_time,
        )

    async def _commit(self) -> None:
        try:
            await self._session.commit()
        except SQLAlchemyError as e:
            log_error(e, context={"operation": "commit", "entity": "Appointment"})
            raise DatabaseError("Failed to save appointment changes") from e

    @asynccontextmanager
    async def _rollback_on_error(self) -> AsyncIterator[None]:
        try:
            yield
        except asyncio.CancelledError:
            await asyncio.shield(self._session.rollback())
            logger.warning("Appointment operation cancelled, changes rolled back")
            raise
        except Exception:
            await self._session.rollback()
            raise


def get_appointments_service(session: AsyncSession) -> AppointmentsService:
    """Factory for AppointmentsService."""
    return AppointmentsService(session=session)
