"""Availability checks for candidate appointments.

A candidate is bookable when both hold:

- counter availability: the branch has more counters offering the service
  than there are other users already holding the same date/time slot
  (aggregate capacity, no specific counter is reserved);
- branch open: a schedule window on the candidate's weekday covers the
  arrival time, opening inclusive and closing exclusive.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from bank_scheduler.exceptions import AppointmentTimeInvalidError
from bank_scheduler.models.appointments import AppointmentCandidate
from bank_scheduler.repositories.appointments_repository import AppointmentsRepository
from bank_scheduler.repositories.branches_repository import BranchesRepository
from bank_scheduler.repositories.counters_repository import CountersRepository
from bank_scheduler.utils.enums import to_week_day

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AvailabilityResult:
    """Outcome of both availability predicates."""

    counter_available: bool
    branch_open: bool

    @property
    def is_valid(self) -> bool:
        return self.counter_available and self.branch_open


class AvailabilityService:
    """Read-only decision logic over the current storage state."""

    def __init__(self, session: AsyncSession) -> None:
        self._appointments = AppointmentsRepository(session)
        self._branches = BranchesRepository(session)
        self._counters = CountersRepository(session)

    async def is_counter_available(self, candidate: AppointmentCandidate) -> bool:
        """Check that a counter offering the service is free at the slot."""
        capacity = await self._counters.count_offering_service(
            candidate.branch_id, candidate.service_id
        )
        if capacity == 0:
            return False
        occupied = await self._appointments.count_slot_holders(
            candidate.slot, exclude_user_id=candidate.user_id
        )
        return capacity > occupied

    async def is_branch_open(self, candidate: AppointmentCandidate) -> bool:
        """Check that the branch schedule covers the candidate's weekday and time."""
        week_day = to_week_day(candidate.arrival_date)
        return await self._branches.is_open_at(
            candidate.branch_id, week_day, candidate.arrival_time
        )

    async def check(self, candidate: AppointmentCandidate) -> AvailabilityResult:
        """Evaluate both predicates."""
        return AvailabilityResult(
            counter_available=await self.is_counter_available(candidate),
            branch_open=await self.is_branch_open(candidate),
        )

    async def is_available(self, candidate: AppointmentCandidate) -> bool:
        """Check both predicates without raising."""
        return (await self.check(candidate)).is_valid

    async def validate(self, candidate: AppointmentCandidate) -> AvailabilityResult:
        """Raise AppointmentTimeInvalidError unless both predicates hold."""
        result = await self.check(candidate)
        if not result.is_valid:
            logger.warning(
                f"Rejected appointment for user {candidate.user_id} at slot {candidate.slot}: "
                f"counter_available={result.counter_available}, branch_open={result.branch_open}"
            )
            raise AppointmentTimeInvalidError(
                counter_available=result.counter_available,
                branch_open=result.branch_open,
                details={"slot": str(candidate.slot), "user_id": candidate.user_id},
            )
        return result
