"""Test data helpers shared across test modules."""

from datetime import date, time
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from bank_scheduler.database.models import (
    Appointment,
    Branch,
    Counter,
    CounterService,
    Schedule,
    Service,
)
from bank_scheduler.models.enums import AppointmentStatus, WeekDay

# 2024-01-01 was a Monday
MONDAY = date(2024, 1, 1)
TUESDAY = date(2024, 1, 2)

BRANCH_ID = "branch-1"
OTHER_BRANCH_ID = "branch-2"
SERVICE_ID = "service-1"
UNSTAFFED_SERVICE_ID = "service-2"
COUNTER_ID = "counter-1"


async def add_counter(
    session: AsyncSession, branch_id: str, *service_ids: str, counter_id: Optional[str] = None
) -> Counter:
    """Add a counter at a branch offering the given services."""
    counter = Counter(branch_id=branch_id, name=counter_id or "extra")
    if counter_id:
        counter.counter_id = counter_id
    counter.counter_services.extend(CounterService(service_id=sid) for sid in service_ids)
    session.add(counter)
    await session.flush()
    return counter


async def add_appointment(
    session: AsyncSession,
    user_id: str,
    branch_id: str = BRANCH_ID,
    service_id: str = SERVICE_ID,
    arrival_date: date = MONDAY,
    arrival_time: time = time(10, 0),
    status: AppointmentStatus = AppointmentStatus.PENDING,
) -> Appointment:
    """Insert an appointment directly, bypassing validation."""
    appointment = Appointment(
        user_id=user_id,
        branch_id=branch_id,
        service_id=service_id,
        arrival_date=arrival_date,
        arrival_time=arrival_time,
        status=status,
    )
    session.add(appointment)
    await session.commit()
    return appointment


async def seed_branches(session: AsyncSession) -> Branch:
    """Create two branches open Monday 09:00-17:00, each with one counter offering SERVICE_ID.

    UNSTAFFED_SERVICE_ID exists but no counter offers it.
    """
    branch = Branch(branch_id=BRANCH_ID, name="Main Street", address="1 Main Street")
    branch.schedules.append(
        Schedule(week_day=WeekDay.MONDAY, opening_time=time(9, 0), closing_time=time(17, 0))
    )
    other_branch = Branch(branch_id=OTHER_BRANCH_ID, name="Harbour")
    other_branch.schedules.append(
        Schedule(week_day=WeekDay.MONDAY, opening_time=time(9, 0), closing_time=time(17, 0))
    )
    service = Service(service_id=SERVICE_ID, name="Account opening")
    unstaffed = Service(service_id=UNSTAFFED_SERVICE_ID, name="Safe deposit")

    session.add_all([branch, other_branch, service, unstaffed])
    await session.flush()

    await add_counter(session, BRANCH_ID, SERVICE_ID, counter_id=COUNTER_ID)
    await add_counter(session, OTHER_BRANCH_ID, SERVICE_ID, counter_id="counter-harbour")
    await session.commit()
    return branch
