"""Branches repository for data access operations."""

from __future__ import annotations

import logging
from datetime import time
from typing import Optional

from sqlalchemy import exists, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from bank_scheduler.database.models import Branch, Schedule
from bank_scheduler.exceptions import DatabaseError
from bank_scheduler.models.enums import WeekDay
from bank_scheduler.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class BranchesRepository(BaseRepository[Branch]):
    """Repository for branch and opening-hours data access."""

    def __init__(self, session: AsyncSession):
        super().__init__(Branch, session)

    async def get_by_branch_id(self, branch_id: str) -> Optional[Branch]:
        """Return a branch by ID (if exists)."""
        return await self.get_by_key(branch_id)

    async def is_open_at(self, branch_id: str, week_day: WeekDay, at: time) -> bool:
        """Check whether any schedule window of the branch covers the weekday/time.

        Opening time is inclusive, closing time exclusive.
        """
        try:
            result = await self._execute(
                "is_open_at",
                select(
                    exists().where(
                        Schedule.branch_id == branch_id,
                        Schedule.week_day == week_day,
                        Schedule.opening_time <= at,
                        Schedule.closing_time > at,
                    )
                )
            )
            return bool(result.scalar())
        except SQLAlchemyError as e:
            logger.error(f"Error checking opening hours of branch {branch_id}: {e}")
            raise DatabaseError("Failed to check branch opening hours") from e
