"""Counters repository for data access operations."""

from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from bank_scheduler.database.models import Counter, CounterService
from bank_scheduler.exceptions import DatabaseError
from bank_scheduler.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class CountersRepository(BaseRepository[Counter]):
    """Repository for counter data access operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(Counter, session)

    async def count_offering_service(self, branch_id: str, service_id: str) -> int:
        """Count the counters at a branch that offer a service."""
        try:
            result = await self._execute(
                "count_offering_service",
                select(func.count(func.distinct(Counter.counter_id)))
                .join(CounterService, CounterService.counter_id == Counter.counter_id)
                .where(Counter.branch_id == branch_id, CounterService.service_id == service_id)
            )
            return result.scalar_one() or 0
        except SQLAlchemyError as e:
            logger.error(
                f"Error counting counters for service {service_id} at branch {branch_id}: {e}"
            )
            raise DatabaseError("Failed to count counters") from e
