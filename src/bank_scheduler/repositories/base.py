"""Base repository class with common operations."""

import logging
import time
from contextlib import contextmanager
from typing import Any, Generic, Iterator, Optional, Sequence, Type, TypeVar, Union

from sqlalchemy.engine import Result
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Executable

from bank_scheduler.database.models import Base
from bank_scheduler.exceptions import DatabaseError
from bank_scheduler.utils.logging import log_database_query

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=Base)

PrimaryKey = Union[Any, Sequence[Any]]


class BaseRepository(Generic[ModelType]):
    """Base repository with common operations.

    Repositories only flush. The caller owns the transaction and rolls it
    back when a call fails.
    """

    def __init__(self, model: Type[ModelType], session: AsyncSession):
        """
        Initialize repository.

        Args:
            model: SQLAlchemy model class
            session: Async database session
        """
        self.model = model
        self.session = session

    @contextmanager
    def _timed(self, operation: str) -> Iterator[None]:
        """Log how long the wrapped storage call took."""
        started = time.perf_counter()
        try:
            yield
        finally:
            duration_ms = (time.perf_counter() - started) * 1000
            log_database_query(operation, self.model.__tablename__, duration_ms)

    async def _execute(self, operation: str, statement: Executable) -> Result:
        with self._timed(operation):
            return await self.session.execute(statement)

    async def get_by_key(self, key: PrimaryKey) -> Optional[ModelType]:
        """
        Get a record by primary key.

        Args:
            key: Primary key value, or a tuple of values for composite keys
                 (in primary key column order)

        Returns:
            Model instance or None if not found
        """
        try:
            with self._timed("get_by_key"):
                return await self.session.get(self.model, key)
        except SQLAlchemyError as e:
            logger.error(f"Error getting {self.model.__name__} by key {key}: {e}")
            raise DatabaseError(f"Failed to retrieve {self.model.__name__}") from e

    async def add(self, instance: ModelType) -> ModelType:
        """
        Stage a new record and flush it.

        Args:
            instance: Model instance to insert

        Returns:
            The flushed instance
        """
        try:
            self.session.add(instance)
            with self._timed("add"):
                await self.session.flush()
            logger.debug(f"Added {self.model.__name__}: {instance!r}")
            return instance
        except SQLAlchemyError as e:
            logger.error(f"Error adding {self.model.__name__}: {e}")
            raise DatabaseError(f"Failed to create {self.model.__name__}") from e

    async def save(self, *instances: ModelType) -> None:
        """
        Flush pending changes of already-loaded records.

        Args:
            *instances: Instances that were modified (re-attached if detached)
        """
        try:
            for instance in instances:
                self.session.add(instance)
            with self._timed("save"):
                await self.session.flush()
            logger.debug(f"Saved {len(instances)} {self.model.__name__} record(s)")
        except SQLAlchemyError as e:
            logger.error(f"Error saving {self.model.__name__}: {e}")
            raise DatabaseError(f"Failed to update {self.model.__name__}") from e
