"""SQLAlchemy async session management."""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from bank_scheduler.database.connection import get_engine
from bank_scheduler.utils.logging import get_request_id, set_request_id

logger = logging.getLogger(__name__)

_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get or create the session factory."""
    global _session_factory
    if _session_factory is None:
        engine = get_engine()
        _session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,  # Don't expire objects after commit
            autoflush=False,  # Don't autoflush (we'll do it explicitly)
        )
        logger.info("Session factory created")
    return _session_factory


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Async generator yielding a session that commits on success.

    Usage:
        async for session in get_session():
            service = get_appointments_service(session)
            ...
    """
    session_factory = get_session_factory()
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except asyncio.CancelledError:
            await asyncio.shield(session.rollback())
            logger.warning("Database session cancelled, transaction rolled back")
            raise
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"Database session error: {e}")
            raise
        except Exception as e:
            await session.rollback()
            logger.error(f"Unexpected error in database session: {e}")
            raise


@asynccontextmanager
async def get_session_context(
    request_id: Optional[str] = None,
) -> AsyncGenerator[AsyncSession, None]:
    """
    Context manager for database sessions.

    The unit of work logs under ``request_id``, or under the current request
    ID, or under a fresh one when neither is set.

    Usage:
        async with get_session_context() as session:
            await get_appointments_service(session).schedule(request)
    """
    if request_id is not None or get_request_id() is None:
        set_request_id(request_id)
    session_factory = get_session_factory()
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except asyncio.CancelledError:
            await asyncio.shield(session.rollback())
            logger.warning("Database session cancelled, transaction rolled back")
            raise
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"Database session error: {e}")
            raise
        except Exception as e:
            await session.rollback()
            logger.error(f"Unexpected error in database session: {e}")
            raise


async def init_db(create_tables: bool = False) -> None:
    """Initialize database connection and verify connectivity.

    ``create_tables`` creates the schema directly from the models; production
    deployments use the Alembic migrations instead.
    """
    from bank_scheduler.database.connection import check_connection

    if create_tables:
        from bank_scheduler.database.models import Base

        async with get_engine().begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created")

    is_connected = await check_connection()
    if is_connected:
        logger.info("Database connection initialized successfully")
    else:
        logger.warning("Database connection check failed")


async def close_db() -> None:
    """Close database connections."""
    global _session_factory
    from bank_scheduler.database.connection import close_engine

    await close_engine()
    _session_factory = None
    logger.info("Database connections closed")
