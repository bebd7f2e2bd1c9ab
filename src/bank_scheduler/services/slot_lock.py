"""Mutual exclusion for the check-then-write window of a booking slot.

Two layers are used. An ``asyncio.Lock`` per slot serializes coroutines in
this process. On PostgreSQL a transaction-scoped advisory lock additionally
serializes across processes; it is released when the transaction ends, so
callers commit while still holding the local lock. Errors raised here,
including from the advisory lock statement, leave rolling back to the caller.
"""

from __future__ import annotations

import asyncio
import hashlib
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Dict, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from bank_scheduler.config import get_settings
from bank_scheduler.exceptions import ConflictError, DatabaseError
from bank_scheduler.models.appointments import SlotKey

logger = logging.getLogger(__name__)


def advisory_lock_key(slot: SlotKey) -> int:
    """Derive a stable signed 64-bit advisory lock key for a slot."""
    digest = hashlib.blake2b(str(slot).encode("utf-8"), digest_size=8).digest()
    return int.from_bytes(digest, byteorder="big", signed=True)


@dataclass
class _Entry:
    lock: asyncio.Lock
    waiters: int = 0


class SlotLockRegistry:
    """Process-local registry of per-slot locks.

    Entries are reference counted and dropped once nobody holds or waits on
    them, so the registry does not grow with every slot ever booked.
    """

    def __init__(self) -> None:
        self._entries: Dict[SlotKey, _Entry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    @asynccontextmanager
    async def hold(self, slot: SlotKey, timeout: Optional[float] = None) -> AsyncIterator[None]:
        entry = self._entries.get(slot)
        if entry is None:
            entry = self._entries[slot] = _Entry(asyncio.Lock())
        entry.waiters += 1
        try:
            try:
                await asyncio.wait_for(entry.lock.acquire(), timeout=timeout)
            except asyncio.TimeoutError:
                logger.warning(f"Timed out waiting for slot lock {slot}")
                raise ConflictError(
                    "Another booking for this slot is in progress, try again",
                    details={"slot": str(slot)},
                ) from None
            try:
                yield
            finally:
                entry.lock.release()
        finally:
            entry.waiters -= 1
            if entry.waiters == 0 and self._entries.get(slot) is entry:
                del self._entries[slot]


_registry = SlotLockRegistry()


def get_slot_lock_registry() -> SlotLockRegistry:
    """Get the process-global slot lock registry."""
    return _registry


class SlotLock:
    """Guards validation and persistence of one slot for one session."""

    def __init__(
        self,
        session: AsyncSession,
        registry: Optional[SlotLockRegistry] = None,
        enabled: Optional[bool] = None,
        timeout: Optional[float] = None,
    ) -> None:
        settings = get_settings().scheduling
        self._session = session
        self._registry = registry or get_slot_lock_registry()
        self._enabled = settings.slot_lock_enabled if enabled is None else enabled
        self._timeout = settings.slot_lock_timeout_seconds if timeout is None else timeout

    @asynccontextmanager
    async def hold(self, slot: SlotKey) -> AsyncIterator[None]:
        """Hold the slot for the duration of the block."""
        if not self._enabled:
            yield
            return

        async with self._registry.hold(slot, timeout=self._timeout):
            await self._acquire_advisory_lock(slot)
            logger.debug(f"Holding slot lock {slot}")
            yield

    async def _acquire_advisory_lock(self, slot: SlotKey) -> None:
        bind = self._session.get_bind()
        if bind.dialect.name != "postgresql":
            return
        try:
            await self._session.execute(
                text("SELECT pg_advisory_xact_lock(:key)"),
                {"key": advisory_lock_key(slot)},
            )
        except SQLAlchemyError as e:
            logger.error(f"Error acquiring advisory lock for slot {slot}: {e}")
            raise DatabaseError("Failed to lock appointment slot") from e
