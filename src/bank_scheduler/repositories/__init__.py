"""Repository layer for data access."""

from bank_scheduler.repositories.appointments_repository import AppointmentsRepository
from bank_scheduler.repositories.base import BaseRepository
from bank_scheduler.repositories.branches_repository import BranchesRepository
from bank_scheduler.repositories.counters_repository import CountersRepository

__all__ = [
    "BaseRepository",
    "AppointmentsRepository",
    "BranchesRepository",
    "CountersRepository",
]
