"""Database connection and session management."""

from bank_scheduler.database.connection import (
    check_connection,
    close_engine,
    create_engine,
    get_engine,
)
from bank_scheduler.database.models import (
    Appointment,
    Base,
    Branch,
    Counter,
    CounterService,
    Schedule,
    Service,
)
from bank_scheduler.database.session import (
    close_db,
    get_session,
    get_session_context,
    get_session_factory,
    init_db,
)

__all__ = [
    # Models
    "Base",
    "Appointment",
    "Branch",
    "Counter",
    "CounterService",
    "Schedule",
    "Service",
    # Connection
    "get_engine",
    "create_engine",
    "close_engine",
    "check_connection",
    # Session
    "get_session",
    "get_session_context",
    "get_session_factory",
    "init_db",
    "close_db",
]
