"""Utility functions."""

from bank_scheduler.utils.enums import list_enum_values, to_week_day
from bank_scheduler.utils.logging import (
    get_logger,
    get_request_id,
    log_database_query,
    log_error,
    set_request_id,
    setup_logging,
)

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "set_request_id",
    "get_request_id",
    "log_database_query",
    "log_error",
    # Enums
    "list_enum_values",
    "to_week_day",
]
