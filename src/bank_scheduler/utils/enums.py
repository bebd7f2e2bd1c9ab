"""Enumeration helpers: weekday translation and value listing."""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Dict, List, Type, TypeVar

from bank_scheduler.models.enums import WeekDay

EnumType = TypeVar("EnumType", bound=Enum)

# date.weekday(): Monday == 0 ... Sunday == 6
CALENDAR_WEEKDAY_TO_WEEKDAY: Dict[int, WeekDay] = {
    0: WeekDay.MONDAY,
    1: WeekDay.TUESDAY,
    2: WeekDay.WEDNESDAY,
    3: WeekDay.THURSDAY,
    4: WeekDay.FRIDAY,
    5: WeekDay.SATURDAY,
    6: WeekDay.SUNDAY,
}


def to_week_day(day: date) -> WeekDay:
    """Map a calendar date to the domain weekday."""
    return CALENDAR_WEEKDAY_TO_WEEKDAY[day.weekday()]


def list_enum_values(enum_cls: Type[EnumType]) -> List[EnumType]:
    """Return the members of an enum in declaration order."""
    return list(enum_cls)
