"""Tests for enumerations and weekday mapping."""

from datetime import date, timedelta

import pytest

from bank_scheduler.models.enums import (
    SLOT_RELEASING_STATUSES,
    STATUS_STORAGE_V1,
    AppointmentStatus,
    WeekDay,
    status_from_storage,
    status_to_storage,
)
from bank_scheduler.utils.enums import list_enum_values, to_week_day


def test_week_day_mapping():
    """2024-01-01 was a Monday; the following six days cover the week."""
    start = date(2024, 1, 1)
    days = [to_week_day(start + timedelta(days=offset)) for offset in range(7)]

    assert days == [
        WeekDay.MONDAY,
        WeekDay.TUESDAY,
        WeekDay.WEDNESDAY,
        WeekDay.THURSDAY,
        WeekDay.FRIDAY,
        WeekDay.SATURDAY,
        WeekDay.SUNDAY,
    ]


def test_week_day_of_leap_day():
    assert to_week_day(date(2024, 2, 29)) == WeekDay.THURSDAY


def test_status_storage_values():
    assert status_to_storage(AppointmentStatus.PENDING) == "Pending"
    assert status_to_storage(AppointmentStatus.CHECKED_IN) == "CheckedIn"
    assert status_to_storage(AppointmentStatus.NO_SHOW) == "NoShow"
    assert status_from_storage("Cancelled") == AppointmentStatus.CANCELLED


def test_status_storage_covers_every_status():
    assert set(STATUS_STORAGE_V1) == set(AppointmentStatus)
    assert len(set(STATUS_STORAGE_V1.values())) == len(AppointmentStatus)
    for status in AppointmentStatus:
        assert status_from_storage(status_to_storage(status)) == status


def test_status_to_storage_accepts_raw_value():
    assert status_to_storage("confirmed") == "Confirmed"


def test_unknown_stored_status():
    with pytest.raises(ValueError, match="Unknown stored appointment status"):
        status_from_storage("Archived")


def test_only_cancelled_releases_slot():
    assert SLOT_RELEASING_STATUSES == {AppointmentStatus.CANCELLED}


def test_list_enum_values_keeps_declaration_order():
    assert list_enum_values(WeekDay)[0] == WeekDay.MONDAY
    assert list_enum_values(WeekDay)[-1] == WeekDay.SUNDAY
    assert list_enum_values(AppointmentStatus) == list(AppointmentStatus)
