"""Tests for request models and candidate normalization."""

from datetime import date, datetime, time, timedelta, timezone

import pytest
from pydantic import ValidationError

from bank_scheduler.models.appointments import (
    AppointmentCandidate,
    AppointmentKey,
    BulkChangeAppointmentStatusRequest,
    PaginatedAppointmentsQuery,
    ScheduleAppointmentRequest,
    SlotKey,
    UpdateAppointmentRequest,
    normalize_arrival,
)
from bank_scheduler.models.enums import AppointmentStatus


def test_time_taken_from_datetime():
    assert normalize_arrival(datetime(2024, 1, 1, 14, 15)) == (date(2024, 1, 1), time(14, 15))


def test_explicit_time_wins():
    arrival = normalize_arrival(datetime(2024, 1, 1, 14, 15), time(9, 30))
    assert arrival == (date(2024, 1, 1), time(9, 30))


def test_plain_date_is_midnight():
    assert normalize_arrival(date(2024, 1, 1)) == (date(2024, 1, 1), time(0, 0))


def test_timezone_is_dropped():
    """Wall-clock time is kept as given, without converting zones."""
    arrival = datetime(2024, 1, 1, 10, 0, tzinfo=timezone(timedelta(hours=2)))
    day, at = normalize_arrival(arrival)

    assert day == date(2024, 1, 1)
    assert at == time(10, 0)
    assert at.tzinfo is None


def test_candidate_from_request():
    request = ScheduleAppointmentRequest(
        user_id="user-1",
        branch_id="branch-1",
        service_id="service-1",
        arrival_date=datetime(2024, 1, 1, 11, 0),
    )
    candidate = AppointmentCandidate.from_request(request)

    assert candidate.arrival_time == time(11, 0)
    assert candidate.slot == SlotKey("branch-1", "service-1", date(2024, 1, 1), time(11, 0))
    assert request.status == AppointmentStatus.PENDING


def test_update_request_status_is_optional():
    request = UpdateAppointmentRequest(
        user_id="user-1",
        branch_id="branch-1",
        service_id="service-1",
        arrival_date=date(2024, 1, 1),
        arrival_time=time(10, 0),
    )
    assert request.status is None


def test_slot_key_str():
    slot = SlotKey("branch-1", "service-1", date(2024, 1, 1), time(10, 0))
    assert str(slot) == "branch-1/service-1/2024-01-01T10:00:00"


def test_key_fields_must_not_be_empty():
    with pytest.raises(ValidationError):
        AppointmentKey(user_id="", branch_id="branch-1", service_id="service-1")


def test_key_is_hashable():
    key = AppointmentKey(user_id="u", branch_id="b", service_id="s")
    assert key.as_tuple() == ("u", "b", "s")
    assert len({key, AppointmentKey(user_id="u", branch_id="b", service_id="s")}) == 1


def test_bulk_request_defaults_to_no_keys():
    request = BulkChangeAppointmentStatusRequest(status=AppointmentStatus.CANCELLED)
    assert request.keys == []


def test_pagination_bounds():
    query = PaginatedAppointmentsQuery()
    assert query.page == 1
    assert query.take is None

    with pytest.raises(ValidationError):
        PaginatedAppointmentsQuery(page=0)
    with pytest.raises(ValidationError):
        PaginatedAppointmentsQuery(take=0)
