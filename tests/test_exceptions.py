"""Tests for exception classes."""

from bank_scheduler.exceptions import (
    APIException,
    AppointmentTimeInvalidError,
    ConflictError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)


def test_api_exception():
    """Test base APIException."""
    exc = APIException("Test error", status_code=400, code="TEST_ERROR")
    assert exc.message == "Test error"
    assert exc.status_code == 400
    assert exc.code == "TEST_ERROR"
    assert exc.to_dict() == {
        "error": {
            "message": "Test error",
            "code": "TEST_ERROR",
            "status_code": 400,
            "details": {},
        }
    }


def test_api_exception_default_code():
    assert APIException("Oops").code == "APIException"


def test_validation_error():
    """Test ValidationError."""
    exc = ValidationError("Bad page", errors={"take": 500})
    assert exc.status_code == 422
    assert exc.code == "VALIDATION_ERROR"
    assert exc.details["validation_errors"] == {"take": 500}


def test_not_found_error_with_id():
    exc = NotFoundError("Branch", resource_id="b-1")
    assert exc.status_code == 404
    assert exc.code == "NOT_FOUND"
    assert "Branch not found with id: b-1" in exc.message
    assert exc.details == {"resource": "Branch", "resource_id": "b-1"}


def test_not_found_error_with_keys():
    keys = {"user_id": "u", "branch_id": "b", "service_id": "s"}
    exc = NotFoundError("Appointment", keys=keys)
    assert exc.details["keys"] == keys
    assert "resource_id" not in exc.details


def test_not_found_error_with_empty_keys():
    exc = NotFoundError("Appointment", keys=[])
    assert exc.details["keys"] == []
    assert "with keys: []" in exc.message


def test_appointment_time_invalid_branch_closed():
    exc = AppointmentTimeInvalidError(counter_available=True, branch_open=False)
    assert exc.status_code == 422
    assert exc.code == "APPOINTMENT_TIME_INVALID"
    assert exc.counter_available is True
    assert exc.branch_open is False
    assert "branch is closed" in exc.message
    assert "no counter" not in exc.message


def test_appointment_time_invalid_counter_taken():
    exc = AppointmentTimeInvalidError(
        counter_available=False, branch_open=True, details={"user_id": "u"}
    )
    assert "no counter is free" in exc.message
    assert "branch is closed" not in exc.message
    assert exc.details == {"user_id": "u", "counter_available": False, "branch_open": True}


def test_conflict_error():
    """Test ConflictError."""
    exc = ConflictError("Slot busy", details={"slot": "b/s/2024-01-01T10:00:00"})
    assert exc.status_code == 409
    assert exc.code == "CONFLICT"
    assert exc.details["slot"] == "b/s/2024-01-01T10:00:00"


def test_database_error():
    """Test DatabaseError."""
    exc = DatabaseError("Connection failed")
    assert exc.status_code == 500
    assert exc.code == "DATABASE_ERROR"
    assert str(exc) == "Connection failed"
