"""Custom exception classes for the bank scheduler."""

from typing import Any, Dict, Optional


class APIException(Exception):
    """Base exception for all scheduler errors."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON response."""
        return {
            "error": {
                "message": self.message,
                "code": self.code,
                "status_code": self.status_code,
                "details": self.details,
            }
        }


class ValidationError(APIException):
    """Exception raised for validation errors."""

    def __init__(
        self,
        message: str = "Validation failed",
        errors: Optional[Dict[str, Any]] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        error_details = details or {}
        if errors:
            error_details["validation_errors"] = errors
        super().__init__(
            message=message,
            status_code=422,
            code="VALIDATION_ERROR",
            details=error_details,
        )


class NotFoundError(APIException):
    """Exception raised when a resource is not found.

    ``resource_id`` is used for single-column keys; composite and bulk keys
    go in ``keys`` so callers can see exactly what was looked up.
    """

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Optional[str] = None,
        keys: Optional[Any] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource} not found"
        if resource_id:
            message += f" with id: {resource_id}"
        elif keys is not None:
            message += f" with keys: {keys}"
        error_details = details or {}
        error_details["resource"] = resource
        if resource_id:
            error_details["resource_id"] = resource_id
        if keys is not None:
            error_details["keys"] = keys
        super().__init__(
            message=message,
            status_code=404,
            code="NOT_FOUND",
            details=error_details,
        )


class AppointmentTimeInvalidError(APIException):
    """Exception raised when a candidate appointment fails availability validation."""

    def __init__(
        self,
        counter_available: bool,
        branch_open: bool,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.counter_available = counter_available
        self.branch_open = branch_open

        reasons = []
        if not branch_open:
            reasons.append("branch is closed at the requested time")
        if not counter_available:
            reasons.append("no counter is free for the requested service")
        message = "Appointment time is invalid"
        if reasons:
            message += ": " + "; ".join(reasons)

        error_details = details or {}
        error_details["counter_available"] = counter_available
        error_details["branch_open"] = branch_open
        super().__init__(
            message=message,
            status_code=422,
            code="APPOINTMENT_TIME_INVALID",
            details=error_details,
        )


class ConflictError(APIException):
    """Exception raised when a resource conflict occurs."""

    def __init__(
        self,
        message: str = "Resource conflict",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            status_code=409,
            code="CONFLICT",
            details=details,
        )


class DatabaseError(APIException):
    """Exception raised for database-related errors."""

    def __init__(
        self,
        message: str = "Database operation failed",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            status_code=500,
            code="DATABASE_ERROR",
            details=details,
        )
