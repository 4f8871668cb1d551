"""
Custom exception classes for the car hire backend.

Every error carries a stable `kind`, a human-readable message and the HTTP
status the API layer answers with. Services raise them; the blueprint error
handler in app/__init__.py turns them into JSON responses.
"""


class CarHireError(Exception):
    """Base class for all business and persistence errors."""

    kind = "Error"
    status_code = 500
    default_message = "Error: request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def __str__(self) -> str:  # pragma: no cover
        return self.message

    def to_dict(self) -> dict:
        return {"success": False, "error": self.kind, "message": self.message}


# ---------- validation ----------
class ValidationError(CarHireError):
    """Raised when a payload is malformed (wrong type, bad value)."""

    kind = "ValidationError"
    status_code = 400
    default_message = "Error: invalid input"


class MissingFieldError(ValidationError):
    """Raised when one or more required fields are absent or blank."""

    kind = "MissingField"
    default_message = "Error: missing required field"

    def __init__(self, fields=None, message: str | None = None) -> None:
        self.fields = list(fields or [])
        if message is None and self.fields:
            message = "Missing required fields: " + ", ".join(self.fields)
        super().__init__(message)

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["fields"] = self.fields
        return data


class InvalidDateRangeError(ValidationError):
    """Raised when start date is after end date or an invalid date is provided."""

    kind = "InvalidDateRange"
    default_message = "Error: invalid date range"


class PastStartDateError(ValidationError):
    """Raised when a booking would start before today."""

    kind = "PastStartDate"
    default_message = "Error: start date cannot be in the past"


class DuplicateRecordError(ValidationError):
    """Raised when a unique field (phone, licence, plate...) is already taken."""

    kind = "DuplicateRecord"
    default_message = "Error: record already exists"


# ---------- business rules ----------
class VehicleUnavailableError(CarHireError):
    """Raised when a vehicle is already booked for the requested dates."""

    kind = "VehicleUnavailable"
    status_code = 409
    default_message = "Error: vehicle is not available for the selected dates"


class TerminalStateViolationError(CarHireError):
    """Raised when a Completed or Cancelled booking is asked to change."""

    kind = "TerminalStateViolation"
    status_code = 409
    default_message = "Error: booking is already closed"


class InvalidTransitionError(CarHireError):
    """Raised for a status change the booking state machine does not allow."""

    kind = "InvalidTransition"
    status_code = 409
    default_message = "Error: invalid status transition"


class ReferenceInUseError(CarHireError):
    """Raised when deleting a client/vehicle that an active booking still uses."""

    kind = "ReferenceInUse"
    status_code = 409
    default_message = "Error: record is referenced by an active booking"


class NotFoundError(CarHireError):
    """Raised when a client, vehicle, booking or user ID cannot be found."""

    kind = "NotFound"
    status_code = 404
    default_message = "Error: record not found"


# ---------- access ----------
class AuthenticationError(CarHireError):
    """Raised when a request needs a logged-in user and has none."""

    kind = "Unauthenticated"
    status_code = 401
    default_message = "Not authorized, please login"


class PermissionDeniedError(CarHireError):
    """Raised when the caller's role lacks the module/action permission."""

    kind = "PermissionDenied"
    status_code = 403
    default_message = "Error: insufficient permission"


# ---------- persistence ----------
class StoreError(CarHireError):
    """Wraps an underlying persistence failure. Not retried by the core."""

    kind = "StoreError"
    status_code = 500
    default_message = "Error: storage failure"
