class DomainError(Exception):
    """Base exception for business rule violations.

    ``code`` is the stable error kind returned to API callers.
    """

    code = "DomainError"


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "ValidationError"


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    code = "Forbidden"


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""

    code = "NotFound"


class InvalidLocationError(ValidationError):
    """Missing or malformed coordinate/accuracy."""

    code = "InvalidLocation"


class LocationRequiredError(ValidationError):
    code = "LocationRequired"


class OutsideShiftWindowError(ValidationError):
    """Event time falls outside the allowed clock range."""

    code = "OutsideShiftWindow"


class OutsideGeofenceError(ValidationError):
    """Only raised when the geofence is configured to block check-in."""

    code = "OutsideGeofence"


class DuplicateCheckInError(ValidationError):
    code = "DuplicateCheckIn"


class NoOpenCheckInError(ValidationError):
    code = "NoOpenCheckIn"


class CheckOutBeforeCheckInError(ValidationError):
    code = "CheckOutBeforeCheckIn"
