"""Custom exceptions for the FreightMatch application."""


class FreightMatchException(Exception):
    """Base exception for FreightMatch application."""

    error_code = "freightmatch_error"


class ValidationError(FreightMatchException):
    """Raised when input is malformed or a required field is missing."""

    error_code = "validation_error"


class InvalidPricing(ValidationError):
    """Raised when a transporter amount or platform fee is out of range."""

    error_code = "invalid_pricing"


class PreconditionFailed(FreightMatchException):
    """Raised when an operation is attempted from an illegal source state."""

    error_code = "precondition_failed"


class AlreadyAssigned(FreightMatchException):
    """Raised when a selection loses the race for a request.

    Kept apart from ConflictError so callers can refresh and show the winner.
    """

    error_code = "already_assigned"

    def __init__(self, message: str, request_id: str | None = None) -> None:
        super().__init__(message)
        self.request_id = request_id


class ConflictError(FreightMatchException):
    """Raised on a generic write conflict (stale version, duplicate row)."""

    error_code = "conflict"


class NotFoundError(FreightMatchException):
    """Raised when a resource is not found."""

    error_code = "not_found"


class ReceiptRequired(FreightMatchException):
    """Raised when a payment is declared without a receipt reference."""

    error_code = "receipt_required"


class ConfigurationError(FreightMatchException):
    """Raised when configuration is invalid."""

    error_code = "configuration_error"
