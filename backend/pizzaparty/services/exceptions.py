"""Base service exceptions.

These exceptions are raised by the service layer and should be caught
by the API layer and converted to appropriate HTTP responses.
"""


class ServiceError(Exception):
    """Base service exception."""

    # Stable machine-readable kind, exposed to API clients
    kind: str = "service_error"


class NotFoundError(ServiceError):
    """Resource not found."""

    kind = "not_found"


class ValidationError(ServiceError):
    """Validation error."""

    kind = "invalid_input"


class ConflictError(ServiceError):
    """Request conflicts with the current state of a resource."""

    kind = "conflict"


class UnavailableError(ServiceError):
    """Service temporarily cannot fulfil the request."""

    kind = "unavailable"
