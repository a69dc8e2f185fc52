"""Service-level error taxonomy.

Services raise these instead of ad hoc strings; each kind carries the HTTP
status the transport layer answers with, so the mapping lives in one place.
"""


class ServiceError(Exception):
    """Base class for errors returned by services.

    Attributes:
        message: Human-readable error message.
        status_code: HTTP status code the API responds with.
    """

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ServiceError):
    """Input failed a validation rule (400)."""

    status_code = 400
    default_message = "Validation failed"


class UnauthorizedError(ServiceError):
    """Authentication failed (401).

    Raised for unknown email, wrong password and unverified email alike so
    callers cannot tell which one happened.
    """

    status_code = 401
    default_message = "Invalid email or password"


class ForbiddenError(ServiceError):
    """Authenticated, but not allowed to touch the resource (403)."""

    status_code = 403
    default_message = "Forbidden"


class ResourceNotFoundError(ServiceError):
    """Requested resource does not exist (404)."""

    status_code = 404
    default_message = "Resource not found"


class UserNotFoundError(ResourceNotFoundError):
    """Account does not exist (404)."""

    default_message = "User not found"


class InvalidTokenError(ServiceError):
    """Verification token does not exist (400)."""

    status_code = 400
    default_message = "Invalid verification token"


class TokenExpiredError(ServiceError):
    """Verification token is past its expiry (410)."""

    status_code = 410
    default_message = "Verification token has expired"


class TokenAlreadyUsedError(ServiceError):
    """Verification token has already been redeemed (409)."""

    status_code = 409
    default_message = "Verification token has already been used"


class ConflictError(ServiceError):
    """Write conflicts with existing state, e.g. duplicate email (409)."""

    status_code = 409
    default_message = "Resource already exists"


class InternalError(ServiceError):
    """Store, signing or other unexpected failure (500)."""

    status_code = 500
    default_message = "Internal server error occurred"
