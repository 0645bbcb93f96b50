"""Typed failures raised by services and adapters."""


class PhotoboothError(Exception):
    """Base error carrying a stable code and HTTP status."""

    status_code = 500
    default_code = "INTERNAL_ERROR"

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code


class ValidationError(PhotoboothError):
    """Missing or malformed input."""

    status_code = 400
    default_code = "VALIDATION_ERROR"


class AuthenticationError(PhotoboothError):
    """Missing, invalid or expired bearer token."""

    status_code = 401
    default_code = "AUTH_ERROR"


class ForbiddenError(PhotoboothError):
    """Caller may not touch the requested storage path."""

    status_code = 403
    default_code = "FORBIDDEN"


class NotFoundError(PhotoboothError):
    """Resource is missing or not owned by the caller."""

    status_code = 404
    default_code = "NOT_FOUND"


class ShareExpiredError(PhotoboothError):
    """Share link is past its expiry timestamp."""

    status_code = 410
    default_code = "SHARE_EXPIRED"


class UploadFailedError(PhotoboothError):
    """Object storage rejected the content."""

    status_code = 500
    default_code = "STORAGE_UPLOAD_ERROR"


class GenerationFailedError(PhotoboothError):
    """Provider reported a generation job as failed."""

    status_code = 502
    default_code = "GENERATION_FAILED"


class GenerationTimeoutError(PhotoboothError):
    """Generation job did not finish before the deadline."""

    status_code = 504
    default_code = "GENERATION_TIMEOUT"


class GenerationCancelledError(PhotoboothError):
    """Caller cancelled the wait for a generation job."""

    status_code = 499
    default_code = "GENERATION_CANCELLED"
