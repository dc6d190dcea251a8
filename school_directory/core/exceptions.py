from typing import Any, Dict, Optional


class SchoolDirectoryError(Exception):
    """Base class for errors mapped to an HTTP response by the exception handlers."""

    status_code: int = 500
    code: str = "INTERNAL_SERVER_ERROR"
    # Internal errors keep their cause in the logs, never in the response
    expose_message: bool = True

    def __init__(self, message: str = "An unexpected error occurred", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class InvalidArgumentError(SchoolDirectoryError):
    status_code = 400
    code = "BAD_REQUEST"


class SchoolNotFoundError(SchoolDirectoryError):
    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, school_id: int):
        super().__init__("School not found")
        self.school_id = school_id


class PayloadTooLargeError(SchoolDirectoryError):
    status_code = 413
    code = "PAYLOAD_TOO_LARGE"


class UnsupportedMediaTypeError(SchoolDirectoryError):
    status_code = 415
    code = "UNSUPPORTED_MEDIA_TYPE"


class StoreUnavailableError(SchoolDirectoryError):
    """A store or blob storage call failed. Safe to retry."""

    expose_message = False
    retryable = True


class ConstraintViolationError(SchoolDirectoryError):
    expose_message = False
    retryable = False
