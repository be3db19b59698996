from typing import Any, Dict, Optional


class ApiError(Exception):
    """
    Raised for any failed request.

    message is the server's `message` field for non-2xx responses,
    or the transport error text when no response arrived.
    """

    def __init__(
        self,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
        payload: Any = None,
    ):
        super().__init__(message or f"Request failed (status {status_code})")
        self.message = message
        self.status_code = status_code
        self.payload = payload


class ValidationError(Exception):
    """
    Local form validation failed, nothing was sent.
    """

    def __init__(self, message: str, field_errors: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.field_errors = field_errors or {}


def describe_error(exc: BaseException, fallback: str) -> str:
    """Text to show the user for a failed operation."""
    if isinstance(exc, (ApiError, ValidationError)) and exc.message:
        return exc.message
    return fallback
