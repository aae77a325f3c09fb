from __future__ import annotations

from typing import Any, Optional


class FissionError(Exception):
    """Base error for fissionctl."""

    status_code = 500
    reason = "InternalError"

    def __init__(self, message: str, *, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class ConfigurationError(FissionError):
    """Invalid connectivity or type registration; fatal at startup."""

    reason = "ConfigurationError"


class ValidationError(FissionError):
    status_code = 400
    reason = "ValidationError"


class NotFoundError(FissionError):
    status_code = 404
    reason = "NotFound"


class ConflictError(FissionError):
    status_code = 409
    reason = "Conflict"


class TransportError(FissionError):
    status_code = 502
    reason = "TransportError"

    def __init__(
        self, message: str, *, timeout: bool = False, details: Optional[Any] = None
    ) -> None:
        super().__init__(message, details=details)
        self.timeout = timeout
        if timeout:
            self.status_code = 504


class SerializationError(FissionError):
    reason = "SerializationError"


class HttpError(FissionError):
    """Store response whose status has no dedicated error type."""

    reason = "StoreError"

    def __init__(self, status_code: int, message: str, *, details: Optional[Any] = None) -> None:
        super().__init__(f"HTTP {status_code}: {message}", details=details)
        self.status_code = status_code


def _store_message(default: str, details: Any) -> str:
    if isinstance(details, dict):
        message = details.get("message")
        if isinstance(message, str) and message:
            return message
    return default


def error_for_status(status_code: int, message: str, *, details: Any = None) -> FissionError:
    """Map an object-store error response onto the error taxonomy."""

    text = _store_message(message, details)
    if status_code in (400, 422):
        return ValidationError(text, details=details)
    if status_code == 404:
        return NotFoundError(text, details=details)
    if status_code == 409:
        return ConflictError(text, details=details)
    if status_code == 504:
        return TransportError(text, timeout=True, details=details)
    return HttpError(status_code, text, details=details)
