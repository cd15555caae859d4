"""Custom exception hierarchy for CueSpec MCP.

Errors are actionable: each carries a suggestion telling the caller how to
recover. The drawing core never raises any of these; they belong to the
record store and the tool layer.
"""

from typing import Optional, List, Dict, Any
from dataclasses import dataclass


@dataclass
class ErrorContext:
    """Structured context for errors."""
    record_type: Optional[str] = None
    requested_id: Optional[str] = None
    current_value: Optional[Any] = None
    valid_values: Optional[List[Any]] = None
    additional_info: Optional[Dict[str, Any]] = None


class CueSpecError(Exception):
    """Base exception for all CueSpec errors.

    ``str()`` carries the suggestion too: FastMCP reports a failed tool call
    with the exception text.
    """

    error_type: str = "CueSpecError"
    default_suggestion: str = "Check the operation parameters and try again."

    def __init__(
        self,
        message: str,
        context: Optional[ErrorContext] = None,
        suggestion: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.context = context or ErrorContext()
        self.suggestion = suggestion or self.default_suggestion

    def __str__(self) -> str:
        return f"{self.error_type}: {self.message}. {self.suggestion}"


class RecordNotFoundError(CueSpecError):
    """Raised when a referenced record does not exist."""

    error_type = "RecordNotFound"
    default_suggestion = "Use list_specs() to see the available records."

    def __init__(
        self,
        record_type: str,
        record_id: str,
        **kwargs,
    ):
        message = f"{record_type} record '{record_id}' does not exist"
        context = ErrorContext(record_type=record_type, requested_id=record_id)
        super().__init__(message, context=context, **kwargs)


class InvalidParameterError(CueSpecError):
    """Raised when a parameter value is invalid."""

    error_type = "InvalidParameter"
    default_suggestion = "Correct the parameter value and try again."

    def __init__(
        self,
        parameter_name: str,
        value: Any,
        valid_values: Optional[List[Any]] = None,
        reason: Optional[str] = None,
        **kwargs,
    ):
        if reason:
            message = f"Invalid value for '{parameter_name}': {reason}"
        elif valid_values:
            message = f"Invalid value '{value}' for '{parameter_name}'. Valid values: {valid_values}"
        else:
            message = f"Invalid value '{value}' for parameter '{parameter_name}'"

        context = ErrorContext(
            current_value=value,
            valid_values=valid_values,
            additional_info={"parameter_name": parameter_name},
        )
        super().__init__(message, context=context, **kwargs)


class StorageError(CueSpecError):
    """Raised when the record store rejects or fails an operation."""

    error_type = "StorageError"
    default_suggestion = "Check the storage backend configuration and try again."

    def __init__(
        self,
        operation: str,
        reason: str,
        status_code: Optional[int] = None,
        **kwargs,
    ):
        message = f"Storage operation '{operation}' failed: {reason}"
        info: Dict[str, Any] = {"operation": operation}
        if status_code is not None:
            info["status_code"] = status_code
        context = ErrorContext(additional_info=info)
        super().__init__(message, context=context, **kwargs)


class ConnectionError(CueSpecError):
    """Raised when the cloud document store cannot be reached."""

    error_type = "ConnectionError"
    default_suggestion = (
        "Check network access and the Firestore project settings, "
        "or set CUESPEC_MCP_STORAGE_BACKEND=local."
    )

    def __init__(
        self,
        backend: str,
        url: str,
        reason: Optional[str] = None,
        **kwargs,
    ):
        message = f"Cannot connect to {backend} at {url}"
        if reason:
            message += f": {reason}"

        context = ErrorContext(
            additional_info={"backend": backend, "url": url}
        )
        super().__init__(message, context=context, **kwargs)


class TimeoutError(CueSpecError):
    """Raised when a storage request times out."""

    error_type = "TimeoutError"
    default_suggestion = "The request took too long. Retry or increase CUESPEC_MCP_REQUEST_TIMEOUT."

    def __init__(
        self,
        operation: str,
        timeout_seconds: float,
        **kwargs,
    ):
        message = f"Operation '{operation}' timed out after {timeout_seconds} seconds"
        context = ErrorContext(
            additional_info={"timeout": timeout_seconds}
        )
        super().__init__(message, context=context, **kwargs)
