"""Error classification shared by the provider adapters and the pipeline.

ErrorCategory determines whether a caller may retry:
- RETRYABLE: Temporary failures, a later attempt with the same input may succeed
- NON_RETRYABLE: Permanent failures (bad credentials, bad request)
- VALIDATION_FAIL: Input or output failed validation

ErrorCode is the short machine-readable code exposed across the HTTP boundary.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class ErrorCategory(str, Enum):
    """Classification of errors for retry decisions."""

    RETRYABLE = "retryable"
    NON_RETRYABLE = "non_retryable"
    VALIDATION_FAIL = "validation_fail"


class ErrorCode(str, Enum):
    """User-visible error codes."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    AUTH_ERROR = "AUTH_ERROR"
    RATE_LIMIT = "RATE_LIMIT"
    NETWORK_ERROR = "NETWORK_ERROR"
    API_ERROR = "API_ERROR"
    PARSE_ERROR = "PARSE_ERROR"
    GENERATION_ERROR = "GENERATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ErrorPayload(BaseModel):
    """Error body sent to clients (no stack detail)."""

    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: list[Any] | None = Field(default=None, description="Validation details")


def to_error_payload(
    error: BaseException,
    default_code: ErrorCode = ErrorCode.GENERATION_ERROR,
) -> ErrorPayload:
    """Map an exception to a client-facing error payload.

    Exceptions from the adapters carry their own ``code``; anything else
    falls back to ``default_code``.
    """
    code = getattr(error, "code", None)
    if isinstance(code, ErrorCode):
        code_value = code.value
    elif isinstance(code, str) and code in {c.value for c in ErrorCode}:
        code_value = code
    else:
        code_value = default_code.value

    message = getattr(error, "message", None) or str(error) or type(error).__name__
    return ErrorPayload(code=code_value, message=message)


class APIError(Exception):
    """Error returned to HTTP clients as ``{success: false, error: {...}}``."""

    def __init__(
        self,
        status_code: int,
        code: ErrorCode,
        message: str,
        details: list[Any] | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.message = message
        self.details = details

    def to_response_body(self) -> dict[str, Any]:
        payload = ErrorPayload(code=self.code.value, message=self.message, details=self.details)
        return {"success": False, "error": payload.model_dump(exclude_none=True)}
