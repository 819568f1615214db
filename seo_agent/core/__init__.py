"""Core contracts shared across the SEO content agent."""

from .errors import APIError, ErrorCategory, ErrorCode, ErrorPayload, to_error_payload

__all__ = [
    "APIError",
    "ErrorCategory",
    "ErrorCode",
    "ErrorPayload",
    "to_error_payload",
]
