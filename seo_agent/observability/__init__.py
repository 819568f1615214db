"""Observability helpers (structured logging with run/phase context)."""

from .logger import (
    StructuredFormatter,
    StructuredLogger,
    clear_context,
    configure_logging,
    get_context,
    get_logger,
    set_context,
)

__all__ = [
    "StructuredFormatter",
    "StructuredLogger",
    "clear_context",
    "configure_logging",
    "get_context",
    "get_logger",
    "set_context",
]
