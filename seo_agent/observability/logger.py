"""Structured logging for pipeline observability.

Provides context-aware logging with automatic run/phase tagging.
"""

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime
from typing import Any

# Context variables for automatic tagging
_run_id: ContextVar[str | None] = ContextVar("run_id", default=None)
_phase: ContextVar[str | None] = ContextVar("phase", default=None)

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def set_context(
    run_id: str | None = None,
    phase: str | None = None,
) -> None:
    """Set logging context variables."""
    if run_id is not None:
        _run_id.set(run_id)
    if phase is not None:
        _phase.set(phase)


def clear_context() -> None:
    """Clear all logging context variables."""
    _run_id.set(None)
    _phase.set(None)


def get_context() -> dict[str, str | None]:
    """Return the current logging context."""
    return {"run_id": _run_id.get(), "phase": _phase.get()}


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data: dict[str, Any] = {
            "timestamp": datetime.now().isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Add context from contextvars
        if run_id := _run_id.get():
            log_data["run_id"] = run_id
        if phase := _phase.get():
            log_data["phase"] = phase

        # Add extra fields
        if hasattr(record, "extra_data"):
            log_data["data"] = record.extra_data

        # Add exception info
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def configure_logging(level: str = "INFO", fmt: str = "text") -> None:
    """Configure root logging for the application.

    Args:
        level: Logging level name
        fmt: "json" for StructuredFormatter output, anything else for plain text
    """
    handler = logging.StreamHandler(sys.stdout)
    if fmt == "json":
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(getattr(logging, level.upper(), logging.INFO))


class StructuredLogger:
    """Logger with structured output and context awareness."""

    def __init__(self, name: str, level: int | None = None):
        """Initialize structured logger.

        Args:
            name: Logger name
            level: Logging level (inherits from the root logger when None)
        """
        self._logger = logging.getLogger(name)
        if level is not None:
            self._logger.setLevel(level)

    def _log(
        self,
        level: int,
        msg: str,
        *args: Any,
        extra_data: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> None:
        """Log with optional extra data."""
        extra = kwargs.pop("extra", {})
        if extra_data:
            extra["extra_data"] = extra_data
        self._logger.log(level, msg, *args, extra=extra, **kwargs)

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log debug message."""
        self._log(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log info message."""
        self._log(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log warning message."""
        self._log(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log error message."""
        self._log(logging.ERROR, msg, *args, **kwargs)

    def exception(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log exception with traceback."""
        self._log(logging.ERROR, msg, *args, exc_info=True, **kwargs)

    def phase_started(self, phase: str, **extra: Any) -> None:
        """Log phase started event."""
        set_context(phase=phase)
        self.info(f"Phase {phase} started", extra_data={"phase": phase, **extra})

    def phase_completed(
        self,
        phase: str,
        duration_ms: int | None = None,
        **extra: Any,
    ) -> None:
        """Log phase completed event."""
        data = {"phase": phase, **extra}
        if duration_ms is not None:
            data["duration_ms"] = duration_ms
        self.info(f"Phase {phase} completed", extra_data=data)

    def phase_failed(
        self,
        phase: str,
        error: str,
        code: str,
        **extra: Any,
    ) -> None:
        """Log phase failed event."""
        self.error(
            f"Phase {phase} failed: {error}",
            extra_data={"phase": phase, "error": error, "code": code, **extra},
        )


# Global logger cache
_loggers: dict[str, StructuredLogger] = {}


def get_logger(name: str) -> StructuredLogger:
    """Get or create a structured logger.

    Args:
        name: Logger name

    Returns:
        StructuredLogger instance
    """
    if name not in _loggers:
        _loggers[name] = StructuredLogger(name)
    return _loggers[name]
