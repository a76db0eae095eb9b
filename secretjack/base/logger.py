"""
Structured logging for Secretjack.

Provides a pre-configured logger that emits JSON-structured log records
with lookup context (backend, operation, key) for easy filtering in log
aggregation tools. Diagnostic ``debug`` records are only emitted when the
logger is verbose. Secret values are never passed to the logger.
"""

from __future__ import annotations

import json
import logging
import os
import uuid
from typing import Any

_TRUTHY = {"1", "true", "yes", "on"}


def _verbose_from_env() -> bool:
    return os.environ.get("SECRETJACK_VERBOSE", "").strip().lower() in _TRUTHY


class StructuredFormatter(logging.Formatter):
    """Emit log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        # Attach any extras injected via SecretjackLogger.log_operation
        for key in ("request_id", "backend", "operation", "key"):
            val = getattr(record, key, None)
            if val is not None:
                log_entry[key] = val
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = str(record.exc_info[1])
        return json.dumps(log_entry)


class SecretjackLogger:
    """Convenience wrapper around :mod:`logging` for secret lookups.

    Args:
        name: Underlying :mod:`logging` logger name.
        verbose: Emit ``debug`` diagnostics. Defaults to the
            ``SECRETJACK_VERBOSE`` environment variable.
    """

    def __init__(self, name: str = "secretjack", verbose: bool | None = None) -> None:
        self.logger = logging.getLogger(name)
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(StructuredFormatter())
            self.logger.addHandler(handler)
            self.logger.setLevel(logging.INFO)
        self.verbose = False
        self.set_verbose(_verbose_from_env() if verbose is None else verbose)

    def set_verbose(self, verbose: bool) -> None:
        """Toggle debug diagnostics for this logger."""
        self.verbose = verbose
        if verbose and self.logger.getEffectiveLevel() > logging.DEBUG:
            self.logger.setLevel(logging.DEBUG)

    def log_operation(
        self,
        level: int,
        message: str,
        *,
        backend: str | None = None,
        operation: str | None = None,
        key: str | None = None,
        request_id: str | None = None,
        exc_info: bool = False,
    ) -> None:
        """Emit a structured log record with lookup context.

        Args:
            level: Logging level (e.g. logging.INFO).
            message: Human-readable message.
            backend: Backend name (e.g. 'aws').
            operation: Operation name (e.g. 'resolve').
            key: Secret key or identifier being looked up; never its value.
            request_id: Optional correlation ID; auto-generated if omitted.
            exc_info: Whether to include exception info.
        """
        extra = {
            "backend": backend,
            "operation": operation,
            "key": key,
            "request_id": request_id or uuid.uuid4().hex[:12],
        }
        self.logger.log(level, message, extra=extra, exc_info=exc_info)

    def info(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.ERROR, message, **kwargs)

    def debug(self, message: str, **kwargs: Any) -> None:
        if self.verbose:
            self.log_operation(logging.DEBUG, message, **kwargs)


# Module-level singleton
sj_logger = SecretjackLogger()
