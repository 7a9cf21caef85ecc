from __future__ import annotations

from ..logging_config import log_structured_error
from .internal import ConfigError, InternalError, TwitchIRCError


def error_category(error: BaseException) -> str:
    """Map an exception onto the category used for aggregation."""
    if isinstance(error, OSError):
        return "network"
    if isinstance(error, TwitchIRCError):
        return "connection"
    if isinstance(error, ConfigError):
        return "config"
    if isinstance(error, InternalError):
        return "internal"
    return "unknown"


def log_error(message: str, error: BaseException, context: dict | None = None) -> None:
    """Logs an error message with the associated exception details.

    The error is categorised from its type and forwarded to structured
    logging, which also records it in the process-wide error aggregator.

    Args:
        message: A descriptive message about the error context.
        error: The exception instance to be logged.
        context: Optional additional context data for debugging.
    """
    merged: dict = dict(context or {})
    if isinstance(error, InternalError) and error.data:
        for key, value in error.data.items():
            merged.setdefault(key, value)
    log_structured_error(
        error_type=error_category(error),
        message=f"{message}: {str(error)}",
        exception=error,
        context=merged or None,
    )


__all__ = ["error_category", "log_error"]
