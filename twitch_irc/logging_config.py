r"""
Logging configuration module for the Twitch IRC client.

Provides a configurable logging setup using the colorlog library together
with structured error logging and a small in-process error aggregator.
Library modules only emit records; installing handlers is left to the
application entry point through ``LoggerConfigurator``.
"""

import atexit
import logging
import os
import sys
import threading
import time
from collections import defaultdict
from typing import Any

import colorlog

LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "magenta",
}


class ErrorAggregator:
    """Aggregates error occurrences per category.

    Keeps the most recent occurrences of every category so a summary can be
    logged on shutdown, and flags categories whose hourly rate is too high.
    """

    MAX_ENTRIES_PER_TYPE = 1000

    def __init__(self):
        self.errors: dict[str, list[dict[str, Any]]] = defaultdict(list)
        self.lock = threading.Lock()
        self.start_time = time.time()

    def record_error(
        self, error_type: str, message: str, context: dict[str, Any] | None = None
    ) -> None:
        """Record an error occurrence with context."""
        with self.lock:
            entries = self.errors[error_type]
            entries.append(
                {"timestamp": time.time(), "message": message, "context": context or {}}
            )
            if len(entries) > self.MAX_ENTRIES_PER_TYPE:
                self.errors[error_type] = entries[-self.MAX_ENTRIES_PER_TYPE :]

    def get_error_summary(self) -> dict[str, Any]:
        """Get a summary of error patterns."""
        with self.lock:
            summary = {}
            current_time = time.time()
            runtime_hours = (current_time - self.start_time) / 3600

            for error_type, occurrences in self.errors.items():
                recent_count = len(
                    [e for e in occurrences if current_time - e["timestamp"] < 3600]
                )
                total_count = len(occurrences)
                summary[error_type] = {
                    "total_count": total_count,
                    "recent_count": recent_count,
                    "rate_per_hour": total_count / max(runtime_hours, 1),
                    "last_occurrence": occurrences[-1] if occurrences else None,
                }

            return summary

    def should_alert(self, error_type: str, threshold_rate: float = 10.0) -> bool:
        """Check if an error type should trigger an alert based on rate."""
        summary = self.get_error_summary()
        if error_type not in summary:
            return False
        return summary[error_type]["rate_per_hour"] > threshold_rate

    def reset(self) -> None:
        with self.lock:
            self.errors.clear()
            self.start_time = time.time()

    def log_summary_report(self) -> None:
        """Log a summary report of error patterns."""
        summary = self.get_error_summary()
        if not summary:
            logging.info("No errors recorded in current session")
            return

        logging.warning("🚨 ERROR SUMMARY REPORT")
        for error_type, stats in summary.items():
            logging.warning(
                f"  {error_type}: {stats['total_count']} total, "
                f"{stats['recent_count']} in last hour, "
                f"{stats['rate_per_hour']:.1f}/hour"
            )
            if stats["last_occurrence"]:
                logging.warning(f"    Last: {stats['last_occurrence']['message']}")


# Global error aggregator instance
error_aggregator = ErrorAggregator()


def log_structured_error(
    error_type: str,
    message: str,
    exception: BaseException | None = None,
    context: dict[str, Any] | None = None,
    level: int = logging.ERROR,
) -> None:
    """Log an error with structured context and aggregation.

    Args:
        error_type: Category of the error (e.g., 'network', 'connection', 'config')
        message: Descriptive error message
        exception: The exception that occurred (optional)
        context: Additional context data for debugging
        level: Logging level (default: ERROR)
    """
    structured_message = f"[{error_type.upper()}] {message}"

    if exception:
        structured_message += (
            f" | Exception: {type(exception).__name__}: {str(exception)}"
        )

    if context:
        context_str = " | ".join(f"{k}={v}" for k, v in context.items())
        structured_message += f" | Context: {context_str}"

    logging.log(level, structured_message)

    error_aggregator.record_error(error_type, message, context)

    if error_aggregator.should_alert(error_type):
        logging.critical(
            f"🚨 HIGH ERROR RATE ALERT: {error_type} occurring at "
            f"{error_aggregator.get_error_summary()[error_type]['rate_per_hour']:.1f}/hour"
        )


def debug_enabled() -> bool:
    return os.environ.get("DEBUG", "").lower() in ("true", "1", "yes")


class LoggerConfigurator:
    """Handles logging configuration using colorlog.

    Uses environment variables:
    - DEBUG: Set to 'true', '1', or 'yes' for DEBUG level, otherwise INFO
    """

    def __init__(self, stream=None, report_on_exit: bool = True):
        self.stream = stream or sys.stderr
        self.report_on_exit = report_on_exit

    def build_formatter(self) -> colorlog.ColoredFormatter:
        return colorlog.ColoredFormatter(
            "%(asctime)s %(log_color)s%(levelname)-8s%(reset)s %(message_log_color)s%(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            log_colors=LOG_COLORS,
            secondary_log_colors={
                "message": {
                    "ERROR": "red",
                    "CRITICAL": "magenta",
                }
            },
            reset=True,
        )

    def configure(self) -> int:
        """Install a colored stream handler on the root logger.

        Returns:
            The log level that was applied.
        """
        log_level = logging.DEBUG if debug_enabled() else logging.INFO

        handler = logging.StreamHandler(self.stream)
        handler.setFormatter(self.build_formatter())

        root_logger = logging.getLogger()
        for existing in list(root_logger.handlers):
            root_logger.removeHandler(existing)
        root_logger.addHandler(handler)
        root_logger.setLevel(log_level)

        if self.report_on_exit:
            atexit.register(self._log_final_error_summary)
        return log_level

    def _log_final_error_summary(self):
        """Log final error summary on application exit."""
        try:
            logging.info("📊 Final error summary before shutdown:")
            error_aggregator.log_summary_report()
        except Exception as e:  # noqa: BLE001
            logging.error(f"Failed to log final error summary: {e}")


__all__ = [
    "ErrorAggregator",
    "LoggerConfigurator",
    "debug_enabled",
    "error_aggregator",
    "log_structured_error",
]
