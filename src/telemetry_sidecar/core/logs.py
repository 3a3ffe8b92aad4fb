"""Log helper functions for creating LogEntry objects."""

import time

from telemetry_sidecar.core.models import LogEntry

INFO = "INFO"
ERROR = "ERROR"


def log(
    level: str,
    message: str,
    timestamp: float | None = None,
    **attributes: str | int | float | bool,
) -> LogEntry:
    """Create a log entry.

    Args:
        level: Log level (e.g., "INFO", "ERROR")
        message: The log message
        timestamp: Unix timestamp to stamp the entry with. Defaults to now.
        **attributes: Additional structured fields

    Returns:
        LogEntry with the given or current timestamp
    """
    return LogEntry(
        timestamp=time.time() if timestamp is None else timestamp,
        level=level,
        message=message,
        attributes=dict(attributes),
    )


def info(
    message: str,
    timestamp: float | None = None,
    **attributes: str | int | float | bool,
) -> LogEntry:
    """Create an INFO log entry."""
    return log(INFO, message, timestamp, **attributes)


def error(
    message: str,
    timestamp: float | None = None,
    **attributes: str | int | float | bool,
) -> LogEntry:
    """Create an ERROR log entry."""
    return log(ERROR, message, timestamp, **attributes)
