"""Console logging setup for the sidecar's operational narrative.

The narrative (readiness progress, per-tick echoes, failures) goes through
the standard library logging module under the ``telemetry_sidecar`` logger.
It is separate from the telemetry data plane handled by the sinks.
"""

import logging
import sys
from typing import TextIO

PACKAGE_LOGGER = "telemetry_sidecar"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class _ConsoleHandler(logging.StreamHandler):  # type: ignore[type-arg]
    """Marker subclass so repeated configuration replaces, not duplicates."""


def configure_logging(
    level: int | str = logging.INFO,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Attach a console handler to the package logger.

    Calling this again replaces the previously installed console handler.

    Args:
        level: Log level for the package logger.
        stream: Output stream. Defaults to stdout.

    Returns:
        The package logger.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        if isinstance(handler, _ConsoleHandler):
            logger.removeHandler(handler)
    handler = _ConsoleHandler(stream or sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    logger.propagate = False
    return logger
