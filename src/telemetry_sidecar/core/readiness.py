"""Readiness gate: bounded polling for the telemetry backend's sockets.

The backend signals it is reachable by creating its Unix domain-socket
files. Startup blocks here until every expected path exists or the retry
budget is spent.
"""

import logging
import os
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)

MissingPaths = tuple[str, ...]


class ReadinessStatus(Enum):
    """Terminal outcome of a readiness wait."""

    READY = "ready"
    TIMED_OUT = "timed_out"


@dataclass(frozen=True)
class ReadinessCheck:
    """Paths to wait for and the retry budget.

    Attributes:
        paths: Filesystem paths that must all exist.
        max_attempts: Delayed attempts before the final check. Must be >= 1.
        attempt_delay: Seconds to sleep after each failed attempt. Must be >= 0.
    """

    paths: tuple[str, ...]
    max_attempts: int = 10
    attempt_delay: float = 5.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.attempt_delay < 0:
            raise ValueError(f"attempt_delay must be >= 0, got {self.attempt_delay}")


@dataclass(frozen=True)
class ReadinessResult:
    """Outcome of a readiness wait.

    Attributes:
        status: READY or TIMED_OUT.
        checks: Number of existence checks performed.
        missing: Paths absent at the last check; empty when ready.
    """

    status: ReadinessStatus
    checks: int
    missing: MissingPaths = ()

    @property
    def ready(self) -> bool:
        return self.status is ReadinessStatus.READY


def poll(
    predicate: Callable[[], MissingPaths],
    max_attempts: int,
    delay: float,
    sleep: Callable[[float], None] = time.sleep,
    on_attempt: Callable[[int, int, MissingPaths], None] | None = None,
) -> ReadinessResult:
    """Poll a readiness predicate with a fixed delay between attempts.

    ``predicate`` returns the paths still missing; an empty tuple means
    ready. Each of the ``max_attempts`` attempts checks once and, on failure,
    sleeps ``delay``. One final check follows the loop with no further delay,
    so a wait that never succeeds performs ``max_attempts + 1`` checks and
    ``max_attempts`` sleeps.

    Args:
        predicate: Returns the tuple of missing paths.
        max_attempts: Number of delayed attempts.
        delay: Seconds to sleep after each failed attempt.
        sleep: Sleep function, injectable for tests.
        on_attempt: Called with (attempt, max_attempts, missing) after each
            failed attempt, before sleeping.

    Returns:
        ReadinessResult with READY or TIMED_OUT.
    """
    for attempt in range(1, max_attempts + 1):
        missing = predicate()
        if not missing:
            return ReadinessResult(ReadinessStatus.READY, checks=attempt)
        if on_attempt is not None:
            on_attempt(attempt, max_attempts, missing)
        sleep(delay)

    missing = predicate()
    if not missing:
        return ReadinessResult(ReadinessStatus.READY, checks=max_attempts + 1)
    return ReadinessResult(
        ReadinessStatus.TIMED_OUT, checks=max_attempts + 1, missing=missing
    )


def _missing_paths(
    paths: Sequence[str], exists: Callable[[str], bool]
) -> MissingPaths:
    return tuple(path for path in paths if not exists(path))


def await_ready(
    check: ReadinessCheck,
    exists: Callable[[str], bool] = os.path.exists,
    sleep: Callable[[float], None] = time.sleep,
) -> ReadinessResult:
    """Block until every path in ``check`` exists or the budget runs out.

    Args:
        check: Paths and retry budget.
        exists: Existence test, injectable for tests.
        sleep: Sleep function, injectable for tests.

    Returns:
        ReadinessResult. TIMED_OUT is a normal outcome, not an error.
    """
    paths = " and ".join(f"'{path}'" for path in check.paths)
    logger.info("Checking for files: %s.", paths)

    def report(attempt: int, max_attempts: int, missing: MissingPaths) -> None:
        logger.info(
            "Files not found. Attempt %d of %d. Missing: %s",
            attempt,
            max_attempts,
            ", ".join(missing),
        )

    result = poll(
        lambda: _missing_paths(check.paths, exists),
        check.max_attempts,
        check.attempt_delay,
        sleep=sleep,
        on_attempt=report,
    )
    if result.ready:
        logger.info("Files %s found after %d checks.", paths, result.checks)
    else:
        logger.error(
            "Files %s not found after %d attempts.",
            ", ".join(f"'{path}'" for path in result.missing),
            check.max_attempts,
        )
    return result
