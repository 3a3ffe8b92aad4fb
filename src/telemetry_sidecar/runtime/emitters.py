"""Periodic emitters for the synthetic CPU log stream and metric."""

import logging
import random
from collections.abc import Callable
from datetime import datetime, timezone

from telemetry_sidecar.core.logs import error, info
from telemetry_sidecar.core.metrics import Counter
from telemetry_sidecar.core.models import LogEntry
from telemetry_sidecar.core.ports import LogSinkPort, MetricSinkPort
from telemetry_sidecar.runtime.periodic import PeriodicTask

logger = logging.getLogger(__name__)

CPU_MIN = 1
CPU_MAX = 100

RESOURCE_NAME = "resource.name"
RESOURCE_LOCATION = "resource.location"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LogEmitter(PeriodicTask):
    """Emits one INFO and one ERROR entry per tick.

    Both entries are stamped with the same UTC instant, read once at the
    start of the tick, and name the workload identity in their message.

    Args:
        sink: Destination for the entries.
        identity: Workload identity; may be empty.
        interval: Seconds between ticks.
        clock: Returns the current aware UTC datetime.
    """

    def __init__(
        self,
        sink: LogSinkPort,
        identity: str,
        interval: float = 10.0,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        super().__init__(interval, name="log-emitter")
        self._sink = sink
        self.identity = identity
        self._clock = clock

    def build_entries(self, now: datetime) -> tuple[LogEntry, LogEntry]:
        stamp = now.isoformat(timespec="seconds")
        timestamp = now.timestamp()
        return (
            info(
                f"{self.identity} : Logging information message at {stamp}",
                timestamp,
            ),
            error(f"{self.identity} : Logging error message at {stamp}", timestamp),
        )

    async def tick(self) -> None:
        now = self._clock()
        logger.info(
            "%s : Logging messages at %s",
            self.identity,
            now.isoformat(timespec="seconds"),
        )
        for entry in self.build_entries(now):
            await self._sink.emit_log(entry)


class MetricEmitter(PeriodicTask):
    """Adds a random CPU reading to the shared counter every tick.

    Each emitter owns its own ``random.Random``, seeded from OS entropy, so
    readings differ between runs.

    Args:
        sink: Destination for the samples.
        counter: Shared CPU counter instrument.
        identity: Workload identity; becomes the resource.name attribute.
        interval: Seconds between ticks.
        location: Value of the resource.location attribute.
        rng: Random source, injectable for tests.
    """

    def __init__(
        self,
        sink: MetricSinkPort,
        counter: Counter,
        identity: str,
        interval: float = 5.0,
        location: str = "eastus",
        rng: random.Random | None = None,
    ) -> None:
        super().__init__(interval, name="metric-emitter")
        self._sink = sink
        self._counter = counter
        self.identity = identity
        self.location = location
        self._rng = rng or random.Random()

    @property
    def attributes(self) -> dict[str, str]:
        return {RESOURCE_NAME: self.identity, RESOURCE_LOCATION: self.location}

    def sample_cpu(self) -> int:
        """Draw a synthetic CPU reading in millicores, 1 to 100 inclusive."""
        return self._rng.randint(CPU_MIN, CPU_MAX)

    async def tick(self) -> None:
        cpu_usage = self.sample_cpu()
        logger.info("%s : Emitting metric %d millicores", self.identity, cpu_usage)
        sample = self._counter.add(cpu_usage, self.attributes)
        await self._sink.emit_metric_sample(sample)
