"""In-memory sink adapters for logs and metrics."""

from collections.abc import AsyncIterable

from telemetry_sidecar.core.models import LogEntry, MetricSample


class InMemoryLogSink:
    """In-memory implementation of LogSinkPort.

    Keeps every entry in a list, in emission order. Suitable for testing
    and for dry runs where no backend is present.
    """

    def __init__(self) -> None:
        self._entries: list[LogEntry] = []
        self.closed = False

    async def emit_log(self, entry: LogEntry) -> None:
        """Append a log entry."""
        self._entries.append(entry)

    async def read(self) -> AsyncIterable[LogEntry]:
        """Yield emitted entries in emission order."""
        for entry in list(self._entries):
            yield entry

    async def close(self) -> None:
        self.closed = True


class InMemoryMetricSink:
    """In-memory implementation of MetricSinkPort."""

    def __init__(self) -> None:
        self._samples: list[MetricSample] = []
        self.closed = False

    async def emit_metric_sample(self, sample: MetricSample) -> None:
        """Append a metric sample."""
        self._samples.append(sample)

    async def read(self) -> AsyncIterable[MetricSample]:
        """Yield emitted samples in emission order."""
        for sample in list(self._samples):
            yield sample

    async def close(self) -> None:
        self.closed = True
