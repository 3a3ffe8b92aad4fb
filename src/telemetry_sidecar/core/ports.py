"""Port interfaces for telemetry sinks.

These protocols define the contracts that sink adapters must implement.
The emitters depend only on these interfaces, not concrete implementations.
"""

from typing import Protocol, runtime_checkable

from telemetry_sidecar.core.models import LogEntry, MetricSample


@runtime_checkable
class LogSinkPort(Protocol):
    """Port for the log side of the telemetry backend.

    Examples: InMemoryLogSink, UnixSocketLogSink, SQLiteLogSink.
    """

    async def emit_log(self, entry: LogEntry) -> None:
        """Hand a log entry to the sink.

        Errors are not retried; they propagate to the caller.
        """
        ...

    async def close(self) -> None:
        """Release the underlying connection, if any."""
        ...


@runtime_checkable
class MetricSinkPort(Protocol):
    """Port for the metrics side of the telemetry backend.

    Examples: InMemoryMetricSink, UnixSocketMetricSink, SQLiteMetricSink.
    """

    async def emit_metric_sample(self, sample: MetricSample) -> None:
        """Hand a metric sample to the sink."""
        ...

    async def close(self) -> None:
        """Release the underlying connection, if any."""
        ...
