"""Sink adapters implementing core ports."""

from telemetry_sidecar.adapters.sinks.in_memory import (
    InMemoryLogSink,
    InMemoryMetricSink,
)
from telemetry_sidecar.adapters.sinks.sqlite import SQLiteLogSink, SQLiteMetricSink
from telemetry_sidecar.adapters.sinks.unix_socket import (
    UnixSocketLogSink,
    UnixSocketMetricSink,
)

__all__ = [
    "InMemoryLogSink",
    "InMemoryMetricSink",
    "SQLiteLogSink",
    "SQLiteMetricSink",
    "UnixSocketLogSink",
    "UnixSocketMetricSink",
]
