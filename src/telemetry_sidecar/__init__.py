"""Telemetry sidecar: readiness-gated periodic log and metric emission."""

from telemetry_sidecar.core.config import SidecarConfig
from telemetry_sidecar.core.errors import SidecarError, SinkUnavailableError
from telemetry_sidecar.core.metrics import Counter, Meter
from telemetry_sidecar.core.models import LogEntry, MetricSample
from telemetry_sidecar.core.readiness import (
    ReadinessCheck,
    ReadinessResult,
    ReadinessStatus,
    await_ready,
    poll,
)
from telemetry_sidecar.runtime.emitters import LogEmitter, MetricEmitter
from telemetry_sidecar.runtime.orchestrator import Sidecar

__version__ = "0.1.0"

__all__ = [
    "Counter",
    "LogEmitter",
    "LogEntry",
    "Meter",
    "MetricEmitter",
    "MetricSample",
    "ReadinessCheck",
    "ReadinessResult",
    "ReadinessStatus",
    "Sidecar",
    "SidecarConfig",
    "SidecarError",
    "SinkUnavailableError",
    "await_ready",
    "poll",
]
