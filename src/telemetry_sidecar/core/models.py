"""Telemetry records handed from the emitters to the sinks."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class LogEntry:
    """One log record produced by a log emitter tick.

    Both records of a tick share the same timestamp. Sinks merge their
    static fields (environment, region) into ``attributes`` on the wire.

    Attributes:
        timestamp: Tick instant as unix seconds, UTC.
        level: "INFO" or "ERROR".
        message: Text naming the workload identity and the tick instant.
        attributes: Per-record fields; empty for emitter records.
    """

    timestamp: float
    level: str
    message: str
    attributes: dict[str, str | int | float | bool] = field(default_factory=dict)


@dataclass(frozen=True)
class MetricSample:
    """An increment added to a counter instrument.

    Attributes:
        name: Counter name, "CPU" for the sidecar.
        timestamp: Moment of the add, unix seconds.
        value: Amount added by this increment, never negative.
        labels: Attribute set of the increment (resource.name, resource.location).
    """

    name: str
    timestamp: float
    value: float
    labels: dict[str, str] = field(default_factory=dict)
