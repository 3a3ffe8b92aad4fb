"""Shared fakes for readiness and sidecar tests."""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from telemetry_sidecar.adapters.sinks.in_memory import (
    InMemoryLogSink,
    InMemoryMetricSink,
)
from telemetry_sidecar.core.config import SidecarConfig
from telemetry_sidecar.core.models import LogEntry, MetricSample

# === Filesystem and clock fakes ===


@dataclass
class FakeFilesystem:
    """Set of existing paths with a call counter."""

    present: set[str] = field(default_factory=set)
    exists_calls: int = 0

    def exists(self, path: str) -> bool:
        self.exists_calls += 1
        return path in self.present

    def create(self, paths: Iterable[str]) -> None:
        self.present.update(paths)


@dataclass
class FakeSleep:
    """Records requested delays; optionally runs a hook after each one."""

    delays: list[float] = field(default_factory=list)
    after_sleep: Callable[[int], None] | None = None

    def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)
        if self.after_sleep is not None:
            self.after_sleep(len(self.delays))


def sockets_appear_after(
    fs: FakeFilesystem, paths: Iterable[str], delays: int
) -> FakeSleep:
    """Sleep fake that creates ``paths`` once ``delays`` sleeps have happened."""
    wanted = tuple(paths)

    def hook(count: int) -> None:
        if count >= delays:
            fs.create(wanted)

    return FakeSleep(after_sleep=hook)


# === Sinks that stop the sidecar ===


class CallbackLogSink(InMemoryLogSink):
    """In-memory log sink invoking a callback after each entry."""

    def __init__(self, on_emit: Callable[[], None]) -> None:
        super().__init__()
        self.entries: list[LogEntry] = []
        self._on_emit = on_emit

    async def emit_log(self, entry: LogEntry) -> None:
        await super().emit_log(entry)
        self.entries.append(entry)
        self._on_emit()


class CallbackMetricSink(InMemoryMetricSink):
    """In-memory metric sink invoking a callback after each sample."""

    def __init__(self, on_emit: Callable[[], None]) -> None:
        super().__init__()
        self.samples: list[MetricSample] = []
        self._on_emit = on_emit

    async def emit_metric_sample(self, sample: MetricSample) -> None:
        await super().emit_metric_sample(sample)
        self.samples.append(sample)
        self._on_emit()


class StopAfter:
    """Sink factories that stop a sidecar once enough telemetry was emitted.

    Usage:
        stopper = StopAfter(logs=2, samples=1)
        sidecar = Sidecar(config, stopper.log_sink, stopper.metric_sink, ...)
        stopper.sidecar = sidecar
    """

    def __init__(self, logs: int = 0, samples: int = 0) -> None:
        self.logs_wanted = logs
        self.samples_wanted = samples
        self.sidecar: Any = None
        self.built_sinks = 0
        self._log_sink = CallbackLogSink(self._check)
        self._metric_sink = CallbackMetricSink(self._check)

    @property
    def logs(self) -> list[LogEntry]:
        return self._log_sink.entries

    @property
    def samples(self) -> list[MetricSample]:
        return self._metric_sink.samples

    @property
    def sinks_closed(self) -> bool:
        return self._log_sink.closed and self._metric_sink.closed

    def _check(self) -> None:
        if (
            len(self.logs) >= self.logs_wanted
            and len(self.samples) >= self.samples_wanted
            and self.sidecar is not None
        ):
            self.sidecar.stop()

    def log_sink(self, config: SidecarConfig) -> CallbackLogSink:
        self.built_sinks += 1
        return self._log_sink

    def metric_sink(self, config: SidecarConfig) -> CallbackMetricSink:
        self.built_sinks += 1
        return self._metric_sink
