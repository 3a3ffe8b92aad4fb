"""Sidecar orchestrator: readiness gate, then concurrent emitters."""

import asyncio
import contextlib
import logging
import os
import signal
import time
from collections.abc import Callable, Mapping

from telemetry_sidecar.adapters.sinks.unix_socket import (
    UnixSocketLogSink,
    UnixSocketMetricSink,
)
from telemetry_sidecar.core.config import SidecarConfig
from telemetry_sidecar.core.metrics import Meter
from telemetry_sidecar.core.ports import LogSinkPort, MetricSinkPort
from telemetry_sidecar.core.readiness import ReadinessResult, await_ready
from telemetry_sidecar.runtime.emitters import LogEmitter, MetricEmitter
from telemetry_sidecar.runtime.periodic import PeriodicTask

logger = logging.getLogger(__name__)

LogSinkFactory = Callable[[SidecarConfig], LogSinkPort]
MetricSinkFactory = Callable[[SidecarConfig], MetricSinkPort]


def unix_socket_log_sink(config: SidecarConfig) -> UnixSocketLogSink:
    """Log sink bound to the logs socket with the static log fields."""
    return UnixSocketLogSink(config.logs_socket, fields=config.log_fields)


def unix_socket_metric_sink(config: SidecarConfig) -> UnixSocketMetricSink:
    """Metric sink bound to the metrics socket with the static dimensions."""
    return UnixSocketMetricSink(
        config.metrics_socket,
        dimensions=config.metric_dimensions,
        account=config.metrics_account,
        namespace=config.metrics_namespace,
    )


class Sidecar:
    """Waits for the telemetry backend, then emits logs and metrics forever.

    ``run()`` blocks on the readiness gate. If the backend never shows up it
    returns the TIMED_OUT result without creating any sink or emitter.
    Otherwise it runs both emitters concurrently on a fresh event loop and
    returns only once both have finished, which under normal operation
    does not happen.

    Args:
        config: Sidecar settings.
        log_sink_factory: Builds the log sink once the backend is ready.
        metric_sink_factory: Builds the metric sink once the backend is ready.
        exists: Path existence test used by the readiness gate.
        sleep: Sleep function used by the readiness gate.
        meter: Meter owning the CPU counter. A new one by default.
        environ: Environment to read the identity from. os.environ by default.
        handle_signals: Stop the emitters on SIGINT/SIGTERM.
    """

    def __init__(
        self,
        config: SidecarConfig | None = None,
        log_sink_factory: LogSinkFactory = unix_socket_log_sink,
        metric_sink_factory: MetricSinkFactory = unix_socket_metric_sink,
        exists: Callable[[str], bool] = os.path.exists,
        sleep: Callable[[float], None] = time.sleep,
        meter: Meter | None = None,
        environ: Mapping[str, str] | None = None,
        handle_signals: bool = False,
    ) -> None:
        self.config = config or SidecarConfig()
        self._log_sink_factory = log_sink_factory
        self._metric_sink_factory = metric_sink_factory
        self._exists = exists
        self._sleep = sleep
        self._environ = environ
        self._handle_signals = handle_signals
        self.meter = meter or Meter(self.config.meter_name, self.config.meter_version)
        self.counter = self.meter.create_counter(self.config.counter_name)
        self.emitters: list[PeriodicTask] = []
        self._stop_requested = False

    def run(self) -> ReadinessResult:
        """Gate on readiness, then serve until both emitters finish."""
        identity = self.config.read_identity(self._environ)
        result = await_ready(
            self.config.readiness_check(), exists=self._exists, sleep=self._sleep
        )
        if not result.ready:
            return result
        logger.info("Sink endpoints found. Proceeding with execution...")
        asyncio.run(self.serve(identity))
        return result

    async def serve(self, identity: str) -> list[BaseException]:
        """Run both emitters concurrently until each one finishes.

        One emitter failing does not stop the other. Failures are logged
        and returned.
        """
        async with contextlib.AsyncExitStack() as stack:
            log_sink = self._log_sink_factory(self.config)
            stack.push_async_callback(log_sink.close)
            metric_sink = self._metric_sink_factory(self.config)
            stack.push_async_callback(metric_sink.close)
            self.emitters = [
                LogEmitter(log_sink, identity, interval=self.config.log_interval),
                MetricEmitter(
                    metric_sink,
                    self.counter,
                    identity,
                    interval=self.config.metric_interval,
                    location=self.config.resource_location,
                ),
            ]
            if self._stop_requested:
                for emitter in self.emitters:
                    emitter.stop()
            if self._handle_signals:
                installed = self._install_signal_handlers()
                stack.callback(self._remove_signal_handlers, installed)

            outcomes = await asyncio.gather(
                *(emitter.run() for emitter in self.emitters),
                return_exceptions=True,
            )

        failures: list[BaseException] = []
        for emitter, outcome in zip(self.emitters, outcomes):
            if isinstance(outcome, BaseException):
                logger.error(
                    "%s terminated after %d ticks",
                    emitter.name,
                    emitter.ticks,
                    exc_info=outcome,
                )
                failures.append(outcome)
        return failures

    def stop(self) -> None:
        """Ask both emitters to finish after their current tick.

        Must be called from the event loop's thread.
        """
        self._stop_requested = True
        for emitter in self.emitters:
            emitter.stop()

    def _install_signal_handlers(self) -> list[signal.Signals]:
        loop = asyncio.get_running_loop()
        installed: list[signal.Signals] = []
        for sig in (signal.SIGINT, signal.SIGTERM):
            # Not available on Windows event loops.
            with contextlib.suppress(NotImplementedError):
                loop.add_signal_handler(sig, self.stop)
                installed.append(sig)
        return installed

    @staticmethod
    def _remove_signal_handlers(installed: list[signal.Signals]) -> None:
        loop = asyncio.get_running_loop()
        for sig in installed:
            loop.remove_signal_handler(sig)
