"""Command-line entrypoint for the telemetry sidecar."""

from __future__ import annotations

import dataclasses
from enum import Enum
from functools import partial

import typer

from telemetry_sidecar.adapters.logging import configure_logging
from telemetry_sidecar.adapters.sinks.sqlite import SQLiteLogSink, SQLiteMetricSink
from telemetry_sidecar.core.config import LOGS_SOCKET, METRICS_SOCKET, SidecarConfig
from telemetry_sidecar.runtime.orchestrator import (
    Sidecar,
    unix_socket_log_sink,
    unix_socket_metric_sink,
)

app = typer.Typer(help="Telemetry sidecar: waits for the backend, then emits logs and metrics")


@app.callback()
def _root() -> None:
    """Telemetry sidecar commands."""


class SinkKind(str, Enum):
    socket = "socket"
    sqlite = "sqlite"


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


def _sqlite_log_sink(path: str, config: SidecarConfig) -> SQLiteLogSink:
    return SQLiteLogSink(path, fields=config.log_fields)


def _sqlite_metric_sink(path: str, config: SidecarConfig) -> SQLiteMetricSink:
    return SQLiteMetricSink(path, dimensions=config.metric_dimensions)


def build_sidecar(
    config: SidecarConfig,
    sink: SinkKind = SinkKind.socket,
    sqlite_path: str = "telemetry.db",
    handle_signals: bool = False,
) -> Sidecar:
    """Wire a Sidecar with the sinks selected on the command line."""
    if sink is SinkKind.sqlite:
        return Sidecar(
            config,
            log_sink_factory=partial(_sqlite_log_sink, sqlite_path),
            metric_sink_factory=partial(_sqlite_metric_sink, sqlite_path),
            handle_signals=handle_signals,
        )
    return Sidecar(
        config,
        log_sink_factory=unix_socket_log_sink,
        metric_sink_factory=unix_socket_metric_sink,
        handle_signals=handle_signals,
    )


@app.command()
def run(
    log_interval: float = typer.Option(10.0, min=0, help="Seconds between log ticks."),
    metric_interval: float = typer.Option(5.0, min=0, help="Seconds between metric ticks."),
    max_attempts: int = typer.Option(10, min=1, help="Readiness attempts before giving up."),
    attempt_delay: float = typer.Option(5.0, min=0, help="Seconds between readiness attempts."),
    metrics_socket: str = typer.Option(METRICS_SOCKET, help="Metrics endpoint socket path."),
    logs_socket: str = typer.Option(LOGS_SOCKET, help="Logs endpoint socket path."),
    sink: SinkKind = typer.Option(SinkKind.socket, help="Where telemetry is sent."),
    sqlite_path: str = typer.Option("telemetry.db", help="Database file for --sink sqlite."),
    log_level: LogLevel = typer.Option(
        LogLevel.INFO, case_sensitive=False, help="Console log level."
    ),
) -> None:
    """Wait for the backend sockets, then emit until killed."""
    configure_logging(log_level.value)
    config = dataclasses.replace(
        SidecarConfig(),
        log_interval=log_interval,
        metric_interval=metric_interval,
        max_attempts=max_attempts,
        attempt_delay=attempt_delay,
        metrics_socket=metrics_socket,
        logs_socket=logs_socket,
    )
    sidecar = build_sidecar(config, sink, sqlite_path, handle_signals=True)
    # A readiness timeout returns normally: exit code 0.
    sidecar.run()


def main() -> None:
    app()
