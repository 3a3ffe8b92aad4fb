"""Sidecar configuration.

Every field defaults to the value the sidecar ships with; overrides are
applied with ``dataclasses.replace``. There is no configuration file.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from telemetry_sidecar.core.readiness import ReadinessCheck

IDENTITY_ENV_KEY = "Fabric_CodePackageName"
METRICS_SOCKET = "/var/etw/mdm_ifx.socket"
LOGS_SOCKET = "/var/run/mdsd/default_fluent.socket"


def _default_log_fields() -> dict[str, str]:
    return {"Environment": "PROD", "Region": "EastUS"}


def _default_metric_dimensions() -> dict[str, str]:
    return {"environment": "PROD", "cloud.region": "EastUS"}


@dataclass(frozen=True)
class SidecarConfig:
    """Static settings for the readiness gate, sinks and emitters.

    Attributes:
        identity_env_key: Environment variable holding the workload identity.
        metrics_socket: Metrics endpoint socket; also a readiness path.
        logs_socket: Logs endpoint socket; also a readiness path.
        max_attempts: Readiness attempts before the final check.
        attempt_delay: Seconds between readiness attempts.
        log_interval: Seconds between log emitter ticks.
        metric_interval: Seconds between metric emitter ticks.
        log_fields: Static fields attached to every log entry by the sink.
        metric_dimensions: Static dimensions attached to every metric sample.
        metrics_account: Metrics account the samples are filed under.
        metrics_namespace: Metrics namespace the samples are filed under.
        meter_name: Name of the meter owning the counter.
        meter_version: Version of that meter.
        counter_name: Name of the CPU counter instrument.
        resource_location: Value of the resource.location attribute.
    """

    identity_env_key: str = IDENTITY_ENV_KEY
    metrics_socket: str = METRICS_SOCKET
    logs_socket: str = LOGS_SOCKET
    max_attempts: int = 10
    attempt_delay: float = 5.0
    log_interval: float = 10.0
    metric_interval: float = 5.0
    log_fields: dict[str, str] = field(default_factory=_default_log_fields)
    metric_dimensions: dict[str, str] = field(
        default_factory=_default_metric_dimensions
    )
    metrics_account: str = "MicrosoftContainerInstanceShoeboxDev"
    metrics_namespace: str = "AzureMonitoringMetrics"
    meter_name: str = "Com.Microsoft.ACI.Samples"
    meter_version: str = "1.0"
    counter_name: str = "CPU"
    resource_location: str = "eastus"

    def __post_init__(self) -> None:
        if self.log_interval < 0:
            raise ValueError(f"log_interval must be >= 0, got {self.log_interval}")
        if self.metric_interval < 0:
            raise ValueError(
                f"metric_interval must be >= 0, got {self.metric_interval}"
            )
        # Fails fast on a bad retry budget.
        self.readiness_check()

    def readiness_check(self) -> ReadinessCheck:
        """Build the readiness check for both sink sockets."""
        return ReadinessCheck(
            paths=(self.metrics_socket, self.logs_socket),
            max_attempts=self.max_attempts,
            attempt_delay=self.attempt_delay,
        )

    def read_identity(self, environ: Mapping[str, str] | None = None) -> str:
        """Read the workload identity; an unset variable yields ""."""
        env = os.environ if environ is None else environ
        return env.get(self.identity_env_key, "")
