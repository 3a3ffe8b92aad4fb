"""BDD step definitions for sidecar startup features."""

import dataclasses
from dataclasses import dataclass, field

import pytest
from pytest_bdd import given, parsers, then, when

from telemetry_sidecar.core.config import IDENTITY_ENV_KEY, SidecarConfig
from telemetry_sidecar.core.readiness import ReadinessResult, ReadinessStatus
from telemetry_sidecar.runtime.orchestrator import Sidecar
from tests.support import FakeFilesystem, FakeSleep, StopAfter, sockets_appear_after


@dataclass
class StartupScenarioContext:
    """Shared state between steps in a startup scenario."""

    config: SidecarConfig = field(default_factory=SidecarConfig)
    fs: FakeFilesystem = field(default_factory=FakeFilesystem)
    sleep: FakeSleep = field(default_factory=FakeSleep)
    environ: dict[str, str] = field(default_factory=dict)
    stopper: StopAfter = field(default_factory=lambda: StopAfter(logs=2, samples=1))
    result: ReadinessResult | None = None


@pytest.fixture
def ctx() -> StartupScenarioContext:
    """Fresh scenario context for each test."""
    return StartupScenarioContext()


# === Given ===
@given("a sidecar with zero emitter intervals")
def step_fast_sidecar(ctx: StartupScenarioContext) -> None:
    ctx.config = dataclasses.replace(
        ctx.config, log_interval=0.0, metric_interval=0.0
    )


@given(parsers.parse("the backend sockets appear after {delays:d} delays"))
def step_sockets_appear(ctx: StartupScenarioContext, delays: int) -> None:
    ctx.sleep = sockets_appear_after(
        ctx.fs, ctx.config.readiness_check().paths, delays=delays
    )


@given("the backend sockets never appear")
def step_sockets_never_appear(ctx: StartupScenarioContext) -> None:
    ctx.sleep = FakeSleep()


@given("the backend sockets are already present")
def step_sockets_present(ctx: StartupScenarioContext) -> None:
    ctx.fs.create(ctx.config.readiness_check().paths)


@given(parsers.parse('the workload identity "{identity}"'))
def step_identity(ctx: StartupScenarioContext, identity: str) -> None:
    ctx.environ[IDENTITY_ENV_KEY] = identity


@given("no workload identity")
def step_no_identity(ctx: StartupScenarioContext) -> None:
    ctx.environ.pop(IDENTITY_ENV_KEY, None)


# === When ===
@when("the sidecar starts")
def step_start(ctx: StartupScenarioContext) -> None:
    sidecar = Sidecar(
        ctx.config,
        log_sink_factory=ctx.stopper.log_sink,
        metric_sink_factory=ctx.stopper.metric_sink,
        exists=ctx.fs.exists,
        sleep=ctx.sleep,
        environ=ctx.environ,
    )
    ctx.stopper.sidecar = sidecar
    ctx.result = sidecar.run()


# === Then ===
@then(parsers.parse("the gate reports ready after {checks:d} checks"))
def step_ready(ctx: StartupScenarioContext, checks: int) -> None:
    assert ctx.result == ReadinessResult(ReadinessStatus.READY, checks=checks)


@then(parsers.parse("the gate reports timed out after {checks:d} checks"))
def step_timed_out(ctx: StartupScenarioContext, checks: int) -> None:
    assert ctx.result is not None
    assert ctx.result.status is ReadinessStatus.TIMED_OUT
    assert ctx.result.checks == checks


@then(parsers.parse("the gate slept {count:d} times"))
def step_slept(ctx: StartupScenarioContext, count: int) -> None:
    assert ctx.sleep.delays == [ctx.config.attempt_delay] * count


@then("nothing was emitted")
def step_nothing_emitted(ctx: StartupScenarioContext) -> None:
    assert ctx.stopper.built_sinks == 0
    assert ctx.stopper.logs == []
    assert ctx.stopper.samples == []


@then("the first log tick emitted an INFO and an ERROR entry")
def step_first_tick(ctx: StartupScenarioContext) -> None:
    first, second = ctx.stopper.logs[:2]
    assert (first.level, second.level) == ("INFO", "ERROR")
    assert first.timestamp == second.timestamp


@then(parsers.parse('every log entry names the identity "{identity}"'))
def step_logs_identity(ctx: StartupScenarioContext, identity: str) -> None:
    assert ctx.stopper.logs
    assert all(e.message.startswith(f"{identity} : ") for e in ctx.stopper.logs)


@then("every log entry carries an empty identity")
def step_logs_empty_identity(ctx: StartupScenarioContext) -> None:
    assert ctx.stopper.logs
    assert all(e.message.startswith(" : ") for e in ctx.stopper.logs)


@then(parsers.parse('every metric sample is labelled "{identity}" in "{location}"'))
def step_metric_labels(
    ctx: StartupScenarioContext, identity: str, location: str
) -> None:
    assert ctx.stopper.samples
    for sample in ctx.stopper.samples:
        assert sample.labels == {
            "resource.name": identity,
            "resource.location": location,
        }


@then("every metric sample carries an empty resource name")
def step_metric_empty_identity(ctx: StartupScenarioContext) -> None:
    assert ctx.stopper.samples
    assert all(s.labels["resource.name"] == "" for s in ctx.stopper.samples)


@then(parsers.parse("every metric sample is between {low:d} and {high:d}"))
def step_metric_range(ctx: StartupScenarioContext, low: int, high: int) -> None:
    assert all(low <= s.value <= high for s in ctx.stopper.samples)
