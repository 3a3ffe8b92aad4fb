"""Shared test fixtures for all test modules."""

import dataclasses

import pytest

from telemetry_sidecar.adapters.sinks.in_memory import (
    InMemoryLogSink,
    InMemoryMetricSink,
)
from telemetry_sidecar.core.config import SidecarConfig
from tests.support import FakeFilesystem, FakeSleep


@pytest.fixture
def fake_fs() -> FakeFilesystem:
    """Empty fake filesystem."""
    return FakeFilesystem()


@pytest.fixture
def fake_sleep() -> FakeSleep:
    """Sleep fake recording requested delays."""
    return FakeSleep()


@pytest.fixture
def fast_config() -> SidecarConfig:
    """Default configuration with zero emitter intervals."""
    return dataclasses.replace(SidecarConfig(), log_interval=0.0, metric_interval=0.0)


@pytest.fixture
def log_sink() -> InMemoryLogSink:
    """Fixture providing an empty in-memory log sink."""
    return InMemoryLogSink()


@pytest.fixture
def metric_sink() -> InMemoryMetricSink:
    """Fixture providing an empty in-memory metric sink."""
    return InMemoryMetricSink()
