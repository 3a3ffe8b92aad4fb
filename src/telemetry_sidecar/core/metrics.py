"""Metric instruments for recording MetricSample objects.

A Meter hands out one Counter per instrument name. Counters are shared
across emission ticks for the lifetime of the process and accumulate
every increment per attribute set.
"""

import threading
import time

from telemetry_sidecar.core.models import MetricSample


def _attribute_key(attributes: dict[str, str]) -> frozenset[tuple[str, str]]:
    return frozenset(attributes.items())


class Counter:
    """Monotonic counter instrument.

    ``add`` may be called from several threads or tasks at once; increments
    are serialized with a lock so no update is lost.

    Args:
        name: Instrument name (e.g., "CPU").
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._lock = threading.Lock()
        self._totals: dict[frozenset[tuple[str, str]], float] = {}

    def add(
        self,
        value: float,
        attributes: dict[str, str] | None = None,
    ) -> MetricSample:
        """Add a non-negative increment.

        Args:
            value: Amount to add. Must be >= 0.
            attributes: Dimension labels for this increment.

        Returns:
            MetricSample describing the increment, stamped with the current time.

        Raises:
            ValueError: If value is negative.
        """
        if value < 0:
            raise ValueError(f"Counter {self.name!r} cannot add negative value {value}")
        labels = dict(attributes or {})
        key = _attribute_key(labels)
        with self._lock:
            self._totals[key] = self._totals.get(key, 0.0) + value
        return MetricSample(
            name=self.name,
            timestamp=time.time(),
            value=value,
            labels=labels,
        )

    def total(self, attributes: dict[str, str] | None = None) -> float:
        """Return the accumulated value for an attribute set."""
        with self._lock:
            return self._totals.get(_attribute_key(attributes or {}), 0.0)


class Meter:
    """Named source of instruments.

    Instruments are singletons per meter: asking twice for the same counter
    name returns the same Counter.
    """

    def __init__(self, name: str, version: str = "") -> None:
        self.name = name
        self.version = version
        self._lock = threading.Lock()
        self._counters: dict[str, Counter] = {}

    def create_counter(self, name: str) -> Counter:
        """Return the counter registered under name, creating it once."""
        with self._lock:
            counter = self._counters.get(name)
            if counter is None:
                counter = Counter(name)
                self._counters[name] = counter
            return counter
