"""Periodic task driven by a fixed interval and a stop signal."""

import asyncio
import logging

logger = logging.getLogger(__name__)


class PeriodicTask:
    """Runs ``tick()`` every ``interval`` seconds until stopped.

    The first tick runs immediately. The next tick starts only after the
    previous tick returned and the interval elapsed, so ticks never
    overlap. Exceptions raised by ``tick()`` are not caught: they end the
    loop and propagate out of ``run()``.

    Args:
        interval: Seconds to wait between ticks.
        name: Name used in log messages.
    """

    def __init__(self, interval: float, name: str) -> None:
        if interval < 0:
            raise ValueError(f"interval must be >= 0, got {interval}")
        self.interval = interval
        self.name = name
        self.ticks = 0
        self._stop_event: asyncio.Event | None = None
        self._stop_requested = False

    def _get_stop_event(self) -> asyncio.Event:
        """Get or create the stop event (lazy to avoid event loop issues)."""
        if self._stop_event is None:
            self._stop_event = asyncio.Event()
            if self._stop_requested:
                self._stop_event.set()
        return self._stop_event

    @property
    def stopped(self) -> bool:
        return self._stop_requested

    async def tick(self) -> None:
        """One unit of periodic work. Must be overridden by subclasses."""
        raise NotImplementedError

    def stop(self) -> None:
        """Ask the loop to exit after the current tick.

        Safe to call before ``run()`` starts, in which case no tick runs.
        """
        self._stop_requested = True
        if self._stop_event is not None:
            self._stop_event.set()

    async def run(self) -> None:
        """Tick until stopped."""
        stop_event = self._get_stop_event()
        logger.debug("%s started, interval %.3fs", self.name, self.interval)
        while not stop_event.is_set():
            await self.tick()
            self.ticks += 1
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                continue
        logger.debug("%s stopped after %d ticks", self.name, self.ticks)
