"""Self-rescheduling cycle runner."""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class CycleScheduler:
    """
    Runs an async cycle forever, sleeping ``interval`` seconds after each one.

    The delay is measured from the moment a cycle completes, so slow cycles
    stretch the cadence but two cycles never overlap. A failing cycle is
    logged and the next one is still scheduled. ``stop()`` wakes the sleep
    immediately and ends the loop after the cycle in flight.

    Usage:
        scheduler = CycleScheduler(interval=30)
        await scheduler.run(monitor.run_cycle)
        # elsewhere
        scheduler.stop()
    """

    def __init__(self, interval: float, max_cycles: Optional[int] = None):
        if interval < 0:
            raise ValueError("Scheduler interval must not be negative")
        self.interval = interval
        self.max_cycles = max_cycles
        self.cycles = 0
        self._stop_event: Optional[asyncio.Event] = None
        self._stop_requested = False

    @property
    def is_running(self) -> bool:
        return self._stop_event is not None and not self._stop_event.is_set()

    async def run(self, cycle: Callable[[], Awaitable]) -> None:
        self._stop_event = asyncio.Event()
        if self._stop_requested:
            self._stop_event.set()

        while not self._stop_event.is_set():
            try:
                await cycle()
            except asyncio.CancelledError:
                logger.info("Cycle cancelled.")
                raise
            except Exception as e:
                logger.error(f"Unexpected error in monitor cycle: {e}", exc_info=True)

            self.cycles += 1
            if self.max_cycles is not None and self.cycles >= self.max_cycles:
                logger.info(f"Reached {self.max_cycles} cycle(s), stopping scheduler")
                break

            logger.debug(f"Next cycle in {self.interval}s")
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                pass

        self._stop_event.set()

    def stop(self) -> None:
        self._stop_requested = True
        if self._stop_event is not None:
            self._stop_event.set()
