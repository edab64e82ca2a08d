from __future__ import annotations

import asyncio
import logging

from timetrust.contexts.clock_sync.application.use_cases.sync_clock import (
    ClockSyncReport,
    SyncClockUseCase,
)

log = logging.getLogger(__name__)


class PeriodicClockResync:
    """
    PeriodicClockResync — re-run clock sync on a fixed interval until stopped.

    The first sync runs immediately. Unknown outcomes keep the previous offset and the
    loop simply waits for the next tick.

    Related:
      - src/timetrust/contexts/clock_sync/application/use_cases/sync_clock.py
      - apps/worker/clock_sync/wiring/modules/clock_sync.py
      - apps/api/main/app.py
    """

    def __init__(self, *, sync_clock: SyncClockUseCase, interval_s: float) -> None:
        if sync_clock is None:  # type: ignore[truthy-bool]
            raise ValueError("PeriodicClockResync requires sync_clock")
        if interval_s <= 0:
            raise ValueError("PeriodicClockResync requires interval_s > 0")
        self._sync_clock = sync_clock
        self._interval_s = interval_s

    @property
    def interval_s(self) -> float:
        return self._interval_s

    async def run(self, stop_event: asyncio.Event) -> None:
        """
        Run sync loop until stop event is set.

        Args:
            stop_event: Cooperative shutdown signal.
        Returns:
            None.
        Assumptions:
            Sync never raises on source failures; it returns the Unknown report.
        Raises:
            asyncio.CancelledError: If the hosting task is cancelled.
        Side Effects:
            Performs network I/O and publishes offsets.
        """
        log.info(
            "clock resync loop started interval_s=%s sources=%s",
            self._interval_s,
            [str(source) for source in self._sync_clock.sources],
        )
        while not stop_event.is_set():
            await self.run_once()
            await _wait_with_stop(stop_event=stop_event, timeout_seconds=self._interval_s)
        log.info("clock resync loop stopped")

    async def run_once(self) -> ClockSyncReport:
        return await self._sync_clock.sync_with_report()


async def _wait_with_stop(*, stop_event: asyncio.Event, timeout_seconds: float) -> None:
    """
    Sleep up to timeout unless stop event is set earlier.

    Args:
        stop_event: Cooperative shutdown signal.
        timeout_seconds: Maximum wait.
    Returns:
        None.
    Assumptions:
        Timeout expiry is the normal path.
    Raises:
        None.
    Side Effects:
        None.
    """
    try:
        await asyncio.wait_for(stop_event.wait(), timeout=timeout_seconds)
    except TimeoutError:
        return
