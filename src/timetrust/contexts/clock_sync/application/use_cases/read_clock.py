from __future__ import annotations

from datetime import datetime, timezone

from timetrust.contexts.clock_sync.application.ports.local_clock import LocalClock
from timetrust.contexts.clock_sync.application.services.clock_offset_state import (
    ClockOffsetState,
)
from timetrust.contexts.clock_sync.domain import ClockOffset, round_to_seconds


class ClockReader:
    """
    ClockReader — corrected "now": local wall clock plus the last synced offset.

    Never performs I/O and never fails. Before the first successful sync the offset is
    zero, so the reader degrades to trusting the local clock.

    Related:
      - src/timetrust/contexts/clock_sync/application/services/clock_offset_state.py
      - src/timetrust/contexts/clock_sync/application/use_cases/sync_clock.py
      - src/timetrust/contexts/timestamping/application/use_cases/verify_timestamp.py
    """

    def __init__(self, *, state: ClockOffsetState, local_clock: LocalClock) -> None:
        if state is None:  # type: ignore[truthy-bool]
            raise ValueError("ClockReader requires state")
        if local_clock is None:  # type: ignore[truthy-bool]
            raise ValueError("ClockReader requires local_clock")
        self._state = state
        self._local_clock = local_clock

    def now(self) -> datetime:
        """
        Return corrected current UTC time.

        Args:
            None.
        Returns:
            datetime: Timezone-aware UTC datetime `local_now + offset`.
        Assumptions:
            Offset snapshot is read once, so a concurrent publish is seen whole or not at all.
        Raises:
            None.
        Side Effects:
            Reads local wall clock.
        """
        snapshot = self._state.snapshot()
        return self._local_clock.now().astimezone(timezone.utc) + snapshot.value

    def offset(self) -> ClockOffset:
        return self._state.snapshot()

    def now_rounded(self, *, seconds: int) -> datetime:
        return round_to_seconds(self.now(), seconds=seconds)
