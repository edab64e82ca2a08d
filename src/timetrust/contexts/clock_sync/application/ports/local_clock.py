from __future__ import annotations

from datetime import datetime
from typing import Protocol


class LocalClock(Protocol):
    """
    LocalClock — порт нескорректированных системных часов хоста (UTC).

    Related:
      - src/timetrust/platform/time/system_clock.py
      - src/timetrust/contexts/clock_sync/application/use_cases/read_clock.py
      - src/timetrust/contexts/clock_sync/application/use_cases/sync_clock.py
    """

    def now(self) -> datetime:
        """
        Return current local UTC timestamp.

        Args:
            None.
        Returns:
            datetime: Timezone-aware UTC datetime.
        Assumptions:
            Value may drift from authoritative time; correction is applied by ClockReader.
        Raises:
            None.
        Side Effects:
            None.
        """
        ...
