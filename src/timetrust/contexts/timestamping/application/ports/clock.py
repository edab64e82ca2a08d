from __future__ import annotations

from datetime import datetime
from typing import Protocol


class TimestampingClock(Protocol):
    """
    TimestampingClock — порт скорректированного "сейчас" для проверки правдоподобия меток.

    Related:
      - src/timetrust/contexts/clock_sync/application/use_cases/read_clock.py
      - src/timetrust/contexts/timestamping/application/use_cases/verify_timestamp.py
      - src/timetrust/contexts/timestamping/adapters/outbound/security/ed25519/
        local_ed25519_timestamp_authority.py
    """

    def now(self) -> datetime:
        """
        Return current corrected UTC timestamp.

        Args:
            None.
        Returns:
            datetime: Timezone-aware UTC datetime.
        Assumptions:
            `ClockReader` from the clock_sync context is the production implementation.
        Raises:
            None.
        Side Effects:
            None.
        """
        ...
