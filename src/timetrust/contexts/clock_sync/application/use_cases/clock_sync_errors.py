from __future__ import annotations

from typing import Sequence


class SyncUnavailableError(Exception):
    """
    SyncUnavailableError — every configured time source failed during one sync call.

    Terminal for that call only; the process keeps running on the last known offset.

    Related:
      - src/timetrust/contexts/clock_sync/application/use_cases/sync_clock.py
      - apps/cli/commands/sync_clock.py
    """

    def __init__(self, *, failures: Sequence[str]) -> None:
        """
        Initialize exhaustion error with per-source failure summaries.

        Args:
            failures: Ordered `source: code` summaries, one per attempted source.
        Returns:
            None.
        Assumptions:
            Empty `failures` means the sync was cancelled or no source is configured.
        Raises:
            None.
        Side Effects:
            None.
        """
        self.code = "sync_unavailable"
        self.failures = tuple(failures)
        if self.failures:
            self.message = "All time sources failed: " + "; ".join(self.failures)
        else:
            self.message = "No time source produced a result"
        super().__init__(self.message)
