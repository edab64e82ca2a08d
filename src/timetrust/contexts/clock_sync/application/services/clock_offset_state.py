from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta

from timetrust.contexts.clock_sync.domain import ClockOffset, TimeSourceKind

log = logging.getLogger(__name__)


class ClockOffsetState:
    """
    ClockOffsetState — explicitly owned holder of the process clock correction.

    One writer at a time (guarded by a lock), any number of lock-free readers. Readers
    always receive one immutable `ClockOffset` snapshot, so a partially written offset
    is never observable. Publishes measured earlier than the current snapshot are
    discarded so a slow stale reply cannot overwrite a fresher one.

    Related:
      - src/timetrust/contexts/clock_sync/application/use_cases/sync_clock.py
      - src/timetrust/contexts/clock_sync/application/use_cases/read_clock.py
    """

    def __init__(self, *, initial: ClockOffset | None = None) -> None:
        """
        Initialize state with zero offset or with an injected snapshot.

        Args:
            initial: Optional starting snapshot; tests inject a fixed offset through it.
        Returns:
            None.
        Assumptions:
            State is not durable; each process starts at offset zero unless injected.
        Raises:
            None.
        Side Effects:
            None.
        """
        self._lock = threading.Lock()
        self._snapshot = initial if initial is not None else ClockOffset.zero()

    @classmethod
    def with_fixed_offset(cls, value: timedelta) -> ClockOffsetState:
        """
        Build state preloaded with an unsynced fixed offset.
        """
        return cls(initial=ClockOffset(value=value))

    def snapshot(self) -> ClockOffset:
        return self._snapshot

    def publish(
        self,
        *,
        value: timedelta,
        synced_at: datetime,
        source_kind: TimeSourceKind,
    ) -> ClockOffset | None:
        """
        Atomically replace current snapshot with a freshly measured offset.

        Args:
            value: Measured `authoritative - local` offset.
            synced_at: Local UTC time at which the measurement completed.
            source_kind: Source that produced the measurement.
        Returns:
            ClockOffset | None: Published snapshot, or None when the measurement is
            older than the current snapshot and was discarded.
        Assumptions:
            `synced_at` comes from the same local clock for every publish.
        Raises:
            ValueError: If `synced_at` is not timezone-aware UTC.
        Side Effects:
            Replaces process clock correction under lock.
        """
        with self._lock:
            current = self._snapshot
            if current.synced_at is not None and synced_at < current.synced_at:
                log.warning(
                    "discarding stale clock offset measured_at=%s current_synced_at=%s",
                    synced_at.isoformat(),
                    current.synced_at.isoformat(),
                )
                return None
            published = ClockOffset(
                value=value,
                version=current.version + 1,
                synced_at=synced_at,
                source_kind=source_kind,
            )
            self._snapshot = published
            return published
