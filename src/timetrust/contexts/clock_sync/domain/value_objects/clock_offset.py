from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from .time_source import TimeSourceKind


@dataclass(frozen=True, slots=True)
class ClockOffset:
    """
    ClockOffset — неизменяемый снимок поправки `эталонное UTC - локальное UTC`.

    Version 0 is the initial zero offset (trust the local clock). Every accepted sync
    publishes a new snapshot with a strictly greater version.

    Related:
      - src/timetrust/contexts/clock_sync/application/services/clock_offset_state.py
      - src/timetrust/contexts/clock_sync/application/use_cases/read_clock.py
    """

    value: timedelta
    version: int = 0
    synced_at: datetime | None = None
    source_kind: TimeSourceKind | None = None

    def __post_init__(self) -> None:
        if self.version < 0:
            raise ValueError("ClockOffset.version must be >= 0")
        if self.synced_at is not None:
            offset = self.synced_at.utcoffset()
            if self.synced_at.tzinfo is None or offset is None or offset.total_seconds() != 0:
                raise ValueError("ClockOffset.synced_at must be timezone-aware UTC datetime")
        if (self.version == 0) != (self.synced_at is None):
            raise ValueError("ClockOffset.synced_at must be set for every synced version")

    @classmethod
    def zero(cls) -> ClockOffset:
        return cls(value=timedelta(0))

    @property
    def is_synced(self) -> bool:
        return self.version > 0

    @property
    def seconds(self) -> float:
        return self.value.total_seconds()
