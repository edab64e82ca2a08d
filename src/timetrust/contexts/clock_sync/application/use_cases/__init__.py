from .clock_sync_errors import SyncUnavailableError
from .periodic_clock_resync import PeriodicClockResync
from .read_clock import ClockReader
from .sync_clock import (
    ClockSyncHooks,
    ClockSyncReport,
    SourceAttemptFailure,
    SyncClockUseCase,
)

__all__ = [
    "ClockReader",
    "ClockSyncHooks",
    "ClockSyncReport",
    "PeriodicClockResync",
    "SourceAttemptFailure",
    "SyncClockUseCase",
    "SyncUnavailableError",
]
