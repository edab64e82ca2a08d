from .ports import (
    LocalClock,
    MalformedResponseError,
    ProtocolUnreachableError,
    TimeSourceClient,
    TimeSourceError,
)
from .services import ClockOffsetState
from .use_cases import (
    ClockReader,
    ClockSyncHooks,
    ClockSyncReport,
    PeriodicClockResync,
    SourceAttemptFailure,
    SyncClockUseCase,
    SyncUnavailableError,
)

__all__ = [
    "ClockOffsetState",
    "ClockReader",
    "ClockSyncHooks",
    "ClockSyncReport",
    "LocalClock",
    "MalformedResponseError",
    "PeriodicClockResync",
    "ProtocolUnreachableError",
    "SourceAttemptFailure",
    "SyncClockUseCase",
    "SyncUnavailableError",
    "TimeSourceClient",
    "TimeSourceError",
]
