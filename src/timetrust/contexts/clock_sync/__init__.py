from .application import (
    ClockOffsetState,
    ClockReader,
    ClockSyncHooks,
    ClockSyncReport,
    LocalClock,
    MalformedResponseError,
    PeriodicClockResync,
    ProtocolUnreachableError,
    SyncClockUseCase,
    SyncUnavailableError,
    TimeSourceClient,
    TimeSourceError,
)
from .domain import ClockOffset, TimeSource, TimeSourceKind

__all__ = [
    "ClockOffset",
    "ClockOffsetState",
    "ClockReader",
    "ClockSyncHooks",
    "ClockSyncReport",
    "LocalClock",
    "MalformedResponseError",
    "PeriodicClockResync",
    "ProtocolUnreachableError",
    "SyncClockUseCase",
    "SyncUnavailableError",
    "TimeSource",
    "TimeSourceClient",
    "TimeSourceError",
    "TimeSourceKind",
]
