from .modules import (
    ClockSyncModule,
    TimestampingApiModule,
    build_clock_sync_module,
    build_timestamping_api_module,
)

__all__ = [
    "ClockSyncModule",
    "TimestampingApiModule",
    "build_clock_sync_module",
    "build_timestamping_api_module",
]
