from .clock_offset import ClockOffset
from .time_source import (
    DEFAULT_DAYTIME_PORT,
    DEFAULT_HTTP_DATE_URL,
    TimeSource,
    TimeSourceKind,
)

__all__ = [
    "ClockOffset",
    "DEFAULT_DAYTIME_PORT",
    "DEFAULT_HTTP_DATE_URL",
    "TimeSource",
    "TimeSourceKind",
]
