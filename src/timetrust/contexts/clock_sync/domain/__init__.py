from .services import round_to_seconds
from .value_objects import (
    DEFAULT_DAYTIME_PORT,
    DEFAULT_HTTP_DATE_URL,
    ClockOffset,
    TimeSource,
    TimeSourceKind,
)

__all__ = [
    "ClockOffset",
    "DEFAULT_DAYTIME_PORT",
    "DEFAULT_HTTP_DATE_URL",
    "TimeSource",
    "TimeSourceKind",
    "round_to_seconds",
]
