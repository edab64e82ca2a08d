from .local_clock import LocalClock
from .time_source_client import (
    MalformedResponseError,
    ProtocolUnreachableError,
    TimeSourceClient,
    TimeSourceError,
)

__all__ = [
    "LocalClock",
    "MalformedResponseError",
    "ProtocolUnreachableError",
    "TimeSourceClient",
    "TimeSourceError",
]
