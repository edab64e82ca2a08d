from __future__ import annotations

from datetime import datetime
from typing import Protocol

from timetrust.contexts.clock_sync.domain import TimeSource


class TimeSourceError(Exception):
    """
    TimeSourceError — base failure of a single time source round trip.

    Related:
      - src/timetrust/contexts/clock_sync/application/use_cases/sync_clock.py
      - src/timetrust/contexts/clock_sync/adapters/outbound/clients/daytime/
        daytime_protocol_client.py
      - src/timetrust/contexts/clock_sync/adapters/outbound/clients/http_date/
        http_date_client.py
    """

    def __init__(self, *, code: str, message: str) -> None:
        """
        Initialize source error with stable error code.

        Args:
            code: Machine-readable deterministic error code.
            message: Human-readable error description.
        Returns:
            None.
        Assumptions:
            ClockSync converts every instance into a fallback to the next source.
        Raises:
            None.
        Side Effects:
            None.
        """
        super().__init__(message)
        self.code = code
        self.message = message


class ProtocolUnreachableError(TimeSourceError):
    """
    ProtocolUnreachableError — connection could not be established, failed, or timed out.
    """

    def __init__(self, *, message: str) -> None:
        super().__init__(code="protocol_unreachable", message=message)


class MalformedResponseError(TimeSourceError):
    """
    MalformedResponseError — wire data does not match the expected time format.
    """

    def __init__(self, *, message: str) -> None:
        super().__init__(code="malformed_response", message=message)


class TimeSourceClient(Protocol):
    """
    TimeSourceClient — порт одного сетевого обращения к источнику точного времени.

    Related:
      - src/timetrust/contexts/clock_sync/domain/value_objects/time_source.py
      - src/timetrust/contexts/clock_sync/application/use_cases/sync_clock.py
    """

    async def fetch_utc(self, *, source: TimeSource) -> datetime:
        """
        Read authoritative UTC instant from one source.

        Args:
            source: Source configuration (endpoint and timeout).
        Returns:
            datetime: Timezone-aware UTC datetime reported by the authority.
        Assumptions:
            Implementations never retry; retry and fallback live in ClockSync.
        Raises:
            ProtocolUnreachableError: On connect failure or timeout.
            MalformedResponseError: If response cannot be parsed.
        Side Effects:
            One network round trip.
        """
        ...
