from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any

import requests

from timetrust.contexts.clock_sync.application.ports.time_source_client import (
    MalformedResponseError,
    ProtocolUnreachableError,
    TimeSourceClient,
)
from timetrust.contexts.clock_sync.domain import TimeSource, TimeSourceKind

log = logging.getLogger(__name__)

_DATE_HEADER = "Date"


class HttpDateHeaderClient(TimeSourceClient):
    """
    HttpDateHeaderClient — reads authoritative UTC from the `Date` header of an HTTP GET.

    - requests.get(..., stream=True): only headers are read, body is never awaited
    - redirects are not followed: any response of the target host carries `Date`
    - blocking call runs in a worker thread so the event loop never blocks

    Related:
      - src/timetrust/contexts/clock_sync/application/ports/time_source_client.py
      - src/timetrust/contexts/clock_sync/application/use_cases/sync_clock.py
    """

    def __init__(self, *, session: requests.Session | None = None) -> None:
        self._session = session if session is not None else requests.Session()

    async def fetch_utc(self, *, source: TimeSource) -> datetime:
        """
        Issue GET to source URL and parse its `Date` response header.

        Args:
            source: HTTP date source (absolute URL, timeout).
        Returns:
            datetime: Timezone-aware UTC datetime from the header.
        Assumptions:
            Any HTTP status is acceptable as long as `Date` is present.
        Raises:
            ProtocolUnreachableError: On connection, TLS, or timeout failure.
            MalformedResponseError: If `Date` is absent or not an HTTP-date.
        Side Effects:
            One HTTP request.
        """
        if source.kind is not TimeSourceKind.HTTP_DATE:
            raise ValueError(f"HttpDateHeaderClient cannot serve {source.kind.value} source")

        try:
            raw_date = await asyncio.wait_for(
                asyncio.to_thread(self._read_date_header, source.endpoint, source.timeout_s),
                timeout=source.timeout_s,
            )
        except TimeoutError as error:
            raise ProtocolUnreachableError(
                message=f"http_date {source.endpoint} timed out after {source.timeout_s}s"
            ) from error
        except requests.RequestException as error:
            raise ProtocolUnreachableError(
                message=f"http_date {source.endpoint} unreachable: {error}"
            ) from error

        if raw_date is None:
            raise MalformedResponseError(
                message=f"http_date {source.endpoint} response has no Date header"
            )
        log.debug("http date header source=%s date=%r", source, raw_date)
        return parse_http_date(raw_date)

    def _read_date_header(self, url: str, timeout_s: float) -> str | None:
        response: Any = self._session.get(
            url,
            timeout=timeout_s,
            stream=True,
            allow_redirects=False,
        )
        try:
            value = response.headers.get(_DATE_HEADER)
            return str(value) if value is not None else None
        finally:
            response.close()


def parse_http_date(value: str) -> datetime:
    """
    Parse HTTP-date header value into UTC datetime.

    Args:
        value: Header value, e.g. `Tue, 04 Mar 2025 15:46:52 GMT`.
    Returns:
        datetime: Timezone-aware UTC datetime.
    Assumptions:
        IMF-fixdate and the obsolete RFC 850 / asctime forms are accepted; values without
        zone information are treated as UTC, as HTTP-date is always GMT.
    Raises:
        MalformedResponseError: If value is not a valid HTTP-date.
    Side Effects:
        None.
    """
    normalized = value.strip()
    if not normalized:
        raise MalformedResponseError(message="http Date header is empty")
    try:
        parsed = parsedate_to_datetime(normalized)
    except (TypeError, ValueError, IndexError) as error:
        raise MalformedResponseError(
            message=f"http Date header is not an HTTP-date: {value!r}"
        ) from error
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
