from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Any

import pytest
import requests

from timetrust.contexts.clock_sync.adapters.outbound import (
    DaytimeProtocolClient,
    HttpDateHeaderClient,
    parse_http_date,
)
from timetrust.contexts.clock_sync.application import (
    ClockOffsetState,
    ClockReader,
    MalformedResponseError,
    ProtocolUnreachableError,
    SyncClockUseCase,
)
from timetrust.contexts.clock_sync.domain import TimeSource, TimeSourceKind
from timetrust.platform.time import SystemClock

_SOURCE = TimeSource(kind=TimeSourceKind.HTTP_DATE, endpoint="https://example.com", timeout_s=2)


class _ResponseStub:
    """
    Minimal streamed response exposing headers and close tracking.
    """

    def __init__(self, headers: dict[str, str]) -> None:
        self.headers = requests.structures.CaseInsensitiveDict(headers)
        self.closed = False

    def close(self) -> None:
        self.closed = True


class _SessionStub:
    """
    Session stub recording GET calls and returning a fixed response or error.
    """

    def __init__(self, *, response: _ResponseStub | None = None, error: Exception | None = None):
        self._response = response
        self._error = error
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def get(self, url: str, **kwargs: Any) -> _ResponseStub:
        self.calls.append((url, kwargs))
        if self._error is not None:
            raise self._error
        assert self._response is not None
        return self._response


def test_parse_http_date_reads_imf_fixdate() -> None:
    assert parse_http_date("Tue, 04 Mar 2025 15:46:52 GMT") == datetime(
        2025, 3, 4, 15, 46, 52, tzinfo=timezone.utc
    )


@pytest.mark.parametrize("value", ["", "   ", "yesterday", "Tue, 99 Foo 2025 15:46:52 GMT"])
def test_parse_http_date_rejects_invalid_values(value: str) -> None:
    with pytest.raises(MalformedResponseError):
        parse_http_date(value)


def test_client_reads_date_header_without_following_redirects() -> None:
    response = _ResponseStub({"date": "Tue, 04 Mar 2025 15:46:52 GMT"})
    session = _SessionStub(response=response)
    client = HttpDateHeaderClient(session=session)  # type: ignore[arg-type]

    value = asyncio.run(client.fetch_utc(source=_SOURCE))

    assert value == datetime(2025, 3, 4, 15, 46, 52, tzinfo=timezone.utc)
    assert response.closed is True
    url, kwargs = session.calls[0]
    assert url == "https://example.com"
    assert kwargs == {"timeout": 2, "stream": True, "allow_redirects": False}


def test_client_maps_missing_date_header_to_malformed_response() -> None:
    client = HttpDateHeaderClient(session=_SessionStub(response=_ResponseStub({})))  # type: ignore[arg-type]

    with pytest.raises(MalformedResponseError):
        asyncio.run(client.fetch_utc(source=_SOURCE))


def test_client_maps_request_exception_to_unreachable() -> None:
    session = _SessionStub(error=requests.ConnectionError("name resolution failed"))
    client = HttpDateHeaderClient(session=session)  # type: ignore[arg-type]

    with pytest.raises(ProtocolUnreachableError) as error_info:
        asyncio.run(client.fetch_utc(source=_SOURCE))

    assert error_info.value.code == "protocol_unreachable"


def test_sync_falls_back_to_http_date_when_daytime_is_unreachable() -> None:
    async def _scenario() -> datetime | None:
        server = await asyncio.start_server(lambda _r, _w: None, host="127.0.0.1", port=0)
        port = server.sockets[0].getsockname()[1]
        server.close()
        await server.wait_closed()

        state = ClockOffsetState()
        session = _SessionStub(response=_ResponseStub({"Date": "Tue, 04 Mar 2025 15:46:52 GMT"}))
        use_case = SyncClockUseCase(
            sources=(
                TimeSource(kind=TimeSourceKind.DAYTIME, endpoint=f"127.0.0.1:{port}", timeout_s=1),
                _SOURCE,
            ),
            clients={
                TimeSourceKind.DAYTIME: DaytimeProtocolClient(),
                TimeSourceKind.HTTP_DATE: HttpDateHeaderClient(session=session),  # type: ignore[arg-type]
            },
            state=state,
            local_clock=SystemClock(),
        )
        authoritative = await use_case.sync()
        reader = ClockReader(state=state, local_clock=SystemClock())
        assert reader.offset().source_kind is TimeSourceKind.HTTP_DATE
        return authoritative

    assert asyncio.run(_scenario()) == datetime(2025, 3, 4, 15, 46, 52, tzinfo=timezone.utc)
