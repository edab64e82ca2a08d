from __future__ import annotations

import asyncio
import time
from datetime import datetime, timedelta, timezone

import pytest

from timetrust.contexts.clock_sync.application import (
    ClockOffsetState,
    ClockSyncHooks,
    ClockSyncReport,
    MalformedResponseError,
    ProtocolUnreachableError,
    SyncClockUseCase,
    SyncUnavailableError,
)
from timetrust.contexts.clock_sync.domain import TimeSource, TimeSourceKind

_T0 = datetime(2025, 3, 4, 15, 46, 52, tzinfo=timezone.utc)
_DAYTIME = TimeSource(kind=TimeSourceKind.DAYTIME, endpoint="time.example:13", timeout_s=1.0)
_HTTP = TimeSource(kind=TimeSourceKind.HTTP_DATE, endpoint="https://example.com", timeout_s=1.0)


class _SteppingClock:
    """
    Deterministic local clock advancing by fixed step on every read.
    """

    def __init__(self, *, start: datetime, step: timedelta) -> None:
        self._current = start
        self._step = step

    def now(self) -> datetime:
        value = self._current
        self._current = value + self._step
        return value


class _ClientStub:
    """
    Time source client returning a fixed instant or raising a fixed error.
    """

    def __init__(
        self,
        *,
        result: datetime | None = None,
        error: Exception | None = None,
        delay_s: float = 0.0,
        gate: asyncio.Event | None = None,
    ) -> None:
        self._result = result
        self._error = error
        self._delay_s = delay_s
        self._gate = gate
        self.calls: list[TimeSource] = []

    async def fetch_utc(self, *, source: TimeSource) -> datetime:
        self.calls.append(source)
        if self._gate is not None:
            await self._gate.wait()
        if self._delay_s:
            await asyncio.sleep(self._delay_s)
        if self._error is not None:
            raise self._error
        assert self._result is not None
        return self._result


def _use_case(
    *,
    daytime: _ClientStub,
    http: _ClientStub,
    state: ClockOffsetState | None = None,
    hooks: ClockSyncHooks | None = None,
    sources: tuple[TimeSource, ...] = (_DAYTIME, _HTTP),
) -> tuple[SyncClockUseCase, ClockOffsetState]:
    effective_state = state if state is not None else ClockOffsetState()
    use_case = SyncClockUseCase(
        sources=sources,
        clients={TimeSourceKind.DAYTIME: daytime, TimeSourceKind.HTTP_DATE: http},
        state=effective_state,
        local_clock=_SteppingClock(start=_T0, step=timedelta(seconds=2)),
        hooks=hooks,
    )
    return use_case, effective_state


def test_sync_uses_first_source_and_publishes_half_round_trip_offset() -> None:
    daytime = _ClientStub(result=_T0 + timedelta(seconds=10))
    http = _ClientStub(result=_T0)
    use_case, state = _use_case(daytime=daytime, http=http)

    report = asyncio.run(use_case.sync_with_report())

    assert report.succeeded is True
    assert report.source == _DAYTIME
    assert report.authoritative_time == _T0 + timedelta(seconds=10)
    assert report.round_trip == timedelta(seconds=2)
    # authoritative + rtt/2 - finished_at = (t0 + 10) + 1 - (t0 + 2)
    assert state.snapshot().value == timedelta(seconds=9)
    assert state.snapshot().version == 1
    assert state.snapshot().source_kind is TimeSourceKind.DAYTIME
    assert http.calls == []


def test_sync_falls_back_to_next_source_on_failure() -> None:
    seen_failures: list[tuple[str, str]] = []
    seen_success: list[str] = []
    hooks = ClockSyncHooks(
        on_source_failed=lambda source, code: seen_failures.append((source.kind.value, code)),
        on_sync_succeeded=lambda source, _offset: seen_success.append(source.kind.value),
    )
    daytime = _ClientStub(error=ProtocolUnreachableError(message="connection refused"))
    http = _ClientStub(result=_T0 - timedelta(seconds=5))
    use_case, state = _use_case(daytime=daytime, http=http, hooks=hooks)

    report = asyncio.run(use_case.sync_with_report())

    assert report.authoritative_time == _T0 - timedelta(seconds=5)
    assert [failure.code for failure in report.failures] == ["protocol_unreachable"]
    assert len(daytime.calls) == 1
    assert seen_failures == [("daytime", "protocol_unreachable")]
    assert seen_success == ["http_date"]
    assert state.snapshot().source_kind is TimeSourceKind.HTTP_DATE


def test_sync_returns_unknown_and_keeps_previous_offset_when_all_sources_fail() -> None:
    unavailable: list[bool] = []
    state = ClockOffsetState.with_fixed_offset(timedelta(seconds=3))
    daytime = _ClientStub(error=MalformedResponseError(message="garbage"))
    http = _ClientStub(error=ProtocolUnreachableError(message="dns failure"))
    use_case, _ = _use_case(
        daytime=daytime,
        http=http,
        state=state,
        hooks=ClockSyncHooks(on_sync_unavailable=lambda: unavailable.append(True)),
    )

    report = asyncio.run(use_case.sync_with_report())

    assert report.authoritative_time is None
    assert report.succeeded is False
    assert [failure.summary() for failure in report.failures] == [
        "daytime:time.example:13: malformed_response",
        "http_date:https://example.com: protocol_unreachable",
    ]
    assert state.snapshot().value == timedelta(seconds=3)
    assert state.snapshot().version == 0
    assert unavailable == [True]
    with pytest.raises(SyncUnavailableError):
        report.raise_for_unavailable()


def test_sync_treats_source_timeout_as_unreachable_and_falls_back() -> None:
    slow = TimeSource(kind=TimeSourceKind.DAYTIME, endpoint="slow.example", timeout_s=0.05)
    daytime = _ClientStub(result=_T0, delay_s=1.0)
    http = _ClientStub(result=_T0)
    use_case, _ = _use_case(daytime=daytime, http=http, sources=(slow, _HTTP))

    report = asyncio.run(use_case.sync_with_report())

    assert report.source == _HTTP
    assert len(report.failures) == 1
    assert report.failures[0].code == "protocol_unreachable"
    assert "timed out" in report.failures[0].message


def test_sync_rejects_naive_datetime_from_client_as_malformed() -> None:
    daytime = _ClientStub(result=datetime(2025, 3, 4, 15, 46, 52))
    http = _ClientStub(error=ProtocolUnreachableError(message="down"))
    use_case, _ = _use_case(daytime=daytime, http=http)

    report = asyncio.run(use_case.sync_with_report())

    assert report.succeeded is False
    assert report.failures[0].code == "malformed_response"


def test_concurrent_sync_calls_join_single_in_flight_attempt() -> None:
    async def _scenario() -> tuple[list[datetime | None], int]:
        gate = asyncio.Event()
        daytime = _ClientStub(result=_T0, gate=gate)
        use_case, _ = _use_case(daytime=daytime, http=_ClientStub(result=_T0))

        first = asyncio.create_task(use_case.sync())
        await asyncio.sleep(0)
        second = asyncio.create_task(use_case.sync())
        await asyncio.sleep(0)
        gate.set()
        results = await asyncio.gather(first, second)
        return list(results), len(daytime.calls)

    results, calls = asyncio.run(_scenario())

    assert results == [_T0, _T0]
    assert calls == 1


def test_sync_clock_rejects_missing_client_and_empty_sources() -> None:
    with pytest.raises(ValueError):
        SyncClockUseCase(
            sources=(_DAYTIME,),
            clients={},
            state=ClockOffsetState(),
            local_clock=_SteppingClock(start=_T0, step=timedelta(0)),
        )
    with pytest.raises(ValueError):
        SyncClockUseCase(
            sources=(),
            clients={TimeSourceKind.DAYTIME: _ClientStub(result=_T0)},
            state=ClockOffsetState(),
            local_clock=_SteppingClock(start=_T0, step=timedelta(0)),
        )


def test_all_failing_slow_sources_finish_within_sum_of_timeouts() -> None:
    sources = (
        TimeSource(kind=TimeSourceKind.DAYTIME, endpoint="slow.example", timeout_s=0.2),
        TimeSource(kind=TimeSourceKind.HTTP_DATE, endpoint="https://slow.example", timeout_s=0.3),
    )
    use_case, state = _use_case(
        daytime=_ClientStub(result=_T0, delay_s=30.0),
        http=_ClientStub(result=_T0, delay_s=30.0),
        sources=sources,
    )

    started = time.perf_counter()
    report = asyncio.run(use_case.sync_with_report())
    elapsed = time.perf_counter() - started

    assert report.succeeded is False
    assert [failure.code for failure in report.failures] == [
        "protocol_unreachable",
        "protocol_unreachable",
    ]
    assert elapsed < sum(source.timeout_s for source in sources) + 0.5
    assert state.snapshot().version == 0


def test_unexpected_client_exception_is_recorded_and_next_source_is_tried() -> None:
    daytime = _ClientStub(error=RuntimeError("resolver exploded"))
    http = _ClientStub(result=_T0)
    use_case, state = _use_case(daytime=daytime, http=http)

    report = asyncio.run(use_case.sync_with_report())

    assert report.source == _HTTP
    assert report.failures[0].code == "protocol_unreachable"
    assert "RuntimeError: resolver exploded" in report.failures[0].message
    assert state.snapshot().source_kind is TimeSourceKind.HTTP_DATE


def test_cancelled_sync_publishes_nothing_and_joiner_gets_unknown_report() -> None:
    async def _scenario() -> tuple[ClockSyncReport, ClockOffsetState, bool]:
        gate = asyncio.Event()
        daytime = _ClientStub(result=_T0 + timedelta(seconds=10), gate=gate)
        use_case, state = _use_case(daytime=daytime, http=_ClientStub(result=_T0))

        owner = asyncio.create_task(use_case.sync_with_report())
        await asyncio.sleep(0)
        joiner = asyncio.create_task(use_case.sync_with_report())
        await asyncio.sleep(0)
        owner.cancel()
        owner_cancelled = False
        try:
            await owner
        except asyncio.CancelledError:
            owner_cancelled = True
        gate.set()
        return await joiner, state, owner_cancelled

    joined, state, owner_cancelled = asyncio.run(_scenario())

    assert owner_cancelled is True
    assert joined.succeeded is False
    assert joined.failures == ()
    assert state.snapshot().version == 0
    assert state.snapshot().value == timedelta(0)
