from __future__ import annotations

import asyncio
import threading
from datetime import datetime, timedelta, timezone

from timetrust.contexts.clock_sync.application import (
    ClockOffsetState,
    ClockReader,
    PeriodicClockResync,
    SyncClockUseCase,
)
from timetrust.contexts.clock_sync.domain import TimeSource, TimeSourceKind

_T0 = datetime(2025, 3, 4, 15, 46, 52, tzinfo=timezone.utc)


class _FixedClock:
    """
    Deterministic local clock returning one instant.
    """

    def __init__(self, now_value: datetime) -> None:
        self._now_value = now_value

    def now(self) -> datetime:
        return self._now_value


class _CountingClient:
    """
    Time source client counting round trips.
    """

    def __init__(self, result: datetime) -> None:
        self._result = result
        self.calls = 0

    async def fetch_utc(self, *, source: TimeSource) -> datetime:
        self.calls += 1
        return self._result


def test_publish_increments_version_and_discards_stale_measurement() -> None:
    state = ClockOffsetState()

    first = state.publish(
        value=timedelta(seconds=1),
        synced_at=_T0 + timedelta(seconds=10),
        source_kind=TimeSourceKind.DAYTIME,
    )
    stale = state.publish(
        value=timedelta(seconds=99),
        synced_at=_T0,
        source_kind=TimeSourceKind.HTTP_DATE,
    )

    assert first is not None
    assert first.version == 1
    assert stale is None
    assert state.snapshot() == first


def test_reader_applies_negative_and_zero_offsets() -> None:
    clock = _FixedClock(_T0)

    unsynced = ClockReader(state=ClockOffsetState(), local_clock=clock)
    behind = ClockReader(
        state=ClockOffsetState.with_fixed_offset(timedelta(seconds=-1.5)),
        local_clock=clock,
    )

    assert unsynced.now() == _T0
    assert unsynced.offset().is_synced is False
    assert behind.now() == _T0 - timedelta(seconds=1.5)
    assert behind.now_rounded(seconds=1) == _T0 - timedelta(seconds=1)


def test_reader_normalizes_non_utc_local_clock() -> None:
    local = datetime(2025, 3, 4, 18, 46, 52, tzinfo=timezone(timedelta(hours=3)))
    reader = ClockReader(state=ClockOffsetState(), local_clock=_FixedClock(local))

    assert reader.now().utcoffset() == timedelta(0)
    assert reader.now() == _T0


def test_concurrent_readers_observe_whole_snapshots_during_publishes() -> None:
    state = ClockOffsetState()
    reader = ClockReader(state=state, local_clock=_FixedClock(_T0))
    observed: list[timedelta] = []
    torn: list[tuple[int, timedelta]] = []
    observed_lock = threading.Lock()

    def _write() -> None:
        for index in range(1, 201):
            state.publish(
                value=timedelta(seconds=index),
                synced_at=_T0 + timedelta(seconds=index),
                source_kind=TimeSourceKind.DAYTIME,
            )

    def _read() -> None:
        for _ in range(200):
            snapshot = reader.offset()
            with observed_lock:
                # version N always carries offset N seconds in this scenario
                if snapshot.value != timedelta(seconds=snapshot.version):
                    torn.append((snapshot.version, snapshot.value))
                observed.append(reader.now() - _T0)

    threads = [threading.Thread(target=_write)] + [
        threading.Thread(target=_read) for _ in range(4)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert torn == []
    assert state.snapshot().version == 200
    assert all(timedelta(0) <= value <= timedelta(seconds=200) for value in observed)


def test_periodic_resync_runs_immediately_and_stops_on_event() -> None:
    client = _CountingClient(_T0 + timedelta(seconds=4))
    state = ClockOffsetState()
    source = TimeSource(kind=TimeSourceKind.DAYTIME, endpoint="time.example", timeout_s=1)
    resync = PeriodicClockResync(
        sync_clock=SyncClockUseCase(
            sources=(source,),
            clients={TimeSourceKind.DAYTIME: client},
            state=state,
            local_clock=_FixedClock(_T0),
        ),
        interval_s=3600,
    )

    async def _scenario() -> None:
        stop_event = asyncio.Event()
        task = asyncio.create_task(resync.run(stop_event))
        for _ in range(50):
            if client.calls:
                break
            await asyncio.sleep(0.01)
        stop_event.set()
        await asyncio.wait_for(task, timeout=1.0)

    asyncio.run(_scenario())

    assert client.calls == 1
    assert state.snapshot().value == timedelta(seconds=4)
