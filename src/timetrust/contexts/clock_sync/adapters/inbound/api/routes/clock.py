from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel

from timetrust.contexts.clock_sync.application.use_cases.clock_sync_errors import (
    SyncUnavailableError,
)
from timetrust.contexts.clock_sync.application.use_cases.read_clock import ClockReader
from timetrust.contexts.clock_sync.application.use_cases.sync_clock import SyncClockUseCase
from timetrust.contexts.clock_sync.domain import ClockOffset
from timetrust.platform.errors import TimetrustError


class ClockNowResponse(BaseModel):
    """
    ClockNowResponse — corrected now together with the offset snapshot it was built from.

    Related:
      - src/timetrust/contexts/clock_sync/application/use_cases/read_clock.py
      - src/timetrust/contexts/clock_sync/domain/value_objects/clock_offset.py
    """

    time: str
    offset_s: float
    offset_version: int
    synced: bool
    synced_at: str | None
    source_kind: str | None


class ClockSyncResponse(BaseModel):
    authoritative_time: str
    source: str
    offset_s: float | None
    round_trip_s: float | None


def build_clock_router(
    *,
    reader: ClockReader,
    sync_clock: SyncClockUseCase | None = None,
) -> APIRouter:
    """
    Build corrected-clock router.

    Related:
      - apps/api/main/app.py
      - apps/api/wiring/modules/clock_sync.py

    Args:
        reader: Corrected clock reader.
        sync_clock: Optional sync use-case enabling `POST /v1/time/sync`.
    Returns:
        APIRouter: Configured clock router.
    Assumptions:
        Reader and sync use-case share the same `ClockOffsetState`.
    Raises:
        ValueError: If reader is missing.
    Side Effects:
        None.
    """
    if reader is None:  # type: ignore[truthy-bool]
        raise ValueError("build_clock_router requires reader")

    router = APIRouter(tags=["clock"])

    @router.get("/v1/time", response_model=ClockNowResponse)
    def get_time() -> ClockNowResponse:
        offset = reader.offset()
        now = reader.now()
        return _to_clock_now_response(now_iso=now.isoformat(), offset=offset)

    if sync_clock is not None:

        @router.post("/v1/time/sync", response_model=ClockSyncResponse)
        async def post_time_sync() -> ClockSyncResponse:
            """
            Run one sync attempt over configured sources.

            Args:
                None.
            Returns:
                ClockSyncResponse: Authoritative time, source, and published offset.
            Assumptions:
                Concurrent calls join one in-flight sync.
            Raises:
                TimetrustError: `sync_unavailable` when every source failed.
            Side Effects:
                Performs network I/O and may publish a new offset.
            """
            report = await sync_clock.sync_with_report()
            try:
                report.raise_for_unavailable()
            except SyncUnavailableError as error:
                raise TimetrustError.from_context_error(
                    error,
                    code="sync_unavailable",
                    failures=error.failures,
                ) from error
            assert report.authoritative_time is not None and report.source is not None
            return ClockSyncResponse(
                authoritative_time=report.authoritative_time.isoformat(),
                source=str(report.source),
                offset_s=None if report.offset is None else report.offset.seconds,
                round_trip_s=(
                    None if report.round_trip is None else report.round_trip.total_seconds()
                ),
            )

    return router


def _to_clock_now_response(*, now_iso: str, offset: ClockOffset) -> ClockNowResponse:
    return ClockNowResponse(
        time=now_iso,
        offset_s=offset.seconds,
        offset_version=offset.version,
        synced=offset.is_synced,
        synced_at=None if offset.synced_at is None else offset.synced_at.isoformat(),
        source_kind=None if offset.source_kind is None else offset.source_kind.value,
    )
