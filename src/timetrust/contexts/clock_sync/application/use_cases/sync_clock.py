from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Mapping, Sequence

from timetrust.contexts.clock_sync.application.ports.local_clock import LocalClock
from timetrust.contexts.clock_sync.application.ports.time_source_client import (
    MalformedResponseError,
    TimeSourceClient,
    TimeSourceError,
)
from timetrust.contexts.clock_sync.application.services.clock_offset_state import (
    ClockOffsetState,
)
from timetrust.contexts.clock_sync.application.use_cases.clock_sync_errors import (
    SyncUnavailableError,
)
from timetrust.contexts.clock_sync.domain import ClockOffset, TimeSource, TimeSourceKind

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SourceAttemptFailure:
    """
    SourceAttemptFailure — one failed source attempt inside a sync call.
    """

    source: TimeSource
    code: str
    message: str

    def summary(self) -> str:
        return f"{self.source}: {self.code}"


@dataclass(frozen=True, slots=True)
class ClockSyncReport:
    """
    ClockSyncReport — outcome of one sync call.

    `authoritative_time is None` is the Unknown outcome: every source failed (or the
    call was cancelled) and the process clock correction was left untouched.
    `offset` is the snapshot published by this call; it stays None when a newer
    measurement already superseded this one.
    """

    authoritative_time: datetime | None
    source: TimeSource | None
    offset: ClockOffset | None
    round_trip: timedelta | None
    failures: tuple[SourceAttemptFailure, ...]

    @classmethod
    def unknown(cls, *, failures: Sequence[SourceAttemptFailure]) -> ClockSyncReport:
        return cls(
            authoritative_time=None,
            source=None,
            offset=None,
            round_trip=None,
            failures=tuple(failures),
        )

    @property
    def succeeded(self) -> bool:
        return self.authoritative_time is not None

    def raise_for_unavailable(self) -> None:
        """
        Raise `SyncUnavailableError` when the call ended with the Unknown outcome.

        Args:
            None.
        Returns:
            None.
        Assumptions:
            Used by callers that prefer exceptions to the Unknown sentinel.
        Raises:
            SyncUnavailableError: If no source succeeded.
        Side Effects:
            None.
        """
        if not self.succeeded:
            raise SyncUnavailableError(failures=[failure.summary() for failure in self.failures])


@dataclass(frozen=True, slots=True)
class ClockSyncHooks:
    """
    Optional metric/logging hooks for clock sync runtime.

    Parameters:
    - on_source_failed: callback with `(source, error_code)` for every failed attempt.
    - on_sync_succeeded: callback with `(source, offset_seconds)` after a successful sync.
    - on_sync_unavailable: callback invoked when every source failed.
    """

    on_source_failed: Callable[[TimeSource, str], None] | None = None
    on_sync_succeeded: Callable[[TimeSource, float], None] | None = None
    on_sync_unavailable: Callable[[], None] | None = None


class SyncClockUseCase:
    """
    SyncClockUseCase — refresh process clock correction from prioritized time sources.

    Sources are tried sequentially in the configured order (precise daytime protocol
    first, widely reachable HTTP date header second by default) and the first success
    wins. Concurrent calls on one instance are single-flight: a call issued while
    another is in flight joins it. One instance is bound to one event loop.

    Related:
      - src/timetrust/contexts/clock_sync/application/services/clock_offset_state.py
      - src/timetrust/contexts/clock_sync/adapters/outbound/clients/
      - apps/worker/clock_sync/wiring/modules/clock_sync.py
    """

    def __init__(
        self,
        *,
        sources: Sequence[TimeSource],
        clients: Mapping[TimeSourceKind, TimeSourceClient],
        state: ClockOffsetState,
        local_clock: LocalClock,
        hooks: ClockSyncHooks | None = None,
    ) -> None:
        """
        Validate source/client wiring and store collaborators.

        Args:
            sources: Sources in priority order.
            clients: Client per source kind.
            state: Process clock correction holder.
            local_clock: Uncorrected host clock used for offset measurement.
            hooks: Optional metrics/log hooks.
        Returns:
            None.
        Assumptions:
            Every source kind has exactly one client.
        Raises:
            ValueError: If sources are empty or a source kind has no client.
        Side Effects:
            None.
        """
        if not sources:
            raise ValueError("SyncClockUseCase requires at least one time source")
        if state is None:  # type: ignore[truthy-bool]
            raise ValueError("SyncClockUseCase requires state")
        if local_clock is None:  # type: ignore[truthy-bool]
            raise ValueError("SyncClockUseCase requires local_clock")
        for source in sources:
            if source.kind not in clients:
                raise ValueError(
                    f"SyncClockUseCase has no client for source kind {source.kind.value}"
                )

        self._sources = tuple(sources)
        self._clients = dict(clients)
        self._state = state
        self._local_clock = local_clock
        self._hooks = hooks if hooks is not None else ClockSyncHooks()
        self._inflight: asyncio.Future[ClockSyncReport] | None = None

    @property
    def sources(self) -> tuple[TimeSource, ...]:
        return self._sources

    async def sync(self) -> datetime | None:
        """
        Refresh clock correction and return authoritative time, or None when Unknown.

        Args:
            None.
        Returns:
            datetime | None: Authoritative UTC instant from the first successful source,
            or None when every source failed.
        Assumptions:
            Callers keep operating on the previous offset when None is returned.
        Raises:
            None.
        Side Effects:
            Network round trips; publishes new offset on success.
        """
        report = await self.sync_with_report()
        return report.authoritative_time

    async def sync_with_report(self) -> ClockSyncReport:
        """
        Refresh clock correction and return detailed outcome.

        Args:
            None.
        Returns:
            ClockSyncReport: Winning source, published offset, and failed attempts.
        Assumptions:
            A call made while another is in flight joins it instead of interleaving.
        Raises:
            asyncio.CancelledError: If the caller itself is cancelled.
        Side Effects:
            Network round trips; publishes new offset on success.
        """
        inflight = self._inflight
        if inflight is not None and not inflight.done():
            log.info("clock sync already in flight, joining")
            await asyncio.wait({inflight})
            if inflight.cancelled():
                return ClockSyncReport.unknown(failures=())
            return inflight.result()

        task = asyncio.ensure_future(self._run_sources())
        self._inflight = task
        try:
            return await task
        finally:
            if self._inflight is task:
                self._inflight = None

    async def _run_sources(self) -> ClockSyncReport:
        """
        Try sources in priority order and publish the first successful measurement.

        Args:
            None.
        Returns:
            ClockSyncReport: Success report or Unknown report.
        Assumptions:
            Offset publish happens after the last await, so cancellation never leaves a
            partial write. Any exception from a client other than cancellation is a
            per-source failure.
        Raises:
            None.
        Side Effects:
            Network round trips; offset publish on success.
        """
        failures: list[SourceAttemptFailure] = []
        for source in self._sources:
            client = self._clients[source.kind]
            started_at = self._local_clock.now()
            try:
                authoritative = await asyncio.wait_for(
                    client.fetch_utc(source=source),
                    timeout=source.timeout_s,
                )
                authoritative = _normalize_utc(value=authoritative, source=source)
            except TimeSourceError as error:
                failures.append(_record_failure(self._hooks, source, error.code, error.message))
                continue
            except TimeoutError:
                failures.append(
                    _record_failure(
                        self._hooks,
                        source,
                        "protocol_unreachable",
                        f"timed out after {source.timeout_s}s",
                    )
                )
                continue
            except OSError as error:
                failures.append(
                    _record_failure(self._hooks, source, "protocol_unreachable", str(error))
                )
                continue
            except Exception as error:
                log.exception("time source client crashed source=%s", source)
                failures.append(
                    _record_failure(
                        self._hooks,
                        source,
                        "protocol_unreachable",
                        f"{type(error).__name__}: {error}",
                    )
                )
                continue

            finished_at = self._local_clock.now()
            round_trip = max(finished_at - started_at, timedelta(0))
            offset_value = authoritative + round_trip / 2 - finished_at
            published = self._state.publish(
                value=offset_value,
                synced_at=finished_at,
                source_kind=source.kind,
            )
            log.info(
                "clock synced source=%s authoritative=%s offset_s=%.6f round_trip_s=%.6f",
                source,
                authoritative.isoformat(),
                offset_value.total_seconds(),
                round_trip.total_seconds(),
            )
            if self._hooks.on_sync_succeeded is not None:
                self._hooks.on_sync_succeeded(source, offset_value.total_seconds())
            return ClockSyncReport(
                authoritative_time=authoritative,
                source=source,
                offset=published,
                round_trip=round_trip,
                failures=tuple(failures),
            )

        log.warning(
            "clock sync unavailable, keeping offset_s=%.6f failures=%s",
            self._state.snapshot().seconds,
            [failure.summary() for failure in failures],
        )
        if self._hooks.on_sync_unavailable is not None:
            self._hooks.on_sync_unavailable()
        return ClockSyncReport.unknown(failures=failures)


def _record_failure(
    hooks: ClockSyncHooks,
    source: TimeSource,
    code: str,
    message: str,
) -> SourceAttemptFailure:
    """
    Log failed attempt, trigger hook, and build failure record.

    Args:
        hooks: Hooks bundle.
        source: Failed source.
        code: Stable failure code.
        message: Failure description.
    Returns:
        SourceAttemptFailure: Failure record for the report.
    Assumptions:
        Failure is recoverable by falling back to the next source.
    Raises:
        None.
    Side Effects:
        Emits warning log and invokes hook when present.
    """
    log.warning("time source failed source=%s code=%s message=%s", source, code, message)
    if hooks.on_source_failed is not None:
        hooks.on_source_failed(source, code)
    return SourceAttemptFailure(source=source, code=code, message=message)


def _normalize_utc(*, value: datetime, source: TimeSource) -> datetime:
    if value.tzinfo is None or value.utcoffset() is None:
        raise MalformedResponseError(message=f"{source} returned naive datetime")
    return value.astimezone(timezone.utc)
