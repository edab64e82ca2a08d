from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from time import perf_counter

from prometheus_client import (
    REGISTRY,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    start_http_server,
)

from apps.api.wiring.modules.clock_sync import build_clock_sync_module
from timetrust.contexts.clock_sync.application import (
    ClockSyncHooks,
    ClockSyncReport,
    PeriodicClockResync,
)
from timetrust.contexts.clock_sync.domain import TimeSource
from timetrust.platform.config import load_timetrust_runtime_config

_LOG = logging.getLogger(__name__)


class ClockSyncMetrics:
    """
    Prometheus metrics bundle for clock sync worker process.

    Related:
      - apps/worker/clock_sync/wiring/modules/clock_sync.py
      - apps/worker/clock_sync/main/main.py
      - src/timetrust/contexts/clock_sync/application/use_cases/sync_clock.py
    """

    def __init__(self, *, registry: CollectorRegistry | None = None) -> None:
        """
        Register worker metrics in provided or default Prometheus registry.

        Args:
            registry: Optional registry for tests or custom process setups.
        Returns:
            None.
        Assumptions:
            Metric names are stable for dashboards and alerts.
        Raises:
            ValueError: Propagated by Prometheus client on duplicate metric names.
        Side Effects:
            Registers metrics in target registry.
        """
        self.registry = registry or REGISTRY
        self.sync_total = Counter(
            "timetrust_clock_sync_total",
            "Clock sync attempts by outcome",
            labelnames=("outcome",),
            registry=self.registry,
        )
        self.source_failures_total = Counter(
            "timetrust_clock_sync_source_failures_total",
            "Failed time source attempts by source kind and error code",
            labelnames=("kind", "code"),
            registry=self.registry,
        )
        self.offset_seconds = Gauge(
            "timetrust_clock_offset_seconds",
            "Last published clock offset in seconds (authoritative minus local)",
            registry=self.registry,
        )
        self.last_success_unixtime = Gauge(
            "timetrust_clock_sync_last_success_unixtime",
            "Unix time of the last successful clock sync",
            registry=self.registry,
        )
        self.sync_duration_seconds = Histogram(
            "timetrust_clock_sync_duration_seconds",
            "Clock sync call duration in seconds",
            buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0),
            registry=self.registry,
        )

    def hooks(self) -> ClockSyncHooks:
        return ClockSyncHooks(
            on_source_failed=self._on_source_failed,
            on_sync_succeeded=self._on_sync_succeeded,
            on_sync_unavailable=self._on_sync_unavailable,
        )

    def observe_report(self, *, report: ClockSyncReport, duration_seconds: float) -> None:
        self.sync_duration_seconds.observe(max(duration_seconds, 0.0))
        if report.offset is not None and report.offset.synced_at is not None:
            self.last_success_unixtime.set(report.offset.synced_at.timestamp())

    def _on_source_failed(self, source: TimeSource, code: str) -> None:
        self.source_failures_total.labels(kind=source.kind.value, code=code).inc()

    def _on_sync_succeeded(self, _source: TimeSource, offset_seconds: float) -> None:
        self.sync_total.labels(outcome="succeeded").inc()
        self.offset_seconds.set(offset_seconds)

    def _on_sync_unavailable(self) -> None:
        self.sync_total.labels(outcome="unavailable").inc()


@dataclass(frozen=True, slots=True)
class ClockSyncWorkerApp:
    """
    Runtime resync loop wrapper for the clock sync worker process.

    Related:
      - apps/worker/clock_sync/main/main.py
      - src/timetrust/contexts/clock_sync/application/use_cases/periodic_clock_resync.py
    """

    resync: PeriodicClockResync
    metrics: ClockSyncMetrics
    metrics_port: int

    def __post_init__(self) -> None:
        if self.metrics_port <= 0:
            raise ValueError("ClockSyncWorkerApp.metrics_port must be > 0")
        if self.resync is None:  # type: ignore[truthy-bool]
            raise ValueError("ClockSyncWorkerApp.resync is required")
        if self.metrics is None:  # type: ignore[truthy-bool]
            raise ValueError("ClockSyncWorkerApp.metrics is required")

    async def run(self, stop_event: asyncio.Event) -> None:
        """
        Run resync loop until stop event is set.

        Args:
            stop_event: Cooperative shutdown signal from process entrypoint.
        Returns:
            None.
        Assumptions:
            Unknown outcomes are normal and only counted; the loop keeps going.
        Raises:
            None.
        Side Effects:
            Starts metrics HTTP server and performs network I/O in loop.
        """
        start_http_server(self.metrics_port, registry=self.metrics.registry)
        _LOG.info(
            "event=metrics_started component=clock-sync-worker metrics_port=%s",
            self.metrics_port,
        )

        while not stop_event.is_set():
            await self.run_once()
            await _wait_with_stop(
                stop_event=stop_event,
                timeout_seconds=self.resync.interval_s,
            )

    async def run_once(self) -> ClockSyncReport:
        started = perf_counter()
        report = await self.resync.run_once()
        self.metrics.observe_report(
            report=report,
            duration_seconds=max(perf_counter() - started, 0.0),
        )
        _LOG.info(
            "event=clock_sync_finished component=clock-sync-worker succeeded=%s failures=%s",
            report.succeeded,
            len(report.failures),
        )
        return report


def build_clock_sync_worker_app(
    *,
    config_path: str,
    metrics_port: int | None = None,
    metrics: ClockSyncMetrics | None = None,
) -> ClockSyncWorkerApp:
    """
    Build fully wired clock sync worker app.

    Args:
        config_path: Path to `timetrust.yaml`.
        metrics_port: Optional metrics port override; config value otherwise.
        metrics: Optional metrics bundle (tests pass one with a private registry).
    Returns:
        ClockSyncWorkerApp: Ready-to-run worker app.
    Assumptions:
        Worker owns its own offset state; it measures and exports, nothing more.
    Raises:
        ValueError: If config is invalid.
        FileNotFoundError: If config cannot be loaded.
    Side Effects:
        Reads runtime YAML.
    """
    runtime_config = load_timetrust_runtime_config(config_path)
    effective_metrics = metrics if metrics is not None else ClockSyncMetrics()
    module = build_clock_sync_module(
        config=runtime_config.clock_sync,
        hooks=effective_metrics.hooks(),
    )
    return ClockSyncWorkerApp(
        resync=module.resync,
        metrics=effective_metrics,
        metrics_port=metrics_port if metrics_port is not None else runtime_config.metrics_port,
    )


async def _wait_with_stop(*, stop_event: asyncio.Event, timeout_seconds: float) -> None:
    try:
        await asyncio.wait_for(stop_event.wait(), timeout=timeout_seconds)
    except TimeoutError:
        return


__all__ = [
    "ClockSyncMetrics",
    "ClockSyncWorkerApp",
    "build_clock_sync_worker_app",
]
