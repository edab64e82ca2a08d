from __future__ import annotations

import asyncio
from pathlib import Path

import pytest
from prometheus_client import CollectorRegistry

from apps.worker.clock_sync.wiring.modules import ClockSyncMetrics, build_clock_sync_worker_app

_CONFIG_YAML = """
version: 1
timetrust:
  clock_sync:
    sources:
      - kind: daytime
        endpoint: 127.0.0.1:1
        timeout_s: 0.5
  worker:
    metrics_port: 9411
"""


def _config(tmp_path: Path) -> str:
    path = tmp_path / "timetrust.yaml"
    path.write_text(_CONFIG_YAML, encoding="utf-8")
    return str(path)


def test_build_clock_sync_worker_app_uses_config_metrics_port_unless_overridden(
    tmp_path: Path,
) -> None:
    """
    Verify worker wiring reads metrics port from config and honours CLI override.

    Args:
        tmp_path: Pytest temporary directory.
    Returns:
        None.
    Assumptions:
        Each app gets its own registry so metric names never collide.
    Raises:
        AssertionError: If resolved metrics port is wrong.
    Side Effects:
        None.
    """
    from_config = build_clock_sync_worker_app(
        config_path=_config(tmp_path),
        metrics=ClockSyncMetrics(registry=CollectorRegistry()),
    )
    overridden = build_clock_sync_worker_app(
        config_path=_config(tmp_path),
        metrics_port=9500,
        metrics=ClockSyncMetrics(registry=CollectorRegistry()),
    )

    assert from_config.metrics_port == 9411
    assert overridden.metrics_port == 9500


def test_run_once_counts_unavailable_sync_and_source_failure(tmp_path: Path) -> None:
    registry = CollectorRegistry()
    app = build_clock_sync_worker_app(
        config_path=_config(tmp_path),
        metrics=ClockSyncMetrics(registry=registry),
    )

    report = asyncio.run(app.run_once())

    assert report.succeeded is False
    assert registry.get_sample_value(
        "timetrust_clock_sync_total",
        {"outcome": "unavailable"},
    ) == 1.0
    assert registry.get_sample_value(
        "timetrust_clock_sync_source_failures_total",
        {"kind": "daytime", "code": "protocol_unreachable"},
    ) == 1.0
    assert registry.get_sample_value("timetrust_clock_sync_duration_seconds_count") == 1.0


def test_build_clock_sync_worker_app_rejects_missing_config(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        build_clock_sync_worker_app(
            config_path=str(tmp_path / "missing.yaml"),
            metrics=ClockSyncMetrics(registry=CollectorRegistry()),
        )
