from __future__ import annotations

import argparse
import asyncio
import logging
import os
import signal

from apps.worker.clock_sync.wiring.modules import build_clock_sync_worker_app
from timetrust.platform.config import resolve_timetrust_config_path


def _configure_logging() -> None:
    """
    Configure process-wide logging defaults for clock sync worker.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        Logging is configured once at process startup.
    Raises:
        None.
    Side Effects:
        Sets root logging handlers and format.
    """
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="timetrust-clock-sync")
    parser.add_argument(
        "--config",
        default=None,
        help="Path to timetrust runtime config (timetrust.yaml).",
    )
    parser.add_argument(
        "--metrics-port",
        type=int,
        default=None,
        help="Prometheus metrics HTTP port (CLI override has highest priority).",
    )
    return parser


def _install_signal_handlers(stop_event: asyncio.Event) -> None:
    """
    Install SIGTERM/SIGINT handlers that trigger cooperative shutdown.

    Args:
        stop_event: Shared shutdown event.
    Returns:
        None.
    Assumptions:
        Function runs inside active asyncio event loop.
    Raises:
        None.
    Side Effects:
        Registers process signal handlers.
    """
    loop = asyncio.get_running_loop()

    def _mark_stop() -> None:
        stop_event.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _mark_stop)
        except NotImplementedError:
            signal.signal(sig, lambda *_args: _mark_stop())


async def _run_async(config_path: str | None, metrics_port: int | None) -> int:
    """
    Build and run clock sync worker until stop signal.

    Args:
        config_path: Optional CLI runtime config path override.
        metrics_port: Optional CLI Prometheus endpoint port override.
    Returns:
        int: Process exit code.
    Assumptions:
        Time sources are reachable at least intermittently; outages are only counted.
    Raises:
        Exception: Propagates wiring/runtime errors to caller.
    Side Effects:
        Loads runtime config and starts worker loop.
    """
    if metrics_port is not None and metrics_port <= 0:
        raise ValueError("--metrics-port must be > 0 when provided")
    resolved_config_path = resolve_timetrust_config_path(
        environ=os.environ,
        cli_path=config_path,
    )
    stop_event = asyncio.Event()
    _install_signal_handlers(stop_event)
    app = build_clock_sync_worker_app(
        config_path=str(resolved_config_path),
        metrics_port=metrics_port,
    )
    await app.run(stop_event)
    return 0


def main(argv: list[str] | None = None) -> int:
    """
    Entrypoint for clock sync worker process.

    Args:
        argv: Optional command-line arguments without program name.
    Returns:
        int: Process exit code.
    Assumptions:
        Function is executed in standalone process context.
    Raises:
        None.
    Side Effects:
        Initializes logging and runs asyncio loop.
    """
    _configure_logging()
    args = _build_parser().parse_args(argv)
    try:
        return asyncio.run(
            _run_async(
                config_path=args.config,
                metrics_port=args.metrics_port,
            )
        )
    except Exception:  # noqa: BLE001
        logging.getLogger(__name__).exception("timetrust-clock-sync failed")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
