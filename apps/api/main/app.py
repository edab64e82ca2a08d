"""
FastAPI application factory for the timetrust authority API.
"""

from __future__ import annotations

import asyncio
import logging
import os
from contextlib import asynccontextmanager
from typing import AsyncIterator, Mapping

from fastapi import FastAPI

from apps.api.common import register_api_error_handlers
from apps.api.wiring.modules import build_clock_sync_module, build_timestamping_api_module
from timetrust.contexts.clock_sync.adapters.inbound.api import build_clock_router
from timetrust.platform.config import (
    load_timetrust_runtime_config,
    resolve_timetrust_config_path,
)

log = logging.getLogger(__name__)


def create_app(
    *,
    environ: Mapping[str, str] | None = None,
    config_path: str | None = None,
    resync_enabled: bool = True,
) -> FastAPI:
    """
    Build FastAPI app with corrected clock and timestamp authority modules.

    Related: apps.api.wiring.modules.clock_sync,
      apps.api.wiring.modules.timestamping,
      timetrust.contexts.timestamping.adapters.inbound.api.routes.timestamps

    Args:
        environ: Optional environment mapping override.
        config_path: Optional explicit `timetrust.yaml` path.
        resync_enabled: Whether lifespan runs the periodic clock resync loop.
    Returns:
        FastAPI: Application instance with registered routers.
    Assumptions:
        Authority signs with corrected time, so the resync loop shares the reader state.
    Raises:
        FileNotFoundError: If config path is missing.
        ValueError: If config or signing key validation fails.
    Side Effects:
        Reads runtime YAML; lifespan starts a background resync task.
    """
    effective_environ = os.environ if environ is None else environ
    resolved_config_path = resolve_timetrust_config_path(
        environ=effective_environ,
        cli_path=config_path,
    )
    runtime_config = load_timetrust_runtime_config(resolved_config_path)

    clock_sync = build_clock_sync_module(config=runtime_config.clock_sync)
    timestamping = build_timestamping_api_module(
        config=runtime_config.timestamping,
        clock=clock_sync.reader,
        environ=effective_environ,
    )

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        if not resync_enabled:
            yield
            return
        stop_event = asyncio.Event()
        task = asyncio.create_task(clock_sync.resync.run(stop_event))
        try:
            yield
        finally:
            stop_event.set()
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                log.info("clock resync task stopped")

    app = FastAPI(
        title="Timetrust API",
        version="1.0.0",
        lifespan=lifespan,
    )
    register_api_error_handlers(app=app)
    app.include_router(
        build_clock_router(reader=clock_sync.reader, sync_clock=clock_sync.sync_clock)
    )
    app.include_router(timestamping.router)
    app.state.clock_sync = clock_sync
    app.state.timestamping = timestamping
    log.info("timetrust api configured config_path=%s", resolved_config_path)
    return app
