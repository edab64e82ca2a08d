"""
Composition helpers for clock sync module shared by API, worker, and CLI processes.
"""

from __future__ import annotations

from dataclasses import dataclass

import requests

from timetrust.contexts.clock_sync.adapters.outbound import (
    DaytimeProtocolClient,
    HttpDateHeaderClient,
)
from timetrust.contexts.clock_sync.application import (
    ClockOffsetState,
    ClockReader,
    ClockSyncHooks,
    PeriodicClockResync,
    SyncClockUseCase,
    TimeSourceClient,
)
from timetrust.contexts.clock_sync.domain import TimeSourceKind
from timetrust.platform.config import ClockSyncRuntimeConfig
from timetrust.platform.time import SystemClock


@dataclass(frozen=True, slots=True)
class ClockSyncModule:
    """
    ClockSyncModule — wired clock sync objects sharing one process offset state.

    Related:
      - src/timetrust/contexts/clock_sync/application/services/clock_offset_state.py
      - apps/api/main/app.py
      - apps/worker/clock_sync/wiring/modules/clock_sync.py
    """

    state: ClockOffsetState
    reader: ClockReader
    sync_clock: SyncClockUseCase
    resync: PeriodicClockResync


def build_clock_sync_module(
    *,
    config: ClockSyncRuntimeConfig,
    hooks: ClockSyncHooks | None = None,
    http_session: requests.Session | None = None,
) -> ClockSyncModule:
    """
    Build clock sync use-case, reader, and resync loop over one offset state.

    Args:
        config: Validated clock sync runtime config.
        hooks: Optional metrics hooks.
        http_session: Optional `requests.Session` for the HTTP date client.
    Returns:
        ClockSyncModule: Wired module.
    Assumptions:
        One module per process; its state is the process clock correction.
    Raises:
        ValueError: If config is missing.
    Side Effects:
        None.
    """
    if config is None:  # type: ignore[truthy-bool]
        raise ValueError("build_clock_sync_module requires config")

    local_clock = SystemClock()
    state = ClockOffsetState()
    clients: dict[TimeSourceKind, TimeSourceClient] = {
        TimeSourceKind.DAYTIME: DaytimeProtocolClient(),
        TimeSourceKind.HTTP_DATE: HttpDateHeaderClient(session=http_session),
    }
    sync_clock = SyncClockUseCase(
        sources=config.sources,
        clients=clients,
        state=state,
        local_clock=local_clock,
        hooks=hooks,
    )
    return ClockSyncModule(
        state=state,
        reader=ClockReader(state=state, local_clock=local_clock),
        sync_clock=sync_clock,
        resync=PeriodicClockResync(
            sync_clock=sync_clock,
            interval_s=config.resync_interval_s,
        ),
    )
