from .timetrust_runtime_config import (
    ClockSyncRuntimeConfig,
    TimestampingRuntimeConfig,
    TimetrustRuntimeConfig,
    load_timetrust_runtime_config,
    read_authority_signing_key_b64,
    resolve_timetrust_config_path,
)

__all__ = [
    "ClockSyncRuntimeConfig",
    "TimestampingRuntimeConfig",
    "TimetrustRuntimeConfig",
    "load_timetrust_runtime_config",
    "read_authority_signing_key_b64",
    "resolve_timetrust_config_path",
]
