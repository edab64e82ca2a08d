from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from timetrust.contexts.clock_sync.domain import TimeSource, TimeSourceKind

_ENV_NAME_KEY = "TIMETRUST_ENV"
_CONFIG_PATH_KEY = "TIMETRUST_CONFIG"
_ALLOWED_ENVS = ("dev", "prod", "test")
_CONFIG_FILE_NAME = "timetrust.yaml"

_RESYNC_INTERVAL_S_DEFAULT = 3600.0
_SOURCE_TIMEOUT_S_DEFAULT = 5.0
_SIGN_TIMEOUT_S_DEFAULT = 10.0
_PLAUSIBILITY_TOLERANCE_S_DEFAULT = 300.0
_SIGNING_KEY_ENV_DEFAULT = "TIMETRUST_AUTHORITY_SIGNING_KEY_B64"
_AUTHORITY_TIMEOUT_S_DEFAULT = 10.0
_METRICS_PORT_DEFAULT = 9310


@dataclass(frozen=True, slots=True)
class ClockSyncRuntimeConfig:
    """
    Runtime settings of the `timetrust.clock_sync` section.

    Related:
      - configs/dev/timetrust.yaml
      - src/timetrust/contexts/clock_sync/application/use_cases/sync_clock.py
      - apps/worker/clock_sync/wiring/modules/clock_sync.py
    """

    sources: tuple[TimeSource, ...]
    resync_interval_s: float

    def __post_init__(self) -> None:
        if not self.sources:
            raise ValueError("ClockSyncRuntimeConfig.sources must be non-empty")
        if self.resync_interval_s <= 0:
            raise ValueError("ClockSyncRuntimeConfig.resync_interval_s must be > 0")


@dataclass(frozen=True, slots=True)
class TimestampingRuntimeConfig:
    """
    Runtime settings of the `timetrust.timestamping` section.

    `authority_url` is the remote authority used by clients (CLI `sign`); the API process
    signs locally with the key read from `signing_key_env`.

    Related:
      - configs/dev/timetrust.yaml
      - apps/api/wiring/modules/timestamping.py
      - apps/cli/commands/sign.py
    """

    sign_timeout_s: float
    plausibility_tolerance_s: float
    signing_key_env: str
    authority_url: str | None
    authority_timeout_s: float

    def __post_init__(self) -> None:
        """
        Validate timestamping runtime invariants.

        Args:
            None.
        Returns:
            None.
        Assumptions:
            Secret values never live in YAML, only the environment variable name does.
        Raises:
            ValueError: If one of values is invalid.
        Side Effects:
            Normalizes string fields.
        """
        if self.sign_timeout_s <= 0:
            raise ValueError("TimestampingRuntimeConfig.sign_timeout_s must be > 0")
        if self.plausibility_tolerance_s < 0:
            raise ValueError("TimestampingRuntimeConfig.plausibility_tolerance_s must be >= 0")
        if self.authority_timeout_s <= 0:
            raise ValueError("TimestampingRuntimeConfig.authority_timeout_s must be > 0")
        normalized_env = self.signing_key_env.strip()
        if not normalized_env:
            raise ValueError("TimestampingRuntimeConfig.signing_key_env must be non-empty")
        object.__setattr__(self, "signing_key_env", normalized_env)
        if self.authority_url is not None:
            normalized_url = self.authority_url.strip()
            if normalized_url and not normalized_url.startswith(("https://", "http://")):
                raise ValueError(
                    "TimestampingRuntimeConfig.authority_url must start with http:// or https://"
                )
            object.__setattr__(self, "authority_url", normalized_url or None)


@dataclass(frozen=True, slots=True)
class TimetrustRuntimeConfig:
    """
    Root runtime config loaded from `configs/<env>/timetrust.yaml`.

    Related:
      - apps/cli/main/main.py
      - apps/api/main/app.py
      - apps/worker/clock_sync/main/main.py
    """

    version: int
    clock_sync: ClockSyncRuntimeConfig
    timestamping: TimestampingRuntimeConfig
    metrics_port: int

    def __post_init__(self) -> None:
        if self.version != 1:
            raise ValueError(f"TimetrustRuntimeConfig.version must be 1, got {self.version}")
        if self.metrics_port <= 0:
            raise ValueError("TimetrustRuntimeConfig.metrics_port must be > 0")


def resolve_timetrust_config_path(
    *,
    environ: Mapping[str, str],
    cli_path: str | None = None,
) -> Path:
    """
    Resolve runtime config path using override precedence contract.

    Related:
      - configs/dev/timetrust.yaml
      - configs/test/timetrust.yaml
      - configs/prod/timetrust.yaml

    Args:
        environ: Runtime environment mapping.
        cli_path: Optional `--config` value.
    Returns:
        Path: Resolved `timetrust.yaml` path.
    Assumptions:
        Precedence is `--config` > `TIMETRUST_CONFIG` > `configs/<TIMETRUST_ENV>/timetrust.yaml`.
    Raises:
        ValueError: If `TIMETRUST_ENV` value is unsupported.
    Side Effects:
        None.
    """
    if cli_path is not None and cli_path.strip():
        return Path(cli_path.strip())
    override_path = environ.get(_CONFIG_PATH_KEY, "").strip()
    if override_path:
        return Path(override_path)
    env_name = _resolve_env_name(environ=environ)
    return Path("configs") / env_name / _CONFIG_FILE_NAME


def load_timetrust_runtime_config(path: str | Path) -> TimetrustRuntimeConfig:
    """
    Load and validate timetrust runtime YAML configuration.

    Related:
      - configs/dev/timetrust.yaml
      - src/timetrust/contexts/clock_sync/domain/value_objects/time_source.py

    Args:
        path: Path to `timetrust.yaml`.
    Returns:
        TimetrustRuntimeConfig: Parsed validated config object.
    Assumptions:
        `timetrust.clock_sync.sources` is strict-required; other scalar keys fall back to
        documented defaults.
    Raises:
        FileNotFoundError: If path does not exist.
        ValueError: If YAML shape or values are invalid.
    Side Effects:
        Reads one UTF-8 YAML file from filesystem.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"timetrust config not found: {config_path}")

    payload = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    if not isinstance(payload, Mapping):
        raise ValueError("timetrust config must be mapping at top-level")

    version = _get_int(payload, "version", required=True)
    root_map = _get_mapping(payload, "timetrust", required=True)
    clock_sync_map = _get_mapping(root_map, "clock_sync", required=True)
    timestamping_map = _get_mapping(root_map, "timestamping", required=False)
    authority_map = _get_mapping(timestamping_map, "authority", required=False)
    worker_map = _get_mapping(root_map, "worker", required=False)

    clock_sync = ClockSyncRuntimeConfig(
        sources=_parse_sources(data=clock_sync_map.get("sources")),
        resync_interval_s=_get_float_with_default(
            clock_sync_map,
            "resync_interval_s",
            default=_RESYNC_INTERVAL_S_DEFAULT,
        ),
    )
    timestamping = TimestampingRuntimeConfig(
        sign_timeout_s=_get_float_with_default(
            timestamping_map,
            "sign_timeout_s",
            default=_SIGN_TIMEOUT_S_DEFAULT,
        ),
        plausibility_tolerance_s=_get_float_with_default(
            timestamping_map,
            "plausibility_tolerance_s",
            default=_PLAUSIBILITY_TOLERANCE_S_DEFAULT,
        ),
        signing_key_env=_get_str_with_default(
            authority_map,
            "signing_key_env",
            default=_SIGNING_KEY_ENV_DEFAULT,
        ),
        authority_url=_get_optional_str(authority_map, "url"),
        authority_timeout_s=_get_float_with_default(
            authority_map,
            "timeout_s",
            default=_AUTHORITY_TIMEOUT_S_DEFAULT,
        ),
    )
    metrics_port = _get_int_with_default(
        worker_map,
        "metrics_port",
        default=_METRICS_PORT_DEFAULT,
    )
    return TimetrustRuntimeConfig(
        version=version,
        clock_sync=clock_sync,
        timestamping=timestamping,
        metrics_port=metrics_port,
    )


def read_authority_signing_key_b64(
    *,
    config: TimestampingRuntimeConfig,
    environ: Mapping[str, str],
) -> str:
    """
    Read authority signing key from the environment variable named in config.

    Args:
        config: Timestamping runtime config.
        environ: Runtime environment mapping.
    Returns:
        str: Base64 raw Ed25519 private key.
    Assumptions:
        Only authority processes call this; verifiers need the public key only.
    Raises:
        ValueError: If variable is missing or blank.
    Side Effects:
        None.
    """
    value = environ.get(config.signing_key_env, "").strip()
    if not value:
        raise ValueError(f"{config.signing_key_env} must be set for the timestamp authority")
    return value


def _parse_sources(*, data: Any) -> tuple[TimeSource, ...]:
    """
    Parse `clock_sync.sources` list preserving priority order.

    Args:
        data: Raw YAML node.
    Returns:
        tuple[TimeSource, ...]: Validated sources.
    Assumptions:
        List order is source priority.
    Raises:
        ValueError: If node is missing, not a list, or one item is invalid.
    Side Effects:
        None.
    """
    if data is None:
        raise ValueError("missing required key: sources")
    if not isinstance(data, list):
        raise ValueError(f"expected list at key 'sources', got {type(data).__name__}")

    sources: list[TimeSource] = []
    for index, item in enumerate(data):
        if not isinstance(item, Mapping):
            raise ValueError(f"expected mapping at sources[{index}], got {type(item).__name__}")
        raw_kind = _get_str(item, "kind", required=True).strip().lower()
        try:
            kind = TimeSourceKind(raw_kind)
        except ValueError as error:
            allowed = tuple(member.value for member in TimeSourceKind)
            raise ValueError(
                f"sources[{index}].kind must be one of {allowed}, got {raw_kind!r}"
            ) from error
        sources.append(
            TimeSource(
                kind=kind,
                endpoint=_get_str(item, "endpoint", required=False),
                timeout_s=_get_float_with_default(
                    item,
                    "timeout_s",
                    default=_SOURCE_TIMEOUT_S_DEFAULT,
                ),
            )
        )
    return tuple(sources)


def _resolve_env_name(*, environ: Mapping[str, str]) -> str:
    raw_env_name = environ.get(_ENV_NAME_KEY, "dev").strip().lower()
    if raw_env_name not in _ALLOWED_ENVS:
        raise ValueError(
            f"{_ENV_NAME_KEY} must be one of {_ALLOWED_ENVS}, got {raw_env_name!r}"
        )
    return raw_env_name


def _get_mapping(data: Mapping[str, Any], key: str, *, required: bool) -> Mapping[str, Any]:
    """
    Read nested mapping from YAML payload.

    Args:
        data: Source mapping.
        key: Mapping key.
        required: Whether key is mandatory.
    Returns:
        Mapping[str, Any]: Nested mapping or empty mapping.
    Assumptions:
        Optional missing mapping sections are represented as empty mapping.
    Raises:
        ValueError: If required key missing or value is not mapping.
    Side Effects:
        None.
    """
    value = data.get(key)
    if value is None:
        if required:
            raise ValueError(f"missing required key: {key}")
        return {}
    if not isinstance(value, Mapping):
        raise ValueError(f"expected mapping at key '{key}', got {type(value).__name__}")
    return value


def _get_int(data: Mapping[str, Any], key: str, *, required: bool) -> int:
    value = data.get(key)
    if value is None:
        if required:
            raise ValueError(f"missing required key: {key}")
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"expected int at key '{key}', got {type(value).__name__}")
    return value


def _get_int_with_default(data: Mapping[str, Any], key: str, *, default: int) -> int:
    if key not in data:
        return default
    return _get_int(data, key, required=True)


def _get_float(data: Mapping[str, Any], key: str, *, required: bool) -> float:
    """
    Read float-compatible numeric value from payload while rejecting bools.

    Args:
        data: Source mapping.
        key: Numeric key name.
        required: Whether key is mandatory.
    Returns:
        float: Parsed float value.
    Assumptions:
        YAML integers are accepted and widened to float.
    Raises:
        ValueError: If missing required key or value type is invalid.
    Side Effects:
        None.
    """
    value = data.get(key)
    if value is None:
        if required:
            raise ValueError(f"missing required key: {key}")
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"expected float at key '{key}', got {type(value).__name__}")
    return float(value)


def _get_float_with_default(data: Mapping[str, Any], key: str, *, default: float) -> float:
    if key not in data:
        return default
    return _get_float(data, key, required=True)


def _get_str(data: Mapping[str, Any], key: str, *, required: bool) -> str:
    value = data.get(key)
    if value is None:
        if required:
            raise ValueError(f"missing required key: {key}")
        return ""
    if not isinstance(value, str):
        raise ValueError(f"expected str at key '{key}', got {type(value).__name__}")
    return value


def _get_str_with_default(data: Mapping[str, Any], key: str, *, default: str) -> str:
    if key not in data:
        return default
    return _get_str(data, key, required=True)


def _get_optional_str(data: Mapping[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"expected str at key '{key}', got {type(value).__name__}")
    return value
