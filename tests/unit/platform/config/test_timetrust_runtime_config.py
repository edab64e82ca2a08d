from __future__ import annotations

from pathlib import Path

import pytest

from timetrust.contexts.clock_sync.domain import TimeSourceKind
from timetrust.platform.config import (
    load_timetrust_runtime_config,
    read_authority_signing_key_b64,
    resolve_timetrust_config_path,
)

_MINIMAL_YAML = """
version: 1
timetrust:
  clock_sync:
    sources:
      - kind: daytime
        endpoint: time.nist.gov
      - kind: http_date
        endpoint: https://google.com
        timeout_s: 2.5
"""


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "timetrust.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_resolve_config_path_precedence() -> None:
    environ = {"TIMETRUST_CONFIG": "/etc/timetrust.yaml", "TIMETRUST_ENV": "prod"}

    assert resolve_timetrust_config_path(environ=environ, cli_path="cli.yaml") == Path("cli.yaml")
    assert resolve_timetrust_config_path(environ=environ) == Path("/etc/timetrust.yaml")
    assert resolve_timetrust_config_path(environ={"TIMETRUST_ENV": "prod"}) == Path(
        "configs/prod/timetrust.yaml"
    )
    assert resolve_timetrust_config_path(environ={}) == Path("configs/dev/timetrust.yaml")


def test_resolve_config_path_rejects_unknown_env() -> None:
    with pytest.raises(ValueError):
        resolve_timetrust_config_path(environ={"TIMETRUST_ENV": "staging"})


def test_load_minimal_config_applies_defaults_and_keeps_source_order(tmp_path: Path) -> None:
    config = load_timetrust_runtime_config(_write(tmp_path, _MINIMAL_YAML))

    assert [source.kind for source in config.clock_sync.sources] == [
        TimeSourceKind.DAYTIME,
        TimeSourceKind.HTTP_DATE,
    ]
    assert config.clock_sync.sources[0].timeout_s == 5.0
    assert config.clock_sync.sources[1].timeout_s == 2.5
    assert config.clock_sync.resync_interval_s == 3600.0
    assert config.timestamping.sign_timeout_s == 10.0
    assert config.timestamping.plausibility_tolerance_s == 300.0
    assert config.timestamping.signing_key_env == "TIMETRUST_AUTHORITY_SIGNING_KEY_B64"
    assert config.timestamping.authority_url is None
    assert config.metrics_port == 9310


@pytest.mark.parametrize(
    "text",
    [
        "version: 2\ntimetrust:\n  clock_sync:\n    sources: [{kind: daytime, endpoint: a}]\n",
        "version: 1\ntimetrust:\n  clock_sync:\n    sources: []\n",
        "version: 1\ntimetrust:\n  clock_sync: {}\n",
        "version: 1\ntimetrust:\n  clock_sync:\n    sources: [{kind: ntp, endpoint: a}]\n",
        "version: 1\ntimetrust:\n  clock_sync:\n    sources: [{kind: daytime, endpoint: a, timeout_s: 0}]\n",
        "version: 1\ntimetrust:\n  clock_sync:\n    sources: [{kind: daytime, endpoint: a}]\n"
        "  timestamping:\n    authority:\n      url: ftp://authority\n",
        "- just\n- a list\n",
    ],
)
def test_load_config_rejects_invalid_shapes(tmp_path: Path, text: str) -> None:
    with pytest.raises(ValueError):
        load_timetrust_runtime_config(_write(tmp_path, text))


def test_load_config_raises_for_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_timetrust_runtime_config(tmp_path / "missing.yaml")


@pytest.mark.parametrize("env_name", ["dev", "test", "prod"])
def test_shipped_configs_are_valid(env_name: str) -> None:
    path = Path(__file__).resolve().parents[4] / "configs" / env_name / "timetrust.yaml"

    config = load_timetrust_runtime_config(path)

    assert config.clock_sync.sources[0].kind is TimeSourceKind.DAYTIME
    assert config.clock_sync.sources[-1].kind is TimeSourceKind.HTTP_DATE


def test_read_authority_signing_key_requires_non_blank_value(tmp_path: Path) -> None:
    config = load_timetrust_runtime_config(_write(tmp_path, _MINIMAL_YAML)).timestamping

    assert (
        read_authority_signing_key_b64(
            config=config,
            environ={"TIMETRUST_AUTHORITY_SIGNING_KEY_B64": " abc= "},
        )
        == "abc="
    )
    with pytest.raises(ValueError):
        read_authority_signing_key_b64(config=config, environ={})
