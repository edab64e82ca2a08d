from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from apps.api.main.app import create_app
from timetrust.contexts.timestamping.adapters.outbound import generate_ed25519_key_pair

_CONFIG_YAML = """
version: 1
timetrust:
  clock_sync:
    resync_interval_s: 60
    sources:
      - kind: daytime
        endpoint: 127.0.0.1:1
        timeout_s: 0.5
"""


def _config(tmp_path: Path) -> str:
    path = tmp_path / "timetrust.yaml"
    path.write_text(_CONFIG_YAML, encoding="utf-8")
    return str(path)


def test_create_app_uses_configured_signing_key(tmp_path: Path) -> None:
    """
    Verify API publishes the key pair configured through the environment.

    Args:
        tmp_path: Pytest temporary directory.
    Returns:
        None.
    Assumptions:
        Resync loop is disabled so no network I/O happens during the test.
    Raises:
        AssertionError: If published public key differs from configured one.
    Side Effects:
        None.
    """
    pair = generate_ed25519_key_pair()
    app = create_app(
        environ={
            "TIMETRUST_ENV": "prod",
            "TIMETRUST_AUTHORITY_SIGNING_KEY_B64": pair.private_key_b64,
        },
        config_path=_config(tmp_path),
        resync_enabled=False,
    )

    with TestClient(app) as client:
        public_key = client.get("/v1/timestamps/public-key").json()
        time_response = client.get("/v1/time")

    assert public_key == {
        "algorithm": "ed25519",
        "public_key_b64": pair.public_key_b64,
        "key_id": pair.key_id,
    }
    assert time_response.status_code == 200
    assert time_response.json()["synced"] is False


def test_create_app_signs_and_verifies_with_ephemeral_dev_key(tmp_path: Path) -> None:
    app = create_app(environ={}, config_path=_config(tmp_path), resync_enabled=False)
    digest_hex = "11" * 32

    with TestClient(app) as client:
        token = client.post("/v1/timestamps", json={"digest_hex": digest_hex}).json()["token"]
        verified = client.post(
            "/v1/timestamps/verify",
            json={"digest_hex": digest_hex, "token": token},
        )

    assert verified.json() == {"valid": True}


def test_create_app_requires_signing_key_in_prod(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="TIMETRUST_AUTHORITY_SIGNING_KEY_B64"):
        create_app(
            environ={"TIMETRUST_ENV": "prod"},
            config_path=_config(tmp_path),
            resync_enabled=False,
        )


def test_create_app_rejects_unknown_env(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="TIMETRUST_ENV"):
        create_app(
            environ={"TIMETRUST_ENV": "staging"},
            config_path=_config(tmp_path),
            resync_enabled=False,
        )
