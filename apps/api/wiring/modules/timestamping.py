"""
Composition helpers for the timestamp authority API module.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Mapping

from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey
from fastapi import APIRouter

from timetrust.contexts.timestamping.adapters.inbound.api import build_timestamps_router
from timetrust.contexts.timestamping.adapters.outbound import (
    Ed25519SignatureVerifier,
    LocalEd25519TimestampAuthority,
    generate_ed25519_key_pair,
    load_ed25519_private_key_b64,
)
from timetrust.contexts.timestamping.application import (
    TimestampingClock,
    TimestampSigner,
    TimestampVerifier,
)
from timetrust.platform.config import (
    TimestampingRuntimeConfig,
    read_authority_signing_key_b64,
)

log = logging.getLogger(__name__)

_ENV_NAME_KEY = "TIMETRUST_ENV"
_ALLOWED_ENVS = ("dev", "prod", "test")


@dataclass(frozen=True, slots=True)
class TimestampingApiModule:
    """
    TimestampingApiModule — in-process authority with its signer, verifier, and router.

    Related:
      - src/timetrust/contexts/timestamping/adapters/outbound/security/ed25519/
        local_ed25519_timestamp_authority.py
      - src/timetrust/contexts/timestamping/adapters/inbound/api/routes/timestamps.py
      - apps/api/main/app.py
    """

    authority: LocalEd25519TimestampAuthority
    signer: TimestampSigner
    verifier: TimestampVerifier
    router: APIRouter


def build_timestamping_api_module(
    *,
    config: TimestampingRuntimeConfig,
    clock: TimestampingClock,
    environ: Mapping[str, str],
) -> TimestampingApiModule:
    """
    Build authority, use-cases, and router from runtime config and environment.

    Args:
        config: Validated timestamping runtime config.
        clock: Corrected clock, normally the API process `ClockReader`.
        environ: Runtime environment mapping holding the signing key.
    Returns:
        TimestampingApiModule: Wired module.
    Assumptions:
        `prod` requires a configured signing key; `dev`/`test` fall back to an ephemeral
        key so local runs need no secrets.
    Raises:
        ValueError: If env name is unsupported, or prod key is missing/malformed.
    Side Effects:
        May generate an ephemeral key pair.
    """
    private_key = _resolve_private_key(config=config, environ=environ)
    authority = LocalEd25519TimestampAuthority(private_key=private_key, clock=clock)
    signer = TimestampSigner(authority=authority, default_timeout_s=config.sign_timeout_s)
    verifier = TimestampVerifier(
        signature_verifier=Ed25519SignatureVerifier(),
        clock=clock,
        tolerance=timedelta(seconds=config.plausibility_tolerance_s),
    )
    router = build_timestamps_router(
        signer=signer,
        verifier=verifier,
        public_key=authority.public_key,
        key_id=authority.key_id,
    )
    log.info("timestamp authority ready key_id=%s", authority.key_id)
    return TimestampingApiModule(
        authority=authority,
        signer=signer,
        verifier=verifier,
        router=router,
    )


def _resolve_private_key(
    *,
    config: TimestampingRuntimeConfig,
    environ: Mapping[str, str],
) -> Ed25519PrivateKey:
    """
    Load configured signing key or fall back to an ephemeral one outside prod.

    Args:
        config: Timestamping runtime config naming the key variable.
        environ: Runtime environment mapping.
    Returns:
        Ed25519PrivateKey: Authority private key.
    Assumptions:
        Ephemeral keys make every restart a new authority identity.
    Raises:
        ValueError: If env name is unsupported or key is required but invalid/missing.
    Side Effects:
        Logs a warning when an ephemeral key is generated.
    """
    env_name = environ.get(_ENV_NAME_KEY, "dev").strip().lower()
    if env_name not in _ALLOWED_ENVS:
        raise ValueError(f"{_ENV_NAME_KEY} must be one of {_ALLOWED_ENVS}, got {env_name!r}")

    if environ.get(config.signing_key_env, "").strip() or env_name == "prod":
        return load_ed25519_private_key_b64(
            read_authority_signing_key_b64(config=config, environ=environ)
        )

    ephemeral = generate_ed25519_key_pair()
    log.warning(
        "%s is not set, using ephemeral authority key key_id=%s env=%s",
        config.signing_key_env,
        ephemeral.key_id,
        env_name,
    )
    return load_ed25519_private_key_b64(ephemeral.private_key_b64)
