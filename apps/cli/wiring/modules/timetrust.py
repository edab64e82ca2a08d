from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Mapping

from apps.api.wiring.modules.clock_sync import ClockSyncModule, build_clock_sync_module
from timetrust.contexts.timestamping.adapters.outbound import (
    Ed25519SignatureVerifier,
    RequestsTimestampAuthority,
    RequestsTimestampAuthorityConfig,
)
from timetrust.contexts.timestamping.application import (
    TimestampingClock,
    TimestampSigner,
    TimestampVerifier,
)
from timetrust.platform.config import (
    TimetrustRuntimeConfig,
    load_timetrust_runtime_config,
    resolve_timetrust_config_path,
)


@dataclass(frozen=True, slots=True)
class TimetrustCliWiring:
    """
    Сборка зависимостей для CLI команд timetrust.

    Config path precedence is `--config` > `TIMETRUST_CONFIG` > `configs/<env>/timetrust.yaml`.
    """

    environ: Mapping[str, str]
    config_path: str | None = None

    def runtime_config(self) -> TimetrustRuntimeConfig:
        path = resolve_timetrust_config_path(environ=self.environ, cli_path=self.config_path)
        return load_timetrust_runtime_config(path)

    def clock_sync_module(self) -> ClockSyncModule:
        return build_clock_sync_module(config=self.runtime_config().clock_sync)

    def remote_signer(self, *, authority_url: str | None = None) -> TimestampSigner:
        """
        Build signer backed by the remote authority API.

        Parameters:
        - authority_url: optional override of `timestamping.authority.url`.

        Returns:
        - `TimestampSigner` over `RequestsTimestampAuthority`.

        Errors/Exceptions:
        - ValueError when no authority URL is configured or given.
        """
        config = self.runtime_config().timestamping
        effective_url = authority_url if authority_url else config.authority_url
        if not effective_url:
            raise ValueError("timestamp authority URL is not configured (use --authority-url)")
        authority = RequestsTimestampAuthority(
            config=RequestsTimestampAuthorityConfig(
                base_url=effective_url,
                timeout_s=config.authority_timeout_s,
            )
        )
        return TimestampSigner(authority=authority, default_timeout_s=config.sign_timeout_s)

    def verifier(self, *, clock: TimestampingClock) -> TimestampVerifier:
        config = self.runtime_config().timestamping
        return TimestampVerifier(
            signature_verifier=Ed25519SignatureVerifier(),
            clock=clock,
            tolerance=timedelta(seconds=config.plausibility_tolerance_s),
        )
