from __future__ import annotations

import asyncio
import logging

from timetrust.contexts.timestamping.application.ports.timestamp_authority import (
    SigningRejectedError,
    SigningUnavailableError,
    TimestampAuthority,
)
from timetrust.contexts.timestamping.domain import (
    SUPPORTED_DIGEST_LENGTHS,
    TimeSig,
    is_supported_digest,
)

log = logging.getLogger(__name__)

_DEFAULT_TIMEOUT_S = 10.0


class TimestampSigner:
    """
    TimestampSigner — obtain a TimeSig for a payload digest from a trusted authority.

    No private key is ever held here; the security property rests on the authority.

    Related:
      - src/timetrust/contexts/timestamping/application/ports/timestamp_authority.py
      - src/timetrust/contexts/timestamping/application/use_cases/verify_timestamp.py
      - apps/cli/commands/sign.py
    """

    def __init__(
        self,
        *,
        authority: TimestampAuthority,
        default_timeout_s: float = _DEFAULT_TIMEOUT_S,
    ) -> None:
        """
        Initialize signer with authority port and default per-call timeout.

        Args:
            authority: External signer port.
            default_timeout_s: Timeout used when the caller passes none.
        Returns:
            None.
        Assumptions:
            Authority implementations are safe to call concurrently.
        Raises:
            ValueError: If authority is missing or timeout is not positive.
        Side Effects:
            None.
        """
        if authority is None:  # type: ignore[truthy-bool]
            raise ValueError("TimestampSigner requires authority")
        if default_timeout_s <= 0:
            raise ValueError("TimestampSigner requires default_timeout_s > 0")
        self._authority = authority
        self._default_timeout_s = default_timeout_s

    async def sign(self, digest: bytes, *, timeout_s: float | None = None) -> TimeSig:
        """
        Send digest to the authority and package its answer as TimeSig.

        Args:
            digest: Payload digest (32, 48, or 64 bytes).
            timeout_s: Optional per-call timeout overriding the default.
        Returns:
            TimeSig: Authority time, signature, and signer key id.
        Assumptions:
            Caller cancellation propagates and produces no TimeSig.
        Raises:
            SigningRejectedError: If digest is malformed or the authority declines.
            SigningUnavailableError: If the authority is unreachable, times out, or
                answers with an unusable time.
        Side Effects:
            Calls the external signer.
        """
        if not is_supported_digest(digest):
            raise SigningRejectedError(
                code="invalid_digest",
                message=(
                    "Digest must be bytes of length "
                    f"{', '.join(str(size) for size in sorted(SUPPORTED_DIGEST_LENGTHS))}"
                ),
            )
        effective_timeout_s = self._default_timeout_s if timeout_s is None else timeout_s
        if effective_timeout_s <= 0:
            raise ValueError("TimestampSigner.sign requires timeout_s > 0")

        try:
            answer = await asyncio.wait_for(
                self._authority.sign(digest=digest),
                timeout=effective_timeout_s,
            )
        except TimeoutError as error:
            log.warning("timestamp authority timed out after %ss", effective_timeout_s)
            raise SigningUnavailableError(
                code="signing_timeout",
                message=f"Timestamp authority did not answer within {effective_timeout_s}s",
            ) from error

        try:
            time_sig = TimeSig(
                time=answer.time,
                signature=answer.signature,
                signer_key_id=answer.key_id,
            )
        except (TypeError, ValueError) as error:
            raise SigningUnavailableError(
                code="invalid_authority_response",
                message=f"Timestamp authority answer is unusable: {error}",
            ) from error

        log.info(
            "digest timestamped time=%s key_id=%s",
            time_sig.time.isoformat(),
            time_sig.signer_key_id,
        )
        return time_sig
