from __future__ import annotations

from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from timetrust.contexts.timestamping.adapters.outbound.security.ed25519.ed25519_keys import (
    key_id_for_public_key,
    public_key_bytes,
)
from timetrust.contexts.timestamping.application.ports.clock import TimestampingClock
from timetrust.contexts.timestamping.application.ports.timestamp_authority import (
    AuthoritySignature,
    SigningRejectedError,
    TimestampAuthority,
)
from timetrust.contexts.timestamping.domain import build_signing_input, is_supported_digest


class LocalEd25519TimestampAuthority(TimestampAuthority):
    """
    LocalEd25519TimestampAuthority — in-process authority signing with a held Ed25519 key.

    Runs inside the authority service (`apps/api`) where the private key lives. Time is
    taken from the injected corrected clock, so signed instants follow the synced offset.

    Related:
      - src/timetrust/contexts/timestamping/application/ports/timestamp_authority.py
      - src/timetrust/contexts/timestamping/adapters/inbound/api/routes/timestamps.py
      - apps/api/wiring/modules/timestamping.py
    """

    def __init__(self, *, private_key: Ed25519PrivateKey, clock: TimestampingClock) -> None:
        """
        Initialize authority with private key and corrected clock.

        Args:
            private_key: Ed25519 private key owned by the authority.
            clock: Corrected clock, normally `ClockReader`.
        Returns:
            None.
        Assumptions:
            Private key never leaves this object.
        Raises:
            ValueError: If one of dependencies is missing.
        Side Effects:
            None.
        """
        if private_key is None:  # type: ignore[truthy-bool]
            raise ValueError("LocalEd25519TimestampAuthority requires private_key")
        if clock is None:  # type: ignore[truthy-bool]
            raise ValueError("LocalEd25519TimestampAuthority requires clock")
        self._private_key = private_key
        self._clock = clock
        self._public_key = public_key_bytes(private_key.public_key())
        self._key_id = key_id_for_public_key(self._public_key)

    @property
    def public_key(self) -> bytes:
        return self._public_key

    @property
    def key_id(self) -> str:
        return self._key_id

    async def sign(self, *, digest: bytes) -> AuthoritySignature:
        """
        Record corrected now and sign `digest || time`.

        Args:
            digest: Payload digest bytes.
        Returns:
            AuthoritySignature: Signed time, signature, and key id.
        Assumptions:
            Signing is CPU-bound and short; it runs inline on the event loop.
        Raises:
            SigningRejectedError: If digest length is unsupported.
        Side Effects:
            Reads corrected clock.
        """
        if not is_supported_digest(digest):
            raise SigningRejectedError(
                code="invalid_digest",
                message="Digest must be 32, 48, or 64 bytes",
            )
        signed_at = self._clock.now()
        signature = self._private_key.sign(build_signing_input(digest=digest, time=signed_at))
        return AuthoritySignature(time=signed_at, signature=signature, key_id=self._key_id)
