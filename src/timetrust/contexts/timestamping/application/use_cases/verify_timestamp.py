from __future__ import annotations

import logging
from datetime import datetime, timedelta

from timetrust.contexts.timestamping.application.ports.clock import TimestampingClock
from timetrust.contexts.timestamping.application.ports.signature_verifier import (
    SignatureVerifier,
)
from timetrust.contexts.timestamping.domain import (
    TimeSig,
    build_signing_input,
    is_supported_digest,
)

log = logging.getLogger(__name__)

DEFAULT_PLAUSIBILITY_TOLERANCE = timedelta(minutes=5)


class TimestampVerifier:
    """
    TimestampVerifier — fail-closed check of a TimeSig against digest and public key.

    `verify` is total: every input, including adversarial bytes, yields a bool and never
    an exception. The only external read is corrected "now" for the plausibility window.

    Related:
      - src/timetrust/contexts/timestamping/domain/services/signing_input.py
      - src/timetrust/contexts/timestamping/application/ports/signature_verifier.py
      - src/timetrust/contexts/clock_sync/application/use_cases/read_clock.py
    """

    def __init__(
        self,
        *,
        signature_verifier: SignatureVerifier,
        clock: TimestampingClock,
        tolerance: timedelta = DEFAULT_PLAUSIBILITY_TOLERANCE,
    ) -> None:
        """
        Initialize verifier with signature primitive, clock, and future tolerance.

        Args:
            signature_verifier: Public-key signature check port.
            clock: Corrected clock, normally `ClockReader`.
            tolerance: Maximum allowed distance of TimeSig time into the future.
        Returns:
            None.
        Assumptions:
            Tolerance absorbs residual skew between this process and the authority.
        Raises:
            ValueError: If dependencies are missing or tolerance is negative.
        Side Effects:
            None.
        """
        if signature_verifier is None:  # type: ignore[truthy-bool]
            raise ValueError("TimestampVerifier requires signature_verifier")
        if clock is None:  # type: ignore[truthy-bool]
            raise ValueError("TimestampVerifier requires clock")
        if tolerance < timedelta(0):
            raise ValueError("TimestampVerifier requires tolerance >= 0")
        self._signature_verifier = signature_verifier
        self._clock = clock
        self._tolerance = tolerance

    def verify(self, digest: bytes, sig: TimeSig, public_key: bytes) -> bool:
        """
        Return whether `sig` is a valid authority signature over `digest` and its time.

        Args:
            digest: Payload digest supplied again by the caller.
            sig: TimeSig produced by `TimestampSigner.sign`.
            public_key: Authority public key.
        Returns:
            bool: True only when digest, time, and signature all check out and the time
            is not later than corrected now plus tolerance.
        Assumptions:
            Signing input is rebuilt with the same encoding the authority used.
        Raises:
            None.
        Side Effects:
            Reads corrected clock.
        """
        try:
            return self._verify(digest=digest, sig=sig, public_key=public_key)
        except Exception:  # noqa: BLE001
            log.debug("timestamp verification failed with exception", exc_info=True)
            return False

    def _verify(self, *, digest: bytes, sig: TimeSig, public_key: bytes) -> bool:
        if not is_supported_digest(digest):
            log.debug("timestamp rejected: unsupported digest")
            return False
        if not isinstance(sig, TimeSig) or not isinstance(public_key, bytes):
            log.debug("timestamp rejected: malformed signature value or public key")
            return False
        if not _is_aware(sig.time) or not sig.signature:
            log.debug("timestamp rejected: naive time or empty signature")
            return False

        latest_plausible = self._clock.now() + self._tolerance
        if sig.time > latest_plausible:
            log.debug(
                "timestamp rejected: time %s later than %s",
                sig.time.isoformat(),
                latest_plausible.isoformat(),
            )
            return False

        message = build_signing_input(digest=digest, time=sig.time)
        valid = self._signature_verifier.verify(
            public_key=public_key,
            signature=sig.signature,
            message=message,
        )
        if valid is not True:
            log.debug("timestamp rejected: signature mismatch")
            return False
        return True


def _is_aware(value: datetime) -> bool:
    if not isinstance(value, datetime):
        return False
    return value.tzinfo is not None and value.utcoffset() is not None
