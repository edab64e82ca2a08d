from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone


@dataclass(frozen=True, slots=True)
class TimeSig:
    """
    TimeSig — подпись authority, связывающая дайджест данных с моментом UTC.

    The payload (or its digest) is not stored; callers supply it again on verify.
    Instances are values: verification never mutates them and may be repeated.

    Related:
      - src/timetrust/contexts/timestamping/domain/services/signing_input.py
      - src/timetrust/contexts/timestamping/application/use_cases/sign_timestamp.py
      - src/timetrust/contexts/timestamping/application/use_cases/verify_timestamp.py
      - src/timetrust/contexts/timestamping/adapters/outbound/codec/time_sig_token_codec.py
    """

    time: datetime
    signature: bytes
    signer_key_id: str | None = None

    def __post_init__(self) -> None:
        """
        Normalize time to UTC and signature to immutable bytes.

        Args:
            None.
        Returns:
            None.
        Assumptions:
            Signature content is opaque here; an empty or foreign signature is a value
            that simply never verifies.
        Raises:
            ValueError: If time is naive.
            TypeError: If time is not a datetime or signature is not bytes-like.
        Side Effects:
            Replaces frozen fields with normalized values.
        """
        if not isinstance(self.time, datetime):
            raise TypeError("TimeSig.time must be datetime")
        if self.time.tzinfo is None or self.time.utcoffset() is None:
            raise ValueError("TimeSig.time must be timezone-aware datetime")
        if not isinstance(self.signature, (bytes, bytearray, memoryview)):
            raise TypeError("TimeSig.signature must be bytes")

        object.__setattr__(self, "time", self.time.astimezone(timezone.utc))
        object.__setattr__(self, "signature", bytes(self.signature))
        if self.signer_key_id is not None:
            normalized_key_id = self.signer_key_id.strip()
            object.__setattr__(self, "signer_key_id", normalized_key_id or None)
