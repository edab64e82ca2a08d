from __future__ import annotations

import struct
from datetime import datetime, timedelta, timezone

# SHA-256 / SHA-384 / SHA-512 sized digests.
SUPPORTED_DIGEST_LENGTHS = frozenset({32, 48, 64})

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MICROSECOND = timedelta(microseconds=1)
_TIME_STRUCT = struct.Struct(">q")


def is_supported_digest(digest: object) -> bool:
    return isinstance(digest, bytes) and len(digest) in SUPPORTED_DIGEST_LENGTHS


def encode_signed_time(value: datetime) -> bytes:
    """
    Encode instant as signed 64-bit big-endian microseconds since Unix epoch (UTC).

    Args:
        value: Timezone-aware datetime.
    Returns:
        bytes: 8-byte encoding.
    Assumptions:
        Integer division by one microsecond keeps the encoding exact for every datetime.
    Raises:
        ValueError: If value is naive.
    Side Effects:
        None.
    """
    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError("signed time must be timezone-aware datetime")
    elapsed_us = (value.astimezone(timezone.utc) - _EPOCH) // _ONE_MICROSECOND
    return _TIME_STRUCT.pack(elapsed_us)


def build_signing_input(*, digest: bytes, time: datetime) -> bytes:
    """
    Build the exact byte sequence an authority signs: `digest || int64_be(time_us)`.

    Args:
        digest: Payload digest (32, 48, or 64 bytes).
        time: Authority-recorded instant.
    Returns:
        bytes: Signing input.
    Assumptions:
        Time encoding is fixed-width, so the digest/time split is unambiguous.
    Raises:
        ValueError: If digest length is unsupported or time is naive.
    Side Effects:
        None.
    """
    if not is_supported_digest(digest):
        raise ValueError(
            f"digest must be bytes of length {sorted(SUPPORTED_DIGEST_LENGTHS)}"
        )
    return digest + encode_signed_time(time)
