from .clock import TimestampingClock
from .signature_verifier import SignatureVerifier
from .timestamp_authority import (
    AuthoritySignature,
    SigningRejectedError,
    SigningUnavailableError,
    TimestampAuthority,
    TimestampingError,
)

__all__ = [
    "AuthoritySignature",
    "SignatureVerifier",
    "SigningRejectedError",
    "SigningUnavailableError",
    "TimestampAuthority",
    "TimestampingClock",
    "TimestampingError",
]
