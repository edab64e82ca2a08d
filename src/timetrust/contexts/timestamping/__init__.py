from .application import (
    AuthoritySignature,
    SignatureVerifier,
    SigningRejectedError,
    SigningUnavailableError,
    TimestampAuthority,
    TimestampingError,
    TimestampSigner,
    TimestampVerifier,
)
from .domain import TimeSig, build_signing_input

__all__ = [
    "AuthoritySignature",
    "SignatureVerifier",
    "SigningRejectedError",
    "SigningUnavailableError",
    "TimeSig",
    "TimestampAuthority",
    "TimestampSigner",
    "TimestampVerifier",
    "TimestampingError",
    "build_signing_input",
]
