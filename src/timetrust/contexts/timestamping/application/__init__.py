from .ports import (
    AuthoritySignature,
    SignatureVerifier,
    SigningRejectedError,
    SigningUnavailableError,
    TimestampAuthority,
    TimestampingClock,
    TimestampingError,
)
from .services import (
    DEFAULT_DIGEST_ALGORITHM,
    SUPPORTED_DIGEST_ALGORITHMS,
    digest_bytes,
    digest_file,
    digest_stream,
)
from .use_cases import DEFAULT_PLAUSIBILITY_TOLERANCE, TimestampSigner, TimestampVerifier

__all__ = [
    "AuthoritySignature",
    "DEFAULT_DIGEST_ALGORITHM",
    "DEFAULT_PLAUSIBILITY_TOLERANCE",
    "SUPPORTED_DIGEST_ALGORITHMS",
    "SignatureVerifier",
    "SigningRejectedError",
    "SigningUnavailableError",
    "TimestampAuthority",
    "TimestampSigner",
    "TimestampVerifier",
    "TimestampingClock",
    "TimestampingError",
    "digest_bytes",
    "digest_file",
    "digest_stream",
]
