from .sign_timestamp import TimestampSigner
from .verify_timestamp import DEFAULT_PLAUSIBILITY_TOLERANCE, TimestampVerifier

__all__ = [
    "DEFAULT_PLAUSIBILITY_TOLERANCE",
    "TimestampSigner",
    "TimestampVerifier",
]
