from .signing_input import (
    SUPPORTED_DIGEST_LENGTHS,
    build_signing_input,
    encode_signed_time,
    is_supported_digest,
)

__all__ = [
    "SUPPORTED_DIGEST_LENGTHS",
    "build_signing_input",
    "encode_signed_time",
    "is_supported_digest",
]
