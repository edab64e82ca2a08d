from .payload_digest import (
    DEFAULT_DIGEST_ALGORITHM,
    SUPPORTED_DIGEST_ALGORITHMS,
    digest_bytes,
    digest_file,
    digest_stream,
)

__all__ = [
    "DEFAULT_DIGEST_ALGORITHM",
    "SUPPORTED_DIGEST_ALGORITHMS",
    "digest_bytes",
    "digest_file",
    "digest_stream",
]
