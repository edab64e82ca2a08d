from .clients.http_authority import (
    RequestsTimestampAuthority,
    RequestsTimestampAuthorityConfig,
)
from .codec import TimeSigDecodeError, decode_time_sig, encode_time_sig
from .security.ed25519 import (
    Ed25519SignatureVerifier,
    LocalEd25519TimestampAuthority,
    generate_ed25519_key_pair,
    key_id_for_public_key,
    load_ed25519_private_key_b64,
    load_public_key_b64,
)

__all__ = [
    "Ed25519SignatureVerifier",
    "LocalEd25519TimestampAuthority",
    "RequestsTimestampAuthority",
    "RequestsTimestampAuthorityConfig",
    "TimeSigDecodeError",
    "decode_time_sig",
    "encode_time_sig",
    "generate_ed25519_key_pair",
    "key_id_for_public_key",
    "load_ed25519_private_key_b64",
    "load_public_key_b64",
]
