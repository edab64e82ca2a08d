from .ed25519_keys import (
    Ed25519KeyPairB64,
    generate_ed25519_key_pair,
    key_id_for_public_key,
    load_ed25519_private_key_b64,
    load_public_key_b64,
    public_key_bytes,
)
from .ed25519_signature_verifier import Ed25519SignatureVerifier
from .local_ed25519_timestamp_authority import LocalEd25519TimestampAuthority

__all__ = [
    "Ed25519KeyPairB64",
    "Ed25519SignatureVerifier",
    "LocalEd25519TimestampAuthority",
    "generate_ed25519_key_pair",
    "key_id_for_public_key",
    "load_ed25519_private_key_b64",
    "load_public_key_b64",
    "public_key_bytes",
]
