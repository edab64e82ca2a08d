from __future__ import annotations

import base64
import binascii
import hashlib
from dataclasses import dataclass

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)

_RAW_KEY_LENGTH = 32
_KEY_ID_HEX_LENGTH = 16


@dataclass(frozen=True, slots=True)
class Ed25519KeyPairB64:
    """
    Ed25519KeyPairB64 — freshly generated key pair as base64 raw 32-byte keys.
    """

    private_key_b64: str
    public_key_b64: str
    key_id: str


def generate_ed25519_key_pair() -> Ed25519KeyPairB64:
    """
    Generate authority key pair for local/dev signing.

    Args:
        None.
    Returns:
        Ed25519KeyPairB64: Base64 raw private/public keys and key id.
    Assumptions:
        Private key is handed to the authority process only, never to verifiers.
    Raises:
        None.
    Side Effects:
        Uses OS CSPRNG.
    """
    private_key = Ed25519PrivateKey.generate()
    private_raw = private_key.private_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PrivateFormat.Raw,
        encryption_algorithm=serialization.NoEncryption(),
    )
    public_raw = public_key_bytes(private_key.public_key())
    return Ed25519KeyPairB64(
        private_key_b64=base64.b64encode(private_raw).decode("ascii"),
        public_key_b64=base64.b64encode(public_raw).decode("ascii"),
        key_id=key_id_for_public_key(public_raw),
    )


def load_ed25519_private_key_b64(value: str) -> Ed25519PrivateKey:
    """
    Load private key from base64 raw 32-byte seed.

    Args:
        value: Base64-encoded raw private key (e.g. `TIMETRUST_AUTHORITY_SIGNING_KEY_B64`).
    Returns:
        Ed25519PrivateKey: Loaded private key.
    Assumptions:
        Only the raw seed form is accepted for secrets in environment variables.
    Raises:
        ValueError: If value is empty, not base64, or not 32 bytes.
    Side Effects:
        None.
    """
    raw = _decode_b64_key(value=value, name="signing key")
    return Ed25519PrivateKey.from_private_bytes(raw)


def load_public_key_b64(value: str) -> bytes:
    """
    Decode base64 raw 32-byte public key into bytes accepted by the verifier.
    """
    return _decode_b64_key(value=value, name="public key")


def public_key_bytes(public_key: Ed25519PublicKey) -> bytes:
    return public_key.public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw,
    )


def key_id_for_public_key(public_key: bytes) -> str:
    """
    Stable short key id: first 16 hex chars of SHA-256 over the raw public key.
    """
    return hashlib.sha256(public_key).hexdigest()[:_KEY_ID_HEX_LENGTH]


def _decode_b64_key(*, value: str, name: str) -> bytes:
    normalized = value.strip()
    if not normalized:
        raise ValueError(f"Ed25519 {name} must be non-empty")
    try:
        raw = base64.b64decode(normalized, validate=True)
    except binascii.Error as error:
        raise ValueError(f"Ed25519 {name} must be valid base64") from error
    if len(raw) != _RAW_KEY_LENGTH:
        raise ValueError(f"Ed25519 {name} must decode to {_RAW_KEY_LENGTH} bytes")
    return raw
