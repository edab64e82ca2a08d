from __future__ import annotations

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey
from cryptography.hazmat.primitives.serialization import (
    load_der_public_key,
    load_pem_public_key,
)

from timetrust.contexts.timestamping.application.ports.signature_verifier import (
    SignatureVerifier,
)

_RAW_KEY_LENGTH = 32
_SIGNATURE_LENGTH = 64
_PEM_PREFIX = b"-----BEGIN"


class Ed25519SignatureVerifier(SignatureVerifier):
    """
    Ed25519SignatureVerifier — Ed25519 check over raw, PEM, or DER public keys.

    Related:
      - src/timetrust/contexts/timestamping/application/ports/signature_verifier.py
      - src/timetrust/contexts/timestamping/application/use_cases/verify_timestamp.py
    """

    def verify(self, *, public_key: bytes, signature: bytes, message: bytes) -> bool:
        """
        Verify Ed25519 signature without raising on malformed input.

        Args:
            public_key: Raw 32-byte key, PEM or DER SubjectPublicKeyInfo.
            signature: 64-byte Ed25519 signature.
            message: Signed bytes.
        Returns:
            bool: True only for a valid signature under an Ed25519 key.
        Assumptions:
            Non-Ed25519 keys are treated as invalid, not as errors.
        Raises:
            None.
        Side Effects:
            None.
        """
        if len(signature) != _SIGNATURE_LENGTH:
            return False
        key = _load_public_key(public_key)
        if key is None:
            return False
        try:
            key.verify(signature, message)
        except InvalidSignature:
            return False
        return True


def _load_public_key(encoded: bytes) -> Ed25519PublicKey | None:
    """
    Load Ed25519 public key from raw/PEM/DER bytes.

    Args:
        encoded: Encoded public key bytes.
    Returns:
        Ed25519PublicKey | None: Loaded key or None when bytes are not an Ed25519 key.
    Assumptions:
        32-byte inputs are raw keys; anything else is SubjectPublicKeyInfo.
    Raises:
        None.
    Side Effects:
        None.
    """
    try:
        if len(encoded) == _RAW_KEY_LENGTH:
            return Ed25519PublicKey.from_public_bytes(encoded)
        if encoded.lstrip().startswith(_PEM_PREFIX):
            loaded = load_pem_public_key(encoded)
        else:
            loaded = load_der_public_key(encoded)
    except (ValueError, TypeError, UnsupportedAlgorithm):
        return None
    if not isinstance(loaded, Ed25519PublicKey):
        return None
    return loaded
