from __future__ import annotations

from typing import Protocol


class SignatureVerifier(Protocol):
    """
    SignatureVerifier — порт примитива проверки подписи открытым ключом.

    Related:
      - src/timetrust/contexts/timestamping/application/use_cases/verify_timestamp.py
      - src/timetrust/contexts/timestamping/adapters/outbound/security/ed25519/
        ed25519_signature_verifier.py
    """

    def verify(self, *, public_key: bytes, signature: bytes, message: bytes) -> bool:
        """
        Check signature over message against public key.

        Args:
            public_key: Encoded public key.
            signature: Signature bytes.
            message: Exact signed bytes.
        Returns:
            bool: True only for a valid signature.
        Assumptions:
            Callers treat any exception as a failed check.
        Raises:
            None.
        Side Effects:
            None.
        """
        ...

