from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol


class TimestampingError(Exception):
    """
    TimestampingError — base deterministic error of the signing flow.

    Related:
      - src/timetrust/contexts/timestamping/application/use_cases/sign_timestamp.py
      - src/timetrust/contexts/timestamping/adapters/inbound/api/routes/timestamps.py
    """

    def __init__(self, *, code: str, message: str) -> None:
        """
        Initialize signing error with stable error code.

        Args:
            code: Machine-readable deterministic error code.
            message: Human-readable error description.
        Returns:
            None.
        Assumptions:
            Inbound adapters map this error into structured HTTP payloads.
        Raises:
            None.
        Side Effects:
            None.
        """
        super().__init__(message)
        self.code = code
        self.message = message


class SigningUnavailableError(TimestampingError):
    """
    SigningUnavailableError — external signer could not be reached or answered garbage.
    """

    def __init__(self, *, message: str, code: str = "signing_unavailable") -> None:
        super().__init__(code=code, message=message)


class SigningRejectedError(TimestampingError):
    """
    SigningRejectedError — external signer declined the request (e.g. malformed digest).
    """

    def __init__(self, *, message: str, code: str = "signing_rejected") -> None:
        super().__init__(code=code, message=message)


@dataclass(frozen=True, slots=True)
class AuthoritySignature:
    """
    AuthoritySignature — raw answer of a timestamp authority for one digest.

    `signature` covers `build_signing_input(digest=digest, time=time)`.
    """

    time: datetime
    signature: bytes
    key_id: str | None = None


class TimestampAuthority(Protocol):
    """
    TimestampAuthority — порт доверенного подписанта, владеющего закрытым ключом.

    Related:
      - src/timetrust/contexts/timestamping/domain/services/signing_input.py
      - src/timetrust/contexts/timestamping/adapters/outbound/security/ed25519/
        local_ed25519_timestamp_authority.py
      - src/timetrust/contexts/timestamping/adapters/outbound/clients/http_authority/
        requests_timestamp_authority.py
    """

    async def sign(self, *, digest: bytes) -> AuthoritySignature:
        """
        Record current authority time and sign `digest || time`.

        Args:
            digest: Payload digest bytes.
        Returns:
            AuthoritySignature: Recorded time, signature, and optional key id.
        Assumptions:
            Time is chosen by the authority, never by the caller.
        Raises:
            SigningUnavailableError: If the signer cannot be reached.
            SigningRejectedError: If the signer declines the digest.
        Side Effects:
            May perform network I/O.
        """
        ...
