from __future__ import annotations

import base64
from typing import Literal

from fastapi import APIRouter
from pydantic import BaseModel

from timetrust.contexts.timestamping.adapters.outbound.codec.time_sig_token_codec import (
    TimeSigDecodeError,
    decode_time_sig,
    encode_time_sig,
)
from timetrust.contexts.timestamping.application.ports.timestamp_authority import (
    SigningRejectedError,
    SigningUnavailableError,
)
from timetrust.contexts.timestamping.application.use_cases import (
    TimestampSigner,
    TimestampVerifier,
)
from timetrust.platform.errors import TimetrustError


class CreateTimestampRequest(BaseModel):
    """
    CreateTimestampRequest — API payload asking the authority to timestamp a digest.

    Related:
      - src/timetrust/contexts/timestamping/application/use_cases/sign_timestamp.py
      - src/timetrust/contexts/timestamping/adapters/outbound/clients/http_authority/
        requests_timestamp_authority.py
    """

    digest_hex: str


class TimestampResponse(BaseModel):
    """
    TimestampResponse — authority answer with signed time, signature, and portable token.

    Related:
      - src/timetrust/contexts/timestamping/domain/entities/time_sig.py
      - src/timetrust/contexts/timestamping/adapters/outbound/codec/time_sig_token_codec.py
    """

    time: str
    signature_b64: str
    key_id: str | None
    token: str


class VerifyTimestampRequest(BaseModel):
    digest_hex: str
    token: str


class VerifyTimestampResponse(BaseModel):
    valid: bool


class PublicKeyResponse(BaseModel):
    algorithm: Literal["ed25519"]
    public_key_b64: str
    key_id: str


def build_timestamps_router(
    *,
    signer: TimestampSigner,
    verifier: TimestampVerifier,
    public_key: bytes,
    key_id: str,
) -> APIRouter:
    """
    Build authority router with sign, verify, and public-key endpoints.

    Related:
      - apps/api/wiring/modules/timestamping.py
      - apps/api/main/app.py

    Args:
        signer: Signing use-case backed by the in-process authority.
        verifier: Verification use-case.
        public_key: Raw authority public key published to verifiers.
        key_id: Key id matching `public_key`.
    Returns:
        APIRouter: Configured timestamps router.
    Assumptions:
        The process serving this router owns the authority private key.
    Raises:
        ValueError: If one of dependencies is missing or public key is empty.
    Side Effects:
        None.
    """
    if signer is None:  # type: ignore[truthy-bool]
        raise ValueError("build_timestamps_router requires signer")
    if verifier is None:  # type: ignore[truthy-bool]
        raise ValueError("build_timestamps_router requires verifier")
    if not public_key:
        raise ValueError("build_timestamps_router requires public_key")

    router = APIRouter(tags=["timestamps"])
    public_key_b64 = base64.b64encode(public_key).decode("ascii")

    @router.post("/v1/timestamps", response_model=TimestampResponse)
    async def post_timestamps(request: CreateTimestampRequest) -> TimestampResponse:
        """
        Timestamp one digest with the authority key.

        Args:
            request: Digest as hex string.
        Returns:
            TimestampResponse: Signed time, base64 signature, key id, and token.
        Assumptions:
            Authority time comes from the corrected clock of this process.
        Raises:
            TimetrustError: `validation_error` for malformed digest, `signing_unavailable`
                when the signer cannot answer.
        Side Effects:
            Signs with authority private key.
        """
        digest = _parse_digest_hex(value=request.digest_hex)
        try:
            time_sig = await signer.sign(digest)
        except SigningRejectedError as error:
            raise TimetrustError.from_context_error(error, code="validation_error") from error
        except SigningUnavailableError as error:
            raise TimetrustError.from_context_error(error, code="signing_unavailable") from error

        return TimestampResponse(
            time=time_sig.time.isoformat(),
            signature_b64=base64.b64encode(time_sig.signature).decode("ascii"),
            key_id=time_sig.signer_key_id,
            token=encode_time_sig(time_sig),
        )

    @router.post("/v1/timestamps/verify", response_model=VerifyTimestampResponse)
    def post_timestamps_verify(request: VerifyTimestampRequest) -> VerifyTimestampResponse:
        """
        Verify a TimeSig token against a digest under this authority's key.

        Args:
            request: Digest hex and TimeSig token.
        Returns:
            VerifyTimestampResponse: Verification outcome.
        Assumptions:
            Malformed digest or token is an invalid request, not a failed verification.
        Raises:
            TimetrustError: `validation_error` for malformed digest or token.
        Side Effects:
            Reads corrected clock.
        """
        digest = _parse_digest_hex(value=request.digest_hex)
        try:
            time_sig = decode_time_sig(request.token)
        except TimeSigDecodeError as error:
            raise TimetrustError.from_context_error(error, code="validation_error") from error
        return VerifyTimestampResponse(
            valid=verifier.verify(digest, time_sig, public_key),
        )

    @router.get("/v1/timestamps/public-key", response_model=PublicKeyResponse)
    def get_timestamps_public_key() -> PublicKeyResponse:
        return PublicKeyResponse(
            algorithm="ed25519",
            public_key_b64=public_key_b64,
            key_id=key_id,
        )

    return router


def _parse_digest_hex(*, value: str) -> bytes:
    """
    Decode request digest hex into bytes.

    Args:
        value: Hex string from request body.
    Returns:
        bytes: Digest bytes; length is checked by the signer/verifier.
    Assumptions:
        Surrounding whitespace is tolerated.
    Raises:
        TimetrustError: `validation_error` when value is not hex.
    Side Effects:
        None.
    """
    try:
        return bytes.fromhex(value.strip())
    except ValueError as error:
        raise TimetrustError(
            code="validation_error",
            message="digest_hex must be hexadecimal",
            details={"reason": "invalid_digest"},
        ) from error
