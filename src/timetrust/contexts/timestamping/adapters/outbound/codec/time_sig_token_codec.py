from __future__ import annotations

import base64
import json
from datetime import datetime
from typing import Any

from timetrust.contexts.timestamping.domain import TimeSig

_TOKEN_VERSION = 1


class TimeSigDecodeError(ValueError):
    """
    TimeSigDecodeError — deterministic TimeSig token parsing error.

    Related:
      - apps/cli/commands/verify.py
      - src/timetrust/contexts/timestamping/adapters/inbound/api/routes/timestamps.py
    """

    def __init__(self, *, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


def encode_time_sig(sig: TimeSig) -> str:
    """
    Serialize TimeSig into compact base64url JSON token.

    Args:
        sig: TimeSig value.
    Returns:
        str: Token `base64url({"v":1,"t":iso,"sig":b64url,"kid":...})` without padding.
    Assumptions:
        Deterministic serialization requires sorted keys and compact separators.
    Raises:
        None.
    Side Effects:
        None.
    """
    payload: dict[str, Any] = {
        "v": _TOKEN_VERSION,
        "t": sig.time.isoformat(),
        "sig": _to_b64url_bytes(raw=sig.signature),
    }
    if sig.signer_key_id is not None:
        payload["kid"] = sig.signer_key_id
    raw = json.dumps(payload, separators=(",", ":"), sort_keys=True).encode("utf-8")
    return _to_b64url_bytes(raw=raw)


def decode_time_sig(token: str) -> TimeSig:
    """
    Parse token produced by `encode_time_sig`.

    Args:
        token: Base64url token string.
    Returns:
        TimeSig: Decoded value; signature is not checked here.
    Assumptions:
        Decoding is structural only; authenticity is `TimestampVerifier`'s job.
    Raises:
        TimeSigDecodeError: If token is not a well-formed version 1 TimeSig token.
    Side Effects:
        None.
    """
    if not isinstance(token, str) or not token.strip():
        raise TimeSigDecodeError(code="invalid_token_format", message="Token must be non-empty")
    raw = _from_b64url_bytes(segment=token.strip())
    try:
        loaded = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as error:
        raise TimeSigDecodeError(
            code="invalid_token_format",
            message="Token is not valid JSON",
        ) from error
    if not isinstance(loaded, dict):
        raise TimeSigDecodeError(code="invalid_token_format", message="Token must be object")
    if loaded.get("v") != _TOKEN_VERSION:
        raise TimeSigDecodeError(
            code="unsupported_token_version",
            message=f"Token version must be {_TOKEN_VERSION}",
        )

    raw_time = loaded.get("t")
    raw_signature = loaded.get("sig")
    raw_key_id = loaded.get("kid")
    if not isinstance(raw_time, str) or not isinstance(raw_signature, str):
        raise TimeSigDecodeError(
            code="invalid_token_claims",
            message="Token requires string t and sig",
        )
    if raw_key_id is not None and not isinstance(raw_key_id, str):
        raise TimeSigDecodeError(code="invalid_token_claims", message="Token kid must be string")

    try:
        signed_at = datetime.fromisoformat(raw_time)
    except ValueError as error:
        raise TimeSigDecodeError(
            code="invalid_token_claims",
            message="Token t must be ISO-8601 datetime",
        ) from error
    signature = _from_b64url_bytes(segment=raw_signature)
    try:
        return TimeSig(time=signed_at, signature=signature, signer_key_id=raw_key_id)
    except (TypeError, ValueError) as error:
        raise TimeSigDecodeError(code="invalid_token_claims", message=str(error)) from error


def _to_b64url_bytes(*, raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def _from_b64url_bytes(*, segment: str) -> bytes:
    """
    Decode base64url segment with optional missing padding.

    Args:
        segment: Base64url-encoded string.
    Returns:
        bytes: Decoded binary payload.
    Assumptions:
        Segment uses URL-safe alphabet.
    Raises:
        TimeSigDecodeError: If segment is not valid base64url.
    Side Effects:
        None.
    """
    padding = "=" * ((4 - len(segment) % 4) % 4)
    try:
        candidate = f"{segment}{padding}".encode("ascii")
        return base64.urlsafe_b64decode(candidate)
    except (ValueError, UnicodeEncodeError) as error:
        raise TimeSigDecodeError(
            code="invalid_token_format",
            message="Token segment is not valid base64url",
        ) from error
