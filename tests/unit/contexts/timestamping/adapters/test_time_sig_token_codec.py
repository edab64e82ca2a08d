from __future__ import annotations

import base64
import json
from datetime import datetime, timezone

import pytest

from timetrust.contexts.timestamping.adapters.outbound import (
    TimeSigDecodeError,
    decode_time_sig,
    encode_time_sig,
)
from timetrust.contexts.timestamping.domain import TimeSig

_T0 = datetime(2025, 3, 4, 15, 46, 52, 123456, tzinfo=timezone.utc)


def _token(payload: object) -> str:
    raw = json.dumps(payload).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def test_token_round_trip_preserves_time_signature_and_key_id() -> None:
    sig = TimeSig(time=_T0, signature=bytes(range(64)), signer_key_id="0a1b2c3d4e5f6789")

    token = encode_time_sig(sig)

    assert "=" not in token
    assert decode_time_sig(token) == sig


def test_token_without_key_id_omits_kid_claim() -> None:
    token = encode_time_sig(TimeSig(time=_T0, signature=b"\x01"))
    padded = token + "=" * (-len(token) % 4)

    assert json.loads(base64.urlsafe_b64decode(padded)) == {
        "sig": "AQ",
        "t": "2025-03-04T15:46:52.123456+00:00",
        "v": 1,
    }


@pytest.mark.parametrize(
    ("token", "code"),
    [
        ("", "invalid_token_format"),
        ("bm90IGpzb24", "invalid_token_format"),
        (_token([1, 2]), "invalid_token_format"),
        (_token({"v": 2, "t": _T0.isoformat(), "sig": "AQ"}), "unsupported_token_version"),
        (_token({"v": 1, "sig": "AQ"}), "invalid_token_claims"),
        (_token({"v": 1, "t": "yesterday", "sig": "AQ"}), "invalid_token_claims"),
        (_token({"v": 1, "t": "2025-03-04T15:46:52", "sig": "AQ"}), "invalid_token_claims"),
        (_token({"v": 1, "t": _T0.isoformat(), "sig": "AQ", "kid": 5}), "invalid_token_claims"),
    ],
)
def test_decode_rejects_malformed_tokens(token: str, code: str) -> None:
    with pytest.raises(TimeSigDecodeError) as error_info:
        decode_time_sig(token)

    assert error_info.value.code == code
