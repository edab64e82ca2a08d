from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from timetrust.contexts.clock_sync.application import (
    ProtocolUnreachableError,
    SyncUnavailableError,
)
from timetrust.contexts.clock_sync.domain import TimeSourceKind
from timetrust.contexts.timestamping.application import SigningUnavailableError
from timetrust.platform.errors import TimetrustError


def test_to_payload_renders_domain_values_in_details() -> None:
    error = TimetrustError(
        code=" validation_error ",
        message=" Timestamp rejected ",
        details={
            "time": datetime(2020, 3, 4, 15, 46, 52, tzinfo=timezone.utc),
            "tolerance": timedelta(minutes=5),
            "digest": b"\x00\xff",
            "source_kind": TimeSourceKind.HTTP_DATE,
            "attempts": ("daytime", None),
        },
    )

    assert error.to_payload() == {
        "error": {
            "code": "validation_error",
            "message": "Timestamp rejected",
            "details": {
                "attempts": ["daytime", None],
                "digest": "00ff",
                "source_kind": "http_date",
                "time": "2020-03-04T15:46:52+00:00",
                "tolerance": 300.0,
            },
        }
    }


def test_to_payload_defaults_details_to_empty_mapping() -> None:
    assert TimetrustError(code="not_found", message="Missing").to_payload() == {
        "error": {"code": "not_found", "message": "Missing", "details": {}}
    }


@pytest.mark.parametrize(
    ("code", "status"),
    [
        ("validation_error", 422),
        ("not_found", 404),
        ("signing_unavailable", 503),
        ("sync_unavailable", 503),
        ("something_new", 500),
    ],
)
def test_http_status_follows_code(code: str, status: int) -> None:
    assert TimetrustError(code=code, message="x").http_status == status


def test_from_context_error_keeps_context_code_as_reason() -> None:
    signing = TimetrustError.from_context_error(
        SigningUnavailableError(message="Authority offline", code="signing_timeout"),
        code="signing_unavailable",
    )
    sync = TimetrustError.from_context_error(
        SyncUnavailableError(failures=["daytime:time.example:13: protocol_unreachable"]),
        code="sync_unavailable",
        failures=("daytime:time.example:13: protocol_unreachable",),
    )
    source = TimetrustError.from_context_error(
        ProtocolUnreachableError(message="refused"),
        code="sync_unavailable",
    )

    assert signing.details == {"reason": "signing_timeout"}
    assert signing.message == "Authority offline"
    assert sync.details == {
        "failures": ["daytime:time.example:13: protocol_unreachable"],
        "reason": "sync_unavailable",
    }
    assert source.details == {"reason": "protocol_unreachable"}


def test_blank_code_or_message_and_non_mapping_details_are_rejected() -> None:
    with pytest.raises(ValueError):
        TimetrustError(code=" ", message="x")
    with pytest.raises(ValueError):
        TimetrustError(code="x", message="")
    with pytest.raises(TypeError):
        TimetrustError(code="x", message="y", details=["reason"])  # type: ignore[arg-type]
