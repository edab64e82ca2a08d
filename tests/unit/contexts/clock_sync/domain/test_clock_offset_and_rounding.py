from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from timetrust.contexts.clock_sync.domain import ClockOffset, TimeSourceKind, round_to_seconds


def test_zero_offset_is_unsynced_version_zero() -> None:
    offset = ClockOffset.zero()

    assert offset.value == timedelta(0)
    assert offset.version == 0
    assert offset.is_synced is False
    assert offset.seconds == 0.0


def test_synced_offset_requires_utc_synced_at() -> None:
    synced = ClockOffset(
        value=timedelta(seconds=-2.5),
        version=1,
        synced_at=datetime(2025, 3, 4, 15, 46, 52, tzinfo=timezone.utc),
        source_kind=TimeSourceKind.DAYTIME,
    )

    assert synced.is_synced is True
    assert synced.seconds == -2.5

    with pytest.raises(ValueError):
        ClockOffset(value=timedelta(0), version=1, synced_at=None)
    with pytest.raises(ValueError):
        ClockOffset(value=timedelta(0), version=1, synced_at=datetime(2025, 3, 4, 15, 46, 52))
    with pytest.raises(ValueError):
        ClockOffset(value=timedelta(0), version=-1)


def test_round_to_seconds_rounds_to_nearest_bucket() -> None:
    value = datetime(2025, 3, 4, 15, 46, 52, 400_000, tzinfo=timezone.utc)

    assert round_to_seconds(value, seconds=1) == datetime(
        2025, 3, 4, 15, 46, 52, tzinfo=timezone.utc
    )
    assert round_to_seconds(value, seconds=60) == datetime(
        2025, 3, 4, 15, 47, tzinfo=timezone.utc
    )


def test_round_to_seconds_half_rounds_up_and_normalizes_to_utc() -> None:
    half = datetime(2025, 3, 4, 15, 46, 52, 500_000, tzinfo=timezone(timedelta(hours=3)))

    rounded = round_to_seconds(half, seconds=1)

    assert rounded == datetime(2025, 3, 4, 12, 46, 53, tzinfo=timezone.utc)
    assert rounded.utcoffset() == timedelta(0)


def test_round_to_seconds_rejects_naive_and_non_positive_bucket() -> None:
    with pytest.raises(ValueError):
        round_to_seconds(datetime(2025, 3, 4), seconds=1)
    with pytest.raises(ValueError):
        round_to_seconds(datetime(2025, 3, 4, tzinfo=timezone.utc), seconds=0)
