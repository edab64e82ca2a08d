from __future__ import annotations

from datetime import datetime, timedelta, timezone

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MICROSECOND = timedelta(microseconds=1)


def round_to_seconds(value: datetime, *, seconds: int) -> datetime:
    """
    Round timezone-aware datetime to the nearest multiple of `seconds` since Unix epoch.

    Args:
        value: Timezone-aware datetime.
        seconds: Positive bucket size in seconds.
    Returns:
        datetime: Rounded UTC datetime; exact halves round up.
    Assumptions:
        Integer microsecond arithmetic keeps the result exact.
    Raises:
        ValueError: If `value` is naive or `seconds` is not positive.
    Side Effects:
        None.
    """
    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError("round_to_seconds requires timezone-aware datetime")
    if isinstance(seconds, bool) or seconds <= 0:
        raise ValueError(f"round_to_seconds requires seconds > 0, got {seconds!r}")

    bucket_us = seconds * 1_000_000
    elapsed_us = (value.astimezone(timezone.utc) - _EPOCH) // _ONE_MICROSECOND
    rounded_us = ((elapsed_us + bucket_us // 2) // bucket_us) * bucket_us
    return _EPOCH + timedelta(microseconds=rounded_us)
