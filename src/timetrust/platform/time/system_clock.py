from __future__ import annotations

from datetime import datetime, timezone


class SystemClock:
    """
    SystemClock — platform реализация LocalClock: "сейчас" из системного времени хоста.

    Satisfies `LocalClock` from the clock_sync context. Corrected time is served by
    `ClockReader`, never by this class.
    """

    def now(self) -> datetime:
        return datetime.now(timezone.utc)
