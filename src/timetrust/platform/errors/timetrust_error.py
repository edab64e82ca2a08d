from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Mapping, Protocol, Sequence

TIMETRUST_HTTP_STATUS_BY_CODE: Mapping[str, int] = {
    "validation_error": 422,
    "not_found": 404,
    "signing_unavailable": 503,
    "sync_unavailable": 503,
    "unexpected_error": 500,
}


class CodedContextError(Protocol):
    """
    CodedContextError — любая ошибка контекста со стабильным `code` и текстом `message`.

    Implemented by `TimeSourceError`, `SyncUnavailableError`, `TimestampingError`
    and `TimeSigDecodeError`.
    """

    code: str
    message: str


@dataclass(frozen=True, slots=True)
class TimetrustError(Exception):
    """
    TimetrustError — error contract at the API/CLI boundary of timetrust.

    Context errors stay inside their contexts; inbound adapters wrap them with
    `from_context_error`, which keeps the context code under `details.reason`.

    Related:
      - apps/api/common/errors.py
      - src/timetrust/contexts/clock_sync/adapters/inbound/api/routes/clock.py
      - src/timetrust/contexts/timestamping/adapters/inbound/api/routes/timestamps.py
    """

    code: str
    message: str
    details: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        """
        Strip code/message and convert details into JSON-ready values.

        Args:
            None.
        Returns:
            None.
        Assumptions:
            Details may carry instants, durations, digests or source kinds.
        Raises:
            ValueError: If `code` or `message` are blank.
            TypeError: If `details` is not a mapping.
        Side Effects:
            Replaces frozen fields with their normalized values.
        """
        code = self.code.strip()
        message = self.message.strip()
        if not code or not message:
            raise ValueError("TimetrustError requires non-empty code and message")
        if self.details is not None and not isinstance(self.details, Mapping):
            raise TypeError("TimetrustError.details must be a mapping when provided")

        object.__setattr__(self, "code", code)
        object.__setattr__(self, "message", message)
        object.__setattr__(self, "details", _json_ready(self.details or {}))

    @classmethod
    def from_context_error(
        cls,
        error: CodedContextError,
        *,
        code: str,
        **details: Any,
    ) -> TimetrustError:
        return cls(code=code, message=error.message, details={"reason": error.code, **details})

    @property
    def http_status(self) -> int:
        return TIMETRUST_HTTP_STATUS_BY_CODE.get(self.code, 500)

    def to_payload(self) -> dict[str, Any]:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": dict(self.details or {}),
            }
        }


def _json_ready(value: Any) -> Any:
    # mapping keys sorted; instants as ISO-8601, durations in seconds, bytes as hex
    if isinstance(value, Mapping):
        return {str(key): _json_ready(value[key]) for key in sorted(value, key=str)}
    if isinstance(value, Enum):
        return _json_ready(value.value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, timedelta):
        return value.total_seconds()
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).hex()
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, Sequence):
        return [_json_ready(item) for item in value]
    return str(value)
