from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from urllib.parse import urlparse

DEFAULT_DAYTIME_PORT = 13
DEFAULT_HTTP_DATE_URL = "https://google.com"


class TimeSourceKind(str, Enum):
    """
    TimeSourceKind — протокол, по которому читается эталонное UTC время.

    Values are the literals used in runtime config (`clock_sync.sources[].kind`).
    """

    DAYTIME = "daytime"
    HTTP_DATE = "http_date"


@dataclass(frozen=True, slots=True)
class TimeSource:
    """
    TimeSource — неизменяемая конфигурация одного сетевого источника времени.

    Related:
      - src/timetrust/contexts/clock_sync/application/ports/time_source_client.py
      - src/timetrust/contexts/clock_sync/application/use_cases/sync_clock.py
      - src/timetrust/platform/config/timetrust_runtime_config.py
    """

    kind: TimeSourceKind
    endpoint: str
    timeout_s: float

    def __post_init__(self) -> None:
        """
        Validate endpoint shape for the source kind and a positive timeout.

        Args:
            None.
        Returns:
            None.
        Assumptions:
            Daytime endpoints are `host` or `host:port`; HTTP endpoints are absolute URLs
            and an empty HTTP endpoint selects `DEFAULT_HTTP_DATE_URL`.
        Raises:
            ValueError: If kind, endpoint, or timeout are invalid.
        Side Effects:
            Normalizes `kind` into `TimeSourceKind` and strips `endpoint`.
        """
        kind = TimeSourceKind(self.kind)
        object.__setattr__(self, "kind", kind)

        if isinstance(self.timeout_s, bool) or self.timeout_s <= 0:
            raise ValueError(f"TimeSource.timeout_s must be > 0, got {self.timeout_s!r}")

        endpoint = self.endpoint.strip()
        if kind is TimeSourceKind.HTTP_DATE:
            if not endpoint:
                endpoint = DEFAULT_HTTP_DATE_URL
            parsed = urlparse(endpoint)
            if parsed.scheme not in ("http", "https") or not parsed.netloc:
                raise ValueError(
                    f"http_date endpoint must be an absolute http(s) URL: {endpoint!r}"
                )
        else:
            if not endpoint:
                raise ValueError("daytime endpoint must be non-empty")
            _split_host_port(endpoint)
        object.__setattr__(self, "endpoint", endpoint)

    @property
    def host(self) -> str:
        """
        Host part of a daytime endpoint (or the URL hostname for HTTP sources).
        """
        if self.kind is TimeSourceKind.HTTP_DATE:
            return urlparse(self.endpoint).hostname or ""
        return _split_host_port(self.endpoint)[0]

    @property
    def port(self) -> int:
        """
        Port of a daytime endpoint, defaulting to 13.
        """
        if self.kind is TimeSourceKind.HTTP_DATE:
            parsed = urlparse(self.endpoint)
            if parsed.port is not None:
                return parsed.port
            return 443 if parsed.scheme == "https" else 80
        return _split_host_port(self.endpoint)[1]

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.endpoint}"


def _split_host_port(endpoint: str) -> tuple[str, int]:
    """
    Split `host[:port]` daytime endpoint into parts.

    Args:
        endpoint: Stripped endpoint string.
    Returns:
        tuple[str, int]: Host and port (13 when omitted).
    Assumptions:
        Bracketed IPv6 literals use `[addr]:port` notation.
    Raises:
        ValueError: If host is empty or port is not an integer in 1..65535.
    Side Effects:
        None.
    """
    if endpoint.startswith("["):
        host, _, rest = endpoint[1:].partition("]")
        raw_port = rest[1:] if rest.startswith(":") else ""
    elif endpoint.count(":") == 1:
        host, _, raw_port = endpoint.partition(":")
    else:
        host, raw_port = endpoint, ""

    if not host:
        raise ValueError(f"daytime endpoint host must be non-empty: {endpoint!r}")
    if not raw_port:
        return host, DEFAULT_DAYTIME_PORT
    try:
        port = int(raw_port)
    except ValueError as error:
        raise ValueError(f"daytime endpoint port must be an integer: {endpoint!r}") from error
    if not 0 < port < 65536:
        raise ValueError(f"daytime endpoint port out of range: {endpoint!r}")
    return host, port
