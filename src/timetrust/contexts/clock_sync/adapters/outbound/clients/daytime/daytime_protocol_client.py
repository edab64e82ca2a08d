from __future__ import annotations

import asyncio
import logging
import re
from datetime import datetime, timezone

from timetrust.contexts.clock_sync.application.ports.time_source_client import (
    MalformedResponseError,
    ProtocolUnreachableError,
    TimeSourceClient,
)
from timetrust.contexts.clock_sync.domain import TimeSource, TimeSourceKind

log = logging.getLogger(__name__)

# NIST daytime line: "\nJJJJJ YY-MM-DD HH:MM:SS TT L H msADV UTC(NIST) OTM"
_FIELD_OFFSET = 7
_FIELD_LENGTH = 17
_FIELD_FORMAT = "%y-%m-%d %H:%M:%S"
_FIELD_PATTERN = re.compile(r"\d{2}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}")
_MAX_RESPONSE_BYTES = 4096


class DaytimeProtocolClient(TimeSourceClient):
    """
    DaytimeProtocolClient — RFC 867 daytime client reading NIST-formatted UTC lines over TCP.

    Related:
      - src/timetrust/contexts/clock_sync/application/ports/time_source_client.py
      - src/timetrust/contexts/clock_sync/application/use_cases/sync_clock.py
    """

    async def fetch_utc(self, *, source: TimeSource) -> datetime:
        """
        Connect, read the full response until EOF, and parse the fixed-position timestamp.

        Args:
            source: Daytime source (`host[:port]`, timeout).
        Returns:
            datetime: Timezone-aware UTC datetime from the response.
        Assumptions:
            Server closes the connection after one line.
        Raises:
            ProtocolUnreachableError: If connect/read fails or exceeds `source.timeout_s`.
            MalformedResponseError: If the response does not carry a parsable timestamp.
        Side Effects:
            Opens and closes one TCP connection.
        """
        if source.kind is not TimeSourceKind.DAYTIME:
            raise ValueError(f"DaytimeProtocolClient cannot serve {source.kind.value} source")

        try:
            raw = await asyncio.wait_for(
                _read_until_eof(host=source.host, port=source.port),
                timeout=source.timeout_s,
            )
        except TimeoutError as error:
            raise ProtocolUnreachableError(
                message=f"daytime {source.endpoint} timed out after {source.timeout_s}s"
            ) from error
        except (OSError, UnicodeError) as error:
            # idna encoding of an over-long host label fails with UnicodeError
            raise ProtocolUnreachableError(
                message=f"daytime {source.endpoint} unreachable: {error}"
            ) from error

        try:
            text = raw.decode("ascii")
        except UnicodeDecodeError as error:
            raise MalformedResponseError(
                message=f"daytime {source.endpoint} returned non-ASCII bytes"
            ) from error

        log.debug("daytime response source=%s raw=%r", source, text)
        return parse_daytime_response(text)


def parse_daytime_response(text: str) -> datetime:
    """
    Parse NIST daytime response into UTC datetime.

    Args:
        text: Response text, with or without the leading line feed NIST sends.
    Returns:
        datetime: Timezone-aware UTC datetime encoded at offset 7, length 17.
    Assumptions:
        Offset 7 is counted on the wire line that starts with a line feed, so the field
        directly follows the 5-digit MJD and a space. Two-digit years map 69-99 to 19xx
        and 00-68 to 20xx.
    Raises:
        MalformedResponseError: If the response is too short or the field is not a date.
    Side Effects:
        None.
    """
    wire_line = "\n" + text.lstrip()
    if len(wire_line) < _FIELD_OFFSET + _FIELD_LENGTH:
        raise MalformedResponseError(message=f"daytime response too short: {text!r}")

    field = wire_line[_FIELD_OFFSET : _FIELD_OFFSET + _FIELD_LENGTH]
    if _FIELD_PATTERN.fullmatch(field) is None:
        raise MalformedResponseError(message=f"daytime timestamp field malformed: {field!r}")
    try:
        parsed = datetime.strptime(field, _FIELD_FORMAT)
    except ValueError as error:
        raise MalformedResponseError(
            message=f"daytime timestamp field is not a valid date: {field!r}"
        ) from error
    return parsed.replace(tzinfo=timezone.utc)


async def _read_until_eof(*, host: str, port: int) -> bytes:
    """
    Open TCP connection and read response bytes until the server closes it.

    Args:
        host: Server host.
        port: Server port.
    Returns:
        bytes: Response bytes, truncated at `_MAX_RESPONSE_BYTES`.
    Assumptions:
        Caller bounds the whole exchange with a timeout.
    Raises:
        OSError: On connect/read failure.
    Side Effects:
        Opens and closes one TCP connection.
    """
    reader, writer = await asyncio.open_connection(host, port)
    try:
        chunks: list[bytes] = []
        received = 0
        while received < _MAX_RESPONSE_BYTES:
            chunk = await reader.read(_MAX_RESPONSE_BYTES - received)
            if not chunk:
                break
            chunks.append(chunk)
            received += len(chunk)
        return b"".join(chunks)
    finally:
        writer.close()
        try:
            await writer.wait_closed()
        except OSError:
            log.debug("daytime connection close failed host=%s port=%s", host, port, exc_info=True)
