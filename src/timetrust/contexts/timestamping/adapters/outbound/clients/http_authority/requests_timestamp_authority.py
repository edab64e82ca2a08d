from __future__ import annotations

import asyncio
import base64
import binascii
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Protocol, cast

import requests

from timetrust.contexts.timestamping.application.ports.timestamp_authority import (
    AuthoritySignature,
    SigningRejectedError,
    SigningUnavailableError,
    TimestampAuthority,
)

log = logging.getLogger(__name__)

_SIGN_PATH = "/v1/timestamps"
_REJECTED_STATUS_CODES = frozenset({400, 422})
_EXCERPT_LIMIT = 200


@dataclass(frozen=True, slots=True)
class RequestsTimestampAuthorityConfig:
    """
    RequestsTimestampAuthorityConfig — remote authority endpoint settings.

    Related:
      - src/timetrust/platform/config/timetrust_runtime_config.py
      - configs/dev/timetrust.yaml
    """

    base_url: str
    timeout_s: float

    def __post_init__(self) -> None:
        """
        Validate and normalize remote authority settings.

        Args:
            None.
        Returns:
            None.
        Assumptions:
            Base URL points at a running `apps/api` authority service.
        Raises:
            ValueError: If base URL is not http(s) or timeout is not positive.
        Side Effects:
            Normalizes trailing slash of base URL.
        """
        normalized_base = self.base_url.strip()
        if not normalized_base.startswith(("https://", "http://")):
            raise ValueError(
                "RequestsTimestampAuthorityConfig.base_url must start with http:// or https://"
            )
        if self.timeout_s <= 0:
            raise ValueError("RequestsTimestampAuthorityConfig.timeout_s must be > 0")
        object.__setattr__(self, "base_url", normalized_base.rstrip("/"))


class AuthorityHttpResponse(Protocol):
    status_code: int

    def json(self) -> Any:
        ...

    @property
    def text(self) -> str:
        ...


class AuthorityHttpSession(Protocol):
    def post(
        self,
        url: str,
        *,
        json: Mapping[str, str],
        timeout: float,
    ) -> AuthorityHttpResponse:
        ...


class RequestsTimestampAuthority(TimestampAuthority):
    """
    RequestsTimestampAuthority — client of a remote authority's `POST /v1/timestamps`.

    Related:
      - src/timetrust/contexts/timestamping/adapters/inbound/api/routes/timestamps.py
      - src/timetrust/contexts/timestamping/application/ports/timestamp_authority.py
      - apps/cli/commands/sign.py
    """

    def __init__(
        self,
        *,
        config: RequestsTimestampAuthorityConfig,
        session: AuthorityHttpSession | None = None,
    ) -> None:
        """
        Initialize remote authority client.

        Args:
            config: Validated endpoint settings.
            session: Optional injected HTTP session for tests.
        Returns:
            None.
        Assumptions:
            `requests.Session` is used from worker threads one request at a time.
        Raises:
            ValueError: If config is missing.
        Side Effects:
            Creates `requests.Session` when no custom session is injected.
        """
        if config is None:  # type: ignore[truthy-bool]
            raise ValueError("RequestsTimestampAuthority requires config")
        self._config = config
        self._session = (
            session
            if session is not None
            else cast(AuthorityHttpSession, requests.Session())
        )

    async def sign(self, *, digest: bytes) -> AuthoritySignature:
        """
        Ask the remote authority to timestamp digest.

        Args:
            digest: Payload digest bytes.
        Returns:
            AuthoritySignature: Decoded authority answer.
        Assumptions:
            Blocking HTTP call is moved off the event loop.
        Raises:
            SigningRejectedError: On HTTP 400/422.
            SigningUnavailableError: On transport failure, other non-200 status, or
                malformed body.
        Side Effects:
            Performs one outbound HTTP request.
        """
        return await asyncio.to_thread(self._sign_blocking, digest)

    def _sign_blocking(self, digest: bytes) -> AuthoritySignature:
        url = f"{self._config.base_url}{_SIGN_PATH}"
        try:
            response = self._session.post(
                url,
                json={"digest_hex": digest.hex()},
                timeout=self._config.timeout_s,
            )
        except requests.RequestException as error:
            log.warning("timestamp authority request failed url=%s error=%s", url, error)
            raise SigningUnavailableError(
                message=f"Timestamp authority {url} is unreachable: {error}",
            ) from error

        if response.status_code in _REJECTED_STATUS_CODES:
            raise SigningRejectedError(
                message=(
                    f"Timestamp authority rejected request status={response.status_code} "
                    f"body={_response_excerpt(response=response)}"
                ),
            )
        if response.status_code != 200:
            log.warning(
                "timestamp authority failed status_code=%s body=%s",
                response.status_code,
                _response_excerpt(response=response),
            )
            raise SigningUnavailableError(
                message=f"Timestamp authority answered status={response.status_code}",
            )

        try:
            payload = response.json()
        except ValueError as error:
            raise SigningUnavailableError(
                message="Timestamp authority answered with non-JSON body",
            ) from error
        return parse_authority_payload(payload)


def parse_authority_payload(payload: Any) -> AuthoritySignature:
    """
    Decode `{"time", "signature_b64", "key_id"}` body into AuthoritySignature.

    Args:
        payload: Parsed JSON body.
    Returns:
        AuthoritySignature: Decoded answer.
    Assumptions:
        Time is ISO-8601 with offset; signature is standard base64.
    Raises:
        SigningUnavailableError: If one of fields is missing or malformed.
    Side Effects:
        None.
    """
    if not isinstance(payload, dict):
        raise SigningUnavailableError(message="Timestamp authority body must be JSON object")

    raw_time = payload.get("time")
    raw_signature = payload.get("signature_b64")
    raw_key_id = payload.get("key_id")
    if not isinstance(raw_time, str) or not isinstance(raw_signature, str):
        raise SigningUnavailableError(
            message="Timestamp authority body requires string time and signature_b64",
        )
    if raw_key_id is not None and not isinstance(raw_key_id, str):
        raise SigningUnavailableError(message="Timestamp authority key_id must be string")

    try:
        signed_at = datetime.fromisoformat(raw_time)
        signature = base64.b64decode(raw_signature, validate=True)
    except (ValueError, binascii.Error) as error:
        raise SigningUnavailableError(
            message=f"Timestamp authority body is malformed: {error}",
        ) from error
    return AuthoritySignature(time=signed_at, signature=signature, key_id=raw_key_id)


def _response_excerpt(*, response: AuthorityHttpResponse) -> str:
    try:
        return response.text[:_EXCERPT_LIMIT]
    except (AttributeError, UnicodeDecodeError):
        return ""
