"""
API error handlers: TimetrustError and request validation failures share one payload shape.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence, cast

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.requests import Request
from starlette.responses import JSONResponse

from timetrust.platform.errors import TimetrustError

log = logging.getLogger(__name__)


def register_api_error_handlers(*, app: FastAPI) -> None:
    """
    Register global API handlers for TimetrustError and FastAPI validation errors.

    Args:
        app: FastAPI application instance.
    Returns:
        None.
    Assumptions:
        Handlers are installed once during application startup.
    Raises:
        ValueError: If `app` dependency is missing.
    Side Effects:
        Mutates FastAPI exception-handler registry.
    """
    if app is None:  # type: ignore[truthy-bool]
        raise ValueError("register_api_error_handlers requires app")

    app.add_exception_handler(TimetrustError, timetrust_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)


def timetrust_error_handler(request: Request, error: Exception) -> JSONResponse:
    """
    Render TimetrustError with the status its code maps to.

    Unavailable signer or time sources (503) are logged with the request path.
    """
    timetrust_error = cast(TimetrustError, error)
    if timetrust_error.http_status >= 500:
        log.warning(
            "api error path=%s code=%s reason=%s message=%s",
            request.url.path,
            timetrust_error.code,
            (timetrust_error.details or {}).get("reason"),
            timetrust_error.message,
        )
    return JSONResponse(
        status_code=timetrust_error.http_status,
        content=timetrust_error.to_payload(),
    )


def request_validation_error_handler(request: Request, error: Exception) -> JSONResponse:
    """
    Convert FastAPI RequestValidationError into `validation_error` with sorted details.

    Args:
        request: Starlette request object.
        error: Raised validation exception from FastAPI/Pydantic.
    Returns:
        JSONResponse: HTTP 422 payload; `details.errors` sorted by path, code, message.
    Assumptions:
        Body fields of timetrust requests are flat (`digest_hex`, `token`).
    Raises:
        None.
    Side Effects:
        None.
    """
    items = _validation_items(raw_errors=cast(RequestValidationError, error).errors())
    return timetrust_error_handler(
        request,
        TimetrustError(
            code="validation_error",
            message="Validation failed",
            details={"errors": sorted(items, key=lambda item: tuple(item.values()))},
        ),
    )


def _validation_items(*, raw_errors: Any) -> list[dict[str, str]]:
    if not isinstance(raw_errors, Sequence) or isinstance(raw_errors, (str, bytes)):
        return []
    items: list[dict[str, str]] = []
    for raw_error in raw_errors:
        if isinstance(raw_error, Mapping):
            items.append(
                {
                    "path": _dotted_path(raw_error.get("loc")),
                    "code": _validation_code(raw_error.get("type")),
                    "message": str(raw_error.get("msg", "Validation error")),
                }
            )
        else:
            items.append({"path": "unknown", "code": "validation_error", "message": str(raw_error)})
    return items


def _dotted_path(loc: Any) -> str:
    if isinstance(loc, (list, tuple)) and loc:
        return ".".join(str(part) for part in loc)
    return "unknown" if loc in (None, (), []) else str(loc)


def _validation_code(raw_type: Any) -> str:
    # pydantic reports absent fields as `missing`
    code = str(raw_type or "").strip().lower()
    if not code:
        return "validation_error"
    return "required" if code.split(".")[-1] == "missing" else code
