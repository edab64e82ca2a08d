"""
API application package.

Exposes a lazy `create_app` export to avoid side effects during package import in
tests and tooling.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .main.app import create_app

__all__ = ["create_app"]


def __getattr__(name: str) -> Any:
    """
    Lazily resolve package exports without eager FastAPI wiring.

    Args:
        name: Requested attribute name.
    Returns:
        Any: Exported object for supported lazy names.
    Assumptions:
        `create_app` lives in `apps.api.main.app`.
    Raises:
        AttributeError: If the requested attribute is not supported.
    Side Effects:
        Imports `apps.api.main.app` only when requested.
    """
    if name == "create_app":
        from .main.app import create_app

        return create_app
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
