"""
CLI entrypoint for running the timetrust authority API service.
"""

from __future__ import annotations

import argparse
import logging

import uvicorn


def _configure_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def _build_parser() -> argparse.ArgumentParser:
    """
    Build command-line parser for API process.

    Args:
        None.
    Returns:
        argparse.ArgumentParser: Configured parser.
    Assumptions:
        Defaults are suitable for local development.
    Raises:
        None.
    Side Effects:
        None.
    """
    parser = argparse.ArgumentParser(prog="timetrust-api")
    parser.add_argument("--host", default="0.0.0.0", help="Bind host")
    parser.add_argument("--port", type=int, default=8000, help="Bind port")
    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Run API process using uvicorn.

    Args:
        argv: Optional command arguments without program name.
    Returns:
        int: Process exit code.
    Assumptions:
        Config path is resolved from `TIMETRUST_CONFIG` / `TIMETRUST_ENV` by the factory.
    Raises:
        None.
    Side Effects:
        Starts HTTP server loop.
    """
    _configure_logging()
    args = _build_parser().parse_args(argv)
    uvicorn.run("apps.api.main.app:create_app", factory=True, host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
