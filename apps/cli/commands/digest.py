from __future__ import annotations

import argparse
import sys
from typing import Sequence

from timetrust.contexts.timestamping.application.services import (
    DEFAULT_DIGEST_ALGORITHM,
    SUPPORTED_DIGEST_ALGORITHMS,
    digest_file,
    digest_stream,
)


class DigestInputParser:
    """
    Resolve payload digest from either `--digest-hex` or a file path (`-` is stdin).
    """

    def parse(self, *, path: str | None, digest_hex: str | None, algorithm: str) -> bytes:
        if digest_hex is not None and path is not None:
            raise ValueError("pass either a payload path or --digest-hex, not both")
        if digest_hex is not None:
            try:
                return bytes.fromhex(digest_hex.strip())
            except ValueError as error:
                raise ValueError("--digest-hex must be hexadecimal") from error
        if path is None:
            raise ValueError("payload path or --digest-hex is required")
        if path == "-":
            return digest_stream(sys.stdin.buffer, algorithm=algorithm)
        return digest_file(path, algorithm=algorithm)


def add_digest_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("path", nargs="?", default=None, help="Payload file path, '-' for stdin")
    parser.add_argument("--digest-hex", default=None, help="Precomputed payload digest (hex)")
    parser.add_argument(
        "--algorithm",
        choices=SUPPORTED_DIGEST_ALGORITHMS,
        default=DEFAULT_DIGEST_ALGORITHM,
        help=f"Digest algorithm (default: {DEFAULT_DIGEST_ALGORITHM})",
    )


class DigestCli:
    def run(self, argv: Sequence[str]) -> int:
        parser = argparse.ArgumentParser(prog="timetrust digest")
        add_digest_arguments(parser)
        ns = parser.parse_args(list(argv))

        digest = DigestInputParser().parse(
            path=ns.path,
            digest_hex=ns.digest_hex,
            algorithm=ns.algorithm,
        )
        print(digest.hex())
        return 0
