from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Any, BinaryIO

SUPPORTED_DIGEST_ALGORITHMS = ("sha256", "sha384", "sha512")
DEFAULT_DIGEST_ALGORITHM = "sha256"

_BLOCK_SIZE = 8192


def digest_bytes(data: bytes, *, algorithm: str = DEFAULT_DIGEST_ALGORITHM) -> bytes:
    """
    Hash in-memory payload into a digest accepted by the signer.

    Args:
        data: Payload bytes.
        algorithm: One of `SUPPORTED_DIGEST_ALGORITHMS`.
    Returns:
        bytes: Digest bytes.
    Assumptions:
        Payload fits in memory; use `digest_stream` otherwise.
    Raises:
        ValueError: If algorithm is unsupported.
    Side Effects:
        None.
    """
    hasher = _new_hasher(algorithm=algorithm)
    hasher.update(data)
    return hasher.digest()


def digest_stream(stream: BinaryIO, *, algorithm: str = DEFAULT_DIGEST_ALGORITHM) -> bytes:
    """
    Hash binary stream in fixed-size blocks until EOF.

    Args:
        stream: Readable binary stream positioned at payload start.
        algorithm: One of `SUPPORTED_DIGEST_ALGORITHMS`.
    Returns:
        bytes: Digest bytes.
    Assumptions:
        Stream is consumed; caller owns it.
    Raises:
        ValueError: If algorithm is unsupported.
    Side Effects:
        Reads stream to EOF.
    """
    hasher = _new_hasher(algorithm=algorithm)
    while True:
        block = stream.read(_BLOCK_SIZE)
        if not block:
            break
        hasher.update(block)
    return hasher.digest()


def digest_file(path: str | Path, *, algorithm: str = DEFAULT_DIGEST_ALGORITHM) -> bytes:
    with Path(path).open("rb") as stream:
        return digest_stream(stream, algorithm=algorithm)


def _new_hasher(*, algorithm: str) -> Any:
    normalized = algorithm.strip().lower()
    if normalized not in SUPPORTED_DIGEST_ALGORITHMS:
        raise ValueError(
            f"digest algorithm must be one of {SUPPORTED_DIGEST_ALGORITHMS}, got {algorithm!r}"
        )
    return hashlib.new(normalized)
