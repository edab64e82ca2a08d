from __future__ import annotations

import io
from pathlib import Path

import pytest

from timetrust.contexts.timestamping.application import digest_bytes, digest_file, digest_stream

_ABC_SHA256 = "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"


def test_digest_bytes_stream_and_file_agree(tmp_path: Path) -> None:
    payload = b"abc"
    path = tmp_path / "payload.bin"
    path.write_bytes(payload)

    assert digest_bytes(payload).hex() == _ABC_SHA256
    assert digest_stream(io.BytesIO(payload)).hex() == _ABC_SHA256
    assert digest_file(path).hex() == _ABC_SHA256


@pytest.mark.parametrize(("algorithm", "size"), [("sha256", 32), ("SHA384", 48), ("sha512", 64)])
def test_digest_lengths_match_supported_algorithms(algorithm: str, size: int) -> None:
    assert len(digest_bytes(b"payload", algorithm=algorithm)) == size


def test_digest_rejects_unsupported_algorithm() -> None:
    with pytest.raises(ValueError):
        digest_bytes(b"payload", algorithm="md5")
