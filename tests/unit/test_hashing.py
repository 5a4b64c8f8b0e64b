import io
from pathlib import Path

import pytest

from cachifier.core.errors import InvalidArgumentError, SourceReadError
from cachifier.core.hashing import (
    compute_bytes_digest,
    compute_file_digest,
    compute_stream_digest,
    format_digest,
)

EXPECTED_010203 = bytes.fromhex("039058c6f2c0cb492c533b0a4d14ef77cc0f78abccced5287d84a1a2011cfb81")


def test_compute_bytes_digest_sha256() -> None:
    digest = compute_bytes_digest(bytes([0x01, 0x02, 0x03]))
    assert digest == EXPECTED_010203
    assert len(digest) == 32


def test_compute_stream_digest_matches_bytes_digest() -> None:
    assert compute_stream_digest(io.BytesIO(bytes([0x01, 0x02, 0x03]))) == EXPECTED_010203


def test_compute_file_digest_reads_in_chunks(tmp_path: Path) -> None:
    source = tmp_path / "three.bin"
    source.write_bytes(bytes([0x01, 0x02, 0x03]))

    assert compute_file_digest(source) == EXPECTED_010203
    assert compute_file_digest(str(source), chunk_size=1) == EXPECTED_010203


@pytest.mark.parametrize("path", [None, "", "   "])
def test_compute_file_digest_rejects_blank_path(path) -> None:
    with pytest.raises(InvalidArgumentError):
        compute_file_digest(path)


def test_compute_file_digest_wraps_missing_file(tmp_path: Path) -> None:
    with pytest.raises(SourceReadError):
        compute_file_digest(tmp_path / "missing.css")


def test_format_digest_renders_hex_bytes() -> None:
    assert format_digest(b"\x01\xab") == "0x01,0xab"
    assert format_digest(b"\x01\xab", ", ") == "0x01, 0xab"
