from __future__ import annotations

import hashlib
from pathlib import Path
from typing import BinaryIO

from cachifier.core.errors import InvalidArgumentError, SourceReadError

DEFAULT_ALGORITHM = "sha256"
DEFAULT_CHUNK_SIZE = 1024 * 1024


def compute_bytes_digest(data: bytes, alg: str = DEFAULT_ALGORITHM) -> bytes:
    h = hashlib.new(alg)
    h.update(data)
    return h.digest()


def compute_stream_digest(
    stream: BinaryIO,
    alg: str = DEFAULT_ALGORITHM,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> bytes:
    if stream is None:
        raise InvalidArgumentError("stream is required")
    h = hashlib.new(alg)
    for chunk in iter(lambda: stream.read(chunk_size), b""):
        h.update(chunk)
    return h.digest()


def compute_file_digest(
    path: Path | str | None,
    alg: str = DEFAULT_ALGORITHM,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> bytes:
    """Digest a file without loading it into memory.

    Raises ``InvalidArgumentError`` for a missing or blank path and
    ``SourceReadError`` when the file cannot be read.
    """
    if path is None or not str(path).strip():
        raise InvalidArgumentError("The path is None, empty or consists solely of whitespace")
    source = Path(path)
    try:
        with source.open("rb") as f:
            return compute_stream_digest(f, alg, chunk_size)
    except OSError as exc:
        raise SourceReadError(f"Unable to read {source}: {exc}") from exc


def format_digest(digest: bytes, separator: str = ",") -> str:
    return separator.join(f"0x{b:02x}" for b in digest)
