from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path, PurePath
from typing import Iterator

from cachifier.core.errors import InvalidArgumentError


def ensure_directory(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def posix_path(path: str | PurePath) -> str:
    return str(path).replace("\\", "/")


def relative_path(path: str | Path, root: str | Path) -> str:
    """Return ``path`` relative to ``root`` using forward slashes.

    Pure string arithmetic: nothing is read from disk and symlinks are not
    followed, so ``root / relative_path(p, root)`` normalizes back to ``p``.
    """
    if path is None or not str(path).strip():
        raise InvalidArgumentError("path is required")
    if root is None or not str(root).strip():
        raise InvalidArgumentError("The base folder is empty or consists solely of whitespace.")

    absolute = os.path.abspath(os.fspath(path))
    base = os.path.abspath(os.fspath(root))
    return posix_path(os.path.relpath(absolute, base))


def is_within(path: Path, root: Path) -> bool:
    rel = relative_path(path, root)
    return rel != ".." and not rel.startswith("../")


def copy_file(src: Path, dst: Path) -> None:
    # Land the bytes in a private temp file next to the destination so readers
    # never see a partial file and concurrent copies never share a temp name.
    fd, temp_name = tempfile.mkstemp(prefix=f".{dst.name}.", suffix=".tmp", dir=dst.parent)
    os.close(fd)
    temp_path = Path(temp_name)
    try:
        shutil.copy2(src, temp_path)
        os.replace(temp_path, dst)
    except OSError:
        temp_path.unlink(missing_ok=True)
        raise


def is_up_to_date(src: Path, dst: Path) -> bool:
    if not dst.exists():
        return False
    return dst.stat().st_mtime >= src.stat().st_mtime


def read_text_exact(path: Path, encoding: str = "utf-8") -> str:
    # newline="" and surrogateescape keep line endings and undecodable bytes intact.
    with path.open("r", encoding=encoding, errors="surrogateescape", newline="") as f:
        return f.read()


def write_text_if_changed(path: Path, text: str, encoding: str = "utf-8") -> bool:
    if path.exists() and read_text_exact(path, encoding) == text:
        return False
    with path.open("w", encoding=encoding, errors="surrogateescape", newline="") as f:
        f.write(text)
    return True


def iter_files(root: Path) -> Iterator[Path]:
    if not root.exists():
        return
    for dirpath, _dirnames, filenames in os.walk(root):
        for filename in filenames:
            yield Path(dirpath) / filename
