from __future__ import annotations

from pathlib import Path

from cachifier.core.errors import FilesystemError, SourceReadError
from cachifier.core.files import (
    copy_file,
    ensure_directory,
    is_up_to_date,
    iter_files,
    read_text_exact,
    write_text_if_changed,
)


class OutputStore:
    """The output subdirectory that holds fingerprinted copies."""

    def __init__(self, base_dir: Path) -> None:
        self.base_dir = base_dir

    def ensure_directory(self, directory: Path) -> bool:
        if directory.is_dir():
            return False
        try:
            ensure_directory(directory)
        except OSError as exc:
            raise FilesystemError(f"Unable to create directory {directory}: {exc}") from exc
        return True

    def store_file(self, src: Path, dst: Path, only_if_newer: bool = False) -> bool:
        if not src.is_file():
            raise SourceReadError(f"Source file not found: {src}")
        try:
            if only_if_newer and is_up_to_date(src, dst):
                return False
            copy_file(src, dst)
        except OSError as exc:
            raise FilesystemError(f"Unable to copy {src} to {dst}: {exc}") from exc
        return True

    def read_text(self, path: Path) -> str:
        try:
            return read_text_exact(path)
        except OSError as exc:
            raise FilesystemError(f"Unable to read {path}: {exc}") from exc

    def write_text(self, path: Path, text: str) -> bool:
        try:
            return write_text_if_changed(path, text)
        except OSError as exc:
            raise FilesystemError(f"Unable to write {path}: {exc}") from exc

    def find_orphans(self, keep: set[str]) -> list[Path]:
        try:
            candidates = list(iter_files(self.base_dir))
        except OSError as exc:
            raise FilesystemError(f"Unable to list {self.base_dir}: {exc}") from exc
        return sorted(path for path in candidates if str(path).lower() not in keep)

    @staticmethod
    def delete_file(path: Path) -> None:
        try:
            path.unlink()
        except FileNotFoundError:
            return
        except OSError as exc:
            raise FilesystemError(f"Unable to delete {path}: {exc}") from exc
