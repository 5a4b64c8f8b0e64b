from __future__ import annotations

import os
from pathlib import PurePath
from typing import Iterable, Iterator

from cachifier.core.config import normalize_extensions
from cachifier.core.errors import InvalidArgumentError
from cachifier.core.files import posix_path


class ResourceFilter:
    """Decides from the path string alone whether a file is a manageable asset.

    Rules, first match wins: an exact (case-insensitive) exclusion match is
    rejected, a path without an extension is accepted, a path whose extension
    is in ``extensions`` is accepted, anything else is rejected.
    """

    def __init__(self, extensions: Iterable[str], exclusions: Iterable[str] | None = None) -> None:
        if extensions is None:
            raise InvalidArgumentError("extensions is required")
        self.extensions = normalize_extensions(extensions)
        self.exclusions = frozenset(posix_path(item).lower() for item in (exclusions or ()) if item)

    def is_resource(self, path: str | PurePath | None) -> bool:
        if path is None or not str(path).strip():
            return False

        if posix_path(path).lower() in self.exclusions:
            return False

        extension = os.path.splitext(os.fspath(path))[1]
        if not extension.strip():
            return True

        return extension.lower() in self.extensions

    def filter(self, files: Iterable[str | PurePath]) -> Iterator[str | PurePath]:
        if files is None:
            raise InvalidArgumentError("files is required")
        return (item for item in files if self.is_resource(item))
