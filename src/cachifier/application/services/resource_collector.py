from __future__ import annotations

import os
from pathlib import Path, PurePath
from typing import Iterable, Iterator

from cachifier.application.services.resource_filter import ResourceFilter
from cachifier.core.errors import InvalidArgumentError
from cachifier.core.files import relative_path
from cachifier.domain.models.resource import Resource


class ResourceCollector:
    """Turns raw file lists into ``Resource`` records rooted at a project directory.

    Both entry points are generators; consume them fully before later stages.
    """

    def __init__(self, project_root: Path, resource_filter: ResourceFilter) -> None:
        if project_root is None or not str(project_root).strip():
            raise InvalidArgumentError("project_root is required")
        if resource_filter is None:
            raise InvalidArgumentError("resource_filter is required")
        self.project_root = Path(project_root)
        self.resource_filter = resource_filter

    def collect_embedded_resources(
        self,
        assembly_name: str,
        root_namespace: str,
        files: Iterable[str | PurePath],
    ) -> Iterator[Resource]:
        if not assembly_name or not assembly_name.strip():
            raise InvalidArgumentError("assembly_name is required for embedded resources")
        if not root_namespace or not root_namespace.strip():
            raise InvalidArgumentError("root_namespace is required for embedded resources")
        if files is None:
            raise InvalidArgumentError("files is required")
        return self._collect_embedded(assembly_name, root_namespace, files)

    def collect_content(self, files: Iterable[str | PurePath]) -> Iterator[Resource]:
        if files is None:
            raise InvalidArgumentError("files is required")
        return self._collect_content(files)

    def _collect_embedded(
        self,
        assembly_name: str,
        root_namespace: str,
        files: Iterable[str | PurePath],
    ) -> Iterator[Resource]:
        for item in self.resource_filter.filter(files):
            path = _absolute(item)
            rel = relative_path(path, self.project_root)
            yield Resource(
                path=path,
                relative_path=rel,
                name=f"{root_namespace}.{rel.replace('/', '.')}",
                assembly=assembly_name,
            )

    def _collect_content(self, files: Iterable[str | PurePath]) -> Iterator[Resource]:
        for item in self.resource_filter.filter(files):
            path = _absolute(item)
            yield Resource(
                path=path,
                relative_path=relative_path(path, self.project_root),
                name=path.name,
            )


def _absolute(item: str | PurePath) -> Path:
    return Path(os.path.abspath(os.fspath(item)))
