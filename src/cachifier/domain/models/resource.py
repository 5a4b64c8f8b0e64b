from __future__ import annotations

from collections.abc import Iterable, Iterator, MutableSet
from dataclasses import dataclass
from pathlib import Path

from cachifier.core.errors import InvalidArgumentError


@dataclass(slots=True, eq=False)
class Resource:
    """A static asset under management.

    Equality and hashing are by identity: two records for the same file are
    still two resources.
    """

    path: Path
    relative_path: str
    name: str
    assembly: str | None = None
    content_hash: str | None = None
    hashed_path: Path | None = None
    relative_hashed_path: str | None = None

    @property
    def is_embedded(self) -> bool:
        return bool(self.assembly and self.assembly.strip())

    def __str__(self) -> str:
        return f"Name: {self.name}, Assembly: {self.assembly}, RelativePath: {self.relative_path}"


class ResourceCollection(MutableSet[Resource]):
    def __init__(self, resources: Iterable[Resource] = ()) -> None:
        self._items: dict[Resource, None] = {}
        self.add_range(resources)

    def __contains__(self, item: object) -> bool:
        return item in self._items

    def __iter__(self) -> Iterator[Resource]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def add(self, value: Resource) -> None:
        self._items[value] = None

    def discard(self, value: Resource) -> None:
        self._items.pop(value, None)

    def add_range(self, resources: Iterable[Resource]) -> None:
        if resources is None:
            raise InvalidArgumentError("resources is required")
        for resource in resources:
            self.add(resource)

    def hashed_paths(self) -> set[str]:
        return {
            str(resource.hashed_path).lower()
            for resource in self._items
            if resource.hashed_path is not None and str(resource.hashed_path).strip()
        }

    def __repr__(self) -> str:
        return f"ResourceCollection({len(self)} resources)"
