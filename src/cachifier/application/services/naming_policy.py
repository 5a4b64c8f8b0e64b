from __future__ import annotations

from pathlib import Path

from cachifier.core.errors import PreconditionViolation
from cachifier.domain.models.resource import Resource

HASH_SEPARATOR = ","


class NamingPolicy:
    separator = HASH_SEPARATOR

    def file_name(self, resource: Resource) -> str:
        """Return ``{stem},{hash}{suffix}`` for a hashed resource."""
        if resource is None:
            raise PreconditionViolation("resource is required")
        if not resource.content_hash:
            raise PreconditionViolation(f"{resource.path} has not been hashed yet")
        source = Path(resource.path)
        return f"{source.stem}{self.separator}{resource.content_hash}{source.suffix}"

    def output_path(self, resource: Resource, base: Path) -> Path:
        directory = Path(resource.relative_path).parent
        if str(directory) in ("", "."):
            return base / self.file_name(resource)
        return base / directory / self.file_name(resource)
