from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Iterable
from urllib.parse import quote, urljoin, urlparse

from cachifier.core.config import ProcessorConfig
from cachifier.core.errors import FilesystemError, InvalidArgumentError
from cachifier.core.files import ensure_directory, posix_path, write_text_if_changed
from cachifier.domain.models.resource import Resource, ResourceCollection

MANIFEST_VERSION = 1


@dataclass(slots=True)
class ManifestEntry:
    name: str
    assembly: str | None
    embedded: bool
    relative_path: str
    relative_hashed_path: str | None
    url: str | None
    cdn_url: str | None


def normalize_relative_uri(relative: str, force_lowercase: bool = False) -> str:
    uri = posix_path(relative)
    if force_lowercase:
        uri = uri.lower()
    return quote(uri, safe="/,~!$&'()*+;=:@-._")


def cdn_url(cdn_base_uri: str | None, relative_uri: str) -> str | None:
    if not cdn_base_uri or not cdn_base_uri.strip():
        return None
    parsed = urlparse(cdn_base_uri.strip())
    if not parsed.scheme or not parsed.netloc:
        return None
    return urljoin(cdn_base_uri.strip(), relative_uri)


def build_entries(
    resources: Iterable[Resource],
    force_lowercase: bool = False,
    cdn_base_uri: str | None = None,
) -> list[ManifestEntry]:
    entries: list[ManifestEntry] = []
    for resource in resources:
        url = None
        cdn = None
        if resource.relative_hashed_path is not None:
            url = normalize_relative_uri(resource.relative_hashed_path, force_lowercase)
            cdn = cdn_url(cdn_base_uri, url)
        entries.append(
            ManifestEntry(
                name=resource.name,
                assembly=resource.assembly,
                embedded=resource.is_embedded,
                relative_path=posix_path(resource.relative_path),
                relative_hashed_path=(
                    posix_path(resource.relative_hashed_path) if resource.relative_hashed_path else None
                ),
                url=url,
                cdn_url=cdn,
            )
        )
    return sorted(entries, key=lambda entry: (entry.relative_path.lower(), entry.name))


class ManifestGenerator:
    """Writes the resource mapping consumed by the web application at runtime."""

    def render(self, resources: ResourceCollection, config: ProcessorConfig) -> str:
        entries = build_entries(resources, config.force_lowercase, config.cdn_base_uri)
        document = {
            "version": MANIFEST_VERSION,
            "namespace": config.root_namespace,
            "output_dir": posix_path(config.output_dir),
            "cdn_base_uri": config.cdn_base_uri,
            "resources": [asdict(entry) for entry in entries],
        }
        return json.dumps(document, indent=2, ensure_ascii=True) + "\n"

    def generate(self, resources: ResourceCollection, config: ProcessorConfig) -> bool:
        if resources is None:
            raise InvalidArgumentError("resources is required")
        if config.mapping_path is None or not str(config.mapping_path).strip():
            raise InvalidArgumentError("The static mapping source path is None, empty or consists solely of whitespace")

        path = Path(config.mapping_path)
        text = self.render(resources, config)
        try:
            ensure_directory(path.parent)
            return write_text_if_changed(path, text)
        except OSError as exc:
            raise FilesystemError(f"Unable to write {path}: {exc}") from exc
