from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Iterable

from cachifier.core.errors import InvalidArgumentError
from cachifier.core.files import is_within

DEFAULT_EXTENSIONS = frozenset(
    {
        ".css",
        ".js",
        ".png",
        ".jpg",
        ".jpeg",
        ".gif",
        ".svg",
        ".ico",
        ".webp",
        ".woff",
        ".woff2",
        ".ttf",
        ".eot",
        ".otf",
    }
)
DEFAULT_TEXT_EXTENSIONS = frozenset({".css", ".js"})
DEFAULT_OUTPUT_DIRNAME = "cache"

COPY_ALWAYS = "always"
COPY_IF_NEWER = "if-newer"
COPY_MODES = (COPY_ALWAYS, COPY_IF_NEWER)


def normalize_extensions(extensions: Iterable[str]) -> frozenset[str]:
    normalized = set()
    for ext in extensions:
        clean = ext.strip().lower()
        if not clean:
            continue
        normalized.add(clean if clean.startswith(".") else f".{clean}")
    return frozenset(normalized)


@dataclass(frozen=True)
class ProcessorConfig:
    project_root: Path
    output_dir: str
    content: tuple[Path, ...] = ()
    embedded_resources: tuple[Path, ...] = ()
    extensions: frozenset[str] = DEFAULT_EXTENSIONS
    exclusions: tuple[str, ...] = ()
    text_extensions: frozenset[str] = DEFAULT_TEXT_EXTENSIONS
    force_lowercase: bool = False
    root_namespace: str | None = None
    assembly_name: str | None = None
    mapping_path: Path | None = None
    cdn_base_uri: str | None = None
    copy_mode: str = COPY_ALWAYS
    workers: int = 1

    @property
    def output_root(self) -> Path:
        return Path(os.path.normpath(self.project_root / self.output_dir))

    def normalized(self) -> ProcessorConfig:
        """Return a copy with an absolute root and an absolute mapping path."""
        root = Path(os.path.abspath(self.project_root))
        mapping_path = self.mapping_path
        if mapping_path is not None:
            mapping_path = Path(os.path.abspath(root / mapping_path))
        return replace(self, project_root=root, mapping_path=mapping_path)

    def validate(self) -> None:
        if self.project_root is None or not str(self.project_root).strip():
            raise InvalidArgumentError("project_root is required")
        if not self.output_dir or not self.output_dir.strip():
            raise InvalidArgumentError("output_dir is required")
        if Path(self.output_dir).is_absolute():
            raise InvalidArgumentError(f"output_dir must be relative to the project root: {self.output_dir}")
        output_root = self.output_root
        if not is_within(output_root, self.project_root) or output_root.resolve() == self.project_root.resolve():
            raise InvalidArgumentError(f"output_dir must be a subdirectory of the project root: {self.output_dir}")
        if self.content is None or self.embedded_resources is None:
            raise InvalidArgumentError("content and embedded_resources lists are required")
        if self.embedded_resources and not (self.root_namespace and self.assembly_name):
            raise InvalidArgumentError("Embedded resources require both a root namespace and an assembly name")
        if self.copy_mode not in COPY_MODES:
            raise InvalidArgumentError(f"Unknown copy mode {self.copy_mode!r}; expected one of {COPY_MODES}")
        if self.workers < 1:
            raise InvalidArgumentError("workers must be at least 1")


def load_config(
    project_root: Path | None = None,
    output_dir: str | None = None,
    **overrides,
) -> ProcessorConfig:
    root = (project_root or Path.cwd()).expanduser().resolve()

    resolved_output = output_dir or os.getenv("CACHIFIER_OUTPUT_DIR") or DEFAULT_OUTPUT_DIRNAME
    if overrides.get("cdn_base_uri") is None:
        cdn_raw = os.getenv("CACHIFIER_CDN_BASE_URI")
        if cdn_raw:
            overrides["cdn_base_uri"] = cdn_raw.strip()

    for key in ("extensions", "text_extensions"):
        if overrides.get(key) is not None:
            overrides[key] = normalize_extensions(overrides[key])
        else:
            overrides.pop(key, None)
    for key in ("content", "embedded_resources", "exclusions"):
        if overrides.get(key) is not None:
            overrides[key] = tuple(overrides[key])
        else:
            overrides.pop(key, None)

    return ProcessorConfig(project_root=root, output_dir=resolved_output, **overrides)
