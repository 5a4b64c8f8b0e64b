from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, Protocol, TypeVar

from cachifier.application.services.manifest_service import ManifestGenerator
from cachifier.application.services.naming_policy import NamingPolicy
from cachifier.application.services.reference_rewriter import ReferenceRewriter
from cachifier.application.services.resource_collector import ResourceCollector
from cachifier.application.services.resource_filter import ResourceFilter
from cachifier.core.config import COPY_IF_NEWER, ProcessorConfig
from cachifier.core.encoding import encode_digest
from cachifier.core.errors import InvalidArgumentError, PreconditionViolation
from cachifier.core.files import is_within, posix_path, relative_path
from cachifier.core.hashing import compute_file_digest, format_digest
from cachifier.core.logging import Importance
from cachifier.domain.models.resource import Resource, ResourceCollection
from cachifier.infrastructure.output.store import OutputStore

T = TypeVar("T")
R = TypeVar("R")


class MappingGenerator(Protocol):
    def generate(self, resources: ResourceCollection, config: ProcessorConfig) -> bool:
        ...


@dataclass(slots=True)
class ProcessResult:
    resources: ResourceCollection
    directories_created: list[Path] = field(default_factory=list)
    copied: int = 0
    skipped: int = 0
    rewritten: list[Path] = field(default_factory=list)
    deleted: list[Path] = field(default_factory=list)
    mapping_written: bool = False

    @property
    def collected(self) -> int:
        return len(self.resources)


class Processor:
    """Fingerprints static assets and rewrites the references between them.

    ``run`` executes the stages strictly in order; each stage finishes for
    every resource before the next begins. With ``config.workers > 1`` the
    per-resource work inside the hash, copy and rewrite stages runs on a
    thread pool.
    """

    def __init__(
        self,
        config: ProcessorConfig,
        logger: logging.Logger | None = None,
        mapping_generator: MappingGenerator | None = None,
        naming_policy: NamingPolicy | None = None,
        hasher: Callable[[Path], bytes] = compute_file_digest,
        encoder: Callable[[bytes], str] = encode_digest,
    ) -> None:
        if config is None:
            raise InvalidArgumentError("config is required")
        config.validate()
        self.config = config.normalized()
        self.logger = logger or logging.getLogger(__name__)
        self.mapping_generator = mapping_generator or ManifestGenerator()
        self.naming_policy = naming_policy or NamingPolicy()
        self.hasher = hasher
        self.encoder = encoder
        self.store = OutputStore(self.config.output_root)

    def run(self) -> ProcessResult:
        resources = self.collect()
        result = ProcessResult(resources=resources)

        self.hash_resources(resources)
        self.name_resources(resources)
        result.directories_created = self.create_directories(resources)
        result.copied, result.skipped = self.copy_resources(resources)
        result.rewritten = self.rewrite_references(resources)
        result.deleted = self.delete_orphans(resources)
        result.mapping_written = self.generate_mapping(resources)

        self._log(
            Importance.HIGH,
            "Processed %d static resources: %d copied, %d up to date, %d rewritten, %d orphans deleted.",
            result.collected,
            result.copied,
            result.skipped,
            len(result.rewritten),
            len(result.deleted),
        )
        return result

    def collect(self) -> ResourceCollection:
        config = self.config
        self._log(Importance.HIGH, 'Collecting static resources from "%s"', config.project_root)

        resource_filter = ResourceFilter(config.extensions, config.exclusions)
        collector = ResourceCollector(config.project_root, resource_filter)

        resources = ResourceCollection()
        if config.embedded_resources:
            resources.add_range(
                collector.collect_embedded_resources(
                    config.assembly_name,
                    config.root_namespace,
                    config.embedded_resources,
                )
            )
        resources.add_range(collector.collect_content(config.content))

        for resource in resources:
            self._check_location(resource)

        self._log(Importance.HIGH, 'Collected "%d" static resources.', len(resources))
        return resources

    def hash_resources(self, resources: ResourceCollection) -> None:
        def hash_one(resource: Resource) -> None:
            if resource.content_hash:
                return
            self._log(Importance.NORMAL, 'Computing the SHA256 hash of "%s".', resource.path)
            digest = self.hasher(resource.path)
            self._log(Importance.LOW, 'Encoding the SHA256 hash of "%s" [%s].', resource.path, format_digest(digest))
            resource.content_hash = self.encoder(digest)

        self._map(hash_one, resources)

    def name_resources(self, resources: ResourceCollection) -> None:
        root = self.config.project_root
        output_root = self.config.output_root
        for resource in resources:
            if not resource.content_hash:
                raise PreconditionViolation(f'"{resource.path}" must be hashed before it is named')
            self._check_location(resource)
            if resource.hashed_path is not None:
                continue
            self._log(Importance.NORMAL, 'Computing the new filename of "%s".', resource.path)
            resource.hashed_path = self.naming_policy.output_path(resource, output_root)
            resource.relative_hashed_path = relative_path(resource.hashed_path, root)

    def create_directories(self, resources: ResourceCollection) -> list[Path]:
        directories = sorted({self._hashed(resource).parent for resource in resources})
        created: list[Path] = []
        for directory in directories:
            if self.store.ensure_directory(directory):
                self._log(Importance.HIGH, 'Creating directory "%s" because it does not exist.', directory)
                created.append(directory)
        return created

    def copy_resources(self, resources: ResourceCollection) -> tuple[int, int]:
        if_newer = self.config.copy_mode == COPY_IF_NEWER

        def copy_one(resource: Resource) -> bool:
            destination = self._hashed(resource)
            # A text asset's output depends on the names of other resources, so
            # its rewritten copy can be stale even when its own source is not.
            only_if_newer = if_newer and not self.is_text_asset(resource)
            copied = self.store.store_file(resource.path, destination, only_if_newer=only_if_newer)
            if copied:
                self._log(Importance.NORMAL, 'Copying file "%s" to "%s".', resource.path, destination)
            else:
                self._log(Importance.LOW, 'Skipping "%s" because it is up to date.', destination)
            return copied

        outcomes = self._map(copy_one, self._distinct_outputs(resources))
        copied = sum(1 for outcome in outcomes if outcome)
        return copied, len(outcomes) - copied

    def build_rewrite_map(self, resources: Iterable[Resource]) -> dict[str, str]:
        output_root = self.config.output_root
        mapping: dict[str, str] = {}
        for resource in resources:
            mapping[posix_path(resource.relative_path)] = relative_path(self._hashed(resource), output_root)
        return mapping

    def rewrite_references(self, resources: ResourceCollection) -> list[Path]:
        rewriter = ReferenceRewriter(self.build_rewrite_map(resources))
        text_resources = [resource for resource in self._distinct_outputs(resources) if self.is_text_asset(resource)]

        def rewrite_one(resource: Resource) -> Path | None:
            destination = self._hashed(resource)
            original = self.store.read_text(destination)
            updated = rewriter.rewrite(original)
            if updated == original:
                return None
            self._log(Importance.NORMAL, 'Rewriting references in "%s".', destination)
            self.store.write_text(destination, updated)
            return destination

        return [path for path in self._map(rewrite_one, text_resources) if path is not None]

    def delete_orphans(self, resources: ResourceCollection) -> list[Path]:
        keep = resources.hashed_paths()
        if self.config.mapping_path is not None:
            keep.add(str(self.config.mapping_path).lower())

        deleted: list[Path] = []
        for orphan in self.store.find_orphans(keep):
            self._log(Importance.HIGH, 'Deleting "%s" because it is an orphan.', orphan)
            self.store.delete_file(orphan)
            deleted.append(orphan)
        return deleted

    def generate_mapping(self, resources: ResourceCollection) -> bool:
        if self.config.mapping_path is None:
            return False
        written = self.mapping_generator.generate(resources, self.config)
        if written:
            self._log(Importance.NORMAL, 'Writing "%s"', self.config.mapping_path)
        else:
            self._log(
                Importance.LOW,
                'Skipping file "%s" because it is up-to-date with respect to the input files.',
                self.config.mapping_path,
            )
        return written

    def is_text_asset(self, resource: Resource) -> bool:
        return Path(resource.path).suffix.lower() in self.config.text_extensions

    def _check_location(self, resource: Resource) -> None:
        root = self.config.project_root
        output_root = self.config.output_root
        if not is_within(resource.path, root):
            raise InvalidArgumentError(f'"{resource.path}" is outside the project root "{root}"')
        if is_within(resource.path, output_root):
            raise InvalidArgumentError(f'"{resource.path}" is inside the output directory "{output_root}"')

    def _distinct_outputs(self, resources: Iterable[Resource]) -> list[Resource]:
        # The same file listed twice (e.g. embedded and content) shares one output.
        seen: set[str] = set()
        distinct: list[Resource] = []
        for resource in resources:
            key = str(self._hashed(resource)).lower()
            if key not in seen:
                seen.add(key)
                distinct.append(resource)
        return distinct

    @staticmethod
    def _hashed(resource: Resource) -> Path:
        if resource.hashed_path is None:
            raise PreconditionViolation(f'"{resource.path}" has no hashed path yet')
        return resource.hashed_path

    def _map(self, fn: Callable[[T], R], items: Iterable[T]) -> list[R]:
        items = list(items)
        if self.config.workers <= 1 or len(items) <= 1:
            return [fn(item) for item in items]
        with ThreadPoolExecutor(max_workers=self.config.workers) as pool:
            return list(pool.map(fn, items))

    def _log(self, importance: Importance, message: str, *args: object) -> None:
        self.logger.log(int(importance), message, *args)
