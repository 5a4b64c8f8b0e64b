from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
from typing import Iterable

from rich.panel import Panel
from rich.table import Table

from cachifier.application.services.processor import Processor
from cachifier.cli.context import CLIContext
from cachifier.core.config import COPY_MODES, load_config
from cachifier.core.errors import InvalidArgumentError
from cachifier.core.files import is_within, iter_files


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("run", help="Fingerprint static assets and rewrite references")
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Output subdirectory relative to the project root (default: $CACHIFIER_OUTPUT_DIR or 'cache')",
    )
    parser.add_argument("--content", nargs="*", default=[], help="Static content files to deploy")
    parser.add_argument("--embedded", nargs="*", default=[], help="Files embedded into a packaged module")
    parser.add_argument(
        "--scan",
        action="store_true",
        help="Collect every file under the project root as content (output directory excluded)",
    )
    parser.add_argument("--ext", action="append", default=None, help="Manageable extension (repeatable)")
    parser.add_argument("--text-ext", action="append", default=None, help="Text asset extension (repeatable)")
    parser.add_argument("--exclude", action="append", default=[], help="Path to leave untouched (repeatable)")
    parser.add_argument("--namespace", default=None, help="Root namespace for embedded resources")
    parser.add_argument("--assembly", default=None, help="Target module for embedded resources")
    parser.add_argument("--mapping", type=Path, default=None, help="Write a JSON resource mapping to this path")
    parser.add_argument("--cdn-base-uri", default=None, help="Absolute base URI used for CDN URLs in the mapping")
    parser.add_argument("--lowercase", action="store_true", help="Lower-case URLs in the mapping")
    parser.add_argument("--copy-mode", choices=COPY_MODES, default="always")
    parser.add_argument("--workers", type=int, default=1)
    parser.set_defaults(handler=run)


def run(args: argparse.Namespace, ctx: CLIContext) -> int:
    root = ctx.project_root
    if not root.is_dir():
        raise InvalidArgumentError(f"The directory '{root}' does not exist")

    content = [_resolve(root, p) for p in args.content]
    embedded = [_resolve(root, p) for p in args.embedded]
    exclusions: list[str] = []
    for item in args.exclude:
        exclusions.append(item)
        exclusions.append(str(_resolve(root, item)))

    config = load_config(
        root,
        args.output_dir,
        content=content,
        embedded_resources=embedded,
        extensions=args.ext,
        text_extensions=args.text_ext,
        exclusions=exclusions,
        root_namespace=args.namespace,
        assembly_name=args.assembly,
        mapping_path=args.mapping,
        cdn_base_uri=args.cdn_base_uri,
        force_lowercase=args.lowercase,
        copy_mode=args.copy_mode,
        workers=args.workers,
    )
    if args.scan and not content:
        config = replace(config, content=tuple(scan_project(root, config.output_root, config.extensions)))

    result = Processor(config).run()

    table = Table(title=f"Cachified Resources ({result.collected})")
    table.add_column("Resource", overflow="fold")
    table.add_column("Hashed Path", overflow="fold")
    table.add_column("Embedded")
    for resource in sorted(result.resources, key=lambda r: r.relative_path.lower()):
        table.add_row(
            resource.relative_path,
            resource.relative_hashed_path or "",
            "yes" if resource.is_embedded else "",
        )
    ctx.console.print(table)

    summary = (
        f"copied={result.copied} up_to_date={result.skipped} "
        f"rewritten={len(result.rewritten)} orphans_deleted={len(result.deleted)}"
    )
    if result.mapping_written:
        summary += f"\nmapping={config.mapping_path}"
    ctx.console.print(Panel(summary, title="cachify run"))
    return 0


def scan_project(root: Path, output_root: Path, extensions: Iterable[str]) -> list[Path]:
    wanted = {ext.lower() for ext in extensions}
    files: list[Path] = []
    for path in iter_files(root):
        if path.suffix.lower() not in wanted or is_within(path, output_root):
            continue
        rel_parts = path.relative_to(root).parts
        if any(part.startswith(".") for part in rel_parts[:-1]):
            continue
        files.append(path)
    return sorted(files)


def _resolve(root: Path, value: str | Path) -> Path:
    path = Path(value).expanduser()
    return path if path.is_absolute() else root / path
