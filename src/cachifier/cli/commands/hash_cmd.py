from __future__ import annotations

import argparse
from pathlib import Path

from rich.table import Table

from cachifier.application.services.naming_policy import NamingPolicy
from cachifier.cli.context import CLIContext
from cachifier.core.encoding import encode_digest
from cachifier.core.errors import SourceReadError
from cachifier.core.files import relative_path
from cachifier.core.hashing import compute_file_digest
from cachifier.domain.models.resource import Resource


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("hash", help="Print the content token and fingerprinted name of files")
    parser.add_argument("paths", nargs="+", help="Files to hash")
    parser.set_defaults(handler=run)


def run(args: argparse.Namespace, ctx: CLIContext) -> int:
    naming_policy = NamingPolicy()

    table = Table(title="Content Hashes")
    table.add_column("File", overflow="fold")
    table.add_column("Token", overflow="fold")
    table.add_column("Fingerprinted Name", overflow="fold")

    exit_code = 0
    for raw in args.paths:
        path = Path(raw).expanduser()
        if not path.is_absolute():
            path = ctx.project_root / path
        try:
            token = encode_digest(compute_file_digest(path))
        except SourceReadError as exc:
            table.add_row(raw, "error", str(exc))
            exit_code = 1
            continue
        resource = Resource(
            path=path,
            relative_path=relative_path(path, ctx.project_root),
            name=path.name,
            content_hash=token,
        )
        table.add_row(raw, token, naming_policy.file_name(resource))

    ctx.console.print(table)
    return exit_code
