from __future__ import annotations

import argparse
import logging
from pathlib import Path

from rich.console import Console

from cachifier.cli.commands import hash_cmd, run_cmd
from cachifier.cli.context import CLIContext
from cachifier.core.errors import CachifierError
from cachifier.core.logging import configure_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cachify",
        description="Fingerprint static assets with content hashes",
    )
    parser.add_argument(
        "--project-root",
        type=Path,
        default=Path.cwd(),
        help="Project root containing the static assets (default: current working directory)",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0)

    subparsers = parser.add_subparsers(dest="command")
    run_cmd.register(subparsers)
    hash_cmd.register(subparsers)

    return parser


def main(argv: list[str] | None = None, console: Console | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    console = console or Console()
    configure_logging(args.verbose, console=console)

    ctx = CLIContext(project_root=args.project_root.expanduser().resolve(), console=console)

    handler = getattr(args, "handler", None)
    if handler is None:
        parser.print_help()
        return 2

    try:
        return handler(args, ctx)
    except CachifierError as exc:
        logger.error(str(exc))
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
