from __future__ import annotations

import logging
from enum import IntEnum

from rich.console import Console
from rich.logging import RichHandler

VERBOSE = 15
logging.addLevelName(VERBOSE, "VERBOSE")


class Importance(IntEnum):
    """Message importance as reported by the processing stages."""

    HIGH = logging.INFO
    NORMAL = VERBOSE
    LOW = logging.DEBUG


def level_for_verbosity(verbosity: int) -> int:
    if verbosity <= 0:
        return logging.INFO
    if verbosity == 1:
        return VERBOSE
    return logging.DEBUG


def configure_logging(verbosity: int = 0, console: Console | None = None) -> None:
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        markup=False,
        rich_tracebacks=verbosity > 1,
    )
    logging.basicConfig(
        level=level_for_verbosity(verbosity),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )
