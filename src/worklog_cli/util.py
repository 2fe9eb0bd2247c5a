from __future__ import annotations

import logging
import os
import sys
from typing import NoReturn

import typer
from rich.console import Console
from rich.logging import RichHandler

from worklog_core.errors import InvalidBoardError, WorklogError
from worklog_core.service import WorklogService

EXIT_ERROR = 1
EXIT_INVALID_BOARD = 3


def configure_stdio() -> None:
    """Make CLI output robust across Windows console encodings.

    Some Windows terminals use a non-UTF8 encoding (e.g., cp1252). Titles are
    free text, so printing one can raise UnicodeEncodeError and abort the
    command. Configure stdout/stderr to replace unencodable characters
    instead of crashing.
    """

    if os.name != "nt":
        return

    for stream in (sys.stdout, sys.stderr):
        try:
            # Keep the current encoding, but make encoding errors non-fatal.
            stream.reconfigure(errors="replace")
        except Exception:
            continue


def resolve_log_level(configured: str, verbosity: int) -> int:
    """Combine the configured level name with -v flags (-v: INFO, -vv: DEBUG)."""
    level = logging.getLevelName(configured.upper())
    if not isinstance(level, int):
        level = logging.WARNING
    if verbosity >= 2:
        return min(level, logging.DEBUG)
    if verbosity == 1:
        return min(level, logging.INFO)
    return level


def configure_logging(level: int) -> None:
    handler = RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=False)
    logging.basicConfig(level=level, format="%(message)s", datefmt="[%X]", handlers=[handler], force=True)


def get_service(ctx: typer.Context) -> WorklogService:
    service = ctx.obj
    if not isinstance(service, WorklogService):
        raise RuntimeError("Worklog service not initialized; invoke through the worklog app")
    return service


def fail(error: WorklogError) -> NoReturn:
    """Report a worklog error on stderr and exit with its code."""
    typer.echo(f"Error: {error}", err=True)
    code = EXIT_INVALID_BOARD if isinstance(error, InvalidBoardError) else EXIT_ERROR
    raise typer.Exit(code=code)
