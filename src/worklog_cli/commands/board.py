from __future__ import annotations

import json

import typer

from worklog_core.errors import WorklogError

from ..util import fail, get_service


def list_board(
    ctx: typer.Context,
    board: str = typer.Argument(..., help="todo|doing|done"),
    output_format: str = typer.Option("plain", "--format", help="plain|json"),
):
    """List the worklogs on one board."""
    service = get_service(ctx)
    try:
        summaries = service.summaries(board)
    except WorklogError as e:
        fail(e)

    if output_format == "json":
        typer.echo(json.dumps([s.model_dump() for s in summaries], ensure_ascii=False))
        return

    for summary in summaries:
        title = summary.title if summary.readable else f"(unreadable: {summary.error})"
        typer.echo(f"{summary.id}\t{title}")
