from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from worklog_core.models import BOARD_ORDER
from worklog_ops.view import (
    BOARD_LABELS,
    Dashboard,
    collect_dashboard,
    render_json,
    render_markdown,
    write_dashboard,
)

from ..util import get_service

console = Console()


def _print_table(dashboard: Dashboard) -> None:
    table = Table(title="Worklog Dashboard", show_header=True)
    for board in BOARD_ORDER:
        table.add_column(f"{BOARD_LABELS[board]} ({dashboard.counts[board]})", overflow="fold")

    columns = [dashboard.boards.get(board, []) for board in BOARD_ORDER]
    depth = max((len(column) for column in columns), default=0)
    for row in range(depth):
        cells = []
        for column in columns:
            if row >= len(column):
                cells.append("")
                continue
            summary = column[row]
            if summary.readable:
                cells.append(f"[dim]{escape(summary.id)}[/dim] {escape(summary.title)}")
            else:
                cells.append(f"[dim]{escape(summary.id)}[/dim] [red](unreadable)[/red]")
        table.add_row(*cells)

    console.print(table)


def dashboard(
    ctx: typer.Context,
    output_format: str = typer.Option("table", "--format", help="table|markdown|json"),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the Markdown dashboard to this file",
        dir_okay=False,
    ),
):
    """Refresh the aggregate view of all boards."""
    service = get_service(ctx)

    if output is not None:
        path = write_dashboard(service, output)
        typer.echo(f"✓ Wrote dashboard: {path}")
        return

    view = collect_dashboard(service)
    if output_format == "json":
        typer.echo(render_json(view))
    elif output_format == "markdown":
        typer.echo(render_markdown(view, record_suffix=service.context.suffix), nl=False)
    elif output_format == "table":
        _print_table(view)
    else:
        typer.echo(f"Error: Unknown format: {output_format} (expected table, markdown or json)", err=True)
        raise typer.Exit(code=2)
