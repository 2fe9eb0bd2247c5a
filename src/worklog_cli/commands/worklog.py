from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional

import typer

from worklog_core.errors import RecordUnreadableError, WorklogError
from worklog_core.service import DEFAULT_TITLE

from ..util import fail, get_service


def _launch_editor(path: Path) -> None:
    typer.edit(filename=str(path))


def init(ctx: typer.Context):
    """Create the store layout (data/, boards, tags/)."""
    service = get_service(ctx)
    root = service.init_layout()
    typer.echo(f"OK: Initialized worklog store at {root}")


def new(
    ctx: typer.Context,
    title: str = typer.Option(DEFAULT_TITLE, "--title", "-t", help="Worklog title"),
    tags: Optional[List[str]] = typer.Option(None, "--tag", help="Tag to record (repeatable)"),
    edit: bool = typer.Option(False, "--edit/--no-edit", help="Open the new record in $EDITOR"),
):
    """Create a new worklog on the todo board."""
    service = get_service(ctx)
    try:
        worklog_id = service.create(title=title, tags=tags or [])
        if edit:
            service.open(worklog_id, editor=_launch_editor)
    except WorklogError as e:
        fail(e)
    typer.echo(f"OK: Created: {worklog_id}")


def open_worklog(
    ctx: typer.Context,
    worklog_id: str = typer.Argument(..., help="Worklog id, e.g. 1a2b-0065f1c2d3"),
    edit: bool = typer.Option(True, "--edit/--no-edit", help="Launch $EDITOR (otherwise print the path)"),
):
    """Open a worklog record for editing."""
    service = get_service(ctx)
    try:
        path = service.open(worklog_id, editor=_launch_editor if edit else None)
    except WorklogError as e:
        fail(e)
    if not edit:
        typer.echo(str(path))


def move(
    ctx: typer.Context,
    worklog_id: str = typer.Argument(..., help="Worklog id"),
    board: str = typer.Argument(..., help="todo|doing|done"),
):
    """Move a worklog onto a board."""
    service = get_service(ctx)
    try:
        state = service.move_to(board, worklog_id)
    except WorklogError as e:
        fail(e)
    typer.echo(f"✓ {worklog_id} moved to {state.describe()}")


def show(
    ctx: typer.Context,
    worklog_id: str = typer.Argument(..., help="Worklog id"),
    output_format: str = typer.Option("plain", "--format", help="plain|json"),
):
    """Show a worklog's state, title and tags."""
    service = get_service(ctx)
    try:
        state = service.state_of(worklog_id)
        path = service.records.path_for(worklog_id)
    except WorklogError as e:
        fail(e)

    try:
        record = service.records.read(worklog_id)
        title: Optional[str] = record.title
        tags = record.tags
        error = None
    except RecordUnreadableError as e:
        title, tags, error = None, [], e.reason

    if output_format == "json":
        data = {
            "id": worklog_id,
            "state": state.kind.value,
            "board": state.board.value if state.board else None,
            "title": title,
            "tags": tags,
            "path": str(path),
            "error": error,
        }
        typer.echo(json.dumps(data, ensure_ascii=False))
        return

    typer.echo(f"id:    {worklog_id}")
    typer.echo(f"state: {state.describe()}")
    typer.echo(f"title: {title if error is None else f'(unreadable: {error})'}")
    typer.echo(f"tags:  {', '.join(tags)}")
    typer.echo(f"path:  {path}")
