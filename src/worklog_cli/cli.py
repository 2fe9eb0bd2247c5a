from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from worklog_core.config import ConfigLoader
from worklog_core.errors import ConfigError
from worklog_core.service import WorklogService

from .util import configure_logging, configure_stdio, fail, resolve_log_level

app = typer.Typer(help="worklog: Track worklogs across todo, doing and done boards")


@app.callback()
def _init(
    ctx: typer.Context,
    root: Optional[Path] = typer.Option(
        None,
        "--root",
        help="Store root (overrides WORKLOG_ROOT and the config file)",
        file_okay=False,
        dir_okay=True,
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config-file",
        help="Path to a worklog config file (config.toml)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="Increase log output (-v, -vv)"),
):
    configure_stdio()

    try:
        context = ConfigLoader.load(root=root, config_file=config_file)
    except ConfigError as e:
        fail(e)

    configure_logging(resolve_log_level(context.log_level, verbose))
    ctx.obj = WorklogService(context)


from .commands import worklog as worklog_cmd  # noqa: E402
from .commands import board as board_cmd  # noqa: E402
from .commands import view as view_cmd  # noqa: E402
from .commands.doctor import doctor as doctor_fn  # noqa: E402

app.command(name="init")(worklog_cmd.init)
app.command(name="new")(worklog_cmd.new)
app.command(name="open")(worklog_cmd.open_worklog)
app.command(name="move")(worklog_cmd.move)
app.command(name="show")(worklog_cmd.show)
app.command(name="list")(board_cmd.list_board)
app.command(name="dashboard")(view_cmd.dashboard)
app.command(name="doctor")(doctor_fn)


def main():
    app()
