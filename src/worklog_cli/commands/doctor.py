"""
doctor.py - Store health check command.

Checks the store layout and board membership consistency.
"""

from __future__ import annotations

import json

import typer
from rich.console import Console
from rich.markup import escape

from worklog_ops.doctor import DoctorResult, run_doctor

from ..util import get_service

console = Console()


def format_result_plain(result: DoctorResult) -> None:
    """Print result in plain text format with rich formatting."""
    console.print()
    console.print("[bold cyan]Worklog Store Health Check[/bold cyan]")
    console.print()

    for check in result.checks:
        if not check.passed:
            console.print(f"[red]✗ {escape(check.name)}[/red]: {escape(check.message)}")
        elif check.findings:
            console.print(f"[yellow]⚠ {escape(check.name)}[/yellow]: {escape(check.message)}")
        else:
            console.print(f"[green]✓ {escape(check.name)}[/green]: {escape(check.message)}")
            continue
        for finding in check.findings:
            console.print(f"   [dim]{escape(finding)}[/dim]")
        if check.details:
            console.print(f"   {escape(check.details)}")

    console.print()
    if result.all_passed:
        console.print("[green bold]All checks passed[/green bold]")
    else:
        console.print("[red bold]Problems found[/red bold]")


def doctor(
    ctx: typer.Context,
    output_format: str = typer.Option("plain", "--format", help="plain|json"),
):
    """Check the worklog store for dangling, duplicated or untracked entries."""
    service = get_service(ctx)
    result = run_doctor(service)

    if output_format == "json":
        typer.echo(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    else:
        format_result_plain(result)

    if not result.all_passed:
        raise typer.Exit(code=1)
