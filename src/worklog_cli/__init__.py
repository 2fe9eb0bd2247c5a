"""Worklog CLI - typer front end for worklog_core."""
