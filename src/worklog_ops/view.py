"""
view.py - Dashboard generation for worklog boards.

Builds the aggregate (board -> [(id, title)]) view from the service and
renders it as a read-only Markdown summary.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from worklog_core.config import DATA_DIRNAME
from worklog_core.models import BOARD_ORDER, Board, WorklogSummary
from worklog_core.service import WorklogService

logger = logging.getLogger(__name__)

BOARD_LABELS = {
    Board.TODO: "To Do",
    Board.DOING: "Doing",
    Board.DONE: "Done",
}


@dataclass
class Dashboard:
    """Aggregate view of all boards."""

    boards: Dict[Board, List[WorklogSummary]]
    root: Path
    generated_at: datetime = field(default_factory=datetime.now)

    @property
    def counts(self) -> Dict[Board, int]:
        return {board: len(self.boards.get(board, [])) for board in BOARD_ORDER}

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def to_dict(self) -> dict:
        return {
            "root": str(self.root),
            "generated_at": self.generated_at.isoformat(timespec="seconds"),
            "boards": {
                board.value: [summary.model_dump() for summary in self.boards.get(board, [])]
                for board in BOARD_ORDER
            },
        }


def collect_dashboard(service: WorklogService) -> Dashboard:
    """Read every board once and return the aggregate view."""
    return Dashboard(boards=service.aggregate(), root=service.context.root)


def describe_entry(summary: WorklogSummary) -> str:
    if summary.readable:
        return f"{summary.id} {summary.title}".strip()
    return f"{summary.id} (unreadable: {summary.error})"


def render_markdown(
    dashboard: Dashboard,
    *,
    output_path: Optional[Path] = None,
    record_suffix: str = ".md",
) -> str:
    """Render the dashboard as Markdown.

    When ``output_path`` is given, entries link to their records relative to
    the dashboard file.
    """
    lines: List[str] = []
    lines.append("# Worklog Dashboard")
    lines.append("")
    lines.append(f"Source: {dashboard.root.as_posix()}")
    lines.append(f"Generated: {dashboard.generated_at.isoformat(timespec='seconds')}")
    lines.append("")

    for board in BOARD_ORDER:
        entries = dashboard.boards.get(board, [])
        lines.append(f"## {BOARD_LABELS[board]} ({len(entries)})")
        lines.append("")
        if not entries:
            lines.append("_No worklogs._")
            lines.append("")
            continue
        for summary in entries:
            description = describe_entry(summary)
            if output_path is None:
                lines.append(f"- {description}")
            else:
                record = dashboard.root / DATA_DIRNAME / f"{summary.id}{record_suffix}"
                lines.append(f"- [{_link_text(description)}]({_relative_path(record, output_path.parent)})")
        lines.append("")
    return "\n".join(lines) + "\n"


def _link_text(text: str) -> str:
    return text.replace("\\", "\\\\").replace("[", "\\[").replace("]", "\\]").replace(")", "\\)")


def render_json(dashboard: Dashboard) -> str:
    return json.dumps(dashboard.to_dict(), ensure_ascii=False, indent=2)


def write_dashboard(service: WorklogService, output_path: Path) -> Path:
    """Render the current dashboard to a Markdown file."""
    dashboard = collect_dashboard(service)
    output_path = output_path.resolve()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    content = render_markdown(
        dashboard,
        output_path=output_path,
        record_suffix=service.context.suffix,
    )
    output_path.write_text(content, encoding="utf-8")
    logger.info("Wrote dashboard with %d worklogs to %s", dashboard.total, output_path)
    return output_path


def _relative_path(target: Path, start: Path) -> str:
    try:
        return os.path.relpath(target, start).replace("\\", "/")
    except ValueError:
        return target.as_posix()
