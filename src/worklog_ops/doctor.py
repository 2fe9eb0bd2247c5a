"""
doctor.py - Read-only consistency checks for a worklog store.

Reports layout problems, dangling pointers, worklogs linked on more than one
board, unreadable records and untracked records. Nothing is repaired here;
`worklog move` restores membership for an untracked record.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional

from worklog_core.errors import RecordUnreadableError
from worklog_core.models import BOARD_ORDER
from worklog_core.service import WorklogService

logger = logging.getLogger(__name__)


@dataclass
class CheckResult:
    """Result of a single check."""
    name: str
    passed: bool
    message: str
    details: Optional[str] = None
    findings: List[str] = field(default_factory=list)


@dataclass
class DoctorResult:
    """Overall doctor check result."""
    all_passed: bool
    checks: List[CheckResult]

    def to_dict(self) -> dict:
        return asdict(self)


def check_layout(service: WorklogService) -> CheckResult:
    """The store root, data/ and the board directories exist."""
    ctx = service.context
    expected = [ctx.data_root] + [ctx.board_root(board) for board in BOARD_ORDER]
    missing = [str(path) for path in expected if not path.is_dir()]
    if missing:
        return CheckResult(
            name="Store Layout",
            passed=False,
            message=f"Missing {len(missing)} store directories under {ctx.root}",
            details="Run `worklog init` to create them.",
            findings=missing,
        )
    return CheckResult(name="Store Layout", passed=True, message=f"Store layout OK at {ctx.root}")


def check_pointers(service: WorklogService) -> CheckResult:
    """Every pointer resolves to an existing record."""
    dangling: List[str] = []
    for board in BOARD_ORDER:
        if not service.context.board_root(board).is_dir():
            continue
        for worklog_id in service.boards.list(board):
            if not service.records.exists(worklog_id):
                dangling.append(f"{board.value}/{worklog_id}")
    if dangling:
        return CheckResult(
            name="Pointers",
            passed=False,
            message=f"{len(dangling)} pointers have no record",
            details="The record was removed outside the tool; delete the pointer by hand.",
            findings=dangling,
        )
    return CheckResult(name="Pointers", passed=True, message="All pointers resolve to records")


def check_membership(service: WorklogService) -> CheckResult:
    """No worklog is linked on more than one board."""
    seen: Dict[str, List[str]] = {}
    for board in BOARD_ORDER:
        if not service.context.board_root(board).is_dir():
            continue
        for worklog_id in service.boards.list(board):
            seen.setdefault(worklog_id, []).append(board.value)
    duplicated = [f"{wid}: {', '.join(boards)}" for wid, boards in sorted(seen.items()) if len(boards) > 1]
    if duplicated:
        return CheckResult(
            name="Board Membership",
            passed=False,
            message=f"{len(duplicated)} worklogs are on more than one board",
            details="Run `worklog move <id> <board>` to keep a single board.",
            findings=duplicated,
        )
    return CheckResult(name="Board Membership", passed=True, message="Every worklog is on at most one board")


def check_records(service: WorklogService) -> CheckResult:
    """Every record exposes a title."""
    unreadable: List[str] = []
    for worklog_id in service.records.list_ids():
        try:
            service.records.title_of(worklog_id)
        except RecordUnreadableError as e:
            unreadable.append(f"{worklog_id}: {e.reason}")
    if unreadable:
        return CheckResult(
            name="Records",
            passed=False,
            message=f"{len(unreadable)} records have no readable title",
            details="Add a `title:` field to the record frontmatter.",
            findings=unreadable,
        )
    return CheckResult(name="Records", passed=True, message="All records have a title")


def check_untracked(service: WorklogService) -> CheckResult:
    """Records on no board; informational only."""
    untracked = [wid for wid in service.records.list_ids() if not service.boards.boards_of(wid)]
    if untracked:
        return CheckResult(
            name="Untracked Records",
            passed=True,
            message=f"Warning: {len(untracked)} records are on no board",
            details="Run `worklog move <id> todo` to track them again.",
            findings=untracked,
        )
    return CheckResult(name="Untracked Records", passed=True, message="No untracked records")


def check_foreign_entries(service: WorklogService) -> CheckResult:
    """Board entries that are not record pointers; informational only."""
    suffix = service.context.suffix
    foreign: List[str] = []
    for board in BOARD_ORDER:
        if not service.context.board_root(board).is_dir():
            continue
        for entry in service.boards.entries(board):
            if not entry.is_symlink() or not entry.name.endswith(suffix):
                foreign.append(f"{board.value}/{entry.name}")
    if foreign:
        return CheckResult(
            name="Foreign Entries",
            passed=True,
            message=f"Warning: {len(foreign)} board entries are ignored",
            details="Only symlinks named <id>" + suffix + " count as board members.",
            findings=foreign,
        )
    return CheckResult(name="Foreign Entries", passed=True, message="No foreign board entries")


def run_doctor(service: WorklogService) -> DoctorResult:
    """Run all doctor checks."""
    layout = check_layout(service)
    checks = [layout]
    if layout.passed:
        checks.extend(
            [
                check_pointers(service),
                check_membership(service),
                check_records(service),
                check_untracked(service),
                check_foreign_entries(service),
            ]
        )

    all_passed = all(c.passed for c in checks)
    logger.debug("Doctor finished: %s", "ok" if all_passed else "problems found")
    return DoctorResult(all_passed=all_passed, checks=checks)
