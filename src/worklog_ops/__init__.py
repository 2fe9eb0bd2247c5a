"""Worklog Ops - dashboards and store checks built on worklog_core."""

from .view import Dashboard, collect_dashboard, render_json, render_markdown, write_dashboard
from .doctor import CheckResult, DoctorResult, run_doctor

__all__ = [
    # View
    "Dashboard",
    "collect_dashboard",
    "render_json",
    "render_markdown",
    "write_dashboard",
    # Doctor
    "CheckResult",
    "DoctorResult",
    "run_doctor",
]
