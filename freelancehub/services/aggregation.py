"""
Dashboard metrics.

Pure functions over a collection of projects.  A project here is anything
with ``status``, ``budget`` and ``created_at`` attributes or keys (ORM rows,
:class:`~freelancehub.models.project.ProjectRead`, or guest-store dicts).
Status comparisons are case-insensitive, so legacy rows stored as
"Completed" or "COMPLETED" count the same as "completed".
"""
import calendar
from collections.abc import Mapping
from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional

from freelancehub.schemas.dashboard import (
    Dashboard, Metrics, RevenuePoint, RevenueSeries, RevenueWindow, StatusBreakdown,
)
from freelancehub.utils import normalize_status, parse_timestamp, round_half_up, utcnow

COMPLETED = "completed"
ACTIVE_STATUSES = frozenset({"in_progress", "planning"})
RECENT_PROJECTS_LIMIT = 5
_EPOCH = parse_timestamp("1970-01-01T00:00:00")


def _field(project: Any, name: str, default: Any = None) -> Any:
    if isinstance(project, Mapping):
        return project.get(name, default)
    return getattr(project, name, default)


def _budget(project: Any) -> float:
    return float(_field(project, "budget") or 0)


def is_completed(project: Any) -> bool:
    return normalize_status(_field(project, "status")) == COMPLETED


def aggregate(projects: Iterable[Any]) -> Metrics:
    projects = list(projects)
    completed = [p for p in projects if is_completed(p)]
    total_revenue = sum(_budget(p) for p in completed)
    active = sum(1 for p in projects if normalize_status(_field(p, "status")) in ACTIVE_STATUSES)

    completion_rate = round_half_up(100 * len(completed) / len(projects)) if projects else 0
    average_value = round_half_up(total_revenue / len(completed)) if completed else 0

    return Metrics(
        total_projects=len(projects),
        completed_projects=len(completed),
        active_projects=active,
        total_revenue=total_revenue,
        completion_rate=completion_rate,
        average_project_value=average_value,
    )


def _add_months(day: date, months: int) -> date:
    """First day of the month ``months`` away from ``day``'s month."""
    index = day.year * 12 + (day.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def bucket_starts(window: RevenueWindow, today: date) -> List[date]:
    """Start date of every bucket in ``window``, oldest first."""
    window = RevenueWindow(window)
    if window == RevenueWindow.last_30_days:
        return [today - timedelta(days=offset) for offset in range(29, -1, -1)]
    if window == RevenueWindow.last_6_months:
        return [_add_months(today, offset) for offset in range(-5, 1)]
    return [date(today.year, month, 1) for month in range(1, today.month + 1)]


def _label(start: date, daily: bool) -> str:
    if daily:
        return start.strftime("%b %d")
    return f"{calendar.month_abbr[start.month]} {start.year}"


def bucket_revenue(
    projects: Iterable[Any],
    window: RevenueWindow = RevenueWindow.last_6_months,
    now: Optional[datetime] = None,
) -> RevenueSeries:
    """
    Sum completed project budgets per day (30-day window) or per month.

    Projects are placed by their ``created_at`` timestamp; anything outside
    the window, in the future, or without a parseable timestamp is ignored.
    Buckets with no projects are present with zero revenue, so the series
    always has one point per day or month in the window.
    """
    window = RevenueWindow(window)
    now = parse_timestamp(now) if now is not None else utcnow()
    today = now.date()
    daily = window == RevenueWindow.last_30_days
    starts = bucket_starts(window, today)
    totals: Dict[date, float] = {start: 0.0 for start in starts}

    for project in projects:
        if not is_completed(project):
            continue
        created = parse_timestamp(_field(project, "created_at"))
        if created is None or created > now:
            continue
        day = created.date()
        if day < starts[0]:
            continue
        key = day if daily else date(day.year, day.month, 1)
        totals[key] += _budget(project)

    return RevenueSeries(
        window=window,
        granularity="day" if daily else "month",
        points=[
            RevenuePoint(period_start=start, label=_label(start, daily), revenue=totals[start])
            for start in starts
        ],
    )


def status_breakdown(projects: Iterable[Any]) -> StatusBreakdown:
    counts: Dict[str, int] = {}
    total = 0
    for project in projects:
        status = normalize_status(_field(project, "status")) or "unknown"
        counts[status] = counts.get(status, 0) + 1
        total += 1
    return StatusBreakdown(total_projects=total, counts=counts)


def recent_projects(projects: Iterable[Any], limit: int = RECENT_PROJECTS_LIMIT) -> List[Any]:
    """The ``limit`` newest projects; rows without a timestamp sort last."""
    ordered = sorted(
        projects,
        key=lambda p: parse_timestamp(_field(p, "created_at")) or _EPOCH,
        reverse=True,
    )
    return ordered[:limit]


def build_dashboard(
    projects: Iterable[Any],
    total_clients: int,
    window: RevenueWindow = RevenueWindow.last_6_months,
    now: Optional[datetime] = None,
) -> Dashboard:
    projects = list(projects)
    return Dashboard(
        total_clients=total_clients,
        metrics=aggregate(projects),
        recent_projects=recent_projects(projects),
        revenue=bucket_revenue(projects, window, now),
    )
