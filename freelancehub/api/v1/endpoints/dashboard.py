"""
Dashboard Endpoints Module

Read-only views computed from the caller's projects: headline metrics, the
five most recent projects, revenue per period and a status breakdown.
"""
from typing import Any
from fastapi import APIRouter, Depends

from freelancehub.schemas.dashboard import Dashboard, RevenueSeries, RevenueWindow, StatusBreakdown
from freelancehub.services import aggregation
from freelancehub.services.storage import DataAccess
from freelancehub.api import deps

router = APIRouter()


@router.get("", response_model=Dashboard)
def read_dashboard(
    window: RevenueWindow = RevenueWindow.last_6_months,
    data: DataAccess = Depends(deps.get_data_access),
) -> Any:
    """
    Get the dashboard overview.

    Args:
        window: Revenue chart window: 30d (daily), 6m or ytd (monthly)
        data: Data access bound to the caller

    Returns:
        Dashboard: Client count, project metrics, recent projects and the
        revenue series for the window
    """
    projects = deps.unwrap(data.list_projects())
    total_clients = deps.unwrap(data.count_clients())
    return aggregation.build_dashboard(projects, total_clients, window)


@router.get("/revenue", response_model=RevenueSeries)
def read_revenue(
    window: RevenueWindow = RevenueWindow.last_30_days,
    data: DataAccess = Depends(deps.get_data_access),
) -> Any:
    """
    Revenue from completed projects, bucketed by period.

    Every period in the window is present; periods without revenue are 0.
    """
    projects = deps.unwrap(data.list_projects())
    return aggregation.bucket_revenue(projects, window)


@router.get("/status", response_model=StatusBreakdown)
def read_status_breakdown(
    data: DataAccess = Depends(deps.get_data_access),
) -> Any:
    """Project counts per status."""
    projects = deps.unwrap(data.list_projects())
    return aggregation.status_breakdown(projects)
