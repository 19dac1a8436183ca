from datetime import date
from enum import Enum
from typing import Dict, List

from pydantic import BaseModel

from freelancehub.models.project import ProjectRead


class RevenueWindow(str, Enum):
    last_30_days = "30d"
    last_6_months = "6m"
    year_to_date = "ytd"


class Metrics(BaseModel):
    total_projects: int = 0
    completed_projects: int = 0
    active_projects: int = 0
    total_revenue: float = 0
    completion_rate: int = 0
    average_project_value: int = 0


class RevenuePoint(BaseModel):
    period_start: date
    label: str
    revenue: float = 0


class RevenueSeries(BaseModel):
    window: RevenueWindow
    granularity: str  # "day" or "month"
    points: List[RevenuePoint]

    @property
    def values(self) -> List[float]:
        return [point.revenue for point in self.points]

    @property
    def total(self) -> float:
        return sum(self.values)


class StatusBreakdown(BaseModel):
    total_projects: int
    counts: Dict[str, int]


class Dashboard(BaseModel):
    """Everything the dashboard page renders, in one payload."""
    total_clients: int
    metrics: Metrics
    recent_projects: List[ProjectRead]
    revenue: RevenueSeries
