from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Generic, List, Optional, Sequence, TypeVar

from core.domain import DateRangePreset, UserRole, Workspace
from core.exceptions import FetchFailure
from core.services.analytics.date_range import DateRange

T = TypeVar("T")


class Direction(str, Enum):
    UP = "up"
    DOWN = "down"
    FLAT = "flat"


@dataclass(frozen=True)
class Delta:
    pct: float
    direction: Direction


@dataclass(frozen=True)
class Bucket:
    start: datetime
    end: datetime
    label: str
    closed: bool = False  # the final bucket also contains its end instant

    def contains(self, moment: datetime | None) -> bool:
        if moment is None:
            return False
        if self.start <= moment < self.end:
            return True
        return self.closed and moment == self.end


@dataclass
class AnalyticsQuery:
    workspace_id: str | None
    user_id: str | None
    role: UserRole
    date_range: DateRange
    show_all_workspaces: bool = False
    accessible_workspaces: Optional[Sequence[Workspace]] = None


@dataclass
class StatsData:
    avg_productivity: int
    productivity_change: float
    task_completion: float
    task_completion_change: float
    active_users: int
    active_users_change: int
    projects_active: int
    projects_due_this_week: int

    @staticmethod
    def empty() -> "StatsData":
        return StatsData(0, 0.0, 0.0, 0.0, 0, 0, 0, 0)


@dataclass
class BranchMetricsData:
    branch: str
    tasks: int
    completed: int
    efficiency: int
    active_users: int


@dataclass
class ProductivityTrendData:
    week: str
    individual: int
    team: int
    period: datetime


@dataclass
class MemberStatsData:
    total_tasks: int
    completed_tasks: int
    in_progress_tasks: int
    overdue_tasks: int
    completion_rate: int
    active_projects: int


@dataclass
class PerformanceData:
    month: str
    productivity: int
    tasks: int
    efficiency: float
    completed: int


@dataclass
class AnalyticsResult(Generic[T]):
    data: T
    failures: List[FetchFailure] = field(default_factory=list)
    generation: int | None = None
    view: str = ""

    @property
    def is_partial(self) -> bool:
        return bool(self.failures)


@dataclass(frozen=True)
class AnalyticsFailure:
    view: str
    generation: int | None
    message: str
    failures: tuple[FetchFailure, ...] = ()


__all__ = [
    "Direction",
    "Delta",
    "Bucket",
    "AnalyticsQuery",
    "StatsData",
    "BranchMetricsData",
    "ProductivityTrendData",
    "MemberStatsData",
    "PerformanceData",
    "AnalyticsResult",
    "AnalyticsFailure",
    "DateRange",
    "DateRangePreset",
]
