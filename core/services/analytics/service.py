from __future__ import annotations

from datetime import datetime
from typing import Callable

from core.domain import utc_now
from core.interfaces import (
    BranchReadRepository,
    ProjectReadRepository,
    TaskReadRepository,
    UserReadRepository,
    WorkspaceReadRepository,
)
from core.services.analytics.access import ReadPorts
from core.services.analytics.aggregator import Aggregator

from .branch_view import AnalyticsBranchMixin
from .loading import AnalyticsLoadingMixin
from .member import AnalyticsMemberMixin
from .performance import AnalyticsPerformanceMixin
from .stats import AnalyticsStatsMixin
from .trends import AnalyticsTrendMixin


class AnalyticsService(
    AnalyticsStatsMixin,
    AnalyticsBranchMixin,
    AnalyticsTrendMixin,
    AnalyticsMemberMixin,
    AnalyticsPerformanceMixin,
    AnalyticsLoadingMixin,
):
    def __init__(
        self,
        task_repo: TaskReadRepository,
        project_repo: ProjectReadRepository,
        user_repo: UserReadRepository,
        branch_repo: BranchReadRepository,
        workspace_repo: WorkspaceReadRepository,
        aggregator: Aggregator | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self._ports: ReadPorts = ReadPorts(
            tasks=task_repo,
            projects=project_repo,
            users=user_repo,
            branches=branch_repo,
        )
        self._workspace_repo: WorkspaceReadRepository = workspace_repo
        self._aggregator: Aggregator = aggregator or Aggregator()
        self._clock: Callable[[], datetime] = clock or utc_now


__all__ = ["AnalyticsService"]
