from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable

from sqlalchemy.orm import Session

from core.events.domain_events import AnalyticsEvents, analytics_events
from core.services.analytics import Aggregator, AnalyticsCoordinator, AnalyticsService
from infra.db.repositories import (
    SqlAlchemyBranchReadRepository,
    SqlAlchemyProjectReadRepository,
    SqlAlchemyTaskReadRepository,
    SqlAlchemyUserReadRepository,
    SqlAlchemyWorkspaceReadRepository,
)
from infra.operational_support import bind_trace_id


@dataclass(frozen=True)
class AnalyticsGraph:
    task_repo: SqlAlchemyTaskReadRepository
    project_repo: SqlAlchemyProjectReadRepository
    user_repo: SqlAlchemyUserReadRepository
    branch_repo: SqlAlchemyBranchReadRepository
    workspace_repo: SqlAlchemyWorkspaceReadRepository
    aggregator: Aggregator
    analytics_service: AnalyticsService
    coordinator: AnalyticsCoordinator

    def as_dict(self) -> dict[str, Any]:
        return {
            "task_repo": self.task_repo,
            "project_repo": self.project_repo,
            "user_repo": self.user_repo,
            "branch_repo": self.branch_repo,
            "workspace_repo": self.workspace_repo,
            "aggregator": self.aggregator,
            "analytics_service": self.analytics_service,
            "coordinator": self.coordinator,
        }


def build_analytics_graph(
    session_factory: Callable[[], Session],
    *,
    events: AnalyticsEvents | None = None,
    clock: Callable[[], datetime] | None = None,
    max_workers: int | None = None,
) -> AnalyticsGraph:
    signals = events or analytics_events

    task_repo = SqlAlchemyTaskReadRepository(session_factory)
    project_repo = SqlAlchemyProjectReadRepository(session_factory)
    user_repo = SqlAlchemyUserReadRepository(session_factory)
    branch_repo = SqlAlchemyBranchReadRepository(session_factory)
    workspace_repo = SqlAlchemyWorkspaceReadRepository(session_factory)

    aggregator = Aggregator(max_workers=max_workers, on_failure=signals.fetch_failed.emit)
    analytics_service = AnalyticsService(
        task_repo,
        project_repo,
        user_repo,
        branch_repo,
        workspace_repo,
        aggregator=aggregator,
        clock=clock,
    )
    coordinator = AnalyticsCoordinator(events=signals, trace_binder=bind_trace_id)

    return AnalyticsGraph(
        task_repo=task_repo,
        project_repo=project_repo,
        user_repo=user_repo,
        branch_repo=branch_repo,
        workspace_repo=workspace_repo,
        aggregator=aggregator,
        analytics_service=analytics_service,
        coordinator=coordinator,
    )


__all__ = ["AnalyticsGraph", "build_analytics_graph"]
