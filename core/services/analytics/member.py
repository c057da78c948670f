from __future__ import annotations

from datetime import datetime
from typing import Callable

from core.services.analytics import metrics
from core.services.analytics.access import ReadPorts
from core.services.analytics.aggregator import FetchCall
from core.services.analytics.models import AnalyticsQuery, AnalyticsResult, MemberStatsData


class AnalyticsMemberMixin:
    _ports: ReadPorts
    _clock: Callable[[], datetime]

    def get_member_stats(self, query: AnalyticsQuery) -> AnalyticsResult[MemberStatsData]:
        """Personal task counters over all time; not filtered by the date range."""
        scope, policy, failures = self._resolve(query)
        ws_id = scope.current_workspace_id
        projects = self._ports.projects
        results = self._collect(
            {
                "tasks": policy.personal_task_fetches(scope, self._ports),
                "projects": [
                    FetchCall(
                        "projects.accessible",
                        ws_id,
                        lambda: projects.list_accessible(ws_id, scope.user_id, scope.role),
                    )
                ],
            },
            failures,
        )
        self._ensure_loaded("member", results, failures)

        tasks = results["tasks"].items
        data = MemberStatsData(
            total_tasks=len(tasks),
            completed_tasks=len(metrics.completed(tasks)),
            in_progress_tasks=len(metrics.in_progress(tasks)),
            overdue_tasks=len(metrics.overdue(tasks, self._clock())),
            completion_rate=metrics.round_half_up(metrics.completion_rate(tasks)),
            active_projects=len(metrics.active_projects(results["projects"].items)),
        )
        return self._result("member", data, failures)


__all__ = ["AnalyticsMemberMixin"]
