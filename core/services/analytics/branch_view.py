from __future__ import annotations

from typing import List

from core.services.analytics.access import ReadPorts
from core.services.analytics.branches import branch_metrics
from core.services.analytics.models import AnalyticsQuery, AnalyticsResult, BranchMetricsData
from core.services.analytics.trend import split_periods


class AnalyticsBranchMixin:
    _ports: ReadPorts

    def get_branch_metrics(self, query: AnalyticsQuery) -> AnalyticsResult[List[BranchMetricsData]]:
        scope, policy, failures = self._resolve(query)
        results = self._collect(
            {
                "branches": policy.branch_fetches(scope, self._ports),
                "tasks": policy.task_fetches(scope, self._ports),
                "projects": policy.project_fetches(scope, self._ports),
            },
            failures,
        )
        self._ensure_loaded("branches", results, failures)

        branches = results["branches"].items
        if not branches:
            return self._result("branches", [], failures)

        # rosters also come from each branch's own workspace, which may sit outside the scope
        roster = self._collect(
            {"users": policy.roster_fetches(scope, self._ports, [b.workspace_id for b in branches])},
            failures,
        )["users"]

        current, _previous = split_periods(results["tasks"].items, query.date_range)
        projects = results["projects"].items
        data = [branch_metrics(branch, current, projects, roster.items) for branch in branches]
        return self._result("branches", data, failures)


__all__ = ["AnalyticsBranchMixin"]
