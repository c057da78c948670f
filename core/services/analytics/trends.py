from __future__ import annotations

from typing import List, Sequence

from core.domain import Task
from core.services.analytics import metrics
from core.services.analytics.access import ReadPorts
from core.services.analytics.buckets import weekly_buckets
from core.services.analytics.models import AnalyticsQuery, AnalyticsResult, Bucket, ProductivityTrendData


def _in_bucket(tasks: Sequence[Task], bucket: Bucket) -> List[Task]:
    return [t for t in tasks if bucket.contains(t.created_at)]


class AnalyticsTrendMixin:
    _ports: ReadPorts

    def get_productivity_trends(self, query: AnalyticsQuery) -> AnalyticsResult[List[ProductivityTrendData]]:
        """
        Weekly productivity for the caller (individual) next to the role-scoped set (team).
        Members see the same series twice.
        """
        scope, policy, failures = self._resolve(query)
        plan = {"team": policy.task_fetches(scope, self._ports)}
        if not policy.personal_view:
            plan["individual"] = policy.personal_task_fetches(scope, self._ports)
        results = self._collect(plan, failures)
        self._ensure_loaded("trends", results, failures)

        team_tasks = results["team"].items
        individual_tasks = results["individual"].items if "individual" in results else team_tasks

        data: List[ProductivityTrendData] = []
        for bucket in weekly_buckets(query.date_range.start, query.date_range.end):
            data.append(
                ProductivityTrendData(
                    week=bucket.label,
                    individual=metrics.productivity_score(_in_bucket(individual_tasks, bucket)),
                    team=metrics.productivity_score(_in_bucket(team_tasks, bucket)),
                    period=bucket.start,
                )
            )
        return self._result("trends", data, failures)


__all__ = ["AnalyticsTrendMixin"]
