from __future__ import annotations

from typing import List

from core.services.analytics import metrics
from core.services.analytics.access import ReadPorts
from core.services.analytics.buckets import rollup_buckets
from core.services.analytics.models import AnalyticsQuery, AnalyticsResult, PerformanceData


class AnalyticsPerformanceMixin:
    _ports: ReadPorts

    def get_performance_overview(self, query: AnalyticsQuery) -> AnalyticsResult[List[PerformanceData]]:
        scope, policy, failures = self._resolve(query)
        results = self._collect({"tasks": policy.task_fetches(scope, self._ports)}, failures)
        self._ensure_loaded("performance", results, failures)

        tasks = results["tasks"].items
        data: List[PerformanceData] = []
        for bucket in rollup_buckets(query.date_range):
            in_bucket = [t for t in tasks if bucket.contains(t.created_at)]
            data.append(
                PerformanceData(
                    month=bucket.label,
                    productivity=metrics.productivity_score(in_bucket),
                    tasks=len(in_bucket),
                    efficiency=metrics.completion_rate(in_bucket),
                    completed=len(metrics.completed(in_bucket)),
                )
            )
        return self._result("performance", data, failures)


__all__ = ["AnalyticsPerformanceMixin"]
