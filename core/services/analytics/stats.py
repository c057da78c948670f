from __future__ import annotations

from datetime import datetime
from typing import Callable

from core.services.analytics import metrics
from core.services.analytics.access import ReadPorts
from core.services.analytics.models import AnalyticsQuery, AnalyticsResult, StatsData
from core.services.analytics.trend import delta, split_periods


class AnalyticsStatsMixin:
    _ports: ReadPorts
    _clock: Callable[[], datetime]

    def get_stats(self, query: AnalyticsQuery) -> AnalyticsResult[StatsData]:
        """
        Headline cards: productivity, completion, active users and project counts,
        each compared against the preceding window of equal length.
        """
        scope, policy, failures = self._resolve(query)
        results = self._collect(
            {
                "tasks": policy.task_fetches(scope, self._ports),
                "projects": policy.project_fetches(scope, self._ports),
            },
            failures,
        )
        self._ensure_loaded("stats", results, failures)

        current, previous = split_periods(results["tasks"].items, query.date_range)
        projects = results["projects"].items
        now = self._clock()

        productivity = metrics.productivity_score(current)
        previous_productivity = metrics.productivity_score(previous)
        completion = metrics.completion_rate(current)
        previous_completion = metrics.completion_rate(previous)

        if policy.personal_view:
            # a member only ever sees themselves
            active_users, active_users_change = 1, 0
        else:
            active_users = metrics.active_user_count(current)
            active_users_change = active_users - metrics.active_user_count(previous)

        data = StatsData(
            avg_productivity=productivity,
            productivity_change=delta(productivity, previous_productivity).pct,
            task_completion=completion,
            task_completion_change=delta(completion, previous_completion).pct,
            active_users=active_users,
            active_users_change=active_users_change,
            projects_active=len(metrics.active_projects(projects)),
            projects_due_this_week=len(metrics.projects_due_within(projects, now)),
        )
        return self._result("stats", data, failures)


__all__ = ["AnalyticsStatsMixin"]
