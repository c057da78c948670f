"""
Pure task metrics.

Rates are percentages in [0, 100]. Intermediate rates stay unrounded; display
metrics (productivity score, efficiency) are rounded half-up to an integer.
"""
from __future__ import annotations

import math
from datetime import datetime, timedelta
from typing import Iterable, List, Sequence

from core.domain import Project, ProjectStatus, Task, TaskStatus

# fixed policy weights, not user-configurable
COMPLETION_WEIGHT = 0.7
ON_TIME_WEIGHT = 0.3


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def completed(tasks: Iterable[Task]) -> List[Task]:
    return [t for t in tasks if t.status == TaskStatus.COMPLETED]


def in_progress(tasks: Iterable[Task]) -> List[Task]:
    return [t for t in tasks if t.status == TaskStatus.IN_PROGRESS]


def completion_rate(tasks: Sequence[Task]) -> float:
    if not tasks:
        return 0.0
    return 100.0 * len(completed(tasks)) / len(tasks)


def is_on_time(task: Task) -> bool:
    if task.due_date is None or task.updated_at is None:
        return False
    return task.updated_at <= task.due_date


def on_time_rate(tasks: Sequence[Task]) -> float:
    with_due = [t for t in completed(tasks) if t.due_date is not None]
    if not with_due:
        return 0.0
    return 100.0 * sum(1 for t in with_due if is_on_time(t)) / len(with_due)


def productivity_score(tasks: Sequence[Task]) -> int:
    score = COMPLETION_WEIGHT * completion_rate(tasks) + ON_TIME_WEIGHT * on_time_rate(tasks)
    return max(0, min(100, round_half_up(score)))


def branch_efficiency(branch_tasks: Sequence[Task]) -> int:
    if not branch_tasks:
        return 0
    return round_half_up(100.0 * len(completed(branch_tasks)) / len(branch_tasks))


def active_user_ids(tasks: Iterable[Task]) -> set[str]:
    ids: set[str] = set()
    for task in tasks:
        if task.assignee_id:
            ids.add(task.assignee_id)
        if task.created_by:
            ids.add(task.created_by)
    return ids


def active_user_count(tasks: Iterable[Task]) -> int:
    return len(active_user_ids(tasks))


def overdue(tasks: Iterable[Task], now: datetime) -> List[Task]:
    return [
        t
        for t in tasks
        if t.due_date is not None and t.due_date < now and t.status != TaskStatus.COMPLETED
    ]


def active_projects(projects: Iterable[Project]) -> List[Project]:
    return [p for p in projects if p.status == ProjectStatus.ACTIVE]


def projects_due_within(projects: Iterable[Project], now: datetime, days: int = 7) -> List[Project]:
    horizon = now + timedelta(days=days)
    return [p for p in projects if p.due_date is not None and now <= p.due_date <= horizon]


__all__ = [
    "COMPLETION_WEIGHT",
    "ON_TIME_WEIGHT",
    "round_half_up",
    "completed",
    "in_progress",
    "completion_rate",
    "is_on_time",
    "on_time_rate",
    "productivity_score",
    "branch_efficiency",
    "active_user_ids",
    "active_user_count",
    "overdue",
    "active_projects",
    "projects_due_within",
]
