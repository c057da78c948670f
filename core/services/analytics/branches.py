from __future__ import annotations

from typing import Iterable, List, Sequence

from core.domain import Branch, Project, Task, User
from core.services.analytics import metrics
from core.services.analytics.models import BranchMetricsData


def branch_roster(branch: Branch, users: Iterable[User]) -> set[str]:
    """Ids of users assigned to ``branch``; ``users`` is already deduplicated across workspaces."""
    return {u.id for u in users if u.branch_id == branch.id}


def attribute_to_branch(
    branch: Branch,
    tasks: Sequence[Task],
    projects: Sequence[Project],
    branch_user_ids: Iterable[str],
) -> List[Task]:
    """
    Tasks belonging to ``branch``.

    A task belongs if its project is in the branch OR its assignee/creator is on the
    branch roster. The clauses are a union, not a priority order, so the same task
    may be attributed to two branches when it satisfies one clause for each.
    """
    project_ids = {p.id for p in projects if p.branch_id == branch.id}
    roster = set(branch_user_ids)

    attributed: List[Task] = []
    for task in tasks:
        in_branch_project = bool(task.project_id) and task.project_id in project_ids
        by_branch_user = (bool(task.assignee_id) and task.assignee_id in roster) or (
            bool(task.created_by) and task.created_by in roster
        )
        if in_branch_project or by_branch_user:
            attributed.append(task)
    return attributed


def branch_metrics(
    branch: Branch,
    tasks: Sequence[Task],
    projects: Sequence[Project],
    users: Iterable[User],
) -> BranchMetricsData:
    branch_tasks = attribute_to_branch(branch, tasks, projects, branch_roster(branch, users))
    return BranchMetricsData(
        branch=branch.name,
        tasks=len(branch_tasks),
        completed=len(metrics.completed(branch_tasks)),
        efficiency=metrics.branch_efficiency(branch_tasks),
        active_users=metrics.active_user_count(branch_tasks),
    )


__all__ = ["attribute_to_branch", "branch_roster", "branch_metrics"]
