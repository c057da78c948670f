"""
Role-keyed access policies.

Every role-dependent decision the engine makes (which workspaces may be spanned,
which task/project/branch reads to issue) lives here and is looked up once per
computation via ``access_policy_for``.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Sequence

from core.domain import Branch, UserRole, Workspace
from core.interfaces import (
    BranchReadRepository,
    ProjectReadRepository,
    TaskReadRepository,
    UserReadRepository,
)
from core.services.analytics.aggregator import FetchCall

if TYPE_CHECKING:
    from core.services.analytics.scope import AnalyticsScope


@dataclass(frozen=True)
class ReadPorts:
    tasks: TaskReadRepository
    projects: ProjectReadRepository
    users: UserReadRepository
    branches: BranchReadRepository


def narrow_to_bound_branch(branches: List[Branch], workspace: Optional[Workspace]) -> List[Branch]:
    """A sub-workspace bound to one branch only ever sees that branch."""
    if workspace is None or not workspace.is_sub or not workspace.branch_id:
        return list(branches)
    return [b for b in branches if b.id == workspace.branch_id]


class AccessPolicy(ABC):
    role: UserRole
    spans_workspaces: bool = False
    can_view_advanced: bool = False

    @abstractmethod
    def task_fetches(self, scope: "AnalyticsScope", ports: ReadPorts) -> List[FetchCall]: ...

    @abstractmethod
    def project_fetches(self, scope: "AnalyticsScope", ports: ReadPorts) -> List[FetchCall]: ...

    @abstractmethod
    def branch_fetches(self, scope: "AnalyticsScope", ports: ReadPorts) -> List[FetchCall]: ...

    @property
    def personal_view(self) -> bool:
        """True when the caller's own tasks are the whole team view."""
        return False

    @property
    def can_view_system_wide(self) -> bool:
        return self.spans_workspaces

    def personal_task_fetches(self, scope: "AnalyticsScope", ports: ReadPorts) -> List[FetchCall]:
        """Assigned-to and created-by the caller, in the caller's current workspace only."""
        ws_id = scope.current_workspace_id
        user_id = scope.user_id
        return [
            FetchCall("tasks.assigned", ws_id, lambda: ports.tasks.list_assigned_to(user_id, ws_id)),
            FetchCall("tasks.created", ws_id, lambda: ports.tasks.list_created_by(user_id, ws_id)),
        ]

    def roster_fetches(self, scope: "AnalyticsScope", ports: ReadPorts, extra_workspace_ids: Sequence[str] = ()) -> List[FetchCall]:
        ids = list(scope.workspace_ids)
        for ws_id in extra_workspace_ids:
            if ws_id not in ids:
                ids.append(ws_id)
        return [
            FetchCall("users.workspace", ws_id, lambda ws_id=ws_id: ports.users.list_by_workspace(ws_id))
            for ws_id in ids
        ]


class MemberAccessPolicy(AccessPolicy):
    role = UserRole.MEMBER
    spans_workspaces = False

    @property
    def personal_view(self) -> bool:
        return True

    def task_fetches(self, scope: "AnalyticsScope", ports: ReadPorts) -> List[FetchCall]:
        # never widened, even if a multi-workspace scope was requested
        return self.personal_task_fetches(scope, ports)

    def project_fetches(self, scope: "AnalyticsScope", ports: ReadPorts) -> List[FetchCall]:
        ws_id = scope.current_workspace_id
        return [FetchCall("projects.workspace", ws_id, lambda: ports.projects.list_by_workspace(ws_id))]

    def branch_fetches(self, scope: "AnalyticsScope", ports: ReadPorts) -> List[FetchCall]:
        ws_id = scope.current_workspace_id
        workspace = scope.workspace(ws_id)

        def _own_branch() -> List[Branch]:
            profile = ports.users.get(scope.user_id)
            if profile is None or not profile.branch_id:
                return []
            branch = ports.branches.get(profile.branch_id)
            return narrow_to_bound_branch([branch] if branch else [], workspace)

        return [FetchCall("branches.own", ws_id, _own_branch)]


class ManagerAccessPolicy(AccessPolicy):
    """Admins see every workspace task in their current workspace."""

    role = UserRole.ADMIN
    spans_workspaces = False
    can_view_advanced = True

    def task_fetches(self, scope: "AnalyticsScope", ports: ReadPorts) -> List[FetchCall]:
        return [
            FetchCall("tasks.workspace", ws_id, lambda ws_id=ws_id: ports.tasks.list_by_workspace(ws_id))
            for ws_id in scope.workspace_ids
        ]

    def project_fetches(self, scope: "AnalyticsScope", ports: ReadPorts) -> List[FetchCall]:
        return [
            FetchCall("projects.workspace", ws_id, lambda ws_id=ws_id: ports.projects.list_by_workspace(ws_id))
            for ws_id in scope.workspace_ids
        ]

    def branch_fetches(self, scope: "AnalyticsScope", ports: ReadPorts) -> List[FetchCall]:
        calls: List[FetchCall] = []
        for ws_id in scope.workspace_ids:
            source_id = scope.branch_source_of(ws_id)
            workspace = scope.workspace(ws_id)
            calls.append(
                FetchCall(
                    "branches.workspace",
                    ws_id,
                    lambda source_id=source_id, workspace=workspace: narrow_to_bound_branch(
                        ports.branches.list_by_workspace(source_id), workspace
                    ),
                )
            )
        return calls


class OwnerAccessPolicy(ManagerAccessPolicy):
    role = UserRole.OWNER
    spans_workspaces = True


_POLICIES: dict[UserRole, AccessPolicy] = {
    UserRole.MEMBER: MemberAccessPolicy(),
    UserRole.ADMIN: ManagerAccessPolicy(),
    UserRole.OWNER: OwnerAccessPolicy(),
}


def access_policy_for(role: UserRole | str) -> AccessPolicy:
    return _POLICIES[UserRole(role)]


__all__ = [
    "ReadPorts",
    "AccessPolicy",
    "MemberAccessPolicy",
    "ManagerAccessPolicy",
    "OwnerAccessPolicy",
    "access_policy_for",
    "narrow_to_bound_branch",
]
