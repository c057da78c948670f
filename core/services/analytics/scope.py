from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable, Mapping, Optional, Sequence

from core.domain import UserRole, Workspace
from core.exceptions import ScopeUnavailableError
from core.services.analytics.access import access_policy_for


@dataclass(frozen=True)
class AnalyticsScope:
    """The authoritative set of workspaces one computation may read from."""

    user_id: str
    role: UserRole
    current_workspace_id: str
    workspace_ids: tuple[str, ...]
    workspaces: Mapping[str, Workspace] = field(default_factory=dict)

    @property
    def spans_multiple(self) -> bool:
        return len(self.workspace_ids) > 1

    def workspace(self, workspace_id: str) -> Optional[Workspace]:
        return self.workspaces.get(workspace_id)

    def branch_source_of(self, workspace_id: str) -> str:
        """Branches are read from the organizational root, never per sub-workspace."""
        ws = self.workspaces.get(workspace_id)
        if ws is not None and ws.is_sub:
            return ws.parent_workspace_id or workspace_id
        return workspace_id

    def missing_workspace_ids(self) -> list[str]:
        """Scoped ids, plus the current workspace, that still need a workspace record."""
        needed = dict.fromkeys([*self.workspace_ids, self.current_workspace_id])
        return [ws_id for ws_id in needed if ws_id not in self.workspaces]

    def with_workspaces(self, workspaces: Iterable[Workspace]) -> "AnalyticsScope":
        merged = dict(self.workspaces)
        for ws in workspaces:
            merged.setdefault(ws.id, ws)
        return replace(self, workspaces=merged)


def resolve_scope(
    role: UserRole | str,
    current_workspace_id: str | None,
    user_id: str | None,
    show_all_workspaces: bool = False,
    accessible_workspaces: Sequence[Workspace] | None = None,
) -> AnalyticsScope:
    if not current_workspace_id or not user_id:
        raise ScopeUnavailableError(
            "Analytics needs both a current workspace and a user.",
            code="SCOPE_UNAVAILABLE",
        )

    role = UserRole(role)
    policy = access_policy_for(role)
    accessible = list(accessible_workspaces or [])

    if show_all_workspaces and policy.spans_workspaces and accessible:
        ids: list[str] = []
        for ws in accessible:
            if ws.id not in ids:
                ids.append(ws.id)
    else:
        ids = [current_workspace_id]

    scope = AnalyticsScope(
        user_id=user_id,
        role=role,
        current_workspace_id=current_workspace_id,
        workspace_ids=tuple(ids),
    )
    return scope.with_workspaces(accessible)


__all__ = ["AnalyticsScope", "resolve_scope"]
