from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from core.domain.enums import UserRole, WorkspaceType
from core.domain.identifiers import generate_id


@dataclass
class Workspace:
    id: str
    name: str = ""
    workspace_type: WorkspaceType = WorkspaceType.MAIN
    parent_workspace_id: Optional[str] = None  # set only for sub-workspaces
    branch_id: Optional[str] = None  # sub-workspace bound to a single branch
    owner_id: Optional[str] = None

    @property
    def is_sub(self) -> bool:
        return self.workspace_type == WorkspaceType.SUB

    @staticmethod
    def create(name: str, **extra) -> "Workspace":
        return Workspace(id=generate_id(), name=name, **extra)

    @staticmethod
    def create_sub(parent: "Workspace", name: str, branch_id: Optional[str] = None, **extra) -> "Workspace":
        return Workspace(
            id=generate_id(),
            name=name,
            workspace_type=WorkspaceType.SUB,
            parent_workspace_id=parent.id,
            branch_id=branch_id,
            **extra,
        )


@dataclass
class Branch:
    id: str
    workspace_id: str
    name: str

    @staticmethod
    def create(workspace_id: str, name: str) -> "Branch":
        return Branch(id=generate_id(), workspace_id=workspace_id, name=name)


@dataclass
class User:
    id: str
    workspace_id: str
    role: UserRole = UserRole.MEMBER
    name: str = ""
    branch_id: Optional[str] = None
    region_id: Optional[str] = None

    @staticmethod
    def create(workspace_id: str, name: str = "", **extra) -> "User":
        return User(id=generate_id(), workspace_id=workspace_id, name=name, **extra)


@dataclass
class AccessibleWorkspaces:
    main_workspaces: List[Workspace] = field(default_factory=list)
    sub_workspaces: Dict[str, List[Workspace]] = field(default_factory=dict)  # keyed by parent id

    def flatten(self) -> List[Workspace]:
        """Main workspaces first, then each parent's sub-workspaces, without repeats."""
        seen: set[str] = set()
        out: List[Workspace] = []
        for ws in self.main_workspaces:
            if ws.id not in seen:
                seen.add(ws.id)
                out.append(ws)
        for subs in self.sub_workspaces.values():
            for ws in subs:
                if ws.id not in seen:
                    seen.add(ws.id)
                    out.append(ws)
        return out


__all__ = ["Workspace", "Branch", "User", "AccessibleWorkspaces"]
