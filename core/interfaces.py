# core/interfaces.py
"""
Read ports the analytics engine depends on.

Entity CRUD lives elsewhere; these contracts only cover the reads the engine
needs, so tests can swap in in-memory fakes and production wires SQLAlchemy
adapters (see infra/db/repositories.py).
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

from core.domain import AccessibleWorkspaces, Branch, Project, Task, User, UserRole, Workspace


class TaskReadRepository(ABC):
    @abstractmethod
    def list_by_workspace(self, workspace_id: str) -> List[Task]: ...

    @abstractmethod
    def list_assigned_to(self, user_id: str, workspace_id: str) -> List[Task]: ...

    @abstractmethod
    def list_created_by(self, user_id: str, workspace_id: str) -> List[Task]: ...


class ProjectReadRepository(ABC):
    @abstractmethod
    def list_by_workspace(self, workspace_id: str) -> List[Project]: ...

    @abstractmethod
    def list_accessible(self, workspace_id: str, user_id: str, role: UserRole) -> List[Project]: ...


class UserReadRepository(ABC):
    @abstractmethod
    def list_by_workspace(self, workspace_id: str) -> List[User]: ...

    @abstractmethod
    def get(self, user_id: str) -> Optional[User]: ...


class BranchReadRepository(ABC):
    @abstractmethod
    def list_by_workspace(self, workspace_id: str) -> List[Branch]: ...

    @abstractmethod
    def get(self, branch_id: str) -> Optional[Branch]: ...


class WorkspaceReadRepository(ABC):
    @abstractmethod
    def get(self, workspace_id: str) -> Optional[Workspace]: ...

    @abstractmethod
    def list_accessible(self, user_id: str) -> AccessibleWorkspaces: ...


__all__ = [
    "TaskReadRepository",
    "ProjectReadRepository",
    "UserReadRepository",
    "BranchReadRepository",
    "WorkspaceReadRepository",
]
