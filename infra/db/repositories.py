"""
SQLAlchemy adapters for the analytics read ports.

Each call opens its own short-lived session from ``session_factory`` so the
aggregator can fan calls out across threads without sharing a Session.
"""
from __future__ import annotations

from typing import Callable, Dict, List, Optional

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from core.domain import AccessibleWorkspaces, Branch, Project, Task, User, UserRole, Workspace, WorkspaceType
from core.interfaces import (
    BranchReadRepository,
    ProjectReadRepository,
    TaskReadRepository,
    UserReadRepository,
    WorkspaceReadRepository,
)
from infra.db.mappers import (
    branch_from_orm,
    project_from_orm,
    task_from_orm,
    user_from_orm,
    workspace_from_orm,
)
from infra.db.models import (
    BranchORM,
    ProjectMemberORM,
    ProjectORM,
    TaskORM,
    UserORM,
    WorkspaceORM,
)

SessionFactory = Callable[[], Session]


class _ReadRepositoryBase:
    def __init__(self, session_factory: SessionFactory):
        self._session_factory = session_factory


class SqlAlchemyTaskReadRepository(_ReadRepositoryBase, TaskReadRepository):
    def list_by_workspace(self, workspace_id: str) -> List[Task]:
        stmt = select(TaskORM).where(TaskORM.workspace_id == workspace_id)
        return self._fetch(stmt)

    def list_assigned_to(self, user_id: str, workspace_id: str) -> List[Task]:
        stmt = select(TaskORM).where(
            TaskORM.workspace_id == workspace_id,
            TaskORM.assignee_id == user_id,
        )
        return self._fetch(stmt)

    def list_created_by(self, user_id: str, workspace_id: str) -> List[Task]:
        stmt = select(TaskORM).where(
            TaskORM.workspace_id == workspace_id,
            TaskORM.created_by == user_id,
        )
        return self._fetch(stmt)

    def _fetch(self, stmt) -> List[Task]:
        with self._session_factory() as session:
            rows = session.execute(stmt.order_by(TaskORM.created_at, TaskORM.id)).scalars().all()
            return [task_from_orm(row) for row in rows]


class SqlAlchemyProjectReadRepository(_ReadRepositoryBase, ProjectReadRepository):
    def list_by_workspace(self, workspace_id: str) -> List[Project]:
        with self._session_factory() as session:
            rows = session.execute(
                select(ProjectORM)
                .where(ProjectORM.workspace_id == workspace_id)
                .order_by(ProjectORM.created_at, ProjectORM.id)
            ).scalars().all()
            members = self._members_of(session, [row.id for row in rows])
            return [project_from_orm(row, members.get(row.id, ())) for row in rows]

    def list_accessible(self, workspace_id: str, user_id: str, role: UserRole) -> List[Project]:
        projects = self.list_by_workspace(workspace_id)
        if UserRole(role) in (UserRole.ADMIN, UserRole.OWNER):
            return projects
        return [p for p in projects if p.is_visible_to(user_id)]

    @staticmethod
    def _members_of(session: Session, project_ids: List[str]) -> Dict[str, List[str]]:
        if not project_ids:
            return {}
        rows = session.execute(
            select(ProjectMemberORM).where(ProjectMemberORM.project_id.in_(project_ids))
        ).scalars().all()
        out: Dict[str, List[str]] = {}
        for row in rows:
            out.setdefault(row.project_id, []).append(row.user_id)
        return out


class SqlAlchemyUserReadRepository(_ReadRepositoryBase, UserReadRepository):
    def list_by_workspace(self, workspace_id: str) -> List[User]:
        with self._session_factory() as session:
            rows = session.execute(
                select(UserORM).where(UserORM.workspace_id == workspace_id).order_by(UserORM.id)
            ).scalars().all()
            return [user_from_orm(row) for row in rows]

    def get(self, user_id: str) -> Optional[User]:
        with self._session_factory() as session:
            obj = session.get(UserORM, user_id)
            return user_from_orm(obj) if obj else None


class SqlAlchemyBranchReadRepository(_ReadRepositoryBase, BranchReadRepository):
    def list_by_workspace(self, workspace_id: str) -> List[Branch]:
        with self._session_factory() as session:
            rows = session.execute(
                select(BranchORM).where(BranchORM.workspace_id == workspace_id).order_by(BranchORM.name)
            ).scalars().all()
            return [branch_from_orm(row) for row in rows]

    def get(self, branch_id: str) -> Optional[Branch]:
        with self._session_factory() as session:
            obj = session.get(BranchORM, branch_id)
            return branch_from_orm(obj) if obj else None


class SqlAlchemyWorkspaceReadRepository(_ReadRepositoryBase, WorkspaceReadRepository):
    def get(self, workspace_id: str) -> Optional[Workspace]:
        with self._session_factory() as session:
            obj = session.get(WorkspaceORM, workspace_id)
            return workspace_from_orm(obj) if obj else None

    def list_accessible(self, user_id: str) -> AccessibleWorkspaces:
        """
        Main workspaces the user owns or belongs to, plus every sub-workspace of those.
        A sub-workspace the user belongs to directly is listed under its parent.
        """
        with self._session_factory() as session:
            home_ids = select(UserORM.workspace_id).where(UserORM.id == user_id)
            direct = session.execute(
                select(WorkspaceORM)
                .where(or_(WorkspaceORM.owner_id == user_id, WorkspaceORM.id.in_(home_ids)))
                .order_by(WorkspaceORM.name, WorkspaceORM.id)
            ).scalars().all()

            mains = [w for w in direct if w.workspace_type == WorkspaceType.MAIN]
            main_ids = [w.id for w in mains]
            subs = []
            if main_ids:
                subs = session.execute(
                    select(WorkspaceORM)
                    .where(WorkspaceORM.parent_workspace_id.in_(main_ids))
                    .order_by(WorkspaceORM.name, WorkspaceORM.id)
                ).scalars().all()

            sub_workspaces: Dict[str, List[Workspace]] = {}
            seen: set[str] = set()
            for row in [*subs, *(w for w in direct if w.workspace_type == WorkspaceType.SUB)]:
                if row.id in seen:
                    continue
                seen.add(row.id)
                parent = row.parent_workspace_id or row.id
                sub_workspaces.setdefault(parent, []).append(workspace_from_orm(row))

            return AccessibleWorkspaces(
                main_workspaces=[workspace_from_orm(row) for row in mains],
                sub_workspaces=sub_workspaces,
            )


__all__ = [
    "SqlAlchemyTaskReadRepository",
    "SqlAlchemyProjectReadRepository",
    "SqlAlchemyUserReadRepository",
    "SqlAlchemyBranchReadRepository",
    "SqlAlchemyWorkspaceReadRepository",
]
