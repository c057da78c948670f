# infra/db/models.py
from __future__ import annotations
from datetime import datetime
from typing import Optional

from sqlalchemy import (
    DateTime,
    Enum as SAEnum,
    ForeignKey,
    Index,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column

from infra.db.base import Base
from core.domain import (
    ProjectStatus,
    ProjectVisibility,
    TaskStatus,
    UserRole,
    WorkspaceType,
)


def _values(enum_cls):
    # persist the enum value ("in-progress"), not the member name
    return [member.value for member in enum_cls]


class WorkspaceORM(Base):
    __tablename__ = "workspaces"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False, default="")
    workspace_type: Mapped[WorkspaceType] = mapped_column(
        SAEnum(WorkspaceType, values_callable=_values), default=WorkspaceType.MAIN, nullable=False
    )
    parent_workspace_id: Mapped[Optional[str]] = mapped_column(
        String, ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=True
    )
    branch_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    owner_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)


Index("idx_workspaces_parent_id", WorkspaceORM.parent_workspace_id)
Index("idx_workspaces_owner_id", WorkspaceORM.owner_id)


class BranchORM(Base):
    __tablename__ = "branches"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    workspace_id: Mapped[str] = mapped_column(
        String, ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String, nullable=False)


Index("idx_branches_workspace_id", BranchORM.workspace_id)


class UserORM(Base):
    __tablename__ = "app_users"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    workspace_id: Mapped[str] = mapped_column(
        String, ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String, nullable=False, default="")
    role: Mapped[UserRole] = mapped_column(
        SAEnum(UserRole, values_callable=_values), default=UserRole.MEMBER, nullable=False
    )
    branch_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    region_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)


Index("idx_app_users_workspace_id", UserORM.workspace_id)


class ProjectORM(Base):
    __tablename__ = "projects"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    workspace_id: Mapped[str] = mapped_column(
        String, ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String, nullable=False, default="")
    status: Mapped[ProjectStatus] = mapped_column(
        SAEnum(ProjectStatus, values_callable=_values), default=ProjectStatus.PLANNING, nullable=False
    )
    branch_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    owner_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    visibility: Mapped[ProjectVisibility] = mapped_column(
        SAEnum(ProjectVisibility, values_callable=_values), default=ProjectVisibility.PRIVATE, nullable=False
    )
    due_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)


Index("idx_projects_workspace_id", ProjectORM.workspace_id)


class ProjectMemberORM(Base):
    __tablename__ = "project_members"

    project_id: Mapped[str] = mapped_column(
        String, ForeignKey("projects.id", ondelete="CASCADE"), primary_key=True
    )
    user_id: Mapped[str] = mapped_column(String, primary_key=True)


class TaskORM(Base):
    __tablename__ = "tasks"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    workspace_id: Mapped[str] = mapped_column(
        String, ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False
    )
    project_id: Mapped[Optional[str]] = mapped_column(
        String, ForeignKey("projects.id", ondelete="SET NULL"), nullable=True
    )
    title: Mapped[str] = mapped_column(String, nullable=False, default="")
    status: Mapped[TaskStatus] = mapped_column(
        SAEnum(TaskStatus, values_callable=_values), default=TaskStatus.TODO, nullable=False
    )
    assignee_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    created_by: Mapped[str] = mapped_column(String, nullable=False)
    due_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)


Index("idx_tasks_workspace_id", TaskORM.workspace_id)
Index("idx_tasks_assignee_id", TaskORM.assignee_id)
Index("idx_tasks_created_by", TaskORM.created_by)
