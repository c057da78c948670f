from __future__ import annotations

from typing import Iterable

from core.domain import Branch, Project, Task, User, Workspace
from infra.db.models import (
    BranchORM,
    ProjectMemberORM,
    ProjectORM,
    TaskORM,
    UserORM,
    WorkspaceORM,
)


def workspace_to_orm(ws: Workspace) -> WorkspaceORM:
    return WorkspaceORM(
        id=ws.id,
        name=ws.name,
        workspace_type=ws.workspace_type,
        parent_workspace_id=ws.parent_workspace_id,
        branch_id=ws.branch_id,
        owner_id=ws.owner_id,
    )


def workspace_from_orm(obj: WorkspaceORM) -> Workspace:
    return Workspace(
        id=obj.id,
        name=obj.name,
        workspace_type=obj.workspace_type,
        parent_workspace_id=obj.parent_workspace_id,
        branch_id=obj.branch_id,
        owner_id=obj.owner_id,
    )


def branch_to_orm(branch: Branch) -> BranchORM:
    return BranchORM(id=branch.id, workspace_id=branch.workspace_id, name=branch.name)


def branch_from_orm(obj: BranchORM) -> Branch:
    return Branch(id=obj.id, workspace_id=obj.workspace_id, name=obj.name)


def user_to_orm(user: User) -> UserORM:
    return UserORM(
        id=user.id,
        workspace_id=user.workspace_id,
        name=user.name,
        role=user.role,
        branch_id=user.branch_id,
        region_id=user.region_id,
    )


def user_from_orm(obj: UserORM) -> User:
    return User(
        id=obj.id,
        workspace_id=obj.workspace_id,
        role=obj.role,
        name=obj.name,
        branch_id=obj.branch_id,
        region_id=obj.region_id,
    )


def project_to_orm(project: Project) -> ProjectORM:
    return ProjectORM(
        id=project.id,
        workspace_id=project.workspace_id,
        name=project.name,
        status=project.status,
        branch_id=project.branch_id,
        owner_id=project.owner_id,
        visibility=project.visibility,
        due_date=project.due_date,
        created_at=project.created_at,
    )


def project_members_to_orm(project: Project) -> list[ProjectMemberORM]:
    return [ProjectMemberORM(project_id=project.id, user_id=uid) for uid in project.member_ids]


def project_from_orm(obj: ProjectORM, member_ids: Iterable[str] = ()) -> Project:
    return Project(
        id=obj.id,
        workspace_id=obj.workspace_id,
        name=obj.name,
        status=obj.status,
        branch_id=obj.branch_id,
        owner_id=obj.owner_id,
        visibility=obj.visibility,
        member_ids=tuple(member_ids),
        due_date=obj.due_date,
        created_at=obj.created_at,
    )


def task_to_orm(task: Task) -> TaskORM:
    return TaskORM(
        id=task.id,
        workspace_id=task.workspace_id,
        project_id=task.project_id,
        title=task.title,
        status=task.status,
        assignee_id=task.assignee_id,
        created_by=task.created_by,
        due_date=task.due_date,
        created_at=task.created_at,
        updated_at=task.updated_at,
    )


def task_from_orm(obj: TaskORM) -> Task:
    return Task(
        id=obj.id,
        workspace_id=obj.workspace_id,
        created_by=obj.created_by,
        title=obj.title,
        status=obj.status,
        project_id=obj.project_id,
        assignee_id=obj.assignee_id,
        due_date=obj.due_date,
        created_at=obj.created_at,
        updated_at=obj.updated_at,
    )


__all__ = [
    "workspace_to_orm",
    "workspace_from_orm",
    "branch_to_orm",
    "branch_from_orm",
    "user_to_orm",
    "user_from_orm",
    "project_to_orm",
    "project_members_to_orm",
    "project_from_orm",
    "task_to_orm",
    "task_from_orm",
]
