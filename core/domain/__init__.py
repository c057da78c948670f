from core.domain.enums import (
    DateRangePreset,
    ProjectStatus,
    ProjectVisibility,
    TaskStatus,
    UserRole,
    WorkspaceType,
)
from core.domain.identifiers import generate_id, utc_now
from core.domain.organization import AccessibleWorkspaces, Branch, User, Workspace
from core.domain.project import Project
from core.domain.task import Task

__all__ = [
    "generate_id",
    "utc_now",
    "UserRole",
    "TaskStatus",
    "ProjectStatus",
    "ProjectVisibility",
    "WorkspaceType",
    "DateRangePreset",
    "Task",
    "Project",
    "Workspace",
    "Branch",
    "User",
    "AccessibleWorkspaces",
]
