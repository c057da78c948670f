from __future__ import annotations

from enum import Enum


class UserRole(str, Enum):
    MEMBER = "member"
    ADMIN = "admin"
    OWNER = "owner"


class TaskStatus(str, Enum):
    TODO = "todo"
    IN_PROGRESS = "in-progress"
    REVIEW = "review"
    COMPLETED = "completed"


class ProjectStatus(str, Enum):
    PLANNING = "planning"
    ACTIVE = "active"
    COMPLETED = "completed"
    ARCHIVED = "archived"


class ProjectVisibility(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"
    RESTRICTED = "restricted"


class WorkspaceType(str, Enum):
    MAIN = "main"
    SUB = "sub"


class DateRangePreset(str, Enum):
    LAST_7_DAYS = "last-7-days"
    LAST_30_DAYS = "last-30-days"
    LAST_3_MONTHS = "last-3-months"
    LAST_YEAR = "last-year"


__all__ = [
    "UserRole",
    "TaskStatus",
    "ProjectStatus",
    "ProjectVisibility",
    "WorkspaceType",
    "DateRangePreset",
]
