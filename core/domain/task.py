from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from core.domain.enums import TaskStatus
from core.domain.identifiers import generate_id, utc_now


@dataclass
class Task:
    id: str
    workspace_id: str
    created_by: str
    title: str = ""
    status: TaskStatus = TaskStatus.TODO
    project_id: Optional[str] = None
    assignee_id: Optional[str] = None
    due_date: Optional[datetime] = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @staticmethod
    def create(workspace_id: str, created_by: str, title: str = "", **extra) -> "Task":
        now = utc_now()
        extra.setdefault("created_at", now)
        extra.setdefault("updated_at", extra["created_at"])
        return Task(
            id=generate_id(),
            workspace_id=workspace_id,
            created_by=created_by,
            title=title,
            **extra,
        )


__all__ = ["Task"]
