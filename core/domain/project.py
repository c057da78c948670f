from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from core.domain.enums import ProjectStatus, ProjectVisibility
from core.domain.identifiers import generate_id, utc_now


@dataclass
class Project:
    id: str
    workspace_id: str
    name: str = ""
    status: ProjectStatus = ProjectStatus.PLANNING
    branch_id: Optional[str] = None
    owner_id: Optional[str] = None
    visibility: ProjectVisibility = ProjectVisibility.PRIVATE
    member_ids: tuple[str, ...] = field(default_factory=tuple)
    due_date: Optional[datetime] = None
    created_at: datetime | None = None

    def is_visible_to(self, user_id: str) -> bool:
        if self.owner_id == user_id:
            return True
        if user_id in self.member_ids:
            return True
        return self.visibility == ProjectVisibility.PUBLIC

    @staticmethod
    def create(workspace_id: str, name: str = "", **extra) -> "Project":
        extra.setdefault("created_at", utc_now())
        if "member_ids" in extra:
            extra["member_ids"] = tuple(extra["member_ids"])
        return Project(id=generate_id(), workspace_id=workspace_id, name=name, **extra)


__all__ = ["Project"]
