# tests/conftest.py
from __future__ import annotations

from collections import defaultdict
from datetime import datetime
from typing import Dict, List, Optional

import pytest

from core.domain import AccessibleWorkspaces, Branch, Project, Task, User, UserRole, Workspace
from core.events.domain_events import AnalyticsEvents
from core.interfaces import (
    BranchReadRepository,
    ProjectReadRepository,
    TaskReadRepository,
    UserReadRepository,
    WorkspaceReadRepository,
)
from core.services.analytics import Aggregator, AnalyticsService, ReadPorts
from infra.db.base import Base, make_session_factory
from infra.db.mappers import (
    branch_to_orm,
    project_members_to_orm,
    project_to_orm,
    task_to_orm,
    user_to_orm,
    workspace_to_orm,
)

NOW = datetime(2024, 1, 31, 12, 0, 0)


class InMemoryStore:
    """
    Entity rows keyed by the workspace they are returned for. The same entity may be
    filed under several workspaces to simulate overlapping query results.
    """

    def __init__(self) -> None:
        self.workspaces: Dict[str, Workspace] = {}
        self.accessible: Dict[str, AccessibleWorkspaces] = {}
        self.tasks: Dict[str, List[Task]] = defaultdict(list)
        self.projects: Dict[str, List[Project]] = defaultdict(list)
        self.users: Dict[str, List[User]] = defaultdict(list)
        self.branches: Dict[str, List[Branch]] = defaultdict(list)
        self.failures: Dict[tuple[str, Optional[str]], Exception] = {}
        self.calls: List[tuple[str, Optional[str]]] = []

    def fail(self, method: str, key: Optional[str] = None, exc: Exception | None = None) -> None:
        self.failures[(method, key)] = exc or ConnectionError(f"{method} unavailable")

    def check(self, method: str, key: Optional[str]) -> None:
        self.calls.append((method, key))
        exc = self.failures.get((method, key)) or self.failures.get((method, None))
        if exc is not None:
            raise exc

    def add_workspace(self, ws: Workspace) -> Workspace:
        self.workspaces[ws.id] = ws
        return ws

    def add_task(self, task: Task, *also_in: str) -> Task:
        for ws_id in (task.workspace_id, *also_in):
            self.tasks[ws_id].append(task)
        return task

    def add_project(self, project: Project) -> Project:
        self.projects[project.workspace_id].append(project)
        return project

    def add_user(self, user: User) -> User:
        self.users[user.workspace_id].append(user)
        return user

    def add_branch(self, branch: Branch) -> Branch:
        self.branches[branch.workspace_id].append(branch)
        return branch


class FakeTaskRepo(TaskReadRepository):
    def __init__(self, store: InMemoryStore):
        self.store = store

    def list_by_workspace(self, workspace_id: str) -> List[Task]:
        self.store.check("tasks.list_by_workspace", workspace_id)
        return list(self.store.tasks[workspace_id])

    def list_assigned_to(self, user_id: str, workspace_id: str) -> List[Task]:
        self.store.check("tasks.list_assigned_to", workspace_id)
        return [t for t in self.store.tasks[workspace_id] if t.assignee_id == user_id]

    def list_created_by(self, user_id: str, workspace_id: str) -> List[Task]:
        self.store.check("tasks.list_created_by", workspace_id)
        return [t for t in self.store.tasks[workspace_id] if t.created_by == user_id]


class FakeProjectRepo(ProjectReadRepository):
    def __init__(self, store: InMemoryStore):
        self.store = store

    def list_by_workspace(self, workspace_id: str) -> List[Project]:
        self.store.check("projects.list_by_workspace", workspace_id)
        return list(self.store.projects[workspace_id])

    def list_accessible(self, workspace_id: str, user_id: str, role: UserRole) -> List[Project]:
        self.store.check("projects.list_accessible", workspace_id)
        projects = list(self.store.projects[workspace_id])
        if UserRole(role) != UserRole.MEMBER:
            return projects
        return [p for p in projects if p.is_visible_to(user_id)]


class FakeUserRepo(UserReadRepository):
    def __init__(self, store: InMemoryStore):
        self.store = store

    def list_by_workspace(self, workspace_id: str) -> List[User]:
        self.store.check("users.list_by_workspace", workspace_id)
        return list(self.store.users[workspace_id])

    def get(self, user_id: str) -> Optional[User]:
        self.store.check("users.get", user_id)
        for users in self.store.users.values():
            for user in users:
                if user.id == user_id:
                    return user
        return None


class FakeBranchRepo(BranchReadRepository):
    def __init__(self, store: InMemoryStore):
        self.store = store

    def list_by_workspace(self, workspace_id: str) -> List[Branch]:
        self.store.check("branches.list_by_workspace", workspace_id)
        return list(self.store.branches[workspace_id])

    def get(self, branch_id: str) -> Optional[Branch]:
        self.store.check("branches.get", branch_id)
        for branches in self.store.branches.values():
            for branch in branches:
                if branch.id == branch_id:
                    return branch
        return None


class FakeWorkspaceRepo(WorkspaceReadRepository):
    def __init__(self, store: InMemoryStore):
        self.store = store

    def get(self, workspace_id: str) -> Optional[Workspace]:
        self.store.check("workspaces.get", workspace_id)
        return self.store.workspaces.get(workspace_id)

    def list_accessible(self, user_id: str) -> AccessibleWorkspaces:
        self.store.check("workspaces.list_accessible", user_id)
        return self.store.accessible.get(user_id, AccessibleWorkspaces())


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def ports(store) -> ReadPorts:
    return ReadPorts(
        tasks=FakeTaskRepo(store),
        projects=FakeProjectRepo(store),
        users=FakeUserRepo(store),
        branches=FakeBranchRepo(store),
    )


@pytest.fixture
def make_service(store):
    def _make(aggregator: Aggregator | None = None, clock=lambda: NOW) -> AnalyticsService:
        return AnalyticsService(
            FakeTaskRepo(store),
            FakeProjectRepo(store),
            FakeUserRepo(store),
            FakeBranchRepo(store),
            FakeWorkspaceRepo(store),
            aggregator=aggregator or Aggregator(max_workers=4),
            clock=clock,
        )

    return _make


@pytest.fixture
def events() -> AnalyticsEvents:
    # isolated signals so tests never leak subscribers into the global instance
    return AnalyticsEvents()


@pytest.fixture
def session_factory(tmp_path):
    # file-backed so sessions opened from fetch threads see the same database
    factory = make_session_factory(f"sqlite:///{(tmp_path / 'analytics.db').as_posix()}")
    engine = factory.kw["bind"]
    Base.metadata.create_all(bind=engine)
    try:
        yield factory
    finally:
        engine.dispose()


@pytest.fixture
def seed(session_factory):
    def _seed(*entities) -> None:
        with session_factory() as session:
            for entity in entities:
                if isinstance(entity, Workspace):
                    session.add(workspace_to_orm(entity))
                elif isinstance(entity, Branch):
                    session.add(branch_to_orm(entity))
                elif isinstance(entity, User):
                    session.add(user_to_orm(entity))
                elif isinstance(entity, Project):
                    session.add(project_to_orm(entity))
                    session.add_all(project_members_to_orm(entity))
                elif isinstance(entity, Task):
                    session.add(task_to_orm(entity))
                else:
                    raise TypeError(f"Cannot seed {entity!r}")
                session.flush()
            session.commit()

    return _seed
