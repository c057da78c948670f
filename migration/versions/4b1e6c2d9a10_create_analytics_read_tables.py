"""create analytics read tables

Revision ID: 4b1e6c2d9a10
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "4b1e6c2d9a10"
down_revision = None
branch_labels = None
depends_on = None


_WORKSPACE_TYPE = sa.Enum("main", "sub", name="workspacetype")
_USER_ROLE = sa.Enum("member", "admin", "owner", name="userrole")
_PROJECT_STATUS = sa.Enum("planning", "active", "completed", "archived", name="projectstatus")
_PROJECT_VISIBILITY = sa.Enum("public", "private", "restricted", name="projectvisibility")
_TASK_STATUS = sa.Enum("todo", "in-progress", "review", "completed", name="taskstatus")


def upgrade() -> None:
    op.create_table(
        "workspaces",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("workspace_type", _WORKSPACE_TYPE, nullable=False),
        sa.Column("parent_workspace_id", sa.String(), nullable=True),
        sa.Column("branch_id", sa.String(), nullable=True),
        sa.Column("owner_id", sa.String(), nullable=True),
        sa.ForeignKeyConstraint(["parent_workspace_id"], ["workspaces.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_workspaces_parent_id", "workspaces", ["parent_workspace_id"])
    op.create_index("idx_workspaces_owner_id", "workspaces", ["owner_id"])

    op.create_table(
        "branches",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("workspace_id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.ForeignKeyConstraint(["workspace_id"], ["workspaces.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_branches_workspace_id", "branches", ["workspace_id"])

    op.create_table(
        "app_users",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("workspace_id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("role", _USER_ROLE, nullable=False),
        sa.Column("branch_id", sa.String(), nullable=True),
        sa.Column("region_id", sa.String(), nullable=True),
        sa.ForeignKeyConstraint(["workspace_id"], ["workspaces.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_app_users_workspace_id", "app_users", ["workspace_id"])

    op.create_table(
        "projects",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("workspace_id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("status", _PROJECT_STATUS, nullable=False),
        sa.Column("branch_id", sa.String(), nullable=True),
        sa.Column("owner_id", sa.String(), nullable=True),
        sa.Column("visibility", _PROJECT_VISIBILITY, nullable=False),
        sa.Column("due_date", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["workspace_id"], ["workspaces.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_projects_workspace_id", "projects", ["workspace_id"])

    op.create_table(
        "project_members",
        sa.Column("project_id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("project_id", "user_id"),
    )

    op.create_table(
        "tasks",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("workspace_id", sa.String(), nullable=False),
        sa.Column("project_id", sa.String(), nullable=True),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("status", _TASK_STATUS, nullable=False),
        sa.Column("assignee_id", sa.String(), nullable=True),
        sa.Column("created_by", sa.String(), nullable=False),
        sa.Column("due_date", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["workspace_id"], ["workspaces.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_tasks_workspace_id", "tasks", ["workspace_id"])
    op.create_index("idx_tasks_assignee_id", "tasks", ["assignee_id"])
    op.create_index("idx_tasks_created_by", "tasks", ["created_by"])


def downgrade() -> None:
    op.drop_index("idx_tasks_created_by", table_name="tasks")
    op.drop_index("idx_tasks_assignee_id", table_name="tasks")
    op.drop_index("idx_tasks_workspace_id", table_name="tasks")
    op.drop_table("tasks")
    op.drop_table("project_members")
    op.drop_index("idx_projects_workspace_id", table_name="projects")
    op.drop_table("projects")
    op.drop_index("idx_app_users_workspace_id", table_name="app_users")
    op.drop_table("app_users")
    op.drop_index("idx_branches_workspace_id", table_name="branches")
    op.drop_table("branches")
    op.drop_index("idx_workspaces_owner_id", table_name="workspaces")
    op.drop_index("idx_workspaces_parent_id", table_name="workspaces")
    op.drop_table("workspaces")
