"""Initial schema — users, teams, projects, nodes, edges, requests.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id(name: str = "id", *args, **kwargs) -> sa.Column:
    return sa.Column(name, sa.String(36), *args, **kwargs)


def _timestamp(name: str, nullable: bool = False) -> sa.Column:
    return sa.Column(
        name, sa.DateTime(timezone=True), nullable=nullable,
        server_default=None if nullable else sa.func.now(),
    )


def upgrade() -> None:
    op.create_table(
        "users",
        _id(primary_key=True),
        sa.Column("name", sa.String(200), nullable=True),
        sa.Column("email", sa.String(320), nullable=False, unique=True),
        _timestamp("created_at"),
    )

    op.create_table(
        "teams",
        _id(primary_key=True),
        _id("org_id", nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        _timestamp("created_at"),
        sa.UniqueConstraint("org_id", "name", name="uq_teams_org_name"),
    )
    op.create_index("ix_teams_org_id", "teams", ["org_id"])

    op.create_table(
        "team_members",
        _id("team_id", sa.ForeignKey("teams.id", ondelete="CASCADE"), primary_key=True),
        _id("user_id", sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    )

    op.create_table(
        "projects",
        _id(primary_key=True),
        _id("org_id", nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        _timestamp("created_at"),
    )
    op.create_index("ix_projects_org_id", "projects", ["org_id"])

    op.create_table(
        "nodes",
        _id(primary_key=True),
        _id("org_id", nullable=False),
        _id("project_id", sa.ForeignKey("projects.id", ondelete="CASCADE"), nullable=False),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("type", sa.String(20), nullable=False, server_default="TASK"),
        sa.Column("manual_status", sa.String(10), nullable=False, server_default="TODO"),
        sa.Column("priority", sa.Integer, nullable=False, server_default="0"),
        _timestamp("due_at", nullable=True),
        _id("owner_id", sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
    )
    op.create_index("ix_nodes_org_id", "nodes", ["org_id"])
    op.create_index("ix_nodes_project_id", "nodes", ["project_id"])

    op.create_table(
        "node_owners",
        _id("node_id", sa.ForeignKey("nodes.id", ondelete="CASCADE"), primary_key=True),
        _id("user_id", sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("position", sa.Integer, nullable=False, server_default="0"),
    )

    op.create_table(
        "node_teams",
        _id("node_id", sa.ForeignKey("nodes.id", ondelete="CASCADE"), primary_key=True),
        _id("team_id", sa.ForeignKey("teams.id", ondelete="CASCADE"), primary_key=True),
    )

    op.create_table(
        "edges",
        _id(primary_key=True),
        _id("org_id", nullable=False),
        _id("project_id", sa.ForeignKey("projects.id", ondelete="CASCADE"), nullable=False),
        _id("from_node_id", sa.ForeignKey("nodes.id", ondelete="CASCADE"), nullable=False),
        _id("to_node_id", sa.ForeignKey("nodes.id", ondelete="CASCADE"), nullable=False),
        sa.Column("relation", sa.String(20), nullable=False),
        _timestamp("created_at"),
        sa.UniqueConstraint(
            "project_id", "from_node_id", "to_node_id", "relation",
            name="uq_edges_identity",
        ),
    )
    op.create_index("ix_edges_org_id", "edges", ["org_id"])
    op.create_index("ix_edges_project_id", "edges", ["project_id"])

    op.create_table(
        "requests",
        _id(primary_key=True),
        _id("org_id", nullable=False),
        _id("project_id", sa.ForeignKey("projects.id", ondelete="CASCADE"), nullable=False),
        _id("linked_node_id", sa.ForeignKey("nodes.id", ondelete="CASCADE"), nullable=False),
        sa.Column("question", sa.Text, nullable=False),
        _id("from_user_id", sa.ForeignKey("users.id"), nullable=False),
        _id("to_user_id", sa.ForeignKey("users.id"), nullable=True),
        sa.Column("to_team", sa.String(100), nullable=True),
        sa.Column("claimed_from_team", sa.String(100), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="OPEN"),
        sa.Column("response_draft", sa.Text, nullable=True),
        sa.Column("response_final", sa.Text, nullable=True),
        _id("approved_by_id", sa.ForeignKey("users.id"), nullable=True),
        _timestamp("approved_at", nullable=True),
        _timestamp("claimed_at", nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
    )
    op.create_index("ix_requests_org_id", "requests", ["org_id"])
    op.create_index("ix_requests_project_id", "requests", ["project_id"])


def downgrade() -> None:
    for index, table in [
        ("ix_requests_project_id", "requests"), ("ix_requests_org_id", "requests"),
        ("ix_edges_project_id", "edges"), ("ix_edges_org_id", "edges"),
        ("ix_nodes_project_id", "nodes"), ("ix_nodes_org_id", "nodes"),
        ("ix_projects_org_id", "projects"), ("ix_teams_org_id", "teams"),
    ]:
        op.drop_index(index, table_name=table)
    for table in [
        "requests", "edges", "node_teams", "node_owners", "nodes",
        "projects", "team_members", "teams", "users",
    ]:
        op.drop_table(table)
