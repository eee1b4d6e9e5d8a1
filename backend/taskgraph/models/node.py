"""Node ORM — persists a task in a project graph.

Invariants:
    - manual_status is the only status column; computed status is never stored
    - Ownership = owner_id (primary) plus node_owners rows (extra owners)
    - Team association via node_teams rows
    - Deleting a node cascades its edges, requests, owners and team links

Design Decisions:
    - org_id denormalized: org-wide action center loads every node of an org
      without joining projects
    - extra owners / teams loaded with selectin: the snapshot loader always
      needs them, so no lazy loads in async context
"""

from datetime import datetime

from sqlalchemy import String, Text, Integer, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from taskgraph.db.base import Base, new_id, utcnow


class Node(Base):
    """Task node. Status values are stored as ManualStatus strings."""
    __tablename__ = "nodes"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    org_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    project_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    type: Mapped[str] = mapped_column(String(20), nullable=False, default="TASK")
    manual_status: Mapped[str] = mapped_column(
        String(10), nullable=False, default="TODO",
    )
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    due_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    owner_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow,
    )

    extra_owners: Mapped[list["NodeOwner"]] = relationship(
        "NodeOwner", cascade="all, delete-orphan", lazy="selectin",
        order_by="NodeOwner.position",
    )
    teams: Mapped[list["NodeTeam"]] = relationship(
        "NodeTeam", cascade="all, delete-orphan", lazy="selectin",
    )


class NodeOwner(Base):
    """Additional owner of a node (multi-owner)."""
    __tablename__ = "node_owners"

    node_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("nodes.id", ondelete="CASCADE"), primary_key=True,
    )
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class NodeTeam(Base):
    """Team associated with a node."""
    __tablename__ = "node_teams"

    node_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("nodes.id", ondelete="CASCADE"), primary_key=True,
    )
    team_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("teams.id", ondelete="CASCADE"), primary_key=True,
    )
