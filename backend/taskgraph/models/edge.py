"""Edge ORM — typed directed relation between two nodes of one project.

Invariants:
    - from_node_id <relation> to_node_id, relation is an EdgeRelation value
    - (project_id, from_node_id, to_node_id, relation) is unique
    - DEPENDS_ON acyclicity is enforced by the write path (core/enforce_edges.py),
      not by the database

Design Decisions:
    - Unique constraint as a backstop for concurrent duplicate inserts; the
      friendly duplicate check runs first in the service
    - org_id denormalized for org-wide snapshot loads
"""

from datetime import datetime

from sqlalchemy import String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from taskgraph.db.base import Base, new_id, utcnow


class Edge(Base):
    __tablename__ = "edges"
    __table_args__ = (
        UniqueConstraint(
            "project_id", "from_node_id", "to_node_id", "relation",
            name="uq_edges_identity",
        ),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    org_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    project_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    from_node_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("nodes.id", ondelete="CASCADE"), nullable=False,
    )
    to_node_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("nodes.id", ondelete="CASCADE"), nullable=False,
    )
    relation: Mapped[str] = mapped_column(String(20), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
