"""Project ORM — the scope of one task graph.

Invariants:
    - Every node, edge and request belongs to exactly one project
    - Deleting a project cascades its whole graph

Design Decisions:
    - The project row doubles as the lock target for graph writes
      (SELECT ... FOR UPDATE in services/edge_mutations.py)
"""

from datetime import datetime

from sqlalchemy import String, Text, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from taskgraph.db.base import Base, new_id, utcnow


class Project(Base):
    __tablename__ = "projects"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    org_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
