"""ORM Models — SQLAlchemy declarative models for all persisted entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Project is the aggregate root of a graph; all graph rows scoped by project_id

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from taskgraph.models.user import User  # noqa: F401
from taskgraph.models.team import Team, TeamMember  # noqa: F401
from taskgraph.models.project import Project  # noqa: F401
from taskgraph.models.node import Node, NodeOwner, NodeTeam  # noqa: F401
from taskgraph.models.edge import Edge  # noqa: F401
from taskgraph.models.request import InfoRequest  # noqa: F401
