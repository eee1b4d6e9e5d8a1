"""Graph Snapshot Loader — reads ORM rows and converts them to core value objects.

Invariants:
    - The only place ORM rows become core Node/Edge/Request values
    - A snapshot is always a full scope (every node, edge and request of a
      project or org) so status derivation never sees a partial graph
    - Unknown enum strings in the DB raise ValueError (data corruption is not skipped)
    - Loads refresh rows already in the session identity map, so a snapshot
      taken after a project lock reflects committed writes from other sessions

Design Decisions:
    - Implements core.repository_protocols.SnapshotLoader structurally (no inheritance)
    - Plain functions for row conversion so mutation services can reuse them
      on rows they already hold
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskgraph.core.domain_types import (
    NodeId, EdgeId, RequestId, UserId, TeamId, ProjectId, OrgId,
    ManualStatus, NodeType, EdgeRelation, RequestStatus,
)
from taskgraph.core import graph_model as core
from taskgraph.models.node import Node
from taskgraph.models.edge import Edge
from taskgraph.models.request import InfoRequest
from taskgraph.models.team import Team, TeamMember
from taskgraph.models.user import User

logger = logging.getLogger(__name__)


def to_core_node(row: Node) -> core.Node:
    return core.Node(
        id=NodeId(row.id),
        manual_status=ManualStatus(row.manual_status),
        type=NodeType(row.type),
        priority=row.priority,
        due_at=row.due_at,
        title=row.title,
        project_id=ProjectId(row.project_id),
        owner_id=UserId(row.owner_id) if row.owner_id else None,
        owner_ids=tuple(UserId(o.user_id) for o in row.extra_owners),
        team_ids=tuple(TeamId(t.team_id) for t in row.teams),
    )


def to_core_edge(row: Edge) -> core.Edge:
    return core.Edge(
        from_node_id=NodeId(row.from_node_id),
        to_node_id=NodeId(row.to_node_id),
        relation=EdgeRelation(row.relation),
        id=EdgeId(row.id),
    )


def to_core_request(row: InfoRequest) -> core.Request:
    return core.Request(
        id=RequestId(row.id),
        linked_node_id=NodeId(row.linked_node_id),
        status=RequestStatus(row.status),
        to_user_id=UserId(row.to_user_id) if row.to_user_id else None,
        to_team=row.to_team,
        from_user_id=UserId(row.from_user_id),
        question=row.question,
        response_draft=row.response_draft,
        response_final=row.response_final,
        claimed_from_team=row.claimed_from_team,
        claimed_at=row.claimed_at,
        approved_by_id=UserId(row.approved_by_id) if row.approved_by_id else None,
        approved_at=row.approved_at,
    )


class SqlSnapshotLoader:
    """SnapshotLoader backed by the async SQLAlchemy session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def load_project(self, project_id: ProjectId) -> core.GraphSnapshot:
        return await self._load(
            Node.project_id == project_id,
            Edge.project_id == project_id,
            InfoRequest.project_id == project_id,
        )

    async def load_org(self, org_id: OrgId) -> core.GraphSnapshot:
        return await self._load(
            Node.org_id == org_id,
            Edge.org_id == org_id,
            InfoRequest.org_id == org_id,
        )

    async def user_names(self, user_ids: set[UserId]) -> dict[UserId, str | None]:
        if not user_ids:
            return {}
        result = await self.db.execute(
            select(User.id, User.name).where(User.id.in_(user_ids)),
        )
        return {UserId(uid): name for uid, name in result.all()}

    async def team_names_for_user(self, org_id: OrgId, user_id: UserId) -> set[str]:
        """Names of the teams the user currently belongs to in this org."""
        result = await self.db.execute(
            select(Team.name)
            .join(TeamMember, TeamMember.team_id == Team.id)
            .where(Team.org_id == org_id, TeamMember.user_id == user_id),
        )
        return set(result.scalars().all())

    async def _load(self, node_clause, edge_clause, request_clause) -> core.GraphSnapshot:
        nodes = (await self.db.execute(
            select(Node).where(node_clause).order_by(Node.created_at, Node.id)
            .execution_options(populate_existing=True),
        )).scalars().all()
        edges = (await self.db.execute(
            select(Edge).where(edge_clause).order_by(Edge.created_at, Edge.id)
            .execution_options(populate_existing=True),
        )).scalars().all()
        requests = (await self.db.execute(
            select(InfoRequest).where(request_clause)
            .order_by(InfoRequest.created_at, InfoRequest.id)
            .execution_options(populate_existing=True),
        )).scalars().all()

        logger.debug(
            f"Loaded snapshot: {len(nodes)} nodes, {len(edges)} edges, "
            f"{len(requests)} requests",
        )
        return core.GraphSnapshot.of(
            (to_core_node(n) for n in nodes),
            (to_core_edge(e) for e in edges),
            (to_core_request(r) for r in requests),
        )


def referenced_user_ids(snapshot: core.GraphSnapshot) -> set[UserId]:
    """Every user id a view may need a display name for."""
    ids: set[UserId] = set()
    for node in snapshot.nodes:
        if node.owner_id:
            ids.add(node.owner_id)
        ids.update(node.owner_ids)
    for request in snapshot.requests:
        if request.to_user_id:
            ids.add(request.to_user_id)
    return ids
