"""Edge Mutations — create, re-type and delete edges under a project lock.

Invariants:
    - Every write follows lock -> reload -> pure check -> write -> commit, in ONE
      transaction: the project row is locked (SELECT ... FOR UPDATE) before the
      snapshot used for the cycle check is read
    - Rejections raise InvalidMutationError before anything is written
    - A unique-constraint race surfaces as ConflictError (via DatabaseSessionManager)
    - Deleting an edge reports nodes whose computed status left BLOCKED/WAITING

Design Decisions:
    - Lock the project, not the edges table: concurrent inserts of different
      edges in one project serialize, so two individually-acyclic edges cannot
      jointly form a cycle
    - Before/after status maps computed in memory from the locked snapshot
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskgraph.core.domain_types import NodeId, ProjectId, EdgeRelation
from taskgraph.core.errors import (
    ErrorContext, InvalidMutationError, ResourceNotFoundError,
)
from taskgraph.core.graph_model import Edge as CoreEdge, GraphSnapshot
from taskgraph.core.compute_status import compute_all_statuses
from taskgraph.core.enforce_edges import validate_edge_creation, validate_relation_change
from taskgraph.core.status_transitions import newly_unblocked
from taskgraph.models.edge import Edge
from taskgraph.models.project import Project
from taskgraph.services.graph_snapshot import SqlSnapshotLoader, to_core_edge

logger = logging.getLogger(__name__)


class EdgeMutations:
    """Transactional edge writes for one request-scoped session."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.loader = SqlSnapshotLoader(db)

    async def create_edge(
        self,
        project_id: ProjectId,
        from_node_id: NodeId,
        to_node_id: NodeId,
        relation: EdgeRelation,
    ) -> Edge:
        """Insert an edge after re-validating against the locked snapshot."""
        project = await self._lock_project(project_id)
        snapshot = await self.loader.load_project(project_id)
        proposed = CoreEdge(from_node_id, to_node_id, relation)

        rejection = validate_edge_creation(
            (n.id for n in snapshot.nodes), snapshot.edges, proposed,
        )
        if rejection:
            await self.db.rollback()
            logger.info(
                f"Edge rejected: {rejection['error_code']}",
                extra={"project_id": project_id, "error_code": rejection["error_code"]},
            )
            raise InvalidMutationError.from_rejection(
                rejection, ErrorContext(project_id=project_id),
            )

        edge = Edge(
            org_id=project.org_id,
            project_id=project_id,
            from_node_id=from_node_id,
            to_node_id=to_node_id,
            relation=relation.value,
        )
        self.db.add(edge)
        await self.db.commit()
        await self.db.refresh(edge)
        logger.info(
            f"Edge created {from_node_id} {relation.value} {to_node_id}",
            extra={"project_id": project_id, "edge_id": edge.id},
        )
        return edge

    async def change_relation(self, edge_id: str, relation: EdgeRelation) -> Edge:
        """Re-type an edge; a switch to DEPENDS_ON is cycle-checked."""
        edge = await self._get_edge(edge_id)
        project_id = edge.project_id
        await self._lock_project(project_id)
        snapshot = await self.loader.load_project(project_id)

        rejection = validate_relation_change(
            snapshot.edges, to_core_edge(edge), relation,
        )
        if rejection:
            await self.db.rollback()
            raise InvalidMutationError.from_rejection(
                rejection, ErrorContext(project_id=project_id, edge_id=edge_id),
            )

        edge.relation = relation.value
        await self.db.commit()
        await self.db.refresh(edge)
        logger.info(
            f"Edge {edge_id} relation changed to {relation.value}",
            extra={"edge_id": edge_id, "relation": relation.value},
        )
        return edge

    async def delete_edge(self, edge_id: str) -> list[NodeId]:
        """Delete an edge. Returns ids of nodes this unblocked."""
        edge = await self._get_edge(edge_id)
        await self._lock_project(edge.project_id)
        before = await self.loader.load_project(edge.project_id)
        after = GraphSnapshot.of(
            before.nodes,
            (e for e in before.edges if e.id != edge_id),
            before.requests,
        )

        await self.db.delete(edge)
        await self.db.commit()

        unblocked = newly_unblocked(
            compute_all_statuses(before.nodes, before.edges, before.requests),
            compute_all_statuses(after.nodes, after.edges, after.requests),
        )
        for node_id in unblocked:
            logger.info(
                "Node unblocked by edge deletion",
                extra={"node_id": node_id, "edge_id": edge_id},
            )
        return unblocked

    async def _lock_project(self, project_id: str) -> Project:
        result = await self.db.execute(
            select(Project).where(Project.id == project_id).with_for_update(),
        )
        project = result.scalar_one_or_none()
        if not project:
            raise ResourceNotFoundError("Project", project_id)
        return project

    async def _get_edge(self, edge_id: str) -> Edge:
        result = await self.db.execute(
            select(Edge).where(Edge.id == edge_id)
            .execution_options(populate_existing=True),
        )
        edge = result.scalar_one_or_none()
        if not edge:
            raise ResourceNotFoundError("Edge", edge_id)
        return edge
