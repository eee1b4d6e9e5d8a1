"""Node Mutations — create nodes and apply manual edits.

Invariants:
    - manual_status only ever changes through an explicit user edit (update_node)
    - update_node reports every node whose COMPUTED status changed as a result,
      including dependents of the edited node
    - Owner/team assignments replace the previous set wholesale

Design Decisions:
    - Status diff computed in memory: the locked snapshot plus the edited node
      gives the "after" map without a second round trip
"""

import logging
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskgraph.core.domain_types import ProjectId, ManualStatus, NodeType
from taskgraph.core.errors import ResourceNotFoundError
from taskgraph.core.graph_model import GraphSnapshot
from taskgraph.core.compute_status import compute_all_statuses
from taskgraph.core.status_transitions import StatusTransition, diff_statuses
from taskgraph.models.node import Node, NodeOwner, NodeTeam
from taskgraph.models.project import Project
from taskgraph.services.graph_snapshot import SqlSnapshotLoader, to_core_node

logger = logging.getLogger(__name__)

_UNSET = object()


class NodeMutations:
    """Node writes for one request-scoped session."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.loader = SqlSnapshotLoader(db)

    async def create_node(
        self,
        project_id: ProjectId,
        title: str,
        node_type: NodeType = NodeType.TASK,
        manual_status: ManualStatus = ManualStatus.TODO,
        priority: int = 0,
        due_at: datetime | None = None,
        owner_id: str | None = None,
        owner_ids: list[str] | None = None,
        team_ids: list[str] | None = None,
    ) -> Node:
        project = await self.db.get(Project, project_id)
        if not project:
            raise ResourceNotFoundError("Project", project_id)

        node = Node(
            org_id=project.org_id,
            project_id=project_id,
            title=title,
            type=node_type.value,
            manual_status=manual_status.value,
            priority=priority,
            due_at=due_at,
            owner_id=owner_id,
        )
        _assign(node, owner_ids or [], team_ids or [])
        self.db.add(node)
        await self.db.commit()
        await self.db.refresh(node)
        logger.info(
            f"Node created: {title}",
            extra={"project_id": project_id, "node_id": node.id},
        )
        return node

    async def update_node(
        self,
        node_id: str,
        title: str | None = None,
        manual_status: ManualStatus | None = None,
        priority: int | None = None,
        due_at: datetime | None | object = _UNSET,
        owner_id: str | None | object = _UNSET,
        owner_ids: list[str] | None = None,
        team_ids: list[str] | None = None,
    ) -> tuple[Node, list[StatusTransition]]:
        """Apply edits; return the node and resulting computed-status transitions."""
        node = await self._get_node(node_id)
        await self.db.execute(
            select(Project.id).where(Project.id == node.project_id).with_for_update(),
        )
        before = await self.loader.load_project(node.project_id)

        if title is not None:
            node.title = title
        if manual_status is not None:
            node.manual_status = manual_status.value
        if priority is not None:
            node.priority = priority
        if due_at is not _UNSET:
            node.due_at = due_at
        if owner_id is not _UNSET:
            node.owner_id = owner_id
        if owner_ids is not None or team_ids is not None:
            _assign(
                node,
                owner_ids if owner_ids is not None else [o.user_id for o in node.extra_owners],
                team_ids if team_ids is not None else [t.team_id for t in node.teams],
            )

        edited = to_core_node(node)
        after = GraphSnapshot.of(
            (edited if n.id == edited.id else n for n in before.nodes),
            before.edges,
            before.requests,
        )
        await self.db.commit()
        await self.db.refresh(node)

        transitions = diff_statuses(
            compute_all_statuses(before.nodes, before.edges, before.requests),
            compute_all_statuses(after.nodes, after.edges, after.requests),
        )
        for t in transitions:
            logger.info(
                f"Computed status {t.before.value} -> {t.after.value}",
                extra={"node_id": t.node_id, "project_id": node.project_id},
            )
        return node, transitions

    async def _get_node(self, node_id: str) -> Node:
        result = await self.db.execute(
            select(Node).where(Node.id == node_id)
            .execution_options(populate_existing=True),
        )
        node = result.scalar_one_or_none()
        if not node:
            raise ResourceNotFoundError("Node", node_id)
        return node


def _assign(node: Node, owner_ids: list[str], team_ids: list[str]) -> None:
    """Replace extra owners and team links, keeping the given order."""
    node.extra_owners = [
        NodeOwner(user_id=uid, position=i)
        for i, uid in enumerate(dict.fromkeys(owner_ids))
    ]
    node.teams = [NodeTeam(team_id=tid) for tid in dict.fromkeys(team_ids)]
