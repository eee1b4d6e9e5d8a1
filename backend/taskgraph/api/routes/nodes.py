"""Node Routes — create tasks and apply manual edits.

Invariants:
    - A freshly created node has no edges or requests, so its computed status
      equals its manual status
    - PATCH reports every computed-status change it caused, including dependents

Design Decisions:
    - Omitted PATCH fields are untouched: only fields in model_fields_set are forwarded
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskgraph.api.deps import get_current_user_id
from taskgraph.core.domain_types import ComputedStatus, ProjectId, UserId
from taskgraph.infrastructure.database import get_db
from taskgraph.schemas.graph import NodeOut
from taskgraph.schemas.mutations import NodeCreate, NodeUpdate, NodeUpdated, StatusChangeOut
from taskgraph.services.graph_snapshot import to_core_node
from taskgraph.services.node_mutations import NodeMutations

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["nodes"])


@router.post(
    "/projects/{project_id}/nodes", response_model=NodeOut,
    status_code=status.HTTP_201_CREATED,
)
async def create_node(
    project_id: str,
    body: NodeCreate,
    user_id: UserId = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Create a node in a project."""
    node = await NodeMutations(db).create_node(
        ProjectId(project_id),
        body.title,
        node_type=body.type,
        manual_status=body.manual_status,
        priority=body.priority,
        due_at=body.due_at,
        owner_id=body.owner_id,
        owner_ids=body.owner_ids,
        team_ids=body.team_ids,
    )
    logger.info("Node created via API", extra={"node_id": node.id, "user_id": user_id})
    core_node = to_core_node(node)
    return NodeOut.from_core(
        core_node, ComputedStatus(core_node.manual_status.value), {},
    )


@router.patch("/nodes/{node_id}", response_model=NodeUpdated)
async def update_node(
    node_id: str,
    body: NodeUpdate,
    user_id: UserId = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Edit a node; returns the computed-status changes it caused."""
    edits = {name: getattr(body, name) for name in body.model_fields_set}
    node, transitions = await NodeMutations(db).update_node(node_id, **edits)
    return NodeUpdated(
        id=node.id,
        manual_status=node.manual_status,
        status_changes=[
            StatusChangeOut(node_id=t.node_id, before=t.before, after=t.after)
            for t in transitions
        ],
        unblocked_node_ids=[t.node_id for t in transitions if t.is_unblock],
    )
