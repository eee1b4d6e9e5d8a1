"""Edge Routes — create, re-type and delete graph edges.

Invariants:
    - Self-loops, duplicates and DEPENDS_ON cycles are rejected with 400 and
      nothing is written; cycle rejections include the cycle path in details
    - Validation runs inside the service transaction, never only in the route

Design Decisions:
    - Edge ids are global, so PATCH/DELETE live under /edges/{id}, not under the project
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskgraph.api.deps import get_current_user_id
from taskgraph.core.domain_types import NodeId, ProjectId, UserId
from taskgraph.infrastructure.database import get_db
from taskgraph.schemas.mutations import EdgeCreate, EdgeDeleted, EdgeResponse, EdgeUpdate
from taskgraph.services.edge_mutations import EdgeMutations

router = APIRouter(prefix="/api/v1", tags=["edges"])


@router.post(
    "/projects/{project_id}/edges", response_model=EdgeResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_edge(
    project_id: str,
    body: EdgeCreate,
    user_id: UserId = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Create an edge with cycle detection."""
    return await EdgeMutations(db).create_edge(
        ProjectId(project_id),
        NodeId(body.from_node_id),
        NodeId(body.to_node_id),
        body.relation,
    )


@router.patch("/edges/{edge_id}", response_model=EdgeResponse)
async def update_edge(
    edge_id: str,
    body: EdgeUpdate,
    user_id: UserId = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Change an edge's relation (re-validated like a new edge)."""
    return await EdgeMutations(db).change_relation(edge_id, body.relation)


@router.delete("/edges/{edge_id}", response_model=EdgeDeleted)
async def delete_edge(
    edge_id: str,
    user_id: UserId = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Delete an edge; reports nodes it unblocked."""
    unblocked = await EdgeMutations(db).delete_edge(edge_id)
    return EdgeDeleted(unblocked_node_ids=list(unblocked))
