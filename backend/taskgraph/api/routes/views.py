"""View Routes — project graph, per-user "now" view and org action center.

Invariants:
    - Read-only: GET endpoints never write or lock
    - Every node in a response carries its computed_status, derived on read

Design Decisions:
    - Caller identity from X-User-Id for the per-user views; the graph view
      is the same for every caller
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from taskgraph.api.deps import get_current_user_id
from taskgraph.core.domain_types import OrgId, ProjectId, UserId
from taskgraph.infrastructure.database import get_db
from taskgraph.schemas.graph import (
    ActionCenterData, BlockingPairOut, BlockingSummaryOut, EdgeOut, GraphData,
    NodeOut, NowData, WaitingItemOut,
)
from taskgraph.services.graph_views import (
    load_action_center, load_now_view, load_project_graph,
)

router = APIRouter(prefix="/api/v1", tags=["views"])


@router.get("/projects/{project_id}/graph", response_model=GraphData)
async def get_project_graph(project_id: str, db: AsyncSession = Depends(get_db)):
    """All nodes (with computed status) and edges of a project."""
    graph = await load_project_graph(db, ProjectId(project_id))
    return GraphData(
        nodes=[
            NodeOut.from_core(n, graph.status_map[n.id], graph.user_names)
            for n in graph.snapshot.nodes
        ],
        edges=[EdgeOut.from_core(e) for e in graph.snapshot.edges],
    )


@router.get("/projects/{project_id}/now", response_model=NowData)
async def get_now_view(
    project_id: str,
    user_id: UserId = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    view = await load_now_view(db, ProjectId(project_id), user_id)

    def out(node):
        return NodeOut.from_core(node, view.status_map[node.id], view.user_names)

    return NowData(
        my_todos=[out(n) for n in view.my_todos],
        my_waiting=[out(n) for n in view.my_waiting],
        im_blocking=[
            BlockingPairOut(
                blocked_node=out(p.blocked_node),
                waiting_on_my_node=out(p.waiting_on_my_node),
            )
            for p in view.im_blocking
        ],
    )


@router.get("/orgs/{org_id}/action-center", response_model=ActionCenterData)
async def get_action_center(
    org_id: str,
    user_id: UserId = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Org-wide: my actions, what I wait on (and why), what I block."""
    center, names = await load_action_center(db, OrgId(org_id), user_id)

    def out(node):
        return NodeOut.from_core(node, center.status_map[node.id], names)

    return ActionCenterData(
        my_actions=[out(n) for n in center.my_actions],
        waiting=[
            WaitingItemOut(
                node=out(w.node), reason=w.reason, responsible=list(w.responsible),
            )
            for w in center.waiting
        ],
        blocking=[
            BlockingSummaryOut(
                node=out(b.node),
                blocked_count=b.blocked_count,
                affected_project_ids=list(b.affected_project_ids),
            )
            for b in center.blocking
        ],
    )
