"""Graph Views — loads a scope snapshot and hands it to the pure view functions.

Invariants:
    - Read-only: never writes, never locks
    - Statuses always computed over the FULL scope (project or org), then filtered
    - Unknown project/org ids raise ResourceNotFoundError

Design Decisions:
    - Thin async wrappers: all derivation lives in core (compute_status,
      status_filters, waiting_reasons), this module only does IO
"""

from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskgraph.core.domain_types import NodeId, ProjectId, OrgId, UserId, ComputedStatus
from taskgraph.core.errors import ResourceNotFoundError
from taskgraph.core.graph_model import Node, GraphSnapshot
from taskgraph.core.repository_protocols import SnapshotLoader
from taskgraph.core.compute_status import compute_all_statuses
from taskgraph.core.status_filters import (
    BlockingPair, get_actionable_for_user, get_waiting_for_user, get_blocking_by_user,
)
from taskgraph.core.waiting_reasons import ActionCenter, build_action_center
from taskgraph.models.project import Project
from taskgraph.services.graph_snapshot import SqlSnapshotLoader, referenced_user_ids


@dataclass(frozen=True)
class ProjectGraph:
    snapshot: GraphSnapshot
    status_map: dict[NodeId, ComputedStatus]
    user_names: dict[UserId, str | None]


@dataclass(frozen=True)
class NowView:
    my_todos: list[Node]
    my_waiting: list[Node]
    im_blocking: list[BlockingPair]
    status_map: dict[NodeId, ComputedStatus]
    user_names: dict[UserId, str | None]


async def load_project_graph(db: AsyncSession, project_id: ProjectId) -> ProjectGraph:
    await _require_project(db, project_id)
    loader: SnapshotLoader = SqlSnapshotLoader(db)
    snapshot = await loader.load_project(project_id)
    status_map = compute_all_statuses(snapshot.nodes, snapshot.edges, snapshot.requests)
    names = await loader.user_names(referenced_user_ids(snapshot))
    return ProjectGraph(snapshot, status_map, names)


async def load_now_view(
    db: AsyncSession, project_id: ProjectId, user_id: UserId,
) -> NowView:
    """'My todos / my waiting / I'm blocking' for one project."""
    graph = await load_project_graph(db, project_id)
    nodes, edges = graph.snapshot.nodes, graph.snapshot.edges
    return NowView(
        my_todos=get_actionable_for_user(user_id, nodes, graph.status_map),
        my_waiting=get_waiting_for_user(user_id, nodes, graph.status_map),
        im_blocking=get_blocking_by_user(user_id, nodes, edges),
        status_map=graph.status_map,
        user_names=graph.user_names,
    )


async def load_action_center(
    db: AsyncSession, org_id: OrgId, user_id: UserId,
) -> tuple[ActionCenter, dict[UserId, str | None]]:
    """Org-wide action center plus the display names it references."""
    result = await db.execute(select(Project.id).where(Project.org_id == org_id).limit(1))
    if result.scalar_one_or_none() is None:
        raise ResourceNotFoundError("Organization", org_id)

    loader: SnapshotLoader = SqlSnapshotLoader(db)
    snapshot = await loader.load_org(org_id)
    names = await loader.user_names(referenced_user_ids(snapshot))
    return build_action_center(user_id, snapshot, names), names


async def _require_project(db: AsyncSession, project_id: ProjectId) -> Project:
    project = await db.get(Project, project_id)
    if not project:
        raise ResourceNotFoundError("Project", project_id)
    return project
