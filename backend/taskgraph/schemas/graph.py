"""Graph Schemas — Pydantic models for graph, "now" and action center responses.

Invariants:
    - computed_status is always present on NodeOut (never persisted, always derived)
    - Enum fields use core domain types so values match the DB strings

Design Decisions:
    - from_core() constructors keep routes free of field-by-field mapping
"""

from datetime import datetime
from typing import Mapping

from pydantic import BaseModel

from taskgraph.core.domain_types import (
    ComputedStatus, EdgeRelation, ManualStatus, NodeType, UserId,
)
from taskgraph.core import graph_model as core


class NodeOut(BaseModel):
    id: str
    project_id: str | None
    title: str
    type: NodeType
    manual_status: ManualStatus
    computed_status: ComputedStatus
    priority: int
    due_at: datetime | None = None
    owner_id: str | None = None
    owner_name: str | None = None
    owner_ids: list[str] = []
    team_ids: list[str] = []

    @classmethod
    def from_core(
        cls,
        node: core.Node,
        computed: ComputedStatus,
        names: Mapping[UserId, str | None],
    ) -> "NodeOut":
        return cls(
            id=node.id,
            project_id=node.project_id,
            title=node.title,
            type=node.type,
            manual_status=node.manual_status,
            computed_status=computed,
            priority=node.priority,
            due_at=node.due_at,
            owner_id=node.owner_id,
            owner_name=names.get(node.owner_id) if node.owner_id else None,
            owner_ids=list(node.owner_ids),
            team_ids=list(node.team_ids),
        )


class EdgeOut(BaseModel):
    id: str | None
    from_node_id: str
    to_node_id: str
    relation: EdgeRelation

    @classmethod
    def from_core(cls, edge: core.Edge) -> "EdgeOut":
        return cls(
            id=edge.id,
            from_node_id=edge.from_node_id,
            to_node_id=edge.to_node_id,
            relation=edge.relation,
        )


class GraphData(BaseModel):
    """Complete project graph with derived statuses."""
    nodes: list[NodeOut] = []
    edges: list[EdgeOut] = []


class BlockingPairOut(BaseModel):
    blocked_node: NodeOut
    waiting_on_my_node: NodeOut


class NowData(BaseModel):
    """Per-user project view."""
    my_todos: list[NodeOut] = []
    my_waiting: list[NodeOut] = []
    im_blocking: list[BlockingPairOut] = []


class WaitingItemOut(BaseModel):
    node: NodeOut
    reason: str
    responsible: list[str] = []


class BlockingSummaryOut(BaseModel):
    node: NodeOut
    blocked_count: int
    affected_project_ids: list[str] = []


class ActionCenterData(BaseModel):
    """Org-wide dashboard for one user."""
    my_actions: list[NodeOut] = []
    waiting: list[WaitingItemOut] = []
    blocking: list[BlockingSummaryOut] = []
