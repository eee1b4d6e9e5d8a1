"""Graph Model — immutable in-memory snapshot of one project or organization.

Invariants:
    - Node, Edge, Request and GraphSnapshot are frozen: the core never mutates input
    - Edge identity is (from_node_id, to_node_id, relation), see Edge.key
    - A Request targets a user XOR a team (validated by the caller, assumed here)
    - GraphIndex is built per call and never stored at module level

Design Decisions:
    - Frozen dataclasses over ORM objects: the core is a pure function of its
      arguments, the shell converts ORM rows at the boundary (services/graph_snapshot.py)
    - owner_ids is an ordered tuple: the primary owner is kept separately, and the
      order of extra owners is preserved for display
"""

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable

from taskgraph.core.domain_types import (
    NodeId, EdgeId, RequestId, UserId, TeamId, ProjectId,
    ManualStatus, NodeType, EdgeRelation, RequestStatus,
    ACTIVE_REQUEST_STATUSES,
)


@dataclass(frozen=True)
class Node:
    """A unit of work. Computed status is never stored here."""
    id: NodeId
    manual_status: ManualStatus = ManualStatus.TODO
    type: NodeType = NodeType.TASK
    priority: int = 0
    due_at: datetime | None = None
    title: str = ""
    project_id: ProjectId | None = None
    owner_id: UserId | None = None
    owner_ids: tuple[UserId, ...] = ()
    team_ids: tuple[TeamId, ...] = ()

    def is_owned_by(self, user_id: UserId) -> bool:
        """Primary owner or one of the multi-owners."""
        return self.owner_id == user_id or user_id in self.owner_ids

    @property
    def has_assignee(self) -> bool:
        """At least one user or team is assigned."""
        return bool(self.owner_id or self.owner_ids or self.team_ids)


@dataclass(frozen=True)
class Edge:
    """Directed relation: from_node <relation> to_node."""
    from_node_id: NodeId
    to_node_id: NodeId
    relation: EdgeRelation
    id: EdgeId | None = None

    @property
    def key(self) -> tuple[NodeId, NodeId, EdgeRelation]:
        return (self.from_node_id, self.to_node_id, self.relation)

    @property
    def is_self_loop(self) -> bool:
        return self.from_node_id == self.to_node_id


@dataclass(frozen=True)
class Request:
    """Question or approval ask attached to exactly one node."""
    id: RequestId
    linked_node_id: NodeId
    status: RequestStatus = RequestStatus.OPEN
    to_user_id: UserId | None = None
    to_team: str | None = None
    from_user_id: UserId | None = None
    question: str = ""
    response_draft: str | None = None
    response_final: str | None = None
    claimed_from_team: str | None = None
    claimed_at: datetime | None = None
    approved_by_id: UserId | None = None
    approved_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        """OPEN or RESPONDED — still waiting on someone."""
        return self.status in ACTIVE_REQUEST_STATUSES

    @property
    def is_team_targeted(self) -> bool:
        return self.to_team is not None and self.to_user_id is None


@dataclass(frozen=True)
class GraphSnapshot:
    """Full {nodes, edges, requests} for one scope, as loaded by the caller."""
    nodes: tuple[Node, ...] = ()
    edges: tuple[Edge, ...] = ()
    requests: tuple[Request, ...] = ()

    @classmethod
    def of(
        cls,
        nodes: Iterable[Node] = (),
        edges: Iterable[Edge] = (),
        requests: Iterable[Request] = (),
    ) -> "GraphSnapshot":
        return cls(tuple(nodes), tuple(edges), tuple(requests))


# ─── Lookup Index ────────────────────────────────────────────────

@dataclass
class GraphIndex:
    """Function-scoped lookup maps over one snapshot."""
    nodes_by_id: dict[NodeId, Node] = field(default_factory=dict)
    _outgoing: dict[tuple[NodeId, EdgeRelation], list[Edge]] = field(
        default_factory=lambda: defaultdict(list),
    )
    _incoming: dict[tuple[NodeId, EdgeRelation], list[Edge]] = field(
        default_factory=lambda: defaultdict(list),
    )
    _requests: dict[NodeId, list[Request]] = field(
        default_factory=lambda: defaultdict(list),
    )

    def node(self, node_id: NodeId) -> Node | None:
        return self.nodes_by_id.get(node_id)

    def outgoing(self, node_id: NodeId, relation: EdgeRelation) -> list[Edge]:
        return self._outgoing.get((node_id, relation), [])

    def incoming(self, node_id: NodeId, relation: EdgeRelation) -> list[Edge]:
        return self._incoming.get((node_id, relation), [])

    def requests_for(self, node_id: NodeId) -> list[Request]:
        return self._requests.get(node_id, [])


def build_index(
    nodes: Iterable[Node],
    edges: Iterable[Edge],
    requests: Iterable[Request],
) -> GraphIndex:
    """Build lookup maps in one pass per collection. Input order is preserved."""
    index = GraphIndex()
    for node in nodes:
        index.nodes_by_id[node.id] = node
    for edge in edges:
        index._outgoing[(edge.from_node_id, edge.relation)].append(edge)
        index._incoming[(edge.to_node_id, edge.relation)].append(edge)
    for request in requests:
        index._requests[request.linked_node_id].append(request)
    return index
