"""Status Filters — per-user views derived from the computed status map.

Invariants:
    - Ownership = primary owner OR multi-owner (Node.is_owned_by)
    - Actionable: owned, manual TODO/DOING, computed neither BLOCKED nor WAITING
    - Waiting: owned, computed BLOCKED or WAITING
    - Blocking: one pair per DEPENDS_ON edge into an owned, non-DONE node whose
      source node is assigned to someone and not owned by the user
    - Input order is preserved in every view

Design Decisions:
    - Self-blocks are excluded from Blocking: depending on your own task is
      sequential work, not a bottleneck for someone else
    - Unassigned dependents are excluded: there is nobody to notify
"""

from dataclasses import dataclass
from typing import Iterable, Mapping

from taskgraph.core.domain_types import (
    NodeId, UserId, ComputedStatus, ManualStatus, EdgeRelation,
    ACTIONABLE_MANUAL_STATUSES, HELD_STATUSES,
)
from taskgraph.core.graph_model import Node, Edge, build_index


@dataclass(frozen=True)
class BlockingPair:
    """blocked_node DEPENDS_ON waiting_on_my_node."""
    blocked_node: Node
    waiting_on_my_node: Node


def get_actionable_for_user(
    user_id: UserId,
    nodes: Iterable[Node],
    status_map: Mapping[NodeId, ComputedStatus],
) -> list[Node]:
    """'My todos' — owned work that can be picked up right now."""
    actionable = []
    for node in nodes:
        if not node.is_owned_by(user_id):
            continue
        computed = status_map.get(node.id)
        if computed is None or computed in HELD_STATUSES:
            continue
        if node.manual_status in ACTIONABLE_MANUAL_STATUSES:
            actionable.append(node)
    return actionable


def get_waiting_for_user(
    user_id: UserId,
    nodes: Iterable[Node],
    status_map: Mapping[NodeId, ComputedStatus],
) -> list[Node]:
    """'My waiting' — owned work held up by dependencies or requests."""
    return [
        node for node in nodes
        if node.is_owned_by(user_id) and status_map.get(node.id) in HELD_STATUSES
    ]


def get_blocking_by_user(
    user_id: UserId,
    nodes: Iterable[Node],
    edges: Iterable[Edge],
) -> list[BlockingPair]:
    """'I'm blocking' — other people's nodes that depend on my unfinished nodes."""
    nodes = list(nodes)
    index = build_index(nodes, edges, ())
    pairs = []

    for mine in nodes:
        if not mine.is_owned_by(user_id) or mine.manual_status == ManualStatus.DONE:
            continue
        for edge in index.incoming(mine.id, EdgeRelation.DEPENDS_ON):
            blocked = index.node(edge.from_node_id)
            if blocked is None:
                continue
            if blocked.is_owned_by(user_id) or not blocked.has_assignee:
                continue
            pairs.append(BlockingPair(blocked_node=blocked, waiting_on_my_node=mine))

    return pairs
