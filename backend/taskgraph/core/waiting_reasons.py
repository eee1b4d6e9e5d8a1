"""Waiting Reasons — org-wide action center aggregation for dashboards and inboxes.

Invariants:
    - Reason derivation order: active requests, then unmet DEPENDS_ON, then
      unapproved APPROVAL_BY, else "Unknown"
    - Reasons re-derive "why" from the same edges/requests the status engine
      reads (shared predicates in compute_status.py), never from a stored code
    - responsible names are deduplicated, first-seen order kept
    - Blocking summaries group BlockingPairs per blocking node, in first-seen order
    - Pure: user display names are passed in, never looked up

Design Decisions:
    - Presentation layer on top of the status engine rather than a reason code
      inside it: the engine stays a bare status function
"""

from dataclasses import dataclass, field
from typing import Mapping

from taskgraph.core.domain_types import NodeId, UserId, ProjectId, ComputedStatus
from taskgraph.core.graph_model import Node, Request, GraphSnapshot, GraphIndex, build_index
from taskgraph.core.compute_status import (
    derive_status, unmet_dependencies, approval_targets, awaiting_approval,
)
from taskgraph.core.status_filters import (
    get_actionable_for_user, get_waiting_for_user, get_blocking_by_user,
)

REASON_RESPONSE = "Waiting for response"
REASON_APPROVAL = "Waiting for approval"
REASON_UNKNOWN = "Unknown"


@dataclass(frozen=True)
class WaitingItem:
    """A held node with a human-readable explanation."""
    node: Node
    computed_status: ComputedStatus
    reason: str
    responsible: tuple[str, ...] = ()


@dataclass(frozen=True)
class BlockingSummary:
    """One of my nodes and how many dependents it is holding up."""
    node: Node
    blocked_count: int
    affected_project_ids: tuple[ProjectId, ...] = ()


@dataclass(frozen=True)
class ActionCenter:
    my_actions: list[Node] = field(default_factory=list)
    waiting: list[WaitingItem] = field(default_factory=list)
    blocking: list[BlockingSummary] = field(default_factory=list)
    status_map: dict[NodeId, ComputedStatus] = field(default_factory=dict)


def build_action_center(
    user_id: UserId,
    snapshot: GraphSnapshot,
    user_names: Mapping[UserId, str | None] | None = None,
) -> ActionCenter:
    """Compute statuses for the whole scope and the user's three sections."""
    user_names = user_names or {}
    index = build_index(snapshot.nodes, snapshot.edges, snapshot.requests)
    status_map = {node.id: derive_status(node, index) for node in snapshot.nodes}

    my_actions = get_actionable_for_user(user_id, snapshot.nodes, status_map)
    waiting = [
        explain_waiting(node, status_map[node.id], index, user_names)
        for node in get_waiting_for_user(user_id, snapshot.nodes, status_map)
    ]
    pairs = get_blocking_by_user(user_id, snapshot.nodes, snapshot.edges)

    return ActionCenter(
        my_actions=my_actions,
        waiting=waiting,
        blocking=summarize_blocking(pairs),
        status_map=status_map,
    )


def explain_waiting(
    node: Node,
    computed_status: ComputedStatus,
    index: GraphIndex,
    user_names: Mapping[UserId, str | None],
) -> WaitingItem:
    """Attach reason + responsible parties to one held node."""
    active = [r for r in index.requests_for(node.id) if r.is_active]
    if active:
        return WaitingItem(
            node, computed_status, REASON_RESPONSE,
            _dedupe(_request_target_name(r, user_names) for r in active),
        )

    unmet = unmet_dependencies(node, index)
    if unmet:
        noun = "task" if len(unmet) == 1 else "tasks"
        return WaitingItem(
            node, computed_status, f"Blocked by {len(unmet)} {noun}",
            _dedupe(name for dep in unmet for name in _owner_names(dep, user_names)),
        )

    if awaiting_approval(node, index):
        approvers = approval_targets(node, index)
        return WaitingItem(
            node, computed_status, REASON_APPROVAL,
            _dedupe(name for a in approvers for name in _owner_names(a, user_names)),
        )

    return WaitingItem(node, computed_status, REASON_UNKNOWN)


def summarize_blocking(pairs) -> list[BlockingSummary]:
    """Group BlockingPairs by the blocking node."""
    counts: dict[NodeId, int] = {}
    projects: dict[NodeId, list[ProjectId]] = {}
    nodes: dict[NodeId, Node] = {}

    for pair in pairs:
        mine = pair.waiting_on_my_node
        nodes.setdefault(mine.id, mine)
        counts[mine.id] = counts.get(mine.id, 0) + 1
        affected = projects.setdefault(mine.id, [])
        project_id = pair.blocked_node.project_id
        if project_id is not None and project_id not in affected:
            affected.append(project_id)

    return [
        BlockingSummary(nodes[nid], counts[nid], tuple(projects[nid]))
        for nid in nodes
    ]


# ─── Helpers ─────────────────────────────────────────────────────

def _request_target_name(
    request: Request, user_names: Mapping[UserId, str | None],
) -> str:
    if request.to_user_id is not None and user_names.get(request.to_user_id):
        return user_names[request.to_user_id]
    return request.to_team or "Unassigned"


def _owner_names(node: Node, user_names: Mapping[UserId, str | None]) -> list[str]:
    """Primary owner's name, else every multi-owner's name.

    An unnamed primary owner with no extra owners names nobody.
    """
    if node.owner_id is not None and user_names.get(node.owner_id):
        return [user_names[node.owner_id]]
    return [user_names.get(uid) or "Unknown" for uid in node.owner_ids]


def _dedupe(names) -> tuple[str, ...]:
    return tuple(dict.fromkeys(names))
