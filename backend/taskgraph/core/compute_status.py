"""Status Engine — derives each node's computed status from the graph snapshot.

Invariants:
    - Priority: BLOCKED > WAITING > manual status passthrough (first match wins)
    - BLOCKED looks only at the immediate DEPENDS_ON targets' MANUAL status,
      never their computed status and never transitively
    - WAITING (A): a linked request is OPEN or RESPONDED
    - WAITING (B): an outgoing APPROVAL_BY edge exists and no linked request is APPROVED
    - Edges whose target is missing from the snapshot are skipped, never raised on
    - Pure: no IO, no mutation of inputs, no module-level state

Design Decisions:
    - Each node's status depends only on its neighbours' manual state, so
      evaluation order does not matter and compute_all_statuses needs no memo
    - A DONE node can still resolve to BLOCKED or WAITING when a stale edge or
      request references it; kept as-is so callers can see the inconsistency
"""

from typing import Iterable

from taskgraph.core.domain_types import (
    NodeId, ManualStatus, ComputedStatus, EdgeRelation, RequestStatus,
)
from taskgraph.core.graph_model import Node, Edge, Request, GraphIndex, build_index


def compute_node_status(
    node: Node,
    all_nodes: Iterable[Node],
    all_edges: Iterable[Edge],
    all_requests: Iterable[Request],
) -> ComputedStatus:
    """Compute one node's status against the full snapshot."""
    index = build_index(all_nodes, all_edges, all_requests)
    return derive_status(node, index)


def compute_all_statuses(
    nodes: Iterable[Node],
    edges: Iterable[Edge],
    requests: Iterable[Request],
) -> dict[NodeId, ComputedStatus]:
    """Compute statuses for every node in the snapshot. Index built once."""
    nodes = list(nodes)
    index = build_index(nodes, edges, requests)
    return {node.id: derive_status(node, index) for node in nodes}


def derive_status(node: Node, index: GraphIndex) -> ComputedStatus:
    """Apply the priority rules to one node using a prebuilt index."""
    if unmet_dependencies(node, index):
        return ComputedStatus.BLOCKED
    if has_active_request(node, index):
        return ComputedStatus.WAITING
    if awaiting_approval(node, index):
        return ComputedStatus.WAITING
    return ComputedStatus(node.manual_status.value)


# ─── Rule Predicates ─────────────────────────────────────────────
# Shared with waiting_reasons.py so the "why" stays in step with the "what".

def unmet_dependencies(node: Node, index: GraphIndex) -> list[Node]:
    """DEPENDS_ON targets whose manual status is not DONE, in edge order."""
    unmet = []
    for edge in index.outgoing(node.id, EdgeRelation.DEPENDS_ON):
        dependency = index.node(edge.to_node_id)
        if dependency is None:
            continue
        if dependency.manual_status != ManualStatus.DONE:
            unmet.append(dependency)
    return unmet


def has_active_request(node: Node, index: GraphIndex) -> bool:
    return any(r.is_active for r in index.requests_for(node.id))


def awaiting_approval(node: Node, index: GraphIndex) -> bool:
    """APPROVAL_BY edge present and no APPROVED request on the node."""
    if not approval_targets(node, index):
        return False
    return not any(
        r.status == RequestStatus.APPROVED for r in index.requests_for(node.id)
    )


def approval_targets(node: Node, index: GraphIndex) -> list[Node]:
    """Resolved APPROVAL_BY targets. Dangling edges are skipped."""
    targets = []
    for edge in index.outgoing(node.id, EdgeRelation.APPROVAL_BY):
        target = index.node(edge.to_node_id)
        if target is not None:
            targets.append(target)
    return targets
