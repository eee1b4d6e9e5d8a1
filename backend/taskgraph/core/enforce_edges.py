"""Edge Mutation Enforcement — validates graph invariants before an edge write.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Return error dict on violation, None on success
    - No self-loops, no duplicate (from, to, relation), no DEPENDS_ON cycles
    - Both endpoints must exist in the same project snapshot
    - A relation change is validated as if the edge were removed and re-added

Design Decisions:
    - Error dicts over exceptions: same shape as every other enforce_* module,
      the shell maps them to InvalidMutationError
    - Cycle errors carry the discovered path for the user-facing message
"""

from typing import Iterable

from taskgraph.core.domain_types import NodeId, EdgeRelation
from taskgraph.core.graph_model import Edge
from taskgraph.core.cycle_detection import find_cycle_path


def check_self_loop(proposed: Edge) -> dict | None:
    if proposed.is_self_loop:
        return _error("EDGE_SELF_LOOP", "Cannot create edge to itself.")
    return None


def check_endpoints_exist(
    node_ids: Iterable[NodeId], proposed: Edge,
) -> dict | None:
    """Both nodes must belong to the snapshot (i.e. the same project)."""
    known = set(node_ids)
    missing = [
        nid for nid in (proposed.from_node_id, proposed.to_node_id)
        if nid not in known
    ]
    if missing:
        return _error(
            "EDGE_NODE_NOT_FOUND",
            f"Node(s) not found in this project: {', '.join(missing)}.",
            missing=missing,
        )
    return None


def check_duplicate(existing_edges: Iterable[Edge], proposed: Edge) -> dict | None:
    if any(edge.key == proposed.key for edge in existing_edges):
        return _error(
            "EDGE_DUPLICATE",
            f"Edge already exists ({proposed.relation.value}).",
        )
    return None


def check_cycle(existing_edges: Iterable[Edge], proposed: Edge) -> dict | None:
    """DEPENDS_ON edges cannot form cycles."""
    path = find_cycle_path(existing_edges, proposed)
    if path is not None:
        return _error(
            "EDGE_CYCLE",
            "Cannot create edge: would create a dependency cycle.",
            cycle=path,
        )
    return None


# --- Composite validators -----------------------------------------------------

def validate_edge_creation(
    node_ids: Iterable[NodeId],
    existing_edges: Iterable[Edge],
    proposed: Edge,
) -> dict | None:
    """Validate a new edge against the project snapshot."""
    existing_edges = list(existing_edges)
    return (
        check_endpoints_exist(node_ids, proposed)
        or check_self_loop(proposed)
        or check_duplicate(existing_edges, proposed)
        or check_cycle(existing_edges, proposed)
    )


def validate_relation_change(
    existing_edges: Iterable[Edge],
    current: Edge,
    new_relation: EdgeRelation,
) -> dict | None:
    """Validate changing `current` to `new_relation`. The edge itself is excluded."""
    others = [edge for edge in existing_edges if edge.key != current.key]
    proposed = Edge(
        current.from_node_id, current.to_node_id, new_relation, id=current.id,
    )
    return (
        check_self_loop(proposed)
        or check_duplicate(others, proposed)
        or check_cycle(others, proposed)
    )


# --- Helper -------------------------------------------------------------------

def _error(code: str, message: str, **details: object) -> dict:
    """Construct a standard error dict."""
    error = {
        "status": "error",
        "error_code": code,
        "message": f"ERROR: {message}",
    }
    if details:
        error["details"] = details
    return error
