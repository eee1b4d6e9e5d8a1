"""Status engine tests — priority rules, edge cases and end-to-end scenarios.

Tests cover:
    BLOCKED: unmet DEPENDS_ON targets (manual status only, not transitive)
    WAITING: active requests, APPROVAL_BY without an APPROVED request
    Passthrough: manual status when nothing holds the node
    Edge cases: dangling edges, DONE-but-blocked, DONE-but-waiting,
        non-blocking relations
"""

from taskgraph.core.domain_types import (
    ManualStatus, ComputedStatus, EdgeRelation, RequestStatus,
)
from taskgraph.core.graph_model import Node, Edge, Request
from taskgraph.core.compute_status import compute_node_status, compute_all_statuses

TODO, DOING, DONE = ManualStatus.TODO, ManualStatus.DOING, ManualStatus.DONE
DEPENDS_ON = EdgeRelation.DEPENDS_ON
APPROVAL_BY = EdgeRelation.APPROVAL_BY


def _status(node_id, nodes, edges=(), requests=()):
    return compute_all_statuses(nodes, edges, requests)[node_id]


# --- Passthrough --------------------------------------------------------------

def test_isolated_node_passes_manual_status_through():
    for manual in ManualStatus:
        assert _status("A", [Node("A", manual)]) == ComputedStatus(manual.value)


# --- BLOCKED ------------------------------------------------------------------

def test_blocked_when_dependency_not_done():
    nodes = [Node("A", DOING), Node("B", TODO)]
    edges = [Edge("A", "B", DEPENDS_ON)]
    assert _status("A", nodes, edges) == ComputedStatus.BLOCKED


def test_unblocked_when_dependency_done():
    nodes = [Node("A", DOING), Node("B", DONE)]
    edges = [Edge("A", "B", DEPENDS_ON)]
    assert _status("A", nodes, edges) == ComputedStatus.DOING


def test_blocked_if_any_dependency_unmet():
    nodes = [Node("A"), Node("B", DONE), Node("C", DOING)]
    edges = [Edge("A", "B", DEPENDS_ON), Edge("A", "C", DEPENDS_ON)]
    assert _status("A", nodes, edges) == ComputedStatus.BLOCKED


def test_blocking_is_not_transitive():
    # A -> B (DONE) -> C (TODO): B is BLOCKED but A only reads B's manual status
    nodes = [Node("A"), Node("B", DONE), Node("C")]
    edges = [Edge("A", "B", DEPENDS_ON), Edge("B", "C", DEPENDS_ON)]
    statuses = compute_all_statuses(nodes, edges, [])
    assert statuses["B"] == ComputedStatus.BLOCKED
    assert statuses["A"] == ComputedStatus.TODO


def test_dangling_dependency_is_ignored():
    nodes = [Node("A", DOING)]
    edges = [Edge("A", "ghost", DEPENDS_ON)]
    assert _status("A", nodes, edges) == ComputedStatus.DOING


def test_done_node_with_unmet_dependency_still_blocked():
    nodes = [Node("A", DONE), Node("B", TODO)]
    edges = [Edge("A", "B", DEPENDS_ON)]
    assert _status("A", nodes, edges) == ComputedStatus.BLOCKED


def test_other_relations_never_block():
    nodes = [Node("A"), Node("B")]
    edges = [
        Edge("A", "B", EdgeRelation.HANDOFF_TO),
        Edge("A", "B", EdgeRelation.NEEDS_INFO_FROM),
    ]
    assert _status("A", nodes, edges) == ComputedStatus.TODO


# --- WAITING ------------------------------------------------------------------

def test_waiting_on_open_request():
    nodes = [Node("A", DOING)]
    requests = [Request("r1", "A", RequestStatus.OPEN, to_user_id="u2")]
    assert _status("A", nodes, requests=requests) == ComputedStatus.WAITING


def test_waiting_on_responded_request():
    nodes = [Node("A")]
    requests = [Request("r1", "A", RequestStatus.RESPONDED, to_team="legal")]
    assert _status("A", nodes, requests=requests) == ComputedStatus.WAITING


def test_done_node_with_open_request_still_waiting():
    nodes = [Node("A", DONE)]
    requests = [Request("r1", "A", RequestStatus.OPEN, to_user_id="u2")]
    assert _status("A", nodes, requests=requests) == ComputedStatus.WAITING


def test_closed_request_does_not_hold():
    nodes = [Node("A", DOING)]
    requests = [Request("r1", "A", RequestStatus.CLOSED, to_user_id="u2")]
    assert _status("A", nodes, requests=requests) == ComputedStatus.DOING


def test_waiting_for_approval_until_approved():
    nodes = [Node("A", DOING), Node("M")]
    edges = [Edge("A", "M", APPROVAL_BY)]
    assert _status("A", nodes, edges) == ComputedStatus.WAITING

    approved = [Request("r1", "A", RequestStatus.APPROVED, to_user_id="boss")]
    assert _status("A", nodes, edges, approved) == ComputedStatus.DOING


def test_dangling_approval_edge_is_ignored():
    nodes = [Node("A", DOING)]
    edges = [Edge("A", "ghost", APPROVAL_BY)]
    assert _status("A", nodes, edges) == ComputedStatus.DOING


def test_blocked_wins_over_waiting():
    nodes = [Node("A"), Node("B")]
    edges = [Edge("A", "B", DEPENDS_ON)]
    requests = [Request("r1", "A", to_user_id="u2")]
    assert _status("A", nodes, edges, requests) == ComputedStatus.BLOCKED


# --- Single-node entry point --------------------------------------------------

def test_compute_node_status_matches_bulk():
    nodes = [Node("A"), Node("B", DONE), Node("C")]
    edges = [Edge("A", "B", DEPENDS_ON), Edge("C", "A", DEPENDS_ON)]
    bulk = compute_all_statuses(nodes, edges, [])
    for node in nodes:
        assert compute_node_status(node, nodes, edges, []) == bulk[node.id]


def test_inputs_not_mutated():
    nodes = [Node("A"), Node("B")]
    edges = [Edge("A", "B", DEPENDS_ON)]
    compute_all_statuses(nodes, edges, [])
    assert nodes == [Node("A"), Node("B")]
    assert edges == [Edge("A", "B", DEPENDS_ON)]


# --- Scenarios ----------------------------------------------------------------

def test_chain_unblocks_step_by_step():
    # Design <- Build <- Ship
    edges = [Edge("build", "design", DEPENDS_ON), Edge("ship", "build", DEPENDS_ON)]

    nodes = [Node("design", DOING), Node("build"), Node("ship")]
    statuses = compute_all_statuses(nodes, edges, [])
    assert statuses == {
        "design": ComputedStatus.DOING,
        "build": ComputedStatus.BLOCKED,
        "ship": ComputedStatus.BLOCKED,
    }

    nodes = [Node("design", DONE), Node("build", DOING), Node("ship")]
    statuses = compute_all_statuses(nodes, edges, [])
    assert statuses["build"] == ComputedStatus.DOING
    assert statuses["ship"] == ComputedStatus.BLOCKED


def test_request_lifecycle_scenario():
    nodes = [Node("A", DOING)]
    for status, expected in [
        (RequestStatus.OPEN, ComputedStatus.WAITING),
        (RequestStatus.RESPONDED, ComputedStatus.WAITING),
        (RequestStatus.APPROVED, ComputedStatus.DOING),
        (RequestStatus.CLOSED, ComputedStatus.DOING),
    ]:
        requests = [Request("r1", "A", status, to_user_id="u2")]
        assert _status("A", nodes, requests=requests) == expected
