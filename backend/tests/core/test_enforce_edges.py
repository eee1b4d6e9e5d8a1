"""Edge enforcement tests — pure validation before an edge write.

Tests cover:
    check_self_loop, check_endpoints_exist, check_duplicate, check_cycle
    Composite validators: validate_edge_creation, validate_relation_change
"""

from taskgraph.core.domain_types import EdgeRelation
from taskgraph.core.graph_model import Edge
from taskgraph.core.enforce_edges import (
    check_self_loop,
    check_endpoints_exist,
    check_duplicate,
    check_cycle,
    validate_edge_creation,
    validate_relation_change,
)

DEPENDS_ON = EdgeRelation.DEPENDS_ON
HANDOFF_TO = EdgeRelation.HANDOFF_TO
NODES = ["A", "B", "C"]


# --- Single checks ------------------------------------------------------------

def test_self_loop_rejected_for_any_relation():
    for relation in EdgeRelation:
        error = check_self_loop(Edge("A", "A", relation))
        assert error["error_code"] == "EDGE_SELF_LOOP"
        assert error["message"].startswith("ERROR: ")


def test_missing_endpoints_listed():
    error = check_endpoints_exist(NODES, Edge("A", "Z", DEPENDS_ON))
    assert error["error_code"] == "EDGE_NODE_NOT_FOUND"
    assert error["details"] == {"missing": ["Z"]}


def test_duplicate_matches_full_key():
    existing = [Edge("A", "B", DEPENDS_ON)]
    assert check_duplicate(existing, Edge("A", "B", DEPENDS_ON))["error_code"] == "EDGE_DUPLICATE"
    assert check_duplicate(existing, Edge("A", "B", HANDOFF_TO)) is None
    assert check_duplicate(existing, Edge("B", "A", DEPENDS_ON)) is None


def test_cycle_error_carries_path():
    existing = [Edge("A", "B", DEPENDS_ON), Edge("B", "C", DEPENDS_ON)]
    error = check_cycle(existing, Edge("C", "A", DEPENDS_ON))
    assert error["error_code"] == "EDGE_CYCLE"
    assert error["details"] == {"cycle": ["A", "B", "C"]}


def test_non_dependency_back_edge_allowed():
    existing = [Edge("A", "B", DEPENDS_ON)]
    assert check_cycle(existing, Edge("B", "A", HANDOFF_TO)) is None


# --- validate_edge_creation ---------------------------------------------------

def test_valid_edge_passes():
    assert validate_edge_creation(NODES, [], Edge("A", "B", DEPENDS_ON)) is None


def test_endpoints_checked_first():
    error = validate_edge_creation(NODES, [], Edge("Z", "Z", DEPENDS_ON))
    assert error["error_code"] == "EDGE_NODE_NOT_FOUND"
    assert error["details"] == {"missing": ["Z", "Z"]}


def test_duplicate_reported_before_cycle():
    existing = [Edge("A", "B", DEPENDS_ON), Edge("B", "A", HANDOFF_TO)]
    error = validate_edge_creation(NODES, existing, Edge("A", "B", DEPENDS_ON))
    assert error["error_code"] == "EDGE_DUPLICATE"


def test_accepts_generator_of_existing_edges():
    existing = (e for e in [Edge("A", "B", DEPENDS_ON)])
    error = validate_edge_creation(NODES, existing, Edge("B", "A", DEPENDS_ON))
    assert error["error_code"] == "EDGE_CYCLE"


# --- validate_relation_change -------------------------------------------------

def test_relation_change_ignores_the_edge_itself():
    current = Edge("A", "B", HANDOFF_TO, id="e1")
    assert validate_relation_change([current], current, DEPENDS_ON) is None


def test_relation_change_into_cycle_rejected():
    current = Edge("B", "A", HANDOFF_TO, id="e2")
    existing = [Edge("A", "B", DEPENDS_ON, id="e1"), current]
    error = validate_relation_change(existing, current, DEPENDS_ON)
    assert error["error_code"] == "EDGE_CYCLE"


def test_relation_change_into_duplicate_rejected():
    current = Edge("A", "B", HANDOFF_TO, id="e2")
    existing = [Edge("A", "B", DEPENDS_ON, id="e1"), current]
    error = validate_relation_change(existing, current, DEPENDS_ON)
    assert error["error_code"] == "EDGE_DUPLICATE"
