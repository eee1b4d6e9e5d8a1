"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - NodeId, EdgeId, RequestId, UserId, TeamId, ProjectId, OrgId wrap str ids
    - All valid states encoded as Enums, no raw string matching
    - ComputedStatus is a superset of ManualStatus (adds BLOCKED, WAITING)

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders, and compare equal to
      the raw column values stored by the ORM
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

NodeId = NewType("NodeId", str)
EdgeId = NewType("EdgeId", str)
RequestId = NewType("RequestId", str)
UserId = NewType("UserId", str)
TeamId = NewType("TeamId", str)
ProjectId = NewType("ProjectId", str)
OrgId = NewType("OrgId", str)


# ─── Enums ───────────────────────────────────────────────────────

class ManualStatus(str, Enum):
    """User-set lifecycle state — maps to nodes.manual_status."""
    TODO = "TODO"
    DOING = "DOING"
    DONE = "DONE"


class ComputedStatus(str, Enum):
    """Derived display state. Never persisted."""
    BLOCKED = "BLOCKED"
    WAITING = "WAITING"
    DONE = "DONE"
    DOING = "DOING"
    TODO = "TODO"


class NodeType(str, Enum):
    TASK = "TASK"
    DECISION = "DECISION"
    BLOCKER = "BLOCKER"
    INFOREQ = "INFOREQ"


class EdgeRelation(str, Enum):
    """Typed relation; from_node <relation> to_node."""
    DEPENDS_ON = "DEPENDS_ON"
    HANDOFF_TO = "HANDOFF_TO"
    NEEDS_INFO_FROM = "NEEDS_INFO_FROM"
    APPROVAL_BY = "APPROVAL_BY"


class RequestStatus(str, Enum):
    """Request lifecycle — CLOSED is terminal."""
    OPEN = "OPEN"
    RESPONDED = "RESPONDED"
    APPROVED = "APPROVED"
    CLOSED = "CLOSED"


# ─── Derived Constants ───────────────────────────────────────────

ACTIVE_REQUEST_STATUSES = frozenset({RequestStatus.OPEN, RequestStatus.RESPONDED})
ACTIONABLE_MANUAL_STATUSES = frozenset({ManualStatus.TODO, ManualStatus.DOING})
HELD_STATUSES = frozenset({ComputedStatus.BLOCKED, ComputedStatus.WAITING})
