"""Status Transitions — compares status maps taken before and after a mutation.

Invariants:
    - Pure: the core keeps no history, the caller supplies both maps
    - Only nodes present in both maps are compared (created/deleted nodes are not transitions)
    - Output follows the iteration order of `after`

Design Decisions:
    - "Unblocked" means leaving BLOCKED or WAITING for any other status; this is
      the hook the shell uses for notification side effects
"""

from dataclasses import dataclass
from typing import Mapping

from taskgraph.core.domain_types import NodeId, ComputedStatus, HELD_STATUSES


@dataclass(frozen=True)
class StatusTransition:
    node_id: NodeId
    before: ComputedStatus
    after: ComputedStatus

    @property
    def is_unblock(self) -> bool:
        return self.before in HELD_STATUSES and self.after not in HELD_STATUSES


def diff_statuses(
    before: Mapping[NodeId, ComputedStatus],
    after: Mapping[NodeId, ComputedStatus],
) -> list[StatusTransition]:
    return [
        StatusTransition(node_id, before[node_id], status)
        for node_id, status in after.items()
        if node_id in before and before[node_id] != status
    ]


def newly_unblocked(
    before: Mapping[NodeId, ComputedStatus],
    after: Mapping[NodeId, ComputedStatus],
) -> list[NodeId]:
    return [t.node_id for t in diff_statuses(before, after) if t.is_unblock]
