"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell: dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: boundary methods are async because implementations do IO,
      but core functions that consume the snapshots are never async themselves;
      the shell orchestrates the async calls around the pure logic
"""

from typing import Protocol

from taskgraph.core.domain_types import OrgId, ProjectId, UserId
from taskgraph.core.graph_model import GraphSnapshot


class SnapshotLoader(Protocol):
    """Loads a full {nodes, edges, requests} snapshot for one scope."""
    async def load_project(self, project_id: ProjectId) -> GraphSnapshot: ...
    async def load_org(self, org_id: OrgId) -> GraphSnapshot: ...
    async def user_names(self, user_ids: set[UserId]) -> dict[UserId, str | None]: ...
