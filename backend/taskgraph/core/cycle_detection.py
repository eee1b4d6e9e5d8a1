"""Cycle Detection — keeps the DEPENDS_ON subgraph acyclic.

Invariants:
    - Only DEPENDS_ON proposals are checked; any other relation is never a cycle
    - Only DEPENDS_ON edges from the existing set are considered
    - A self-loop is always a cycle, decided before any search
    - find_cycle_path returns None exactly when would_create_cycle returns False
    - Never raises; the caller turns a positive result into a rejection

Design Decisions:
    - Fresh adjacency list per call, O(V+E): edge writes are rare compared to
      reads, so no cached reachability index
    - BFS from the proposed target looking for the proposed source: a path
      to -> ... -> from plus the new edge from -> to closes a loop
"""

from collections import defaultdict, deque
from typing import Iterable

from taskgraph.core.domain_types import NodeId, EdgeRelation
from taskgraph.core.graph_model import Edge


def would_create_cycle(existing_edges: Iterable[Edge], proposed: Edge) -> bool:
    """True if inserting `proposed` would close a DEPENDS_ON cycle."""
    return find_cycle_path(existing_edges, proposed) is not None


def find_cycle_path(
    existing_edges: Iterable[Edge], proposed: Edge,
) -> list[NodeId] | None:
    """Path to_node -> ... -> from_node that the proposed edge would close."""
    if proposed.relation != EdgeRelation.DEPENDS_ON:
        return None
    if proposed.is_self_loop:
        return [proposed.to_node_id]

    graph = _build_adjacency(existing_edges)
    graph[proposed.from_node_id].append(proposed.to_node_id)
    return _bfs_path(graph, proposed.to_node_id, proposed.from_node_id)


def _build_adjacency(edges: Iterable[Edge]) -> dict[NodeId, list[NodeId]]:
    """A DEPENDS_ON B becomes A -> B."""
    graph: dict[NodeId, list[NodeId]] = defaultdict(list)
    for edge in edges:
        if edge.relation == EdgeRelation.DEPENDS_ON:
            graph[edge.from_node_id].append(edge.to_node_id)
    return graph


def _bfs_path(
    graph: dict[NodeId, list[NodeId]], start: NodeId, target: NodeId,
) -> list[NodeId] | None:
    """Shortest path start -> target, or None."""
    parents: dict[NodeId, NodeId | None] = {start: None}
    queue = deque([start])

    while queue:
        current = queue.popleft()
        for neighbor in graph.get(current, ()):
            if neighbor in parents:
                continue
            parents[neighbor] = current
            if neighbor == target:
                return _unwind(parents, target)
            queue.append(neighbor)

    return None


def _unwind(parents: dict[NodeId, NodeId | None], end: NodeId) -> list[NodeId]:
    path = [end]
    while (parent := parents[path[-1]]) is not None:
        path.append(parent)
    path.reverse()
    return path
