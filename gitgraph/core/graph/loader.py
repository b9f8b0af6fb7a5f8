"""Load ObjectGraph from GraphRepository."""

from __future__ import annotations

from typing import TYPE_CHECKING

from gitgraph.core.exceptions import ObjectNotFoundError
from gitgraph.core.graph.base import ObjectGraph

if TYPE_CHECKING:
    from gitgraph.core.storage import GraphRepository


def load_from_repository(repo: GraphRepository) -> ObjectGraph:
    """Load the full exported graph. O(V + E)."""
    graph = ObjectGraph()
    for node in repo.objects.all():
        graph.add_node(node)
    for edge in repo.edges.all():
        graph.add_edge(edge)
    return graph


def load_subgraph(repo: GraphRepository, root_id: str, max_depth: int = 10) -> ObjectGraph:
    """Load only the objects reachable from ``root_id``.

    More memory efficient for large stores. Targets missing from the
    export still appear as edges.
    """
    graph = ObjectGraph()
    visited: set[str] = set()
    queue: list[tuple[str, int]] = [(root_id, 0)]

    while queue:
        identifier, depth = queue.pop(0)
        if identifier in visited or depth > max_depth:
            continue
        visited.add(identifier)

        try:
            graph.add_node(repo.objects.get(identifier))
        except ObjectNotFoundError:
            # dangling target; the edge that led here is already recorded
            pass

        for edge in repo.edges.get_children(identifier):
            graph.add_edge(edge)
            if edge.dest not in visited:
                queue.append((edge.dest, depth + 1))

    return graph
