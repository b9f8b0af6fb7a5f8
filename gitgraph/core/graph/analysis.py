"""Graph analysis: dangling references, root commits, unreferenced objects, cycles."""

from __future__ import annotations

from typing import TYPE_CHECKING

from gitgraph.core.models import ObjectKind

if TYPE_CHECKING:
    from gitgraph.core.graph.base import ObjectGraph
    from gitgraph.core.graph.models import GraphEdge, Node


def dangling_edges(graph: ObjectGraph) -> list[GraphEdge]:
    """Edges whose target is not a loaded object. O(E)."""
    return [edge for edge in graph.edges if edge.dest not in graph]


def get_root_commits(graph: ObjectGraph) -> list[Node]:
    """Commits without parents. O(V)."""
    return [
        node
        for node in graph.nodes.values()
        if node.kind is ObjectKind.COMMIT and not node.view.get("parents")
    ]


def get_unreferenced(graph: ObjectGraph, kind: ObjectKind | None = None) -> list[Node]:
    """Nodes nothing points at (in-degree = 0), optionally of one kind. O(V).

    For commits these are branch tips or orphaned commits.
    """
    return [
        node
        for identifier, node in graph.nodes.items()
        if graph.in_degree(identifier) == 0 and (kind is None or node.kind is kind)
    ]


def has_cycle(graph: ObjectGraph) -> bool:
    """Check for cycles using three-color DFS. O(V + E).

    A content-addressed store cannot contain cycles, so True means the
    loaded objects are inconsistent. Iterative, since commit chains can be
    far deeper than the recursion limit.
    """
    white, gray, black = 0, 1, 2
    color: dict[str, int] = {v: white for v in graph.nodes}

    for start in graph.nodes:
        if color[start] != white:
            continue
        color[start] = gray
        stack = [(start, iter(graph.get_children(start)))]
        while stack:
            node_id, children = stack[-1]
            for edge in children:
                child = edge.dest
                if child not in color:
                    continue
                if color[child] == gray:
                    return True
                if color[child] == white:
                    color[child] = gray
                    stack.append((child, iter(graph.get_children(child))))
                    break
            else:
                color[node_id] = black
                stack.pop()

    return False
