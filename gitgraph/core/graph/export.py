"""Plain-dict rendering of a RepoGraph for JSON documents."""

from __future__ import annotations

from typing import Any

from gitgraph.core.graph.models import GraphEdge, Node, RepoGraph
from gitgraph.core.models import ObjectError


def error_to_dict(error: ObjectError) -> dict[str, Any]:
    return {
        "name": error.identifier,
        "kind": error.kind.value,
        "message": error.message,
        "path": str(error.path) if error.path else None,
    }


def node_to_dict(node: Node) -> dict[str, Any]:
    return {
        "name": node.identifier,
        "type": node.kind.value,
        "object": node.view,
        "error": error_to_dict(node.error) if node.error else None,
    }


def edge_to_dict(edge: GraphEdge) -> dict[str, str]:
    return {"src": edge.src, "dest": edge.dest}


def graph_to_dict(graph: RepoGraph) -> dict[str, Any]:
    """Render nodes, edges and failures as JSON-serializable data."""
    return {
        "nodes": [node_to_dict(n) for n in graph.nodes],
        "edges": [edge_to_dict(e) for e in graph.edges],
        "failures": [error_to_dict(f) for f in graph.failures],
    }
