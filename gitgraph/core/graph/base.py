"""Core ObjectGraph class with adjacency list representation."""

from __future__ import annotations

from gitgraph.core.graph.models import GraphEdge, Node, RepoGraph


class ObjectGraph:
    """Directed graph of object references.

    Uses adjacency lists for O(1) neighbor lookup. Edge targets need not
    be nodes; such dangling references are kept in the adjacency lists.
    """

    __slots__ = ("_out", "_in", "_nodes", "_edges")

    def __init__(self) -> None:
        self._out: dict[str, list[GraphEdge]] = {}
        self._in: dict[str, list[GraphEdge]] = {}
        self._nodes: dict[str, Node] = {}
        self._edges: list[GraphEdge] = []

    @classmethod
    def from_repo_graph(cls, repo_graph: RepoGraph) -> ObjectGraph:
        """Index a built RepoGraph. O(V + E)."""
        graph = cls()
        for node in repo_graph.nodes:
            graph.add_node(node)
        for edge in repo_graph.edges:
            graph.add_edge(edge)
        return graph

    def add_node(self, node: Node) -> None:
        """Add an object node. O(1)."""
        self._nodes[node.identifier] = node
        self._out.setdefault(node.identifier, [])
        self._in.setdefault(node.identifier, [])

    def add_edge(self, edge: GraphEdge) -> None:
        """Add a reference edge, preserving insertion order. O(1)."""
        self._edges.append(edge)
        self._out.setdefault(edge.src, []).append(edge)
        self._in.setdefault(edge.dest, []).append(edge)

    def get_node(self, identifier: str) -> Node | None:
        """Get node by identifier. O(1)."""
        return self._nodes.get(identifier)

    def match_prefix(self, prefix: str) -> list[str]:
        """Identifiers starting with ``prefix`` (case-insensitive). O(V)."""
        prefix = prefix.lower()
        return sorted(i for i in self._nodes if i.startswith(prefix))

    def get_children(self, identifier: str) -> list[GraphEdge]:
        """Outgoing edges in the order the object declares them."""
        return list(self._out.get(identifier, []))

    def get_referrers(self, identifier: str) -> list[GraphEdge]:
        """Incoming edges from objects that reference this one."""
        return list(self._in.get(identifier, []))

    def out_degree(self, identifier: str) -> int:
        return len(self._out.get(identifier, []))

    def in_degree(self, identifier: str) -> int:
        return len(self._in.get(identifier, []))

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._nodes

    @property
    def num_nodes(self) -> int:
        return len(self._nodes)

    @property
    def num_edges(self) -> int:
        return len(self._edges)

    @property
    def nodes(self) -> dict[str, Node]:
        return self._nodes

    @property
    def edges(self) -> list[GraphEdge]:
        return self._edges

    def __repr__(self) -> str:
        return f"ObjectGraph(nodes={self.num_nodes}, edges={self.num_edges})"
