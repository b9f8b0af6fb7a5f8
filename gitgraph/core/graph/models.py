"""Data models for graph operations."""

from __future__ import annotations

import json
import sqlite3
from collections import Counter
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from gitgraph.core.models import ErrorKind, ObjectError, ObjectKind

PARENT_LABEL = "parent"
TREE_LABEL = "tree"


@dataclass(frozen=True)
class Node:
    """One object in the graph with its kind-specific decoded view."""

    identifier: str
    kind: ObjectKind
    view: dict[str, Any] = field(default_factory=dict, hash=False)
    error: ObjectError | None = None

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> Node:
        """Create a Node from an ``objects`` table row."""
        error = None
        if row["error"]:
            data = json.loads(row["error"])
            error = ObjectError(
                identifier=row["name"],
                kind=ErrorKind(data["kind"]),
                message=data["message"],
                path=Path(data["path"]) if data.get("path") else None,
            )
        return cls(
            identifier=row["name"],
            kind=ObjectKind(row["type"]),
            view=json.loads(row["object"]) if row["object"] else {},
            error=error,
        )


@dataclass(frozen=True)
class GraphEdge:
    """A directed reference between two objects.

    ``dest`` may name an object that is not in the graph.
    """

    src: str
    dest: str
    label: str = ""


@dataclass(frozen=True)
class RepoGraph:
    """Nodes, edges and failures produced by one build pass."""

    nodes: tuple[Node, ...] = ()
    edges: tuple[GraphEdge, ...] = ()
    failures: tuple[ObjectError, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.failures

    def node(self, identifier: str) -> Node | None:
        for node in self.nodes:
            if node.identifier == identifier:
                return node
        return None

    def edges_from(self, identifier: str) -> list[GraphEdge]:
        return [edge for edge in self.edges if edge.src == identifier]

    def failure_counts(self) -> Counter[ErrorKind]:
        return Counter(failure.kind for failure in self.failures)

    def kind_counts(self) -> Counter[ObjectKind]:
        return Counter(node.kind for node in self.nodes)

    def __repr__(self) -> str:
        return (
            f"RepoGraph(nodes={len(self.nodes)}, edges={len(self.edges)}, "
            f"failures={len(self.failures)})"
        )


@dataclass
class TreeNode:
    """A node in a recursive directory listing."""

    identifier: str
    name: str
    mode: str
    kind: ObjectKind | None
    depth: int
    children: list[TreeNode] = field(default_factory=list)

    @property
    def is_missing(self) -> bool:
        """Entry points at an object not present in the graph."""
        return self.kind is None

    def __iter__(self) -> Iterator[TreeNode]:
        """Pre-order traversal."""
        yield self
        for child in self.children:
            yield from child

    def __len__(self) -> int:
        """Total nodes in subtree."""
        return 1 + sum(len(c) for c in self.children)
