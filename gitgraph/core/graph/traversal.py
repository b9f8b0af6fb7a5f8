"""History and directory traversal over an ObjectGraph."""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING

from gitgraph.core.graph.models import PARENT_LABEL, TreeNode
from gitgraph.core.models import ObjectKind

if TYPE_CHECKING:
    from gitgraph.core.graph.base import ObjectGraph
    from gitgraph.core.graph.models import Node


def _parents(graph: ObjectGraph, commit_id: str) -> list[str]:
    return [e.dest for e in graph.get_children(commit_id) if e.label == PARENT_LABEL]


def first_parent_history(
    graph: ObjectGraph, start_id: str, max_count: int | None = None
) -> list[Node]:
    """Follow first parents from a commit, newest first.

    Stops at a root commit, at a parent missing from the graph, or after
    ``max_count`` commits.
    """
    history: list[Node] = []
    seen: set[str] = set()
    current: str | None = start_id

    while current is not None and current not in seen:
        if max_count is not None and len(history) >= max_count:
            break
        node = graph.get_node(current)
        if node is None or node.kind is not ObjectKind.COMMIT:
            break
        seen.add(current)
        history.append(node)
        parents = _parents(graph, current)
        current = parents[0] if parents else None

    return history


def is_ancestor(graph: ObjectGraph, ancestor_id: str, descendant_id: str) -> bool:
    """Check whether ``ancestor_id`` is reachable through parent links. BFS, O(V + E)."""
    if ancestor_id == descendant_id:
        return ancestor_id in graph

    queue: deque[str] = deque([descendant_id])
    visited: set[str] = {descendant_id}

    while queue:
        current = queue.popleft()
        for parent_id in _parents(graph, current):
            if parent_id == ancestor_id:
                return True
            if parent_id not in visited:
                visited.add(parent_id)
                queue.append(parent_id)

    return False


def get_tree_listing(graph: ObjectGraph, tree_id: str, max_depth: int = 32) -> TreeNode | None:
    """Build a recursive directory listing rooted at a tree.

    Children keep the tree's on-disk entry order. Entries whose target is
    absent from the graph appear with ``kind=None``.
    """
    root = graph.get_node(tree_id)
    if root is None or root.kind is not ObjectKind.TREE:
        return None

    def dfs(identifier: str, name: str, mode: str, depth: int) -> TreeNode:
        node = graph.get_node(identifier)
        tree_node = TreeNode(
            identifier=identifier,
            name=name,
            mode=mode,
            kind=node.kind if node else None,
            depth=depth,
        )
        if node is None or node.kind is not ObjectKind.TREE or depth >= max_depth:
            return tree_node

        for entry in node.view.get("entries", []):
            tree_node.children.append(dfs(entry["hash"], entry["name"], entry["mode"], depth + 1))
        return tree_node

    return dfs(tree_id, "", "40000", 0)


def flatten_tree(root: TreeNode, include_root: bool = True) -> list[TreeNode]:
    """Flatten tree to list in pre-order. O(n)."""
    result: list[TreeNode] = []
    if include_root:
        result.append(root)
    for child in root.children:
        result.extend(flatten_tree(child, include_root=True))
    return result
