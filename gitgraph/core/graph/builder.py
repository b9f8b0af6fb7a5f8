"""Turn loaded objects into graph nodes and edges."""

from __future__ import annotations

import logging
import zlib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from gitgraph.core.decoding import decode_commit, decode_tree
from gitgraph.core.discovery import iter_object_paths
from gitgraph.core.exceptions import ObjectDecodeError
from gitgraph.core.graph.models import PARENT_LABEL, TREE_LABEL, GraphEdge, Node, RepoGraph
from gitgraph.core.loader import Decompressor, ProgressCallback, load_objects
from gitgraph.core.models import (
    Commit,
    GitObject,
    LoadResult,
    ObjectError,
    ObjectKind,
    TreeEntry,
)

logger = logging.getLogger(__name__)


def tree_view(entries: list[TreeEntry]) -> dict[str, Any]:
    return {
        "entries": [
            {"mode": e.mode, "name": e.display_name, "hash": e.target} for e in entries
        ]
    }


def commit_view(commit: Commit) -> dict[str, Any]:
    return {"tree": commit.tree, "parents": list(commit.parents)}


def _opaque_view(obj: GitObject) -> dict[str, Any]:
    view: dict[str, Any] = {"size": obj.declared_size, "length": len(obj.content)}
    if obj.kind is ObjectKind.UNKNOWN:
        view["type"] = obj.type_name
    return view


def _decode(obj: GitObject) -> tuple[dict[str, Any], list[GraphEdge]]:
    """Decode one object's body into its view and its outgoing edges.

    Commit edges are parents in declaration order followed by the tree;
    tree edges follow entry order.
    """
    if obj.kind is ObjectKind.COMMIT:
        commit = decode_commit(obj.content)
        edges = [GraphEdge(obj.identifier, p, PARENT_LABEL) for p in commit.parents]
        edges.append(GraphEdge(obj.identifier, commit.tree, TREE_LABEL))
        return commit_view(commit), edges

    if obj.kind is ObjectKind.TREE:
        entries = decode_tree(obj.content)
        edges = [GraphEdge(obj.identifier, e.target, e.display_name) for e in entries]
        return tree_view(entries), edges

    return _opaque_view(obj), []


def _failed_node(error: ObjectError, type_name: str | None = None) -> Node:
    view = {"type": type_name} if type_name else {}
    return Node(error.identifier, ObjectKind.UNREADABLE, view, error)


def build_graph(result: LoadResult | Mapping[str, GitObject]) -> RepoGraph:
    """Build nodes and edges from a complete, frozen set of loaded objects.

    Every object gets a node. Objects whose body fails to decode become
    UNREADABLE nodes with the error attached; the pass itself never fails.
    Load failures carried by ``result`` are turned into UNREADABLE nodes too.
    """
    if isinstance(result, LoadResult):
        objects, load_failures = result.objects, result.failures
    else:
        objects, load_failures = result, ()

    nodes: list[Node] = []
    edges: list[GraphEdge] = []
    failures: list[ObjectError] = list(load_failures)

    for identifier in sorted(objects):
        obj = objects[identifier]
        try:
            view, obj_edges = _decode(obj)
        except ObjectDecodeError as e:
            error = ObjectError(identifier, e.error_kind, str(e), obj.path)
            logger.warning("Failed to decode %s %s: %s", obj.type_name, identifier, e)
            failures.append(error)
            nodes.append(_failed_node(error, obj.type_name))
            continue
        nodes.append(Node(identifier, obj.kind, view))
        edges.extend(obj_edges)

    seen = set(objects)
    for error in load_failures:
        # one node per identifier; further failures stay in ``failures``
        if error.identifier not in seen:
            seen.add(error.identifier)
            nodes.append(_failed_node(error))

    if failures:
        logger.info("Graph built with %d failed objects", len(failures))
    return RepoGraph(nodes=tuple(nodes), edges=tuple(edges), failures=tuple(failures))


def build_repository_graph(
    objects_root: Path,
    decompress: Decompressor = zlib.decompress,
    workers: int = 1,
    on_progress: ProgressCallback | None = None,
) -> RepoGraph:
    """Discover, load and build the graph of a whole objects directory."""
    result = load_objects(
        iter_object_paths(objects_root),
        decompress=decompress,
        workers=workers,
        on_progress=on_progress,
    )
    return build_graph(result)
