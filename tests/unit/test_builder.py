"""Unit tests for graph building."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

from gitgraph.core.graph import GraphEdge, build_graph, build_repository_graph
from gitgraph.core.models import ErrorKind, GitObject, LoadResult, ObjectError, ObjectKind

if TYPE_CHECKING:
    from conftest import LooseStore

H1 = "1" * 40
H2 = "2" * 40
TREE_ID = "3" * 40
P1 = "a" * 40
P2 = "b" * 40
SELF = "f" * 40


def _obj(identifier: str, type_name: str, content: bytes) -> GitObject:
    return GitObject(
        identifier=identifier,
        kind=ObjectKind.from_type_name(type_name),
        type_name=type_name,
        declared_size=len(content),
        size_field=str(len(content)),
        content=content,
    )


class TestTreeEdges:
    """Tests for edges produced by tree objects."""

    def test_edges_in_entry_order(self, tree_encoder: Callable[..., bytes]) -> None:
        body = tree_encoder([("100644", "a.txt", H1), ("40000", "b", H2)])
        graph = build_graph({SELF: _obj(SELF, "tree", body)})

        assert [(e.src, e.dest) for e in graph.edges] == [(SELF, H1), (SELF, H2)]
        assert [e.label for e in graph.edges] == ["a.txt", "b"]

    def test_tree_view(self, tree_encoder: Callable[..., bytes]) -> None:
        body = tree_encoder([("100644", "a.txt", H1), ("40000", "b", H2)])
        graph = build_graph({SELF: _obj(SELF, "tree", body)})

        node = graph.node(SELF)
        assert node is not None
        assert node.kind is ObjectKind.TREE
        assert node.view["entries"] == [
            {"mode": "100644", "name": "a.txt", "hash": H1},
            {"mode": "40000", "name": "b", "hash": H2},
        ]

    def test_empty_tree(self) -> None:
        graph = build_graph({SELF: _obj(SELF, "tree", b"")})
        assert graph.edges == ()
        assert graph.node(SELF).view == {"entries": []}


class TestCommitEdges:
    """Tests for edges produced by commit objects."""

    def test_parents_then_tree(self, commit_encoder: Callable[..., bytes]) -> None:
        body = commit_encoder(TREE_ID, [P1, P2])
        graph = build_graph({SELF: _obj(SELF, "commit", body)})

        assert graph.edges == (
            GraphEdge(SELF, P1, "parent"),
            GraphEdge(SELF, P2, "parent"),
            GraphEdge(SELF, TREE_ID, "tree"),
        )

    def test_root_commit_has_only_tree_edge(self, commit_encoder: Callable[..., bytes]) -> None:
        graph = build_graph({SELF: _obj(SELF, "commit", commit_encoder(TREE_ID))})
        assert [(e.src, e.dest) for e in graph.edges] == [(SELF, TREE_ID)]
        assert graph.node(SELF).view == {"tree": TREE_ID, "parents": []}


class TestOpaqueObjects:
    """Tests for blobs and unrecognised types."""

    def test_blob_has_no_edges(self) -> None:
        graph = build_graph({SELF: _obj(SELF, "blob", b"hello")})
        assert graph.edges == ()
        assert graph.node(SELF).view == {"size": 5, "length": 5}

    def test_unknown_type_keeps_type_name(self) -> None:
        graph = build_graph({SELF: _obj(SELF, "tag", b"object x\n")})
        node = graph.node(SELF)
        assert node.kind is ObjectKind.UNKNOWN
        assert node.view["type"] == "tag"
        assert graph.edges == ()


class TestFailures:
    """Tests that per-object failures never abort the pass."""

    def test_bad_tree_becomes_unreadable(self, tree_encoder: Callable[..., bytes]) -> None:
        good = tree_encoder([("100644", "a", H1)])
        objects = {
            H2: _obj(H2, "tree", good[:-3]),
            SELF: _obj(SELF, "tree", good),
        }

        graph = build_graph(objects)

        bad = graph.node(H2)
        assert bad.kind is ObjectKind.UNREADABLE
        assert bad.error is not None
        assert bad.error.kind is ErrorKind.TRUNCATED_TREE
        assert bad.view == {"type": "tree"}
        assert graph.edges == (GraphEdge(SELF, H1, "a"),)
        assert not graph.ok

    def test_bad_commit_becomes_unreadable(self) -> None:
        graph = build_graph({SELF: _obj(SELF, "commit", b"nonsense\n")})
        assert graph.node(SELF).kind is ObjectKind.UNREADABLE
        assert graph.failure_counts()[ErrorKind.MALFORMED_COMMIT] == 1

    def test_load_failures_become_nodes(self) -> None:
        failure = ObjectError(H1, ErrorKind.CORRUPT_OBJECT, "bad stream")
        result = LoadResult.freeze({SELF: _obj(SELF, "blob", b"x")}, [failure])

        graph = build_graph(result)

        assert len(graph.nodes) == 2
        assert graph.node(H1).kind is ObjectKind.UNREADABLE
        assert graph.node(H1).error == failure
        assert graph.failures == (failure,)

    def test_one_node_per_failed_identifier(self) -> None:
        first = ObjectError(H1, ErrorKind.CORRUPT_OBJECT, "bad stream", Path("C1/x"))
        second = ObjectError(H1, ErrorKind.DUPLICATE_OBJECT, "Also stored at C1/x", Path("c1/x"))
        copy = ObjectError(SELF, ErrorKind.DUPLICATE_OBJECT, "Also stored elsewhere")
        result = LoadResult.freeze({SELF: _obj(SELF, "blob", b"x")}, [first, second, copy])

        graph = build_graph(result)

        assert [n.identifier for n in graph.nodes] == [SELF, H1]
        assert graph.node(SELF).kind is ObjectKind.BLOB
        assert graph.node(H1).error == first
        assert graph.failures == (first, second, copy)

    def test_failure_counts(self) -> None:
        result = LoadResult.freeze(
            {SELF: _obj(SELF, "tree", b"100644 a")},
            [
                ObjectError(H1, ErrorKind.CORRUPT_OBJECT, "x"),
                ObjectError(H2, ErrorKind.MALFORMED_HEADER, "y"),
            ],
        )
        counts = build_graph(result).failure_counts()
        assert counts[ErrorKind.CORRUPT_OBJECT] == 1
        assert counts[ErrorKind.MALFORMED_HEADER] == 1
        assert counts[ErrorKind.TRUNCATED_TREE] == 1


class TestRepositoryGraph:
    """End-to-end builds from a loose object store."""

    def test_blob_tree_commit(self, store: LooseStore) -> None:
        blob = store.blob(b"hello\n")
        tree = store.tree([("100644", "hello.txt", blob)])
        commit = store.commit(tree)

        graph = build_repository_graph(store.objects)

        assert len(graph.nodes) == 3
        assert set(graph.edges) == {
            GraphEdge(commit, tree, "tree"),
            GraphEdge(tree, blob, "hello.txt"),
        }
        assert graph.ok

    def test_nodes_in_identifier_order(self, store: LooseStore) -> None:
        ids = [store.blob(f"{i}".encode()) for i in range(6)]
        graph = build_repository_graph(store.objects)
        assert [n.identifier for n in graph.nodes] == sorted(ids)

    def test_repeated_builds_are_identical(self, store: LooseStore) -> None:
        blob = store.blob(b"x")
        tree = store.tree([("100644", "x", blob), ("40000", "sub", "9" * 40)])
        store.commit(tree, ["8" * 40])
        store.write_raw("cc" * 20, b"garbage")

        first = build_repository_graph(store.objects)
        second = build_repository_graph(store.objects, workers=3)

        assert first == second

    def test_dangling_targets_are_kept(self, store: LooseStore) -> None:
        tree = store.tree([("100644", "gone.txt", H1)])
        graph = build_repository_graph(store.objects)

        assert graph.edges == (GraphEdge(tree, H1, "gone.txt"),)
        assert graph.node(H1) is None

    def test_empty_store(self, temp_dir: Path) -> None:
        graph = build_repository_graph(temp_dir / "objects")
        assert graph.nodes == ()
        assert graph.edges == ()
        assert graph.ok
