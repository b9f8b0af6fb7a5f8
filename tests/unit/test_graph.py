"""Unit tests for graph algorithms."""

import pytest

from gitgraph.core.graph import GraphEdge, Node, ObjectGraph, RepoGraph
from gitgraph.core.graph.analysis import (
    dangling_edges,
    get_root_commits,
    get_unreferenced,
    has_cycle,
)
from gitgraph.core.graph.traversal import (
    first_parent_history,
    flatten_tree,
    get_tree_listing,
    is_ancestor,
)
from gitgraph.core.models import ObjectKind


def oid(label: str) -> str:
    """Pad a short label into a 40-character identifier."""
    return label.encode().hex().ljust(40, "0")


def make_commit(name: str, tree: str, parents: list[str]) -> tuple[Node, list[GraphEdge]]:
    """Create a test commit node and its edges."""
    identifier = oid(name)
    node = Node(identifier, ObjectKind.COMMIT, {"tree": tree, "parents": parents})
    edges = [GraphEdge(identifier, p, "parent") for p in parents]
    edges.append(GraphEdge(identifier, tree, "tree"))
    return node, edges


def make_tree(name: str, entries: list[tuple[str, str, str]]) -> tuple[Node, list[GraphEdge]]:
    """Create a test tree node from (mode, name, target) entries."""
    identifier = oid(name)
    view = {"entries": [{"mode": m, "name": n, "hash": h} for m, n, h in entries]}
    edges = [GraphEdge(identifier, h, n) for _, n, h in entries]
    return Node(identifier, ObjectKind.TREE, view), edges


def make_blob(name: str) -> Node:
    return Node(oid(name), ObjectKind.BLOB, {"size": 1, "length": 1})


def assemble(*parts: Node | tuple[Node, list[GraphEdge]]) -> ObjectGraph:
    graph = ObjectGraph()
    for part in parts:
        if isinstance(part, Node):
            graph.add_node(part)
        else:
            node, edges = part
            graph.add_node(node)
            for edge in edges:
                graph.add_edge(edge)
    return graph


@pytest.fixture
def linear_history() -> ObjectGraph:
    """Create a linear history: C3 -> C2 -> C1, all sharing tree T."""
    tree = oid("T")
    return assemble(
        make_tree("T", [("100644", "a.txt", oid("A"))]),
        make_blob("A"),
        make_commit("C1", tree, []),
        make_commit("C2", tree, [oid("C1")]),
        make_commit("C3", tree, [oid("C2")]),
    )


@pytest.fixture
def merge_history() -> ObjectGraph:
    r"""Create a merge: M has parents L and R, both descend from B (diamond shape)."""
    tree = oid("T")
    return assemble(
        make_tree("T", []),
        make_commit("B", tree, []),
        make_commit("L", tree, [oid("B")]),
        make_commit("R", tree, [oid("B")]),
        make_commit("M", tree, [oid("L"), oid("R")]),
    )


@pytest.fixture
def nested_tree() -> ObjectGraph:
    """Create root/{README, src/{main.py}, missing}."""
    return assemble(
        make_tree(
            "root",
            [
                ("100644", "README", oid("readme")),
                ("40000", "src", oid("src")),
                ("100644", "missing", oid("gone")),
            ],
        ),
        make_tree("src", [("100755", "main.py", oid("main"))]),
        make_blob("readme"),
        make_blob("main"),
    )


class TestObjectGraph:
    """Tests for ObjectGraph class."""

    def test_add_node(self) -> None:
        graph = ObjectGraph()
        graph.add_node(make_blob("A"))

        assert graph.num_nodes == 1
        assert oid("A") in graph
        assert graph.get_node(oid("A")).kind is ObjectKind.BLOB

    def test_edges_keep_declaration_order(self, merge_history: ObjectGraph) -> None:
        children = merge_history.get_children(oid("M"))
        assert [e.dest for e in children] == [oid("L"), oid("R"), oid("T")]
        assert [e.label for e in children] == ["parent", "parent", "tree"]

    def test_referrers(self, merge_history: ObjectGraph) -> None:
        referrers = {e.src for e in merge_history.get_referrers(oid("B"))}
        assert referrers == {oid("L"), oid("R")}
        assert merge_history.in_degree(oid("T")) == 4

    def test_dangling_target_in_adjacency(self, nested_tree: ObjectGraph) -> None:
        assert oid("gone") not in nested_tree
        assert nested_tree.in_degree(oid("gone")) == 1

    def test_match_prefix(self, linear_history: ObjectGraph) -> None:
        c_prefix = "43"  # hex of "C"
        matches = linear_history.match_prefix(c_prefix)
        assert matches == sorted([oid("C1"), oid("C2"), oid("C3")])
        assert linear_history.match_prefix(oid("C2")[:12].upper()) == [oid("C2")]

    def test_from_repo_graph(self) -> None:
        node, edges = make_commit("C", oid("T"), [])
        graph = ObjectGraph.from_repo_graph(RepoGraph(nodes=(node,), edges=tuple(edges)))
        assert graph.num_nodes == 1
        assert graph.num_edges == 1
        assert graph.out_degree(oid("C")) == 1


class TestHistory:
    """Tests for commit history traversal."""

    def test_first_parent_history(self, linear_history: ObjectGraph) -> None:
        history = first_parent_history(linear_history, oid("C3"))
        assert [n.identifier for n in history] == [oid("C3"), oid("C2"), oid("C1")]

    def test_max_count(self, linear_history: ObjectGraph) -> None:
        history = first_parent_history(linear_history, oid("C3"), max_count=2)
        assert len(history) == 2

    def test_follows_first_parent_of_merge(self, merge_history: ObjectGraph) -> None:
        history = first_parent_history(merge_history, oid("M"))
        assert [n.identifier for n in history] == [oid("M"), oid("L"), oid("B")]

    def test_stops_at_missing_parent(self) -> None:
        graph = assemble(make_commit("C", oid("T"), [oid("gone")]))
        assert len(first_parent_history(graph, oid("C"))) == 1

    def test_non_commit_start(self, linear_history: ObjectGraph) -> None:
        assert first_parent_history(linear_history, oid("T")) == []

    def test_is_ancestor(self, merge_history: ObjectGraph) -> None:
        assert is_ancestor(merge_history, oid("B"), oid("M"))
        assert is_ancestor(merge_history, oid("R"), oid("M"))
        assert not is_ancestor(merge_history, oid("M"), oid("B"))
        assert not is_ancestor(merge_history, oid("L"), oid("R"))

    def test_is_ancestor_of_itself(self, merge_history: ObjectGraph) -> None:
        assert is_ancestor(merge_history, oid("M"), oid("M"))


class TestTreeListing:
    """Tests for recursive tree listings."""

    def test_listing(self, nested_tree: ObjectGraph) -> None:
        root = get_tree_listing(nested_tree, oid("root"))

        assert root is not None
        assert [c.name for c in root.children] == ["README", "src", "missing"]
        src = root.children[1]
        assert src.kind is ObjectKind.TREE
        assert [c.name for c in src.children] == ["main.py"]
        assert src.children[0].mode == "100755"
        assert src.children[0].depth == 2

    def test_missing_entries(self, nested_tree: ObjectGraph) -> None:
        root = get_tree_listing(nested_tree, oid("root"))
        assert [n.name for n in root if n.is_missing] == ["missing"]

    def test_max_depth(self, nested_tree: ObjectGraph) -> None:
        root = get_tree_listing(nested_tree, oid("root"), max_depth=1)
        assert root.children[1].children == []

    def test_not_a_tree(self, nested_tree: ObjectGraph) -> None:
        assert get_tree_listing(nested_tree, oid("readme")) is None
        assert get_tree_listing(nested_tree, oid("gone")) is None

    def test_flatten(self, nested_tree: ObjectGraph) -> None:
        root = get_tree_listing(nested_tree, oid("root"))
        names = [n.name for n in flatten_tree(root, include_root=False)]
        assert names == ["README", "src", "main.py", "missing"]
        assert len(root) == 5


class TestAnalysis:
    """Tests for graph analysis functions."""

    def test_dangling_edges(self, nested_tree: ObjectGraph) -> None:
        dangling = dangling_edges(nested_tree)
        assert [(e.src, e.dest) for e in dangling] == [(oid("root"), oid("gone"))]

    def test_root_commits(self, merge_history: ObjectGraph) -> None:
        assert [n.identifier for n in get_root_commits(merge_history)] == [oid("B")]

    def test_unreferenced_commits_are_tips(self, merge_history: ObjectGraph) -> None:
        tips = get_unreferenced(merge_history, ObjectKind.COMMIT)
        assert [n.identifier for n in tips] == [oid("M")]

    def test_unreferenced_any_kind(self, nested_tree: ObjectGraph) -> None:
        assert [n.identifier for n in get_unreferenced(nested_tree)] == [oid("root")]

    def test_no_cycle(self, merge_history: ObjectGraph) -> None:
        assert not has_cycle(merge_history)

    def test_cycle_detected(self) -> None:
        graph = assemble(
            make_commit("A", oid("T"), [oid("B")]),
            make_commit("B", oid("T"), [oid("A")]),
        )
        assert has_cycle(graph)

    def test_deep_chain_does_not_recurse(self) -> None:
        parts = [make_commit("c0", oid("T"), [])]
        for i in range(1, 5000):
            parts.append(make_commit(f"c{i}", oid("T"), [oid(f"c{i - 1}")]))
        assert not has_cycle(assemble(*parts))
