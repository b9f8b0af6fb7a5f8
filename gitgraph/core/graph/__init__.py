"""
Object graph construction and queries.

This module turns loaded objects into a node/edge graph and answers
questions about it:

Construction:
    - build_graph(): Decode trees and commits into nodes and edges
    - build_repository_graph(): Discovery, loading and building in one call

Data Structures:
    - RepoGraph: Immutable result of a build pass (nodes, edges, failures)
    - ObjectGraph: Adjacency list representation with O(1) lookups
    - TreeNode: Recursive directory listing

Algorithms:
    - traversal: first-parent history, ancestry, directory listings
    - analysis: dangling references, root commits, unreferenced objects, cycles

Loading:
    - load_from_repository(): Load full graph from SQLite
    - load_subgraph(): Load only reachable nodes (memory efficient)
"""

from gitgraph.core.graph.base import ObjectGraph
from gitgraph.core.graph.builder import build_graph, build_repository_graph
from gitgraph.core.graph.export import graph_to_dict, node_to_dict
from gitgraph.core.graph.loader import load_from_repository, load_subgraph
from gitgraph.core.graph.models import GraphEdge, Node, RepoGraph, TreeNode

__all__ = [
    "GraphEdge",
    "Node",
    "ObjectGraph",
    "RepoGraph",
    "TreeNode",
    "build_graph",
    "build_repository_graph",
    "graph_to_dict",
    "load_from_repository",
    "load_subgraph",
    "node_to_dict",
]
