"""
gitgraph: Object graph extraction from git loose object stores.

gitgraph reads ``.git/objects`` directly, without the git executable, and
builds a node/edge graph of blobs, trees and commits, enabling you to:
- Export the whole object graph as JSON or SQLite
- Walk first-parent history and directory listings
- Find corrupt, truncated or dangling objects

Usage:
    from gitgraph.core.discovery import find_git_dir, objects_dir
    from gitgraph.core.graph import build_repository_graph

    git_dir = find_git_dir(Path("."))
    graph = build_repository_graph(objects_dir(git_dir))
    print(len(graph.nodes), len(graph.edges), graph.failure_counts())
"""

__version__ = "0.1.0"
