"""MCP server implementation for gitgraph."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from gitgraph.config import load_settings
from gitgraph.core.discovery import find_git_dir
from gitgraph.core.exceptions import GitGraphError
from gitgraph.core.graph import load_from_repository, load_subgraph, node_to_dict
from gitgraph.core.graph.models import TreeNode
from gitgraph.core.graph.traversal import first_parent_history, get_tree_listing
from gitgraph.core.models import ObjectKind
from gitgraph.core.refs import current_branch, resolve_head
from gitgraph.core.storage import GraphRepository

server = Server("gitgraph")


def _get_repo() -> GraphRepository:
    """Get the exported graph database for the current directory."""
    git_dir = find_git_dir(Path.cwd())
    db_path = load_settings().resolve_db_path(git_dir.parent)
    if not db_path.exists():
        raise FileNotFoundError(
            f"No gitgraph export found. Run 'gitgraph export .' first.\nExpected: {db_path}"
        )
    return GraphRepository(db_path)


def _edge_to_dict(edge: Any) -> dict[str, str]:
    return {"src": edge.src, "dest": edge.dest, "label": edge.label}


def _tree_to_dict(node: TreeNode) -> dict[str, Any]:
    """Convert a TreeNode to a JSON-serializable dict."""
    return {
        "name": node.name,
        "hash": node.identifier,
        "mode": node.mode,
        "type": node.kind.value if node.kind else None,
        "depth": node.depth,
        "children": [_tree_to_dict(c) for c in node.children],
    }


@server.list_tools()  # type: ignore[no-untyped-call, untyped-decorator]
async def list_tools() -> list[Tool]:
    """List available tools."""
    return [
        Tool(
            name="gitgraph_stats",
            description=(
                "Get statistics about the exported object graph: object counts by type, "
                "edge count, dangling references and failed objects."
            ),
            inputSchema={"type": "object", "properties": {}},
        ),
        Tool(
            name="gitgraph_object",
            description=(
                "Show one object (blob, tree or commit) by identifier or unique prefix, "
                "with its decoded content, outgoing references and referrers."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "identifier": {
                        "type": "string",
                        "description": "Full 40-character identifier or a unique prefix",
                    },
                },
                "required": ["identifier"],
            },
        ),
        Tool(
            name="gitgraph_log",
            description="First-parent commit history, newest first.",
            inputSchema={
                "type": "object",
                "properties": {
                    "rev": {
                        "type": "string",
                        "description": "Commit to start from (default: HEAD)",
                    },
                    "max_count": {
                        "type": "integer",
                        "description": "Maximum commits to return (default: 20)",
                        "default": 20,
                    },
                },
            },
        ),
        Tool(
            name="gitgraph_tree",
            description=(
                "Recursive directory listing of a commit or tree. Entries whose objects are "
                "missing from the store have type null."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "rev": {
                        "type": "string",
                        "description": "Commit or tree identifier (default: HEAD)",
                    },
                    "max_depth": {
                        "type": "integer",
                        "description": "Maximum depth to list (default: 5)",
                        "default": 5,
                    },
                },
            },
        ),
        Tool(
            name="gitgraph_failures",
            description="List objects that could not be decompressed or decoded, and why.",
            inputSchema={"type": "object", "properties": {}},
        ),
    ]


@server.call_tool()  # type: ignore[untyped-decorator]
async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
    """Handle tool calls."""
    try:
        if name == "gitgraph_stats":
            result = _handle_stats()
        elif name == "gitgraph_object":
            result = _handle_object(arguments["identifier"])
        elif name == "gitgraph_log":
            result = _handle_log(arguments.get("rev"), arguments.get("max_count", 20))
        elif name == "gitgraph_tree":
            result = _handle_tree(arguments.get("rev"), arguments.get("max_depth", 5))
        elif name == "gitgraph_failures":
            result = _handle_failures()
        else:
            result = {"error": f"Unknown tool: {name}"}

        return [TextContent(type="text", text=json.dumps(result, indent=2))]

    except (FileNotFoundError, GitGraphError) as e:
        return [TextContent(type="text", text=json.dumps({"error": str(e)}))]


def _resolve(repo: GraphRepository, rev: str | None) -> str | None:
    """Expand ``rev`` (or HEAD) to a single identifier, or None."""
    if rev is None:
        return resolve_head(find_git_dir(Path.cwd()))
    matches = repo.objects.find(rev)
    if len(matches) != 1:
        return None
    return matches[0].identifier


def _handle_stats() -> dict[str, Any]:
    """Handle gitgraph_stats tool."""
    with _get_repo() as repo:
        stats = repo.get_stats()
        return {
            "objects": stats["objects"],
            "edges": stats["edges"],
            "types": stats["types"],
            "dangling": stats["dangling"],
            "failures": stats["failures"],
            "branch": current_branch(find_git_dir(Path.cwd())),
            "exported_at": str(stats["exported_at"]) if stats["exported_at"] else None,
        }


def _handle_object(identifier: str) -> dict[str, Any]:
    """Handle gitgraph_object tool."""
    with _get_repo() as repo:
        matches = repo.objects.find(identifier)
        if not matches:
            return {"error": f"No object found matching '{identifier}'"}
        if len(matches) > 1:
            return {
                "error": f"'{identifier}' is ambiguous",
                "candidates": [m.identifier for m in matches[:20]],
            }

        node = matches[0]
        return {
            **node_to_dict(node),
            "children": [_edge_to_dict(e) for e in repo.edges.get_children(node.identifier)],
            "referrers": [_edge_to_dict(e) for e in repo.edges.get_referrers(node.identifier)],
        }


def _handle_log(rev: str | None, max_count: int) -> dict[str, Any]:
    """Handle gitgraph_log tool."""
    with _get_repo() as repo:
        start = _resolve(repo, rev)
        if start is None:
            return {"error": f"Cannot resolve '{rev or 'HEAD'}' to a commit"}

        graph = load_from_repository(repo)
        history = first_parent_history(graph, start, max_count)
        return {"start": start, "commits": [node_to_dict(n) for n in history]}


def _handle_tree(rev: str | None, max_depth: int) -> dict[str, Any]:
    """Handle gitgraph_tree tool."""
    with _get_repo() as repo:
        start = _resolve(repo, rev)
        if start is None:
            return {"error": f"Cannot resolve '{rev or 'HEAD'}' to a commit or tree"}

        node = repo.objects.get(start)
        if node.kind is ObjectKind.COMMIT:
            start = node.view["tree"]

        graph = load_subgraph(repo, start, max_depth=max_depth)
        listing = get_tree_listing(graph, start, max_depth)
        if listing is None:
            return {"error": f"'{start}' is not a tree in this store"}
        return {"tree": _tree_to_dict(listing)}


def _handle_failures() -> dict[str, Any]:
    """Handle gitgraph_failures tool."""
    with _get_repo() as repo:
        failed = repo.objects.find_by_type(ObjectKind.UNREADABLE)
        return {
            "count": len(failed),
            "results": [node_to_dict(n) for n in failed],
        }


async def serve() -> None:
    """Run the MCP server."""
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())
