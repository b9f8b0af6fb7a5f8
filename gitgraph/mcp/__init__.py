"""
MCP server for gitgraph.

Exposes the exported object graph to LLMs via the Model Context Protocol.

Tools:
    - gitgraph_stats: Object, edge and failure counts
    - gitgraph_object: Show one object with its references
    - gitgraph_log: First-parent commit history
    - gitgraph_tree: Recursive directory listing
    - gitgraph_failures: Objects that failed to decode

Usage:
    Export first: gitgraph export .
    Run: mcp-server-gitgraph
"""

import asyncio

from gitgraph.mcp.server import serve as _serve


def serve() -> None:
    """Entry point for the MCP server."""
    asyncio.run(_serve())


__all__ = ["serve"]
