"""
Storage layer: SQLite export of an object graph.

This module provides database operations split by concern:

Components:
    - GraphRepository: Main facade that coordinates all storage
    - ObjectStorage: Read/write operations for the objects table
    - EdgeStorage: Read/write operations for the edges table

Database Schema:
    objects: name, type, object (JSON view), error (JSON or NULL)
    edges: id, src, dest, label, position
    meta: key, value (exported_at, source, failures)

The database is stored at .gitgraph/graph.db relative to the project root.
"""

from gitgraph.core.storage.edges import EdgeStorage
from gitgraph.core.storage.objects import ObjectStorage
from gitgraph.core.storage.repository import GraphRepository, get_default_db_path

__all__ = [
    "GraphRepository",
    "ObjectStorage",
    "EdgeStorage",
    "get_default_db_path",
]
