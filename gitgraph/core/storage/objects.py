"""Object storage operations."""

from __future__ import annotations

import json
import sqlite3
from collections.abc import Callable, Iterable

from gitgraph.core.exceptions import ObjectNotFoundError
from gitgraph.core.graph.export import error_to_dict
from gitgraph.core.graph.models import Node
from gitgraph.core.models import ObjectKind


class ObjectStorage:
    """Storage operations for graph nodes."""

    def __init__(self, get_connection: Callable[[], sqlite3.Connection]) -> None:
        self._get_connection = get_connection

    def insert_many(self, nodes: Iterable[Node]) -> int:
        """Insert nodes and return how many were written. Does not commit."""
        conn = self._get_connection()
        rows = [
            (
                node.identifier,
                node.kind.value,
                json.dumps(node.view),
                json.dumps(error_to_dict(node.error)) if node.error else None,
            )
            for node in nodes
        ]
        conn.executemany(
            "INSERT OR REPLACE INTO objects (name, type, object, error) VALUES (?, ?, ?, ?)",
            rows,
        )
        return len(rows)

    def get(self, identifier: str) -> Node:
        """Get a node by identifier."""
        conn = self._get_connection()
        cursor = conn.execute("SELECT * FROM objects WHERE name = ?", (identifier,))
        row = cursor.fetchone()
        if row is None:
            raise ObjectNotFoundError(f"Object not found: {identifier}")
        return Node.from_row(row)

    def find(self, prefix: str, kind: ObjectKind | None = None) -> list[Node]:
        """Find nodes whose identifier starts with ``prefix``.

        The prefix is compared literally, so ``_`` and ``%`` match nothing.
        """
        conn = self._get_connection()
        prefix = prefix.lower()
        if kind:
            cursor = conn.execute(
                "SELECT * FROM objects WHERE substr(name, 1, ?) = ? AND type = ? ORDER BY name",
                (len(prefix), prefix, kind.value),
            )
        else:
            cursor = conn.execute(
                "SELECT * FROM objects WHERE substr(name, 1, ?) = ? ORDER BY name",
                (len(prefix), prefix),
            )
        return [Node.from_row(row) for row in cursor.fetchall()]

    def find_by_type(self, kind: ObjectKind) -> list[Node]:
        return self.find("", kind)

    def all(self) -> list[Node]:
        conn = self._get_connection()
        cursor = conn.execute("SELECT * FROM objects ORDER BY name")
        return [Node.from_row(row) for row in cursor.fetchall()]

    def count_by_type(self) -> dict[str, int]:
        conn = self._get_connection()
        cursor = conn.execute("SELECT type, COUNT(*) AS n FROM objects GROUP BY type ORDER BY type")
        return {row["type"]: row["n"] for row in cursor.fetchall()}

    def clear(self) -> None:
        """Delete all objects. Does not commit."""
        conn = self._get_connection()
        conn.execute("DELETE FROM objects")
