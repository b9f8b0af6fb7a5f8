"""Edge storage operations."""

from __future__ import annotations

import sqlite3
from collections.abc import Callable, Iterable

from gitgraph.core.graph.models import GraphEdge


class EdgeStorage:
    """Storage operations for edges (references between objects)."""

    def __init__(self, get_connection: Callable[[], sqlite3.Connection]) -> None:
        self._get_connection = get_connection

    def insert_many(self, edges: Iterable[GraphEdge]) -> int:
        """Insert edges keeping their global order in ``position``. Does not commit."""
        conn = self._get_connection()
        rows = [(e.src, e.dest, e.label, i) for i, e in enumerate(edges)]
        conn.executemany(
            "INSERT INTO edges (src, dest, label, position) VALUES (?, ?, ?, ?)",
            rows,
        )
        return len(rows)

    def get_children(self, identifier: str) -> list[GraphEdge]:
        """Edges leaving an object, in declaration order."""
        conn = self._get_connection()
        cursor = conn.execute(
            "SELECT src, dest, label FROM edges WHERE src = ? ORDER BY position",
            (identifier,),
        )
        return self._rows_to_edges(cursor.fetchall())

    def get_referrers(self, identifier: str) -> list[GraphEdge]:
        """Edges pointing at an object."""
        conn = self._get_connection()
        cursor = conn.execute(
            "SELECT src, dest, label FROM edges WHERE dest = ? ORDER BY src, position",
            (identifier,),
        )
        return self._rows_to_edges(cursor.fetchall())

    def all(self) -> list[GraphEdge]:
        conn = self._get_connection()
        cursor = conn.execute("SELECT src, dest, label FROM edges ORDER BY position")
        return self._rows_to_edges(cursor.fetchall())

    def count_dangling(self) -> int:
        """Edges whose target has no row in ``objects``."""
        conn = self._get_connection()
        return conn.execute(
            "SELECT COUNT(*) FROM edges WHERE dest NOT IN (SELECT name FROM objects)"
        ).fetchone()[0]

    def clear(self) -> None:
        """Delete all edges. Does not commit."""
        conn = self._get_connection()
        conn.execute("DELETE FROM edges")

    def _rows_to_edges(self, rows: list[sqlite3.Row]) -> list[GraphEdge]:
        return [GraphEdge(src=row["src"], dest=row["dest"], label=row["label"]) for row in rows]
