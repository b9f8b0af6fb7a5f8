"""Repository that coordinates all storage operations."""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from gitgraph.core.graph.models import RepoGraph
from gitgraph.core.storage.edges import EdgeStorage
from gitgraph.core.storage.objects import ObjectStorage

logger = logging.getLogger(__name__)

SaveProgress = Callable[[int, int], None]

_BATCH_SIZE = 500

_SCHEMA = """
CREATE TABLE IF NOT EXISTS objects (
    name TEXT PRIMARY KEY,
    type TEXT NOT NULL,
    object TEXT,
    error TEXT
);

CREATE TABLE IF NOT EXISTS edges (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    src TEXT NOT NULL,
    dest TEXT NOT NULL,
    label TEXT,
    position INTEGER NOT NULL
);

CREATE TABLE IF NOT EXISTS meta (
    key TEXT PRIMARY KEY,
    value TEXT
);

CREATE INDEX IF NOT EXISTS idx_edges_src ON edges(src);
CREATE INDEX IF NOT EXISTS idx_edges_dest ON edges(dest);
CREATE INDEX IF NOT EXISTS idx_objects_type ON objects(type);
"""


class GraphRepository:
    """Facade that coordinates objects and edges storage."""

    def __init__(self, db_path: Path) -> None:
        self._db_path = db_path
        self._conn: sqlite3.Connection | None = None

        self.objects = ObjectStorage(self._get_connection)
        self.edges = EdgeStorage(self._get_connection)

    def _get_connection(self) -> sqlite3.Connection:
        """Get or create a database connection."""
        if self._conn is None:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(self._db_path)
            self._conn.row_factory = sqlite3.Row
            self._conn.executescript(_SCHEMA)
        return self._conn

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> GraphRepository:
        return self

    def __exit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: object) -> None:
        self.close()

    def save_graph(
        self,
        graph: RepoGraph,
        source: Path | None = None,
        on_progress: SaveProgress | None = None,
    ) -> None:
        """Replace the stored graph with ``graph`` in a single transaction.

        Args:
            graph: Graph to persist
            source: Objects directory the graph was built from, recorded in ``meta``
            on_progress: Optional callback (nodes written, total nodes)
        """
        conn = self._get_connection()
        total = len(graph.nodes)
        with conn:
            self.edges.clear()
            self.objects.clear()
            for start in range(0, total, _BATCH_SIZE):
                written = self.objects.insert_many(graph.nodes[start : start + _BATCH_SIZE])
                if on_progress:
                    on_progress(start + written, total)
            self.edges.insert_many(graph.edges)
            conn.executemany(
                "INSERT OR REPLACE INTO meta (key, value) VALUES (?, ?)",
                [
                    ("exported_at", datetime.now().isoformat(timespec="seconds")),
                    ("source", str(source) if source else ""),
                    ("failures", str(len(graph.failures))),
                ],
            )
        logger.info(
            "Saved %d objects and %d edges to %s", total, len(graph.edges), self._db_path
        )

    def get_stats(self) -> dict[str, object]:
        """Get export statistics."""
        conn = self._get_connection()

        object_count = conn.execute("SELECT COUNT(*) FROM objects").fetchone()[0]
        edge_count = conn.execute("SELECT COUNT(*) FROM edges").fetchone()[0]
        meta = {row["key"]: row["value"] for row in conn.execute("SELECT key, value FROM meta")}
        exported_at = meta.get("exported_at")

        return {
            "objects": object_count,
            "edges": edge_count,
            "types": self.objects.count_by_type(),
            "dangling": self.edges.count_dangling(),
            "failures": int(meta.get("failures") or 0),
            "source": meta.get("source") or None,
            "exported_at": datetime.fromisoformat(exported_at) if exported_at else None,
        }

    def clear(self) -> None:
        """Clear all data from the database."""
        conn = self._get_connection()
        with conn:
            self.edges.clear()
            self.objects.clear()
            conn.execute("DELETE FROM meta")


def get_default_db_path(project_root: Path) -> Path:
    """Get the default database path for a project."""
    return project_root / ".gitgraph" / "graph.db"
