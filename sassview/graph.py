import sqlite3
import logging
from typing import List
from .config import GRAPH_DB_PATH

logger = logging.getLogger(__name__)

class ImportGraph:
    """
    Which stylesheet imports which, keyed by virtual path.
    A stylesheet's imports are always replaced as a whole, so edges
    removed from the source disappear from the graph too.
    """

    def __init__(self, db_path: str = None):
        self.db_path = db_path or str(GRAPH_DB_PATH)
        self._init_db()

    def _init_db(self):
        try:
            with sqlite3.connect(self.db_path) as conn:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS imports (
                        source TEXT NOT NULL,
                        target TEXT NOT NULL,
                        position INTEGER NOT NULL,
                        PRIMARY KEY (source, target)
                    )
                """)
                conn.execute("CREATE INDEX IF NOT EXISTS idx_imports_target ON imports(target)")
        except sqlite3.Error as e:
            logger.error(f"Failed to initialize import graph at {self.db_path}: {e}")

    def record(self, source: str, targets: List[str]):
        """Replaces the imports of `source` with `targets` (in import order)."""
        ordered = list(dict.fromkeys(targets))
        try:
            with sqlite3.connect(self.db_path) as conn:
                conn.execute("DELETE FROM imports WHERE source = ?", (source,))
                conn.executemany(
                    "INSERT INTO imports (source, target, position) VALUES (?, ?, ?)",
                    [(source, target, i) for i, target in enumerate(ordered)]
                )
        except sqlite3.Error as e:
            logger.error(f"Failed to record imports of {source}: {e}")

    def imports_of(self, source: str) -> List[str]:
        """Direct imports of `source`, in import order."""
        return self._column(
            "SELECT target FROM imports WHERE source = ? ORDER BY position", (source,)
        )

    def dependents(self, target: str) -> List[str]:
        """Stylesheets recorded as importing `target`, sorted."""
        return self._column(
            "SELECT DISTINCT source FROM imports WHERE target = ? ORDER BY source", (target,)
        )

    def clear(self):
        try:
            with sqlite3.connect(self.db_path) as conn:
                conn.execute("DELETE FROM imports")
        except sqlite3.Error as e:
            logger.error(f"Failed to clear import graph: {e}")

    def _column(self, query: str, params: tuple) -> List[str]:
        try:
            with sqlite3.connect(self.db_path) as conn:
                return [row[0] for row in conn.execute(query, params)]
        except sqlite3.Error as e:
            logger.error(f"Failed to query import graph: {e}")
            return []
