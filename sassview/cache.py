import sqlite3
import logging
import hashlib
from datetime import datetime
from typing import Iterable, Optional, Tuple
from .config import CACHE_DB_PATH

logger = logging.getLogger(__name__)

class CompileCache:
    """
    Compiled CSS keyed by the content of a stylesheet's whole import closure.
    Any byte changed in the stylesheet or an import, or a different
    output setting, gives a different key.
    """

    def __init__(self, db_path: str = str(CACHE_DB_PATH)):
        self.db_path = db_path
        self._init_db()

    def _init_db(self):
        try:
            with sqlite3.connect(self.db_path) as conn:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS compiled (
                        key TEXT PRIMARY KEY,
                        filename TEXT,
                        css TEXT NOT NULL,
                        used_at TIMESTAMP NOT NULL
                    )
                """)
                conn.execute("CREATE INDEX IF NOT EXISTS idx_compiled_used_at ON compiled(used_at)")
        except sqlite3.Error as e:
            logger.error(f"Failed to initialize compile cache at {self.db_path}: {e}")

    @staticmethod
    def key_for(documents: Iterable[Tuple[str, str]], settings: str = "") -> str:
        """
        Args:
            documents: (virtual path, source) pairs; the compiled stylesheet
                first, then its imports.
            settings: Output settings that change the CSS (style, precision).
        """
        digest = hashlib.sha256(settings.encode("utf-8"))
        for filename, source in documents:
            for part in (filename or "", source):
                encoded = part.encode("utf-8")
                # Length prefix keeps ("ab", "c") and ("a", "bc") apart
                digest.update(len(encoded).to_bytes(8, "big"))
                digest.update(encoded)
        return digest.hexdigest()

    def get(self, key: str) -> Optional[str]:
        row = self._run("SELECT css FROM compiled WHERE key = ?", (key,), fetch=True)
        if row is None:
            return None
        self._run("UPDATE compiled SET used_at = ? WHERE key = ?", (datetime.utcnow(), key))
        return row[0]

    def set(self, key: str, css: str, filename: Optional[str] = None):
        self._run(
            "INSERT OR REPLACE INTO compiled (key, filename, css, used_at) VALUES (?, ?, ?, ?)",
            (key, filename, css, datetime.utcnow())
        )

    def prune(self, days: int = 30):
        """Removes entries not used in the last N days."""
        self._run("DELETE FROM compiled WHERE used_at < datetime('now', ?)", (f'-{days} days',))
        logger.info(f"Pruned compiled CSS unused for {days} days.")

    def _run(self, query: str, params: tuple, fetch: bool = False, retry: bool = True):
        """Runs one statement; recreates the table once if it went missing."""
        try:
            with sqlite3.connect(self.db_path) as conn:
                cursor = conn.execute(query, params)
                return cursor.fetchone() if fetch else None
        except sqlite3.OperationalError as e:
            if retry and "no such table" in str(e):
                logger.info("Compile cache table missing, recreating")
                self._init_db()
                return self._run(query, params, fetch, retry=False)
            logger.warning(f"Compile cache query failed: {e}")
        except sqlite3.Error as e:
            logger.warning(f"Compile cache query failed: {e}")
        return None
