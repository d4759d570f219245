"""SQLite ledger - durable key-value storage for registry deployments.

Provides the same get/put primitives as the in-memory ledger on top of a
single SQLite table, so records and the index survive service restarts.
"""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from datetime import datetime, timezone
from pathlib import Path

from .ledger import LedgerReadError, LedgerWriteError

# SQL schema for ledger state
SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS ledger_state (
    key TEXT PRIMARY KEY,
    value BLOB NOT NULL,
    updated_at TEXT NOT NULL
);
"""


class SqliteLedger:
    """SQLite-backed ledger.

    Example:
        with SqliteLedger("data/bluechain.db") as ledger:
            ledger.put("S1", b'{"supplyItemID":"S1"}')
            ledger.get("S1")
    """

    def __init__(self, db_path: str | Path | None = None) -> None:
        """Initialize ledger with database connection.

        Args:
            db_path: Path to SQLite database file. Defaults to data/bluechain.db
        """
        if db_path is None:
            db_path = Path.cwd() / "data" / "bluechain.db"
        else:
            db_path = Path(db_path)

        db_path.parent.mkdir(parents=True, exist_ok=True)

        self.db_path = str(db_path)
        self._conn: sqlite3.Connection | None = None
        self._ensure_connection()
        self._ensure_schema()

    def _ensure_connection(self) -> None:
        """Ensure database connection is established."""
        if self._conn is None:
            # FastAPI runs sync endpoints in a threadpool
            self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
            self._conn.execute("PRAGMA journal_mode = WAL")
            self._conn.execute("PRAGMA synchronous = NORMAL")
            self._conn.execute("PRAGMA busy_timeout = 5000")

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        conn.executescript(SCHEMA_SQL)
        conn.commit()

    def _get_conn(self) -> sqlite3.Connection:
        """Get database connection, ensuring it's established."""
        self._ensure_connection()
        assert self._conn is not None
        return self._conn

    def get(self, key: str) -> bytes | None:
        try:
            cursor = self._get_conn().execute(
                "SELECT value FROM ledger_state WHERE key = ?",
                (key,),
            )
            row = cursor.fetchone()
        except sqlite3.Error as e:
            raise LedgerReadError(f"Failed to read {key!r}: {e}", key) from e

        if row is None:
            return None
        return bytes(row[0])

    def put(self, key: str, value: bytes) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO ledger_state (key, value, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,
                (key, sqlite3.Binary(value), datetime.now(timezone.utc).isoformat()),
            )
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise LedgerWriteError(f"Failed to write {key!r}: {e}", key) from e

    def delete(self, key: str) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM ledger_state WHERE key = ?", (key,))
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise LedgerWriteError(f"Failed to delete {key!r}: {e}", key) from e

    def keys(self) -> Iterator[str]:
        try:
            cursor = self._get_conn().execute(
                "SELECT key FROM ledger_state ORDER BY key"
            )
            rows = cursor.fetchall()
        except sqlite3.Error as e:
            raise LedgerReadError(f"Failed to list keys: {e}") from e
        return iter([row[0] for row in rows])

    def count(self) -> int:
        """Count total entries in the ledger."""
        cursor = self._get_conn().execute("SELECT COUNT(*) FROM ledger_state")
        row = cursor.fetchone()
        return row[0] if row else 0

    def close(self) -> None:
        """Close database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> SqliteLedger:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
