"""SQLite database holding the history of executed queries."""

import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path

from .errors import StorageFailure
from .models import HistoryRecord

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# Columns added after the first release, applied in order when missing
MIGRATIONS = (
    ("errorMessage", "TEXT"),
    ("isSuccessful", "INTEGER DEFAULT 1"),
    ("recordCount", "INTEGER"),
)

SELECT_COLUMNS = "id, connectionString, query, executedAt, errorMessage, isSuccessful, recordCount"


class HistoryStore:
    """Append-only log of query attempts.

    Reads never raise: a broken store shows up as an empty history. Writes
    and deletes raise StorageFailure so the caller can report them.
    """

    def __init__(self, db_path, clock=None):
        self.db_path = Path(db_path)
        self.clock = clock or datetime.now
        self.initialize()

    @contextmanager
    def _get_conn(self):
        conn = sqlite3.connect(self.db_path)
        try:
            conn.row_factory = sqlite3.Row
            yield conn
            conn.commit()
        finally:
            conn.close()

    def initialize(self):
        """Create the table, or add any columns an older file is missing."""
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            with self._get_conn() as conn:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS QueryHistory (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        connectionString TEXT NOT NULL,
                        query TEXT NOT NULL,
                        executedAt TEXT NOT NULL,
                        errorMessage TEXT,
                        isSuccessful INTEGER DEFAULT 1,
                        recordCount INTEGER
                    )
                """)
                cursor = conn.execute("PRAGMA table_info(QueryHistory)")
                columns = {row[1].lower() for row in cursor.fetchall()}
                for name, definition in MIGRATIONS:
                    if name.lower() not in columns:
                        logger.info("Adding column %s to QueryHistory", name)
                        conn.execute(f"ALTER TABLE QueryHistory ADD COLUMN {name} {definition}")
                        columns.add(name.lower())
        except (sqlite3.Error, OSError) as e:
            raise StorageFailure(f"Could not open history database {self.db_path}: {e}") from e

    def append(self, connection_string, query, is_successful=True,
               error_message=None, record_count=None):
        """Store one query attempt and return it as a HistoryRecord."""
        if is_successful and error_message is not None:
            raise ValueError("A successful query cannot carry an error message")
        if not is_successful and (record_count is not None or not error_message):
            raise ValueError("A failed query needs an error message and no record count")

        executed_at = self.clock().replace(microsecond=0)
        try:
            with self._get_conn() as conn:
                cursor = conn.execute(
                    """INSERT INTO QueryHistory
                       (connectionString, query, executedAt, errorMessage, isSuccessful, recordCount)
                       VALUES (?, ?, ?, ?, ?, ?)""",
                    (connection_string or "", query or "", executed_at.strftime(TIMESTAMP_FORMAT),
                     error_message, 1 if is_successful else 0, record_count)
                )
                record_id = cursor.lastrowid
        except sqlite3.Error as e:
            logger.error("Error saving query to history: %s", e)
            raise StorageFailure(f"Could not save query to history: {e}") from e

        return HistoryRecord(
            id=record_id,
            connection_string=connection_string or "",
            query=query or "",
            executed_at=executed_at,
            is_successful=is_successful,
            error_message=error_message,
            record_count=record_count,
        )

    def list_all(self):
        """All records, newest first."""
        try:
            with self._get_conn() as conn:
                cursor = conn.execute(
                    f"SELECT {SELECT_COLUMNS} FROM QueryHistory ORDER BY executedAt DESC, id DESC"
                )
                return [self._to_record(row) for row in cursor.fetchall()]
        except sqlite3.Error as e:
            logger.warning("Error loading history: %s", e)
            return []

    def count(self):
        try:
            with self._get_conn() as conn:
                return conn.execute("SELECT COUNT(*) FROM QueryHistory").fetchone()[0]
        except sqlite3.Error as e:
            logger.warning("Error getting history count: %s", e)
            return 0

    def latest_connection_string(self):
        """Connection string of the most recent attempt, or None."""
        try:
            with self._get_conn() as conn:
                row = conn.execute(
                    "SELECT connectionString FROM QueryHistory ORDER BY executedAt DESC, id DESC LIMIT 1"
                ).fetchone()
        except sqlite3.Error as e:
            logger.warning("Error reading last connection string: %s", e)
            return None
        return row[0] if row and row[0] else None

    def purge_all(self):
        try:
            with self._get_conn() as conn:
                conn.execute("DELETE FROM QueryHistory")
        except sqlite3.Error as e:
            logger.error("Error deleting history: %s", e)
            raise StorageFailure(f"Could not delete history: {e}") from e
        logger.info("History deleted")

    def _to_record(self, row):
        executed_at = row["executedAt"]
        if not isinstance(executed_at, datetime):
            try:
                executed_at = datetime.strptime(str(executed_at), TIMESTAMP_FORMAT)
            except ValueError:
                try:
                    executed_at = datetime.fromisoformat(str(executed_at))
                except ValueError:
                    executed_at = self.clock()
        is_successful = row["isSuccessful"]
        return HistoryRecord(
            id=row["id"],
            connection_string=row["connectionString"],
            query=row["query"],
            executed_at=executed_at,
            is_successful=True if is_successful is None else is_successful == 1,
            error_message=row["errorMessage"],
            record_count=row["recordCount"],
        )
