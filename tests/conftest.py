# tests/conftest.py
import sqlite3
from datetime import datetime, timedelta

import pytest

from sqlrunner.adapters import DBAdapter, SQLiteAdapter
from sqlrunner.database import HistoryStore
from sqlrunner.executor import QueryExecutor
from sqlrunner.models import BackendKind


class TrackingConnection:
    """Wraps a sqlite3 connection and remembers whether it was closed."""

    def __init__(self, conn):
        self._conn = conn
        self.closed = False

    def cursor(self):
        return self._conn.cursor()

    def close(self):
        self.closed = True
        self._conn.close()


class FakeSQLServerAdapter(DBAdapter):
    """Stands in for SQL Server; serves queries from an in-memory SQLite db."""

    kind = BackendKind.SQLSERVER
    display_name = "SQL Server"
    required_module = None
    install_hint = "pip install pyodbc"

    def __init__(self, error=None, available=True):
        self.error = error
        self.available = available
        self.calls = []
        self.connections = []

    def is_available(self):
        return self.available

    def connect(self, connection_string, must_exist=False):
        self.calls.append(connection_string)
        if self.error is not None:
            raise self.error
        conn = TrackingConnection(sqlite3.connect(":memory:", isolation_level=None))
        self.connections.append(conn)
        return conn


class TrackingSQLiteAdapter(SQLiteAdapter):
    """Real SQLite adapter that records each connection it hands out."""

    def __init__(self):
        self.calls = []
        self.connections = []

    def connect(self, connection_string, must_exist=False):
        self.calls.append((connection_string, must_exist))
        conn = TrackingConnection(super().connect(connection_string, must_exist))
        self.connections.append(conn)
        return conn


class StepClock:
    """Clock that advances one second per call."""

    def __init__(self, start=datetime(2024, 5, 1, 12, 0, 0)):
        self.current = start

    def __call__(self):
        value = self.current
        self.current += timedelta(seconds=1)
        return value


@pytest.fixture
def history_path(tmp_path):
    return tmp_path / "SqlRuner" / "history.db"


@pytest.fixture
def store(history_path):
    return HistoryStore(history_path)


@pytest.fixture
def sample_db(tmp_path):
    """A SQLite file with a small ``users`` table."""
    path = tmp_path / "sample.db"
    conn = sqlite3.connect(path)
    conn.execute("CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT, score REAL)")
    conn.executemany(
        "INSERT INTO users (name, score) VALUES (?, ?)",
        [("alice", 9.5), ("bob", None), ("carol", 7.25)],
    )
    conn.commit()
    conn.close()
    return path


@pytest.fixture
def fake_server():
    return FakeSQLServerAdapter()


@pytest.fixture
def sqlite_adapter():
    return TrackingSQLiteAdapter()


@pytest.fixture
def executor(sqlite_adapter, fake_server):
    return QueryExecutor({
        BackendKind.SQLITE: sqlite_adapter,
        BackendKind.SQLSERVER: fake_server,
    })
