"""Database adapters for the supported backends."""

import sqlite3
from abc import ABC, abstractmethod
from decimal import Decimal
from pathlib import Path

from .connstr import get_value, is_true, to_odbc
from .models import BackendKind, Column, ResultSet


class DBAdapter(ABC):
    """Base class for database adapters."""

    kind = None
    display_name = "Base"
    required_module = None  # Module name to import for this adapter
    install_hint = None  # pip install hint for missing dependency

    @classmethod
    def is_available(cls):
        """Check if the required module for this adapter is installed."""
        if cls.required_module is None:
            return True
        try:
            __import__(cls.required_module)
            return True
        except ImportError:
            return False

    @abstractmethod
    def connect(self, connection_string, must_exist=False):
        """Open a DB-API connection for ``connection_string``.

        ``must_exist`` asks the adapter not to create anything while
        connecting (used when probing an ambiguous string).
        """

    def fetch(self, conn, query):
        """Run ``query`` on ``conn`` and materialize every returned row."""
        cursor = conn.cursor()
        try:
            cursor.execute(query)
            if cursor.description:
                rows = tuple(tuple(row) for row in cursor.fetchall())
                columns = tuple(
                    Column(col[0] or f"column{i + 1}", self.column_type_name(col, rows, i))
                    for i, col in enumerate(cursor.description)
                )
                rows_affected = -1
            else:
                rows, columns = (), ()
                rows_affected = cursor.rowcount
        finally:
            cursor.close()
        return ResultSet(columns=columns, rows=rows, backend=self.kind,
                         rows_affected=rows_affected)

    def column_type_name(self, col_info, rows, index):
        """Name of the column type; defaults to the driver's Python type code."""
        type_code = col_info[1] if len(col_info) > 1 else None
        if isinstance(type_code, type):
            return type_code.__name__
        return infer_type_name(rows, index)


def infer_type_name(rows, index):
    """Type of the first non-NULL value in a column, or "NULL"."""
    for row in rows:
        value = row[index]
        if value is not None:
            if isinstance(value, Decimal):
                return "Decimal"
            return type(value).__name__
    return "NULL"


class SQLiteAdapter(DBAdapter):
    """Adapter for SQLite database files via the standard library driver."""

    kind = BackendKind.SQLITE
    display_name = "SQLite"

    def connect(self, connection_string, must_exist=False):
        if "=" in connection_string:
            source = get_value(connection_string, "data source", "datasource", "filename")
            read_only = is_true(get_value(connection_string, "read only") or "")
            fail_if_missing = is_true(get_value(connection_string, "failifmissing") or "")
        else:
            source, read_only, fail_if_missing = connection_string.strip(), False, False

        if not source:
            raise ValueError("SQLite connection string has no Data Source")

        if source == ":memory:":
            return sqlite3.connect(source, isolation_level=None)

        mode = None
        if read_only:
            mode = "ro"
        elif fail_if_missing or must_exist:
            mode = "rw"

        if mode:
            uri = f"{Path(source).absolute().as_uri()}?mode={mode}"
            return sqlite3.connect(uri, uri=True, isolation_level=None)
        # Autocommit: statements run exactly as typed, with no implicit transaction
        return sqlite3.connect(source, isolation_level=None)


class SQLServerAdapter(DBAdapter):
    """Adapter for Microsoft SQL Server via ODBC."""

    kind = BackendKind.SQLSERVER
    display_name = "SQL Server"
    required_module = "pyodbc"
    install_hint = "pip install pyodbc (plus the Microsoft ODBC Driver for SQL Server)"

    def connect(self, connection_string, must_exist=False):
        import pyodbc
        odbc_string, timeout = to_odbc(connection_string, pyodbc.drivers())
        if timeout is not None:
            return pyodbc.connect(odbc_string, autocommit=True, timeout=timeout)
        return pyodbc.connect(odbc_string, autocommit=True)


# Registry of available adapters
ADAPTERS = {
    BackendKind.SQLITE: SQLiteAdapter,
    BackendKind.SQLSERVER: SQLServerAdapter,
}


def get_adapter(kind):
    """Get an adapter instance by backend kind."""
    adapter_class = ADAPTERS.get(kind)
    if adapter_class:
        return adapter_class()
    raise ValueError(f"Unknown database type: {kind}")


def get_unavailable_adapters():
    """Get list of adapters that are not available due to missing dependencies.

    Returns list of (kind, display_name, install_hint).
    """
    return [
        (kind, cls.display_name, cls.install_hint)
        for kind, cls in ADAPTERS.items()
        if not cls.is_available()
    ]
