"""Decide which backend a connection string targets.

Everything here is pure: the same input always yields the same
classification, so it is recomputed on every use rather than stored.
"""

from .connstr import connection_keys
from .models import BackendKind, Classification

SQLSERVER_KEYS = frozenset({
    "server", "address", "addr", "network address",
    "initial catalog",
    "integrated security", "trusted_connection",
})
SQLITE_SOURCE_KEYS = frozenset({"data source", "datasource"})
SQLITE_VERSION_KEY = "version"
SQLITE_MARKERS = (".db", ".sqlite", ".sqlite3")


def has_sqlite_marker(text):
    lowered = text.lower()
    return any(marker in lowered for marker in SQLITE_MARKERS)


def sqlite_connection_string(path):
    """Wrap a bare file path in the canonical SQLite connection string."""
    return f"Data Source={path};Version=3;"


def normalize_connection_string(raw):
    """Undo doubled backslashes and turn bare database paths into SQLite strings."""
    text = (raw or "").strip().replace("\\\\", "\\")
    if "=" not in text and has_sqlite_marker(text):
        return sqlite_connection_string(text)
    return text


def classify(raw):
    """Return the backend for ``raw`` along with its normalized form.

    First match wins: SQL Server keys, then a SQLite data source with a
    version marker, then a SQLite file extension anywhere. Anything else is
    ambiguous (``kind`` is None).
    """
    text = normalize_connection_string(raw)
    keys = connection_keys(text)

    if keys & SQLSERVER_KEYS:
        return Classification(BackendKind.SQLSERVER, text)

    if keys & SQLITE_SOURCE_KEYS and SQLITE_VERSION_KEY in keys:
        return Classification(BackendKind.SQLITE, text)

    if has_sqlite_marker(text):
        if "=" not in text:
            text = sqlite_connection_string(text)
        return Classification(BackendKind.SQLITE, text)

    return Classification(None, text)
