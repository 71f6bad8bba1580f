# tests/test_database.py
import re
import sqlite3
from datetime import datetime

import pytest

from sqlrunner.database import HistoryStore
from sqlrunner.errors import StorageFailure

from .conftest import StepClock


def _columns(path):
    conn = sqlite3.connect(path)
    try:
        return [row[1] for row in conn.execute("PRAGMA table_info(QueryHistory)")]
    finally:
        conn.close()


def _drop_table(path):
    conn = sqlite3.connect(path)
    conn.execute("DROP TABLE QueryHistory")
    conn.commit()
    conn.close()


def test_initialize_creates_file_and_schema(history_path):
    HistoryStore(history_path)
    assert history_path.exists()
    assert _columns(history_path) == [
        "id", "connectionString", "query", "executedAt",
        "errorMessage", "isSuccessful", "recordCount",
    ]


def test_append_then_list_all_returns_new_record_first(store):
    store.append("Data Source=a.db;Version=3;", "SELECT 1", record_count=1)
    newest = store.append("Data Source=b.db;Version=3;", "SELECT 2", record_count=1)

    records = store.list_all()
    assert records[0] == newest
    assert [r.query for r in records] == ["SELECT 2", "SELECT 1"]


def test_same_second_ties_break_on_id(history_path):
    fixed = datetime(2024, 1, 1, 8, 30, 0)
    store = HistoryStore(history_path, clock=lambda: fixed)
    first = store.append("x.db", "SELECT 1", record_count=0)
    second = store.append("x.db", "SELECT 2", record_count=0)

    assert second.id > first.id
    assert [r.id for r in store.list_all()] == [second.id, first.id]


def test_order_follows_executed_at_not_insertion(history_path):
    times = iter([datetime(2024, 1, 2, 9, 0, 0), datetime(2024, 1, 1, 9, 0, 0)])
    store = HistoryStore(history_path, clock=lambda: next(times))
    later = store.append("x.db", "SELECT 'later'", record_count=1)
    earlier = store.append("x.db", "SELECT 'earlier'", record_count=1)

    assert [r.id for r in store.list_all()] == [later.id, earlier.id]


def test_executed_at_is_stored_as_local_text(history_path):
    store = HistoryStore(history_path, clock=StepClock(datetime(2024, 5, 1, 7, 5, 9, 123456)))
    record = store.append("x.db", "SELECT 1", record_count=1)

    conn = sqlite3.connect(history_path)
    raw = conn.execute("SELECT executedAt FROM QueryHistory").fetchone()[0]
    conn.close()
    assert raw == "2024-05-01 07:05:09"
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}", raw)
    assert record.executed_at == datetime(2024, 5, 1, 7, 5, 9)


def test_duplicates_are_not_rejected(store):
    store.append("x.db", "SELECT 1", record_count=1)
    store.append("x.db", "SELECT 1", record_count=1)
    assert store.count() == 2


def test_failure_and_success_fields_round_trip(store):
    store.append("x.db", "SELECT 1", is_successful=True, record_count=0)
    store.append("x.db", "SELEC", is_successful=False, error_message="syntax error")

    failed, ok = store.list_all()
    assert (ok.is_successful, ok.record_count, ok.error_message) == (True, 0, None)
    assert (failed.is_successful, failed.record_count, failed.error_message) == (False, None, "syntax error")
    assert failed.status == "Failed"
    assert failed.record_count_display == "-"


@pytest.mark.parametrize("kwargs", [
    {"is_successful": True, "error_message": "boom"},
    {"is_successful": False, "error_message": "boom", "record_count": 3},
    {"is_successful": False, "error_message": None},
    {"is_successful": False, "error_message": ""},
])
def test_append_rejects_inconsistent_outcomes(store, kwargs):
    with pytest.raises(ValueError):
        store.append("x.db", "SELECT 1", **kwargs)
    assert store.count() == 0


def test_initialize_twice_is_a_no_op(history_path):
    store = HistoryStore(history_path)
    store.append("x.db", "SELECT 1", record_count=1)
    columns = _columns(history_path)

    store.initialize()
    HistoryStore(history_path)

    assert _columns(history_path) == columns
    assert store.count() == 1


def test_legacy_schema_is_migrated_without_losing_rows(history_path):
    history_path.parent.mkdir(parents=True)
    conn = sqlite3.connect(history_path)
    conn.execute("""
        CREATE TABLE QueryHistory (
            Id INTEGER PRIMARY KEY AUTOINCREMENT,
            ConnectionString TEXT NOT NULL,
            Query TEXT NOT NULL,
            ExecutedAt DATETIME NOT NULL
        )
    """)
    conn.execute(
        "INSERT INTO QueryHistory (ConnectionString, Query, ExecutedAt) VALUES (?, ?, ?)",
        ("Data Source=old.db;Version=3;", "SELECT * FROM t", "2023-11-02 10:00:00"),
    )
    conn.commit()
    conn.close()

    store = HistoryStore(history_path)
    store.initialize()

    lowered = [c.lower() for c in _columns(history_path)]
    assert lowered.count("errormessage") == 1
    assert lowered.count("issuccessful") == 1
    assert lowered.count("recordcount") == 1

    (legacy,) = store.list_all()
    assert legacy.query == "SELECT * FROM t"
    assert legacy.is_successful is True
    assert legacy.error_message is None
    assert legacy.record_count is None
    assert legacy.executed_at == datetime(2023, 11, 2, 10, 0, 0)


def test_partially_migrated_schema_gets_only_missing_columns(history_path):
    history_path.parent.mkdir(parents=True)
    conn = sqlite3.connect(history_path)
    conn.execute("""
        CREATE TABLE QueryHistory (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            connectionString TEXT NOT NULL,
            query TEXT NOT NULL,
            executedAt TEXT NOT NULL,
            errorMessage TEXT
        )
    """)
    conn.commit()
    conn.close()

    HistoryStore(history_path)
    assert _columns(history_path)[-2:] == ["isSuccessful", "recordCount"]


def test_purge_empties_history(store):
    for i in range(3):
        store.append("x.db", f"SELECT {i}", record_count=i)
    store.purge_all()
    assert store.list_all() == []
    assert store.count() == 0


def test_latest_connection_string(store):
    assert store.latest_connection_string() is None
    store.append("first.db", "SELECT 1", record_count=1)
    store.append("second.db", "SELECT 1", record_count=1)
    assert store.latest_connection_string() == "second.db"


def test_read_faults_degrade_to_empty(store, history_path):
    store.append("x.db", "SELECT 1", record_count=1)
    _drop_table(history_path)

    assert store.list_all() == []
    assert store.count() == 0
    assert store.latest_connection_string() is None


def test_write_faults_raise_storage_failure(store, history_path):
    _drop_table(history_path)

    with pytest.raises(StorageFailure):
        store.append("x.db", "SELECT 1", record_count=1)
    with pytest.raises(StorageFailure):
        store.purge_all()


def test_unusable_data_root_raises_storage_failure(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")

    with pytest.raises(StorageFailure):
        HistoryStore(blocker / "SqlRuner" / "history.db")
