# tests/test_main_window.py
import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
QtWidgets = pytest.importorskip("PyQt6.QtWidgets")

from PyQt6.QtCore import QSettings  # noqa: E402

from sqlrunner.qt.main_window import MainWindow  # noqa: E402
from sqlrunner.runner import SqlRunner  # noqa: E402


@pytest.fixture(scope="module")
def qapp():
    return QtWidgets.QApplication.instance() or QtWidgets.QApplication([])


@pytest.fixture
def window(qapp, tmp_path, store, executor):
    for fmt in (QSettings.Format.NativeFormat, QSettings.Format.IniFormat):
        QSettings.setPath(fmt, QSettings.Scope.UserScope, str(tmp_path / "settings"))
    win = MainWindow(SqlRunner(store, executor))
    yield win
    win.deleteLater()


def _action_widgets(win):
    return [win.btn_test, win.btn_execute, win.btn_delete_history, win.history_table,
            win.btn_first, win.btn_prev, win.btn_next, win.btn_last]


def test_busy_locks_every_action_control(window):
    window._set_busy(True)
    assert not any(w.isEnabled() for w in _action_widgets(window))

    window._set_busy(False)
    assert window.btn_test.isEnabled()
    assert window.btn_execute.isEnabled()
    assert window.btn_delete_history.isEnabled()
    assert window.history_table.isEnabled()
    # a single empty page has nowhere to go
    assert not window.btn_next.isEnabled()
    assert not window.btn_prev.isEnabled()


def test_busy_window_refuses_new_action_with_feedback(window, sample_db):
    window.connection_edit.setText(str(sample_db))
    window._set_busy(True)

    window.test_connection()

    assert window._worker is None
    assert "wait" in window.status_bar.currentMessage()


def test_stale_history_row_does_not_raise(window, sample_db):
    window.runner.run_query(str(sample_db), "SELECT 1")
    window._show_history(window.runner.get_history_page())
    assert window.history_table.rowCount() == 1

    # snapshot is emptied while the grid still shows the old row
    window.runner.purge_history()
    stale = window.history_table.model().index(0, 0)
    window._on_history_double_clicked(stale)

    assert window.history_table.rowCount() == 0
    assert window.status_bar.currentMessage() == "History is empty"


def test_selecting_history_replays_query(window, sample_db):
    window.runner.run_query(str(sample_db), "SELECT name FROM users")
    window._show_history(window.runner.get_history_page())

    window.history_table.selectRow(0)

    assert window.editor.toPlainText() == "SELECT name FROM users"
    assert window.connection_edit.text() == str(sample_db)
    assert window.status_bar.currentMessage().startswith("Query loaded - succeeded")
