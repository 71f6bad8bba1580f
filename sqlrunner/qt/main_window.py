"""
Main application window for the SqlRunner PyQt6 GUI.

Connection string and query editor on top, results and paged history
below. Every action runs on a worker thread while all action controls and
the history grid are locked.
"""

from typing import Any, Callable, Optional
from PyQt6.QtCore import Qt, QSettings
from PyQt6.QtGui import QAction, QFont, QKeySequence, QCloseEvent, QShortcut
from PyQt6.QtWidgets import (
    QMainWindow,
    QWidget,
    QSplitter,
    QVBoxLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPlainTextEdit,
    QPushButton,
    QTabWidget,
    QStatusBar,
    QMessageBox,
    QApplication,
)

from .dialogs import ErrorDialog
from .theme import Theme
from .widgets import HistoryTable, ResultsTable
from .worker import TaskWorker
from ..adapters import get_unavailable_adapters
from ..config import APP_NAME
from ..errors import ExecutionFailure, StorageFailure
from ..models import HistoryPage, HistorySelection, ResultSet
from ..runner import SqlRunner


class MainWindow(QMainWindow):
    """Main application window."""

    def __init__(self, runner: SqlRunner):
        super().__init__()

        from ..version import __version__
        self.setWindowTitle(f"SqlRunner v{__version__}")
        self.setMinimumSize(900, 600)

        self.runner = runner
        self._worker: Optional[TaskWorker] = None
        self._page: Optional[HistoryPage] = None
        self._busy = False

        self._create_actions()
        self._create_menu_bar()
        self._create_central_widget()
        self._create_status_bar()
        self._restore_state()

        last = self.runner.latest_connection_string()
        if last:
            self.connection_edit.setText(last)
        self._show_history(self.runner.get_history_page())
        self._warn_missing_drivers()

    def _create_actions(self) -> None:
        """Create menu actions."""
        self.action_dark_mode = QAction("Dark Mode", self)
        self.action_dark_mode.setCheckable(True)
        self.action_dark_mode.setChecked(Theme.is_dark())
        self.action_dark_mode.triggered.connect(self._toggle_dark_mode)

        self.action_exit = QAction("Exit", self)
        self.action_exit.setShortcut(QKeySequence("Alt+F4"))
        self.action_exit.triggered.connect(self.close)

        self.action_about = QAction("About", self)
        self.action_about.triggered.connect(self._show_about)

    def _create_menu_bar(self) -> None:
        """Create the menu bar."""
        menu_bar = self.menuBar()

        file_menu = menu_bar.addMenu("&File")
        file_menu.addAction(self.action_dark_mode)
        file_menu.addSeparator()
        file_menu.addAction(self.action_exit)

        help_menu = menu_bar.addMenu("&Help")
        help_menu.addAction(self.action_about)

    def _create_central_widget(self) -> None:
        """Create the main content area."""
        central = QWidget()
        layout = QVBoxLayout(central)
        layout.setContentsMargins(8, 8, 8, 8)

        # Connection string row
        conn_layout = QHBoxLayout()
        conn_layout.addWidget(QLabel("Connection String:"))
        self.connection_edit = QLineEdit()
        self.connection_edit.setPlaceholderText(
            r"C:\data\app.db  or  Data Source=HOST\SQL2022;Initial Catalog=MyDb;Integrated Security=True;"
        )
        conn_layout.addWidget(self.connection_edit)
        self.btn_test = QPushButton("Test Connection")
        self.btn_test.clicked.connect(self.test_connection)
        conn_layout.addWidget(self.btn_test)
        layout.addLayout(conn_layout)

        self.splitter = QSplitter(Qt.Orientation.Vertical)
        self.splitter.setHandleWidth(3)
        self.splitter.setChildrenCollapsible(False)

        # Query editor
        editor_container = QWidget()
        editor_layout = QVBoxLayout(editor_container)
        editor_layout.setContentsMargins(0, 0, 0, 0)
        self.editor = QPlainTextEdit()
        self.editor.setPlaceholderText("SELECT * FROM ...")
        font = QFont("JetBrains Mono", 11)
        font.setStyleHint(QFont.StyleHint.Monospace)
        self.editor.setFont(font)
        editor_layout.addWidget(self.editor)

        run_layout = QHBoxLayout()
        run_layout.addStretch()
        self.btn_execute = QPushButton("Execute (F5)")
        self.btn_execute.clicked.connect(self.execute_query)
        run_layout.addWidget(self.btn_execute)
        editor_layout.addLayout(run_layout)
        self.splitter.addWidget(editor_container)

        # Results / history tabs
        self.tabs = QTabWidget()
        self.results_table = ResultsTable()
        self.tabs.addTab(self.results_table, "Results")
        self.tabs.addTab(self._create_history_widget(), "History")
        self.splitter.addWidget(self.tabs)
        self.splitter.setSizes([250, 450])

        layout.addWidget(self.splitter)
        self.setCentralWidget(central)

        QShortcut(QKeySequence("F5"), self).activated.connect(self.execute_query)
        QShortcut(QKeySequence("Ctrl+Return"), self).activated.connect(self.execute_query)

    def _create_history_widget(self) -> QWidget:
        """Create the history grid with its pagination bar."""
        container = QWidget()
        layout = QVBoxLayout(container)
        layout.setContentsMargins(0, 4, 0, 0)

        self.history_table = HistoryTable()
        self.history_table.itemSelectionChanged.connect(self._on_history_selected)
        self.history_table.doubleClicked.connect(self._on_history_double_clicked)
        layout.addWidget(self.history_table)

        nav_layout = QHBoxLayout()
        self.btn_delete_history = QPushButton("Delete History")
        self.btn_delete_history.clicked.connect(self.purge_history)
        nav_layout.addWidget(self.btn_delete_history)
        nav_layout.addStretch()

        self.btn_first = QPushButton("|<")
        self.btn_first.setFixedWidth(35)
        self.btn_first.clicked.connect(lambda: self._show_history(self.runner.first_page()))
        nav_layout.addWidget(self.btn_first)

        self.btn_prev = QPushButton("<")
        self.btn_prev.setFixedWidth(35)
        self.btn_prev.clicked.connect(lambda: self._show_history(self.runner.previous_page()))
        nav_layout.addWidget(self.btn_prev)

        self.page_label = QLabel()
        self.page_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.page_label.setMinimumWidth(110)
        nav_layout.addWidget(self.page_label)

        self.btn_next = QPushButton(">")
        self.btn_next.setFixedWidth(35)
        self.btn_next.clicked.connect(lambda: self._show_history(self.runner.next_page()))
        nav_layout.addWidget(self.btn_next)

        self.btn_last = QPushButton(">|")
        self.btn_last.setFixedWidth(35)
        self.btn_last.clicked.connect(lambda: self._show_history(self.runner.last_page()))
        nav_layout.addWidget(self.btn_last)

        layout.addLayout(nav_layout)
        return container

    def _create_status_bar(self) -> None:
        """Create the status bar."""
        self.status_bar = QStatusBar()
        self.status_bar.setFixedHeight(22)
        self.setStatusBar(self.status_bar)
        self.status_bar.showMessage("Ready")

    def _restore_state(self) -> None:
        """Restore window geometry and splitter sizes."""
        settings = QSettings(APP_NAME, APP_NAME)

        geometry = settings.value("geometry")
        if geometry:
            self.restoreGeometry(geometry)
        else:
            self.resize(1200, 800)
            screen = QApplication.primaryScreen().geometry()
            self.move(
                (screen.width() - self.width()) // 2,
                (screen.height() - self.height()) // 2
            )

        splitter_state = settings.value("splitter")
        if splitter_state:
            self.splitter.restoreState(splitter_state)

    def _save_state(self) -> None:
        settings = QSettings(APP_NAME, APP_NAME)
        settings.setValue("geometry", self.saveGeometry())
        settings.setValue("splitter", self.splitter.saveState())

    def closeEvent(self, event: QCloseEvent) -> None:
        """Wait for a running action before closing."""
        if self._worker and self._worker.isRunning():
            self._worker.wait()
        self._save_state()
        event.accept()

    def set_status(self, message: str, timeout: int = 0) -> None:
        """Set status bar message."""
        self.status_bar.showMessage(message, timeout)

    # Actions

    def _is_busy(self) -> bool:
        return self._busy

    def _set_busy(self, busy: bool) -> None:
        """Lock every control that starts an action or reads the history.

        The worker reloads the history snapshot, so the history grid and
        its paging stay locked until the worker is done.
        """
        self._busy = busy
        for widget in (self.btn_test, self.btn_execute, self.btn_delete_history,
                       self.history_table):
            widget.setEnabled(not busy)
        if busy:
            for button in (self.btn_first, self.btn_prev, self.btn_next, self.btn_last):
                button.setEnabled(False)
        else:
            self._update_nav(self._page)

    def _start(self, task: Callable[[], Any], on_success: Callable[[Any], None],
               on_error: Callable[[Exception], None], status: str) -> bool:
        """Run ``task`` on the worker thread; False if another action is running."""
        if self._is_busy():
            self.set_status("Please wait for the running action to finish", 5000)
            return False

        worker = TaskWorker(task)

        def finish_ok(result: Any) -> None:
            self._set_busy(False)
            on_success(result)

        def finish_error(error: Exception) -> None:
            self._set_busy(False)
            on_error(error)

        worker.succeeded.connect(finish_ok)
        worker.failed.connect(finish_error)
        self._worker = worker
        self._set_busy(True)
        worker.start()
        self.set_status(status)
        return True

    def test_connection(self) -> None:
        connection_string = self.connection_edit.text().strip()
        if not connection_string:
            QMessageBox.warning(self, "Error", "Please enter a connection string.")
            return

        def on_success(classification: Any) -> None:
            self.set_status("Connection succeeded")
            QMessageBox.information(
                self, "Connection Succeeded",
                f"Connected to {classification.kind.display_name} successfully!\n\n"
                f"Connection string used:\n{classification.connection_string}"
            )

        def on_error(error: Exception) -> None:
            self.set_status("Connection failed")
            self._show_error(error, "Connection test failed")

        self._start(lambda: self.runner.test_connection(connection_string),
                    on_success, on_error, "Testing connection...")

    def execute_query(self) -> None:
        connection_string = self.connection_edit.text().strip()
        query = self.editor.toPlainText().strip()
        if not connection_string:
            QMessageBox.warning(self, "Error", "Please enter a connection string.")
            return
        if not query:
            QMessageBox.warning(self, "Error", "Please enter a SQL query.")
            return

        def on_success(result: ResultSet) -> None:
            self.results_table.load_result(result)
            self.tabs.setCurrentIndex(0)
            self._show_history(self.runner.get_history_page())
            if result.columns:
                message = f"Success - {result.record_count} row(s) returned"
            elif result.rows_affected >= 0:
                message = f"Success - {result.rows_affected} row(s) affected"
            else:
                message = "Success"
            self.set_status(message + self._history_note())

        def on_error(error: Exception) -> None:
            self.results_table.clear_results()
            self._show_history(self.runner.get_history_page())
            self.set_status("Query failed" + self._history_note())
            self._show_error(error, "Query execution failed")

        self._start(lambda: self.runner.run_query(connection_string, query),
                    on_success, on_error, "Executing...")

    def purge_history(self) -> None:
        if self._is_busy():
            self.set_status("Please wait for the running action to finish", 5000)
            return

        result = QMessageBox.warning(
            self,
            "Delete History",
            "Are you sure you want to delete the entire history?\n"
            "This cannot be undone.",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
            QMessageBox.StandardButton.No
        )
        if result != QMessageBox.StandardButton.Yes:
            return

        def on_success(page: HistoryPage) -> None:
            self._show_history(page)
            QMessageBox.information(self, "History Deleted", "The history was deleted.")

        def on_error(error: Exception) -> None:
            QMessageBox.critical(self, "Error", f"Failed to delete history:\n{error}")

        self._start(self.runner.purge_history, on_success, on_error, "Deleting history...")

    # History

    def _show_history(self, page: HistoryPage) -> None:
        """Render one history page and update the pagination controls."""
        self.history_table.blockSignals(True)
        self.history_table.load_page(page)
        self.history_table.blockSignals(False)

        self._page = page
        self.page_label.setText(f"Page {page.current_page} of {page.total_pages}")
        self._update_nav(page)

        if page.total_count:
            self.set_status(
                f"History: {page.total_count} queries - page {page.current_page} of {page.total_pages}"
            )
        else:
            self.set_status("History is empty")

    def _update_nav(self, page: Optional[HistoryPage]) -> None:
        can_back = page is not None and page.has_previous
        can_forward = page is not None and page.has_next
        self.btn_first.setEnabled(can_back)
        self.btn_prev.setEnabled(can_back)
        self.btn_next.setEnabled(can_forward)
        self.btn_last.setEnabled(can_forward)

    def _selected_history_row(self) -> int:
        rows = self.history_table.selectionModel().selectedRows()
        return rows[0].row() if rows else -1

    def _select(self, row: int) -> Optional[HistorySelection]:
        """The entry at ``row``, or None when the grid is out of date."""
        if self._is_busy():
            return None
        try:
            return self.runner.select_history(row)
        except IndexError:
            self._show_history(self.runner.get_history_page())
            return None

    def _on_history_selected(self) -> None:
        """Replay the selected entry into the connection box and editor."""
        row = self._selected_history_row()
        if row < 0:
            return
        selection = self._select(row)
        if selection is None:
            return
        self.editor.setPlainText(selection.query)
        if self.connection_edit.text() != selection.connection_string:
            self.connection_edit.setText(selection.connection_string)
        self.set_status(selection.summary)

    def _on_history_double_clicked(self, index) -> None:
        selection = self._select(index.row())
        if selection is None:
            return
        if selection.error_message:
            ErrorDialog(self, selection.error_message, "Query Error").exec()
        elif selection.record.is_successful:
            rows = ""
            if selection.record.record_count is not None:
                rows = f" - {selection.record.record_count} row(s) returned"
            QMessageBox.information(self, "Query Succeeded",
                                    f"This query ran successfully.{rows}")

    # Helpers

    def _history_note(self) -> str:
        if self.runner.last_history_error is not None:
            return " (history not saved)"
        return ""

    def _show_error(self, error: Exception, title: str) -> None:
        if isinstance(error, ValueError):
            QMessageBox.warning(self, "Error", str(error))
        elif isinstance(error, ExecutionFailure):
            ErrorDialog(self, error.format(title), title).exec()
        elif isinstance(error, StorageFailure):
            QMessageBox.critical(self, "Error", str(error))
        else:
            ErrorDialog(self, f"{title}:\n{error}", title).exec()

    def _warn_missing_drivers(self) -> None:
        missing = get_unavailable_adapters()
        if missing:
            names = ", ".join(f"{name} ({hint})" for _, name, hint in missing)
            self.set_status(f"Unavailable backends: {names}", 10000)

    def _toggle_dark_mode(self) -> None:
        Theme.toggle(QApplication.instance())
        self.action_dark_mode.setChecked(Theme.is_dark())
        if self._page is not None and not self._is_busy():
            self._show_history(self._page)

    def _show_about(self) -> None:
        from ..version import __version__
        QMessageBox.about(
            self,
            "About SqlRunner",
            f"SqlRunner v{__version__}\n\n"
            "Run SQL against SQLite files or SQL Server and keep a history "
            "of every execution."
        )
