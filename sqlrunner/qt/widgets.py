"""
Table widgets for query results and query history.
"""

from typing import Optional
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QKeySequence
from PyQt6.QtWidgets import (
    QWidget,
    QTableWidget,
    QTableWidgetItem,
    QMenu,
    QHeaderView,
    QAbstractItemView,
    QApplication,
)

from .theme import Theme
from ..models import HistoryPage, ResultSet

MAX_COLUMN_WIDTH = 300


class ResultsTable(QTableWidget):
    """Table widget for displaying a ResultSet."""

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)

        self.setAlternatingRowColors(True)
        self.setSelectionBehavior(QAbstractItemView.SelectionBehavior.SelectRows)
        self.setSelectionMode(QAbstractItemView.SelectionMode.ExtendedSelection)
        self.setSortingEnabled(True)
        self.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)

        self.horizontalHeader().setStretchLastSection(True)
        self.horizontalHeader().setSectionResizeMode(QHeaderView.ResizeMode.Interactive)
        self.verticalHeader().setDefaultSectionSize(24)

        self.setContextMenuPolicy(Qt.ContextMenuPolicy.CustomContextMenu)
        self.customContextMenuRequested.connect(self._show_context_menu)

    def _show_context_menu(self, pos) -> None:
        menu = QMenu(self)
        menu.addAction("Copy", lambda: self._copy_selection(), QKeySequence("Ctrl+C"))
        menu.addAction("Copy with Headers", lambda: self._copy_selection(with_headers=True))
        menu.addSeparator()
        menu.addAction("Select All", self.selectAll, QKeySequence("Ctrl+A"))
        menu.exec(self.mapToGlobal(pos))

    def _copy_selection(self, with_headers: bool = False) -> None:
        """Copy selected cells to the clipboard as tab-separated text."""
        indexes = self.selectedIndexes()
        if not indexes:
            return

        rows = sorted({index.row() for index in indexes})
        cols = sorted({index.column() for index in indexes})

        def cell(item):
            return item.text() if item else ""

        lines = []
        if with_headers:
            lines.append("\t".join(cell(self.horizontalHeaderItem(c)) for c in cols))
        lines.extend("\t".join(cell(self.item(r, c)) for c in cols) for r in rows)

        QApplication.clipboard().setText("\n".join(lines))

    def clear_results(self) -> None:
        self.clear()
        self.setRowCount(0)
        self.setColumnCount(0)

    def load_result(self, result: ResultSet) -> None:
        """Load a ResultSet into the table."""
        self.clear()
        self.setSortingEnabled(False)

        if not result.columns:
            self.setRowCount(0)
            self.setColumnCount(0)
            return

        self.setColumnCount(len(result.columns))
        self.setHorizontalHeaderLabels(list(result.column_names))
        for i, column in enumerate(result.columns):
            self.horizontalHeaderItem(i).setToolTip(column.type_name)

        self.setRowCount(len(result.rows))
        for row_idx, row in enumerate(result.rows):
            for col_idx, value in enumerate(row):
                item = QTableWidgetItem(str(value) if value is not None else "")

                # Right-align numbers
                if isinstance(value, (int, float)) and not isinstance(value, bool):
                    item.setTextAlignment(
                        Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter
                    )

                self.setItem(row_idx, col_idx, item)

        self.resizeColumnsToContents()
        for i in range(self.columnCount()):
            if self.columnWidth(i) > MAX_COLUMN_WIDTH:
                self.setColumnWidth(i, MAX_COLUMN_WIDTH)

        self.setSortingEnabled(True)


class HistoryTable(QTableWidget):
    """One page of query history, newest first."""

    HEADERS = ["Executed At", "Status", "Rows", "Query", "Connection String"]

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)

        self.setColumnCount(len(self.HEADERS))
        self.setHorizontalHeaderLabels(self.HEADERS)
        self.setSelectionBehavior(QAbstractItemView.SelectionBehavior.SelectRows)
        self.setSelectionMode(QAbstractItemView.SelectionMode.SingleSelection)
        self.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
        self.horizontalHeader().setStretchLastSection(True)
        self.verticalHeader().setDefaultSectionSize(24)
        self.verticalHeader().setVisible(False)

    def load_page(self, page: HistoryPage) -> None:
        """Show the records of one history page."""
        self.clearContents()
        self.setRowCount(len(page.items))

        for i, record in enumerate(page.items):
            # Keep the grid to one line per entry; full text goes in the tooltip
            query_text = " ".join(record.query.split())
            items = [
                QTableWidgetItem(record.executed_at.strftime("%Y-%m-%d %H:%M:%S")),
                QTableWidgetItem(record.status),
                QTableWidgetItem(record.record_count_display),
                QTableWidgetItem(query_text[:200] + ("..." if len(query_text) > 200 else "")),
                QTableWidgetItem(record.connection_string),
            ]
            items[2].setTextAlignment(Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter)
            items[3].setToolTip(record.query)
            items[1].setForeground(
                Theme.succeeded_text_color() if record.is_successful else Theme.failed_text_color()
            )
            if not record.is_successful:
                items[1].setToolTip("Double-click to see the error")
                for item in items:
                    item.setBackground(Theme.failed_row_color())

            for col, item in enumerate(items):
                self.setItem(i, col, item)

        self.resizeColumnsToContents()
        for i in range(self.columnCount() - 1):
            if self.columnWidth(i) > MAX_COLUMN_WIDTH:
                self.setColumnWidth(i, MAX_COLUMN_WIDTH)
