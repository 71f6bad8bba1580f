"""
Error Dialog for the SqlRunner PyQt6 GUI.

Shows a full diagnostic text (driver error, connection string, stack trace
and tips) in a read-only, copyable text box.
"""

from typing import Optional
from PyQt6.QtGui import QFont, QKeySequence, QShortcut
from PyQt6.QtWidgets import (
    QApplication,
    QDialog,
    QVBoxLayout,
    QHBoxLayout,
    QPushButton,
    QPlainTextEdit,
    QWidget,
)


class ErrorDialog(QDialog):
    """Dialog for reading and copying a long error message."""

    def __init__(self, parent: Optional[QWidget], message: str,
                 title: str = "Error"):
        super().__init__(parent)

        self.message = message

        self.setWindowTitle(title)
        self.setMinimumSize(500, 350)
        self.resize(720, 520)

        if parent is not None:
            pg = parent.window().frameGeometry()
            self.move(
                pg.x() + (pg.width() - self.width()) // 2,
                pg.y() + (pg.height() - self.height()) // 2,
            )

        self._setup_ui()
        QShortcut(QKeySequence("Ctrl+Shift+C"), self).activated.connect(self._copy)

    def _setup_ui(self) -> None:
        layout = QVBoxLayout(self)

        self.text = QPlainTextEdit()
        self.text.setReadOnly(True)
        self.text.setLineWrapMode(QPlainTextEdit.LineWrapMode.WidgetWidth)
        font = QFont("JetBrains Mono", 10)
        font.setStyleHint(QFont.StyleHint.Monospace)
        self.text.setFont(font)
        self.text.setPlainText(self.message)
        layout.addWidget(self.text)

        btn_layout = QHBoxLayout()
        self.btn_copy = QPushButton("Copy")
        self.btn_copy.setToolTip("Copy the whole message (Ctrl+Shift+C)")
        self.btn_copy.clicked.connect(self._copy)
        btn_layout.addWidget(self.btn_copy)
        btn_layout.addStretch()
        btn_close = QPushButton("Close")
        btn_close.setDefault(True)
        btn_close.clicked.connect(self.accept)
        btn_layout.addWidget(btn_close)
        layout.addLayout(btn_layout)

    def _copy(self) -> None:
        """Copy the error text to the clipboard."""
        QApplication.clipboard().setText(self.message)
        self.btn_copy.setText("Copied")
