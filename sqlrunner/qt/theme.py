"""
Theme for the SqlRunner PyQt6 GUI.

Fusion style with a light or dark palette. Each palette also names the
colors used to mark history entries as succeeded or failed.
"""

from typing import Dict, Tuple
from PyQt6.QtCore import QSettings
from PyQt6.QtGui import QPalette, QColor
from PyQt6.QtWidgets import QApplication, QStyleFactory

from ..config import APP_NAME

RGB = Tuple[int, int, int]

DARK_ROLES: Dict[QPalette.ColorRole, RGB] = {
    QPalette.ColorRole.Window: (45, 45, 48),
    QPalette.ColorRole.WindowText: (230, 230, 230),
    QPalette.ColorRole.Base: (30, 30, 30),
    QPalette.ColorRole.AlternateBase: (45, 45, 48),
    QPalette.ColorRole.Text: (230, 230, 230),
    QPalette.ColorRole.Button: (45, 45, 48),
    QPalette.ColorRole.ButtonText: (230, 230, 230),
    QPalette.ColorRole.ToolTipBase: (60, 60, 64),
    QPalette.ColorRole.ToolTipText: (230, 230, 230),
    QPalette.ColorRole.PlaceholderText: (140, 140, 140),
    QPalette.ColorRole.Highlight: (38, 79, 120),
    QPalette.ColorRole.HighlightedText: (255, 255, 255),
}

STATUS_COLORS: Dict[bool, Dict[str, RGB]] = {
    True: {"failed_row": (80, 40, 40), "succeeded": (120, 200, 120), "failed": (240, 120, 120)},
    False: {"failed_row": (255, 225, 225), "succeeded": (0, 128, 0), "failed": (180, 0, 0)},
}


class Theme:
    """Light/dark palette switch, remembered between sessions."""

    _is_dark: bool = True

    @classmethod
    def is_dark(cls) -> bool:
        return cls._is_dark

    @classmethod
    def load(cls) -> None:
        """Read the dark mode preference saved by a previous session."""
        settings = QSettings(APP_NAME, APP_NAME)
        cls._is_dark = settings.value("dark_mode", "1") == "1"

    @classmethod
    def save(cls) -> None:
        settings = QSettings(APP_NAME, APP_NAME)
        settings.setValue("dark_mode", "1" if cls._is_dark else "0")

    @classmethod
    def apply(cls, app: QApplication) -> None:
        app.setStyle(QStyleFactory.create("Fusion"))
        if not cls._is_dark:
            app.setPalette(app.style().standardPalette())
            return

        palette = QPalette()
        for role, rgb in DARK_ROLES.items():
            palette.setColor(role, QColor(*rgb))
        app.setPalette(palette)

    @classmethod
    def toggle(cls, app: QApplication) -> None:
        cls._is_dark = not cls._is_dark
        cls.apply(app)
        cls.save()

    @classmethod
    def _status(cls, name: str) -> QColor:
        return QColor(*STATUS_COLORS[cls._is_dark][name])

    @classmethod
    def failed_row_color(cls) -> QColor:
        return cls._status("failed_row")

    @classmethod
    def succeeded_text_color(cls) -> QColor:
        return cls._status("succeeded")

    @classmethod
    def failed_text_color(cls) -> QColor:
        return cls._status("failed")
