"""
Dialog windows for the SqlRunner PyQt6 GUI.
"""

from .error_dialog import ErrorDialog

__all__ = ["ErrorDialog"]
