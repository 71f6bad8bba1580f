"""
SqlRunner PyQt6 GUI Module

Desktop front end over the query runner and its history.
"""

from .main_window import MainWindow

__all__ = ["MainWindow"]
