"""SqlRunner - run ad-hoc SQL against SQLite or SQL Server and keep a history."""

from .version import __version__

__all__ = ["__version__"]
