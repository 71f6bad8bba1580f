"""Value objects shared by the executor, the history store and the UI."""

import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional, Tuple


class BackendKind(enum.Enum):
    """Database engines a connection string can point at."""

    SQLITE = "sqlite"
    SQLSERVER = "sqlserver"

    @property
    def display_name(self) -> str:
        return "SQLite" if self is BackendKind.SQLITE else "SQL Server"


@dataclass(frozen=True)
class Classification:
    """Outcome of classifying a connection string.

    ``kind`` is None when the string matches neither backend and the
    executor has to probe.
    """

    kind: Optional[BackendKind]
    connection_string: str

    @property
    def is_ambiguous(self) -> bool:
        return self.kind is None


@dataclass(frozen=True)
class Column:
    name: str
    type_name: str


@dataclass(frozen=True)
class ResultSet:
    """Rows returned by one statement, materialized in memory."""

    columns: Tuple[Column, ...]
    rows: Tuple[Tuple[Any, ...], ...]
    backend: Optional[BackendKind] = None
    connection_string: str = ""
    rows_affected: int = -1

    @property
    def column_names(self) -> Tuple[str, ...]:
        return tuple(col.name for col in self.columns)

    @property
    def record_count(self) -> int:
        return len(self.rows)


@dataclass(frozen=True)
class HistoryRecord:
    """One executed query as stored in the history database."""

    id: int
    connection_string: str
    query: str
    executed_at: datetime
    is_successful: bool = True
    error_message: Optional[str] = None
    record_count: Optional[int] = None

    @property
    def status(self) -> str:
        return "Success" if self.is_successful else "Failed"

    @property
    def record_count_display(self) -> str:
        return str(self.record_count) if self.record_count is not None else "-"


@dataclass(frozen=True)
class HistoryPage:
    items: Tuple[HistoryRecord, ...]
    current_page: int
    total_pages: int
    total_count: int

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages


@dataclass(frozen=True)
class HistorySelection:
    """What the UI needs to replay a history entry into the editor."""

    record: HistoryRecord
    query: str = field(init=False)
    connection_string: str = field(init=False)
    error_message: Optional[str] = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "query", self.record.query)
        object.__setattr__(self, "connection_string", self.record.connection_string)
        object.__setattr__(self, "error_message", self.record.error_message)

    @property
    def summary(self) -> str:
        stamp = self.record.executed_at.strftime("%Y/%m/%d %H:%M:%S")
        if self.record.is_successful:
            rows = ""
            if self.record.record_count is not None:
                rows = f" - {self.record.record_count} row(s)"
            return f"Query loaded - succeeded{rows} - {stamp}"
        return f"Query loaded - failed - {stamp} (double-click to see the error)"
