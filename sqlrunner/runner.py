"""The operations the UI calls: test, run, page through and purge history."""

import logging

from .config import DEFAULT_PAGE_SIZE
from .errors import ExecutionFailure, StorageFailure
from .executor import QueryExecutor
from .history import HistoryPaginator

logger = logging.getLogger(__name__)


class SqlRunner:
    """Ties the executor, the history store and the paginator together.

    Every ``run_query`` attempt is written to history, whether it succeeded
    or not. A failed history write is logged and kept in
    ``last_history_error``; it never replaces the query outcome.
    """

    def __init__(self, store, executor=None, page_size=DEFAULT_PAGE_SIZE):
        self.store = store
        self.executor = executor or QueryExecutor()
        self.paginator = HistoryPaginator(page_size)
        self.last_history_error = None
        self.reload_history()

    def test_connection(self, connection_string):
        """Open and close a connection; raises ExecutionFailure on error."""
        if not connection_string or not connection_string.strip():
            raise ValueError("Please enter a connection string.")
        return self.executor.test_connection(connection_string.strip())

    def run_query(self, connection_string, query):
        """Execute ``query``, record the attempt, and return the ResultSet."""
        connection_string = (connection_string or "").strip()
        query = (query or "").strip()
        if not connection_string:
            raise ValueError("Please enter a connection string.")
        if not query:
            raise ValueError("Please enter a SQL query.")

        try:
            result = self.executor.execute(connection_string, query)
        except ExecutionFailure as failure:
            self._record(connection_string, query, is_successful=False,
                         error_message=failure.format())
            raise

        self._record(connection_string, query, is_successful=True,
                     record_count=result.record_count)
        return result

    def _record(self, connection_string, query, **outcome):
        self.last_history_error = None
        try:
            self.store.append(connection_string, query, **outcome)
        except StorageFailure as e:
            logger.warning("Query history not saved: %s", e)
            self.last_history_error = e
        self.reload_history()

    def reload_history(self):
        self.paginator.load(self.store.list_all())
        return self.paginator.snapshot()

    def get_history_page(self, page=None):
        if page is None:
            return self.paginator.snapshot()
        return self.paginator.go_to(page)

    def first_page(self):
        return self.paginator.first()

    def previous_page(self):
        return self.paginator.previous()

    def next_page(self):
        return self.paginator.next()

    def last_page(self):
        return self.paginator.last()

    def select_history(self, index):
        return self.paginator.select(index)

    def purge_history(self):
        """Delete every history record; raises StorageFailure on error."""
        self.store.purge_all()
        return self.reload_history()

    def latest_connection_string(self):
        return self.store.latest_connection_string()
