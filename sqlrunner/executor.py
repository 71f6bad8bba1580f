"""Open a backend connection, run one statement, and close it again."""

import logging
from dataclasses import replace

from .adapters import get_adapter
from .classifier import classify, sqlite_connection_string
from .errors import ExecutionFailure
from .models import BackendKind, Classification

logger = logging.getLogger(__name__)

# Ambiguous strings are tried against these backends, in this order
PROBE_ORDER = (BackendKind.SQLITE, BackendKind.SQLSERVER)


class QueryExecutor:
    """Runs statements against whichever backend a connection string names.

    Every call opens a fresh connection and closes it before returning, on
    success and on failure alike.
    """

    def __init__(self, adapters=None):
        self.adapters = dict(adapters) if adapters else {}

    def adapter_for(self, kind):
        if kind not in self.adapters:
            self.adapters[kind] = get_adapter(kind)
        return self.adapters[kind]

    def execute(self, connection_string, query):
        """Run ``query`` and return a ResultSet; raise ExecutionFailure on error."""
        classification = classify(connection_string)
        if classification.is_ambiguous:
            return self._probe(classification.connection_string, query)
        return self._run(classification.kind, classification.connection_string, query)

    def test_connection(self, connection_string):
        """Open and close a connection without running anything.

        Returns the Classification that succeeded.
        """
        classification = classify(connection_string)
        if classification.is_ambiguous:
            return self._probe(classification.connection_string, None)
        self._run(classification.kind, classification.connection_string, None)
        return classification

    def _probe(self, connection_string, query):
        failures = []
        for kind in PROBE_ORDER:
            used = connection_string
            if kind is BackendKind.SQLITE and "=" not in used:
                used = sqlite_connection_string(used)
            try:
                result = self._run(kind, used, query, probing=True)
            except ExecutionFailure as failure:
                logger.debug("%s probe failed: %s", kind.display_name, failure.message)
                failures.append(failure)
                continue
            if query is None:
                return Classification(kind, used)
            return result

        sqlite_failure, sqlserver_failure = failures
        raise ExecutionFailure(
            "Could not connect to the database.\n\n"
            f"SQLite error: {sqlite_failure.message}\n\n"
            f"SQL Server error: {sqlserver_failure.message}\n\n"
            "Please check the connection string.",
            connection_string=connection_string,
            cause=sqlite_failure.message,
            trace=sqlite_failure.trace,
            attempts=failures,
        )

    def _run(self, kind, connection_string, query, probing=False):
        adapter = self.adapter_for(kind)
        if not adapter.is_available():
            raise ExecutionFailure(
                f"{adapter.display_name} support requires the '{adapter.required_module}' "
                f"module.\nInstall it with: {adapter.install_hint}",
                connection_string=connection_string,
                backend=kind,
            )

        conn = None
        try:
            logger.debug("Connecting to %s", adapter.display_name)
            conn = adapter.connect(connection_string, must_exist=probing)
            if query is None:
                return None
            result = adapter.fetch(conn, query)
        except Exception as e:
            raise ExecutionFailure.from_exception(e, connection_string, backend=kind) from e
        finally:
            if conn is not None:
                try:
                    conn.close()
                except Exception:
                    logger.debug("Closing %s connection failed", adapter.display_name, exc_info=True)

        logger.info("%s query returned %d row(s)", adapter.display_name, result.record_count)
        return replace(result, backend=kind, connection_string=connection_string)
