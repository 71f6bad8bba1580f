"""Exceptions raised by the query executor and the history store."""

import traceback

from .guidance import guidance_for

SEPARATOR = "=" * 40


class SqlRunnerError(Exception):
    """Base class for errors surfaced to the UI."""


class StorageFailure(SqlRunnerError):
    """The history store could not complete a write or delete."""


class ExecutionFailure(SqlRunnerError):
    """A backend rejected the statement or the connection could not be opened.

    Carries the primary error text, the causal error text (if any), the
    native traceback text, and the connection string that was actually used.
    ``attempts`` holds the per-backend failures when the executor had to
    probe more than one backend.
    """

    def __init__(self, message, connection_string="", cause=None, trace=None,
                 backend=None, attempts=()):
        super().__init__(message)
        self.message = message
        self.connection_string = connection_string
        self.cause = cause
        self.trace = trace
        self.backend = backend
        self.attempts = tuple(attempts)
        self.guidance = guidance_for(message)

    @classmethod
    def from_exception(cls, exc, connection_string, backend=None):
        """Wrap a driver exception, keeping its chained cause and traceback."""
        inner = exc.__cause__ or exc.__context__
        trace = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)).strip()
        return cls(
            str(exc) or type(exc).__name__,
            connection_string=connection_string,
            cause=str(inner) if inner is not None else None,
            trace=trace or None,
            backend=backend,
        )

    def format(self, title="Query execution failed"):
        """Render the failure as one copyable diagnostic text."""
        parts = [f"{title}:\n{self.message}"]
        if self.connection_string:
            parts.append(f"Connection string used:\n{self.connection_string}")
        if self.cause:
            parts.append(f"More details:\n{self.cause}")
        if self.trace:
            parts.append(f"Stack trace:\n{self.trace}")
        if self.guidance:
            parts.append(f"{SEPARATOR}\nTips:\n{self.guidance}")
        return "\n\n".join(parts)

    def __str__(self):
        return self.message
