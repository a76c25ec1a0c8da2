"""Shared connection handle that registration statements execute against."""

from __future__ import annotations

import logging
import threading
from typing import Protocol, runtime_checkable

import duckdb

from .errors import StatementExecutionError

LOG = logging.getLogger(__name__)


@runtime_checkable
class StatementExecutor(Protocol):
    """Anything able to run a single SQL statement on the current connection."""

    def execute(self, sql: str) -> None:
        """Run ``sql``; raise :class:`StatementExecutionError` on failure."""


def describe_error(exc: BaseException) -> str:
    """Render a DuckDB error without its statement-context lines.

    DuckDB appends a ``LINE n: ...`` excerpt of the statement (and a caret
    marker) after the reason; everything from that excerpt on is dropped.
    """

    lines: list[str] = []
    for line in str(exc).splitlines():
        if line.startswith("LINE "):
            break
        if line.strip():
            lines.append(line.strip())
    return " ".join(lines) or exc.__class__.__name__


class SharedConnection:
    """Lock-guarded DuckDB connection shared by every provisioning call.

    Statements never run concurrently on the wrapped connection.
    """

    def __init__(self, connection: duckdb.DuckDBPyConnection) -> None:
        self._connection: duckdb.DuckDBPyConnection | None = connection
        self._lock = threading.Lock()

    @classmethod
    def sibling_of(cls, connection: duckdb.DuckDBPyConnection) -> SharedConnection:
        """Open a sibling connection on the same database as ``connection``."""

        return cls(connection.cursor())

    @property
    def closed(self) -> bool:
        return self._connection is None

    def execute(self, sql: str) -> None:
        with self._lock:
            if self._connection is None:
                raise StatementExecutionError("duck_rage: connection not initialised")
            try:
                self._connection.execute(sql)
            except duckdb.Error as exc:
                reason = describe_error(exc)
                LOG.warning("Statement execution failed", extra={"error": exc.__class__.__name__})
                raise StatementExecutionError(f"Failed to execute statement: {reason}") from None

    def close(self) -> None:
        with self._lock:
            if self._connection is None:
                return
            self._connection.close()
            self._connection = None


__all__ = ["SharedConnection", "StatementExecutor", "describe_error"]
