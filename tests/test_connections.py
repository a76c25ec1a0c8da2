"""Tests for the shared DuckDB connection handle."""

from __future__ import annotations

import threading

import duckdb
import pytest

from duck_rage.connections import SharedConnection, StatementExecutor
from duck_rage.errors import StatementExecutionError


def test_shared_connection_executes_on_same_database() -> None:
    connection = duckdb.connect(":memory:")
    shared = SharedConnection.sibling_of(connection)

    shared.execute("CREATE TABLE provisioned (name VARCHAR)")
    shared.execute("INSERT INTO provisioned VALUES ('duck_rage_orders')")

    assert connection.execute("SELECT name FROM provisioned").fetchall() == [("duck_rage_orders",)]
    assert isinstance(shared, StatementExecutor)
    shared.close()
    connection.close()


def test_shared_connection_surfaces_headline_only() -> None:
    shared = SharedConnection(duckdb.connect(":memory:"))

    with pytest.raises(StatementExecutionError) as excinfo:
        shared.execute("CREATE OR REPLACE SECRET x ( PASSWORD 'hunter2' ) garbage")

    assert "hunter2" not in str(excinfo.value)
    assert excinfo.value.__cause__ is None
    shared.close()


def test_closed_connection_is_reported() -> None:
    shared = SharedConnection(duckdb.connect(":memory:"))
    shared.close()
    shared.close()

    assert shared.closed is True
    with pytest.raises(StatementExecutionError, match="not initialised"):
        shared.execute("SELECT 1")


def test_statements_are_serialized() -> None:
    connection = duckdb.connect(":memory:")
    shared = SharedConnection.sibling_of(connection)
    shared.execute("CREATE TABLE hits (n INTEGER)")

    def _insert(n: int) -> None:
        for _ in range(20):
            shared.execute(f"INSERT INTO hits VALUES ({n})")

    threads = [threading.Thread(target=_insert, args=(n,)) for n in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert connection.execute("SELECT count(*) FROM hits").fetchone() == (80,)
    shared.close()
    connection.close()


class _FailingConnection:
    def __init__(self, error: Exception) -> None:
        self._error = error

    def execute(self, _sql: str) -> None:
        raise self._error

    def close(self) -> None:  # pragma: no cover - nothing to clean
        return None


def test_multi_line_reason_is_kept_without_statement_context() -> None:
    error = duckdb.IOException(
        "An error occurred while trying to automatically install the required extension 'postgres_scanner':\n"
        "Failed to download extension \"postgres_scanner\"\n"
        "\n"
        "LINE 1: CREATE OR REPLACE SECRET \"duck_rage_orders\" ( TYPE postgres, PASSWORD 'hunter2' )\n"
        "        ^"
    )
    shared = SharedConnection(_FailingConnection(error))  # type: ignore[arg-type]

    with pytest.raises(StatementExecutionError) as excinfo:
        shared.execute("CREATE OR REPLACE SECRET ...")

    message = str(excinfo.value)
    assert "required extension 'postgres_scanner':" in message
    assert 'Failed to download extension "postgres_scanner"' in message
    assert "hunter2" not in message
    assert "LINE 1" not in message
