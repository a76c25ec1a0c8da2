"""Tests for backend parsing and statement building."""

from __future__ import annotations

import pytest
import sqlglot
from sqlglot.tokens import TokenType

from duck_rage.errors import UnsupportedBackendError
from duck_rage.providers import MYSQL, POSTGRES, BackendKind, escape_sql_string


def _literals(sql: str) -> list[str]:
    return [token.text for token in sqlglot.tokenize(sql, read="duckdb") if token.token_type == TokenType.STRING]


@pytest.mark.parametrize(
    ("literal", "expected"),
    [
        ("postgres", BackendKind.POSTGRES),
        ("PostgreSQL", BackendKind.POSTGRES),
        ("POSTGRES", BackendKind.POSTGRES),
        ("mysql", BackendKind.MYSQL),
        ("MySQL", BackendKind.MYSQL),
    ],
)
def test_backend_aliases_are_case_insensitive(literal: str, expected: BackendKind) -> None:
    assert BackendKind.parse(literal) is expected


@pytest.mark.parametrize("literal", ["", "sqlite", "postgre", "my sql", " postgres"])
def test_unknown_backend_lists_supported(literal: str) -> None:
    with pytest.raises(UnsupportedBackendError) as excinfo:
        BackendKind.parse(literal)

    message = str(excinfo.value)
    assert f"'{literal}'" in message
    assert "Supported: postgres, mysql" in message


def test_kinds_select_their_provider() -> None:
    assert BackendKind.POSTGRES.provider is POSTGRES
    assert BackendKind.MYSQL.provider is MYSQL
    assert POSTGRES.credential_type_tag() == "postgres"
    assert MYSQL.credential_type_tag() == "mysql"


def test_build_statement_embeds_every_field() -> None:
    sql = POSTGRES.build_statement("db.example.com", 5432, "orders", "svc", "s3cret")

    assert sql.startswith('CREATE OR REPLACE SECRET "duck_rage_orders" (')
    assert "TYPE postgres" in sql
    assert "PORT 5432," in sql
    assert _literals(sql) == ["db.example.com", "orders", "svc", "s3cret"]


def test_build_statement_uses_backend_type() -> None:
    sql = MYSQL.build_statement("localhost", 3306, "shop", "root", "pw")

    assert "TYPE mysql" in sql
    assert "PORT 3306," in sql


def test_build_statement_doubles_single_quotes() -> None:
    sql = POSTGRES.build_statement("h'ost", 5432, "o'brien", "us'er", "pa''ss")

    assert "DATABASE 'o''brien'" in sql
    assert "PASSWORD 'pa''''ss'" in sql
    assert _literals(sql) == ["h'ost", "o'brien", "us'er", "pa''ss"]
    identifiers = [
        token.text for token in sqlglot.tokenize(sql, read="duckdb") if token.token_type == TokenType.IDENTIFIER
    ]
    assert "duck_rage_o'brien" in identifiers


def test_build_statement_allows_empty_strings() -> None:
    sql = POSTGRES.build_statement("", 0, "", "", "")

    assert _literals(sql) == ["", "", "", ""]
    assert "PORT 0," in sql


def test_escape_sql_string() -> None:
    assert escape_sql_string("it's") == "it''s"
    assert escape_sql_string("plain") == "plain"
