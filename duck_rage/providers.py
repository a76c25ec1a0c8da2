"""Backend providers that build credential-registration statements."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from sqlglot import exp

from .errors import UnsupportedBackendError

CREDENTIAL_PREFIX = "duck_rage_"


class BackendKind(str, Enum):
    """Closed set of database backends a credential can target."""

    POSTGRES = "postgres"
    MYSQL = "mysql"

    @classmethod
    def parse(cls, value: str) -> BackendKind:
        """Parse a backend literal case-insensitively, accepting aliases."""

        kind = _ALIASES.get(value.lower())
        if kind is None:
            supported = ", ".join(member.value for member in cls)
            raise UnsupportedBackendError(f"Unknown db_type '{value}'. Supported: {supported}")
        return kind

    @property
    def provider(self) -> BackendProvider:
        return _PROVIDERS[self]


_ALIASES: dict[str, BackendKind] = {
    "postgres": BackendKind.POSTGRES,
    "postgresql": BackendKind.POSTGRES,
    "mysql": BackendKind.MYSQL,
}


def escape_sql_string(value: str) -> str:
    """Double single quotes for embedding in a SQL string literal."""

    return value.replace("'", "''")


def credential_name(database: str) -> str:
    """Deterministic credential name for a database."""

    return f"{CREDENTIAL_PREFIX}{database}"


@dataclass(frozen=True, slots=True)
class BackendProvider:
    """Stateless statement builder for one backend kind."""

    secret_type: str

    def credential_type_tag(self) -> str:
        return self.secret_type

    def build_statement(self, host: str, port: int, database: str, user: str, password: str) -> str:
        """Build an idempotent ``CREATE OR REPLACE SECRET`` statement."""

        name = exp.to_identifier(credential_name(database), quoted=True).sql(dialect="duckdb")
        return (
            f"CREATE OR REPLACE SECRET {name} ( "
            f"TYPE {self.secret_type}, "
            f"HOST '{escape_sql_string(host)}', "
            f"PORT {int(port)}, "
            f"DATABASE '{escape_sql_string(database)}', "
            f"USER '{escape_sql_string(user)}', "
            f"PASSWORD '{escape_sql_string(password)}' "
            ")"
        )


POSTGRES = BackendProvider(secret_type="postgres")
MYSQL = BackendProvider(secret_type="mysql")

_PROVIDERS: dict[BackendKind, BackendProvider] = {
    BackendKind.POSTGRES: POSTGRES,
    BackendKind.MYSQL: MYSQL,
}


__all__ = [
    "BackendKind",
    "BackendProvider",
    "CREDENTIAL_PREFIX",
    "MYSQL",
    "POSTGRES",
    "credential_name",
    "escape_sql_string",
]
