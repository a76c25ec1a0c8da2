"""Shared dataclasses used across the provisioning modules."""

from __future__ import annotations

from dataclasses import dataclass

Row = tuple[str]


@dataclass(frozen=True, slots=True)
class ConnectionParameters:
    """Target database a credential is provisioned for."""

    host: str
    port: int
    database: str
    user: str


@dataclass(frozen=True, slots=True, repr=False)
class ProvisioningRequest:
    """Bind-time state: connection parameters plus the compiled statement.

    The statement text is the only carrier of the decrypted password, so it is
    excluded from ``repr`` and must never be logged.
    """

    connection: ConnectionParameters
    credential_name: str
    statement: str

    def __repr__(self) -> str:
        return (
            f"ProvisioningRequest(connection={self.connection!r}, "
            f"credential_name={self.credential_name!r}, statement=<redacted>)"
        )


@dataclass(frozen=True, slots=True)
class TableFunctionResult:
    """Rows collected from one table-function call."""

    columns: tuple[str, ...]
    rows: tuple[Row, ...]
    elapsed_ms: int

    @property
    def row_count(self) -> int:
        return len(self.rows)


__all__ = ["ConnectionParameters", "ProvisioningRequest", "Row", "TableFunctionResult"]
