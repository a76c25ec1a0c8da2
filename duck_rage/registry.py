"""Registry of table functions and the extension entrypoint."""

from __future__ import annotations

import logging
import time
from typing import Any, Protocol, Sequence

import duckdb

from .connections import SharedConnection
from .errors import RegistrationError
from .function import FUNCTION_NAME, ParameterType, ProvisionSecretFunction
from .models import Row, TableFunctionResult

LOG = logging.getLogger(__name__)


class TableFunction(Protocol):
    """Contract for functions driven by :class:`TableFunctionRegistry`."""

    name: str
    parameters: tuple[ParameterType, ...]
    columns: tuple[tuple[str, ParameterType], ...]

    def bind(self, parameters: Sequence[object]) -> Any: ...

    def init(self, bind_data: Any) -> Any: ...

    def func(self, bind_data: Any, init_data: Any) -> list[Row]: ...


class TableFunctionRegistry:
    """Collects table functions and runs them by name."""

    def __init__(self) -> None:
        self._functions: dict[str, TableFunction] = {}

    def register(self, function: TableFunction) -> None:
        """Register a table function; names are unique."""

        if function.name in self._functions:
            raise RegistrationError(f"Table function '{function.name}' is already registered")
        self._functions[function.name] = function
        LOG.debug("Registered table function", extra={"function": function.name})

    def get(self, name: str) -> TableFunction:
        try:
            return self._functions[name]
        except KeyError:
            raise KeyError(f"Unknown table function '{name}'") from None

    def list_functions(self) -> list[TableFunction]:
        return list(self._functions.values())

    def call(self, name: str, *parameters: object) -> TableFunctionResult:
        """Bind once, init once, then poll until an empty batch comes back."""

        function = self.get(name)
        started = time.perf_counter()
        bind_data = function.bind(parameters)
        init_data = function.init(bind_data)
        rows: list[Row] = []
        while True:
            batch = function.func(bind_data, init_data)
            if not batch:
                break
            rows.extend(batch)
        elapsed_ms = int((time.perf_counter() - started) * 1000)
        return TableFunctionResult(
            columns=tuple(column for column, _ in function.columns),
            rows=tuple(rows),
            elapsed_ms=elapsed_ms,
        )


def extension_entrypoint(
    connection: duckdb.DuckDBPyConnection,
    registry: TableFunctionRegistry | None = None,
) -> TableFunctionRegistry:
    """Register ``duck_rage`` against a sibling of ``connection``.

    Registration failures are fatal to startup and surface as
    :class:`RegistrationError`.
    """

    registry = registry or TableFunctionRegistry()
    try:
        shared = SharedConnection.sibling_of(connection)
    except duckdb.Error as exc:
        raise RegistrationError(f"Failed to register {FUNCTION_NAME} table function: {exc}") from exc
    try:
        registry.register(ProvisionSecretFunction(shared))
    except RegistrationError:
        shared.close()
        raise
    return registry


def provision_secret(connection: duckdb.DuckDBPyConnection, *parameters: object) -> TableFunctionResult:
    """Run ``duck_rage`` once against ``connection``."""

    registry = extension_entrypoint(connection)
    try:
        return registry.call(FUNCTION_NAME, *parameters)
    finally:
        for function in registry.list_functions():
            executor = getattr(function, "executor", None)
            if isinstance(executor, SharedConnection):
                executor.close()


__all__ = ["TableFunction", "TableFunctionRegistry", "extension_entrypoint", "provision_secret"]
