"""The ``duck_rage`` table function: bind, init and poll."""

from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Sequence

from .connections import StatementExecutor
from .decrypt import decrypt_file
from .models import ProvisioningRequest, Row
from .params import Decryptor, Extractor, bind_request
from .payload import extract

LOG = logging.getLogger(__name__)

FUNCTION_NAME = "duck_rage"


class ParameterType(str, Enum):
    """Logical types of the table function's parameters and columns."""

    VARCHAR = "VARCHAR"
    INTEGER = "INTEGER"


class CallState(str, Enum):
    """Lifecycle of one provisioning call."""

    BOUND = "bound"
    EXECUTED = "executed"
    EXHAUSTED = "exhausted"


class InvocationCursor:
    """Per-call state machine: ``BOUND -> EXECUTED -> EXHAUSTED``.

    :meth:`claim` is an atomic read-and-set, so exactly one poll of a call is
    allowed to execute the statement.
    """

    def __init__(self) -> None:
        self._state = CallState.BOUND
        self._lock = threading.Lock()

    @property
    def state(self) -> CallState:
        return self._state

    def claim(self) -> bool:
        """Move ``BOUND -> EXECUTED``; return whether this caller won the claim."""

        with self._lock:
            if self._state is not CallState.BOUND:
                return False
            self._state = CallState.EXECUTED
            return True

    def exhaust(self) -> None:
        with self._lock:
            self._state = CallState.EXHAUSTED


def confirmation_message(request: ProvisioningRequest) -> str:
    conn = request.connection
    return (
        f"Secret '{request.credential_name}' created for "
        f"{conn.user}@{conn.host}:{conn.port}/{conn.database}"
    )


class ProvisionSecretFunction:
    """Decrypts a stored secret at bind time and registers it on first poll."""

    name = FUNCTION_NAME
    parameters: tuple[ParameterType, ...] = (
        ParameterType.VARCHAR,  # db_type
        ParameterType.VARCHAR,  # host
        ParameterType.INTEGER,  # port
        ParameterType.VARCHAR,  # database
        ParameterType.VARCHAR,  # user
        ParameterType.VARCHAR,  # secrets_file
        ParameterType.VARCHAR,  # secret_key
        ParameterType.VARCHAR,  # identity_file
    )
    columns: tuple[tuple[str, ParameterType], ...] = (("status", ParameterType.VARCHAR),)

    def __init__(
        self,
        executor: StatementExecutor,
        *,
        decryptor: Decryptor = decrypt_file,
        extractor: Extractor = extract,
    ) -> None:
        self._executor = executor
        self._decryptor = decryptor
        self._extractor = extractor

    @property
    def executor(self) -> StatementExecutor:
        return self._executor

    def bind(self, parameters: Sequence[object]) -> ProvisioningRequest:
        return bind_request(parameters, decryptor=self._decryptor, extractor=self._extractor)

    def init(self, request: ProvisioningRequest) -> InvocationCursor:
        return InvocationCursor()

    def func(self, request: ProvisioningRequest, cursor: InvocationCursor) -> list[Row]:
        """Produce the next batch of rows; an empty batch ends the call."""

        if not cursor.claim():
            return []
        self._executor.execute(request.statement)
        message = confirmation_message(request)
        cursor.exhaust()
        LOG.info(
            "Secret created",
            extra={
                "credential": request.credential_name,
                "host": request.connection.host,
                "port": request.connection.port,
                "database": request.connection.database,
                "user": request.connection.user,
            },
        )
        return [(message,)]


__all__ = [
    "CallState",
    "FUNCTION_NAME",
    "InvocationCursor",
    "ParameterType",
    "ProvisionSecretFunction",
    "confirmation_message",
]
