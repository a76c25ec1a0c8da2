"""Positional parameter validation and backend dispatch."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Callable, Sequence

from .decrypt import decrypt_file
from .errors import DuckRageError, InvalidPortError
from .models import ConnectionParameters, ProvisioningRequest
from .payload import extract
from .providers import BackendKind, credential_name

LOG = logging.getLogger(__name__)

USAGE = """Usage: duck_rage(
  db_type       VARCHAR  -- 'postgres' or 'mysql'
  host          VARCHAR  -- hostname or IP
  port          INTEGER  -- e.g. 5432
  database      VARCHAR  -- database name
  user          VARCHAR  -- login user
  secrets_file  VARCHAR  -- path to age-encrypted JSON file
  secret_key    VARCHAR  -- JSON key whose value is the password
  identity_file VARCHAR  -- path to age identity file (rage-keygen output)
)"""

PARAMETER_NAMES: tuple[str, ...] = (
    "db_type",
    "host",
    "port",
    "database",
    "user",
    "secrets_file",
    "secret_key",
    "identity_file",
)

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

_INTEGER = re.compile(r"[+-]?[0-9]+")

Decryptor = Callable[[str | Path, str | Path], bytes]
Extractor = Callable[[bytes, str], str]


def parse_port(value: object) -> int:
    """Parse the port parameter as a 32-bit signed integer."""

    if isinstance(value, int) and not isinstance(value, bool):
        port = value
    elif isinstance(value, str) and _INTEGER.fullmatch(value):
        port = int(value)
    else:
        raise InvalidPortError(f"Invalid port '{value}': must be an integer", usage=USAGE)
    if not INT32_MIN <= port <= INT32_MAX:
        raise InvalidPortError(f"Invalid port '{value}': must be an integer", usage=USAGE)
    return port


def parse_backend(value: object) -> BackendKind:
    try:
        return BackendKind.parse(str(value))
    except DuckRageError as exc:
        raise exc.with_usage(USAGE)


def bind_request(
    parameters: Sequence[object],
    *,
    decryptor: Decryptor = decrypt_file,
    extractor: Extractor = extract,
) -> ProvisioningRequest:
    """Validate the eight positional parameters and compile the statement.

    The recovered password is embedded into the statement and not kept
    anywhere else.
    """

    if len(parameters) != len(PARAMETER_NAMES):
        raise DuckRageError(
            f"duck_rage expects {len(PARAMETER_NAMES)} parameters, got {len(parameters)}",
            usage=USAGE,
        )
    kind = parse_backend(parameters[0])
    host = str(parameters[1])
    port = parse_port(parameters[2])
    database = str(parameters[3])
    user = str(parameters[4])
    secrets_file = str(parameters[5])
    secret_key = str(parameters[6])
    identity_file = str(parameters[7])

    try:
        statement = kind.provider.build_statement(
            host,
            port,
            database,
            user,
            extractor(decryptor(secrets_file, identity_file), secret_key),
        )
    except DuckRageError as exc:
        raise exc.with_usage(USAGE)

    connection = ConnectionParameters(host=host, port=port, database=database, user=user)
    LOG.debug(
        "Bound provisioning request",
        extra={
            "backend": kind.value,
            "host": host,
            "port": port,
            "database": database,
            "user": user,
            "secrets_file": secrets_file,
        },
    )
    return ProvisioningRequest(
        connection=connection,
        credential_name=credential_name(database),
        statement=statement,
    )


__all__ = ["INT32_MAX", "INT32_MIN", "PARAMETER_NAMES", "USAGE", "bind_request", "parse_backend", "parse_port"]
