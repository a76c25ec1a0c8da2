"""Provision DuckDB secrets from age-encrypted JSON documents."""

from .errors import (
    DecryptionError,
    DuckRageError,
    IdentityLoadError,
    IdentityParseError,
    InvalidPortError,
    IoError,
    KeyNotFoundError,
    KeyTypeError,
    MalformedPayloadError,
    RegistrationError,
    StatementExecutionError,
    UnsupportedBackendError,
)
from .registry import TableFunctionRegistry, extension_entrypoint, provision_secret

__version__ = "0.1.0"

__all__ = [
    "DecryptionError",
    "DuckRageError",
    "IdentityLoadError",
    "IdentityParseError",
    "InvalidPortError",
    "IoError",
    "KeyNotFoundError",
    "KeyTypeError",
    "MalformedPayloadError",
    "RegistrationError",
    "StatementExecutionError",
    "TableFunctionRegistry",
    "UnsupportedBackendError",
    "__version__",
    "extension_entrypoint",
    "provision_secret",
]
