"""Error taxonomy raised while provisioning secrets."""

from __future__ import annotations


class DuckRageError(RuntimeError):
    """Base error for provisioning failures.

    Carries an optional usage synopsis which is appended when the error is
    rendered, so callers see both the root cause and the calling convention.
    """

    def __init__(self, message: str, *, usage: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.usage = usage

    def __str__(self) -> str:
        if self.usage:
            return f"{self.message}\n\n{self.usage}"
        return self.message

    def with_usage(self, usage: str) -> DuckRageError:
        """Attach the usage synopsis and return the same error."""

        self.usage = usage
        return self


# --- Parameters ---


class UnsupportedBackendError(DuckRageError):
    """Raised for an unknown backend-kind literal."""


class InvalidPortError(DuckRageError):
    """Raised when the port parameter is not an integer."""


# --- Decryption ---


class IoError(DuckRageError):
    """Raised when the secrets file or identity file cannot be read."""


class IdentityParseError(DuckRageError):
    """Raised when identity material is not in a recognized encoding."""


class IdentityLoadError(DuckRageError):
    """Raised when identity entries parse but cannot be used (or none exist)."""


class DecryptionError(DuckRageError):
    """Raised when no identity unlocks the container or it is malformed."""


# --- Payload ---


class MalformedPayloadError(DuckRageError):
    """Raised when decrypted bytes are not a JSON object."""


class KeyNotFoundError(DuckRageError):
    """Raised when the requested field is absent."""


class KeyTypeError(DuckRageError):
    """Raised when the requested field is not a string."""


# --- Execution ---


class StatementExecutionError(DuckRageError):
    """Raised when the host connection fails to run the registration statement."""


class RegistrationError(DuckRageError):
    """Raised when the table function cannot be registered at startup."""


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
    "UnsupportedBackendError",
]
