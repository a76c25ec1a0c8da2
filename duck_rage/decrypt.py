"""Identity-based decryption of age containers.

Generate a key pair with ``rage-keygen -o ~/.config/duck-rage/identity.txt``
and encrypt a secrets document to its public key::

    echo '{"db_password": "hunter2"}' | rage -r age1... -o secrets.age

Plaintext returned from :func:`decrypt_file` is never written anywhere and
never included in error messages or log records.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Sequence

import pyrage
from pyrage import ssh, x25519

from .errors import DecryptionError, IdentityLoadError, IdentityParseError, IoError

LOG = logging.getLogger(__name__)

SECRET_KEY_PREFIX = "AGE-SECRET-KEY-1"
PLUGIN_PREFIX = "AGE-PLUGIN-"
SSH_KEY_MARKER = "-----BEGIN"

Identity = Any


def read_bytes(path: str | Path, *, kind: str) -> bytes:
    """Read a whole file, mapping OS failures to :class:`IoError`."""

    try:
        return Path(path).read_bytes()
    except OSError as exc:
        reason = exc.strerror or exc.__class__.__name__
        raise IoError(f"Cannot read {kind} file '{path}': {reason}") from exc


def load_identities(identity_path: str | Path) -> list[Identity]:
    """Load every identity held by an age identity file or OpenSSH key."""

    raw = read_bytes(identity_path, kind="identity")
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError:
        raise IdentityParseError(
            f"Failed to parse identity file '{identity_path}': not UTF-8 text"
        ) from None

    if text.lstrip().startswith(SSH_KEY_MARKER):
        identities = [_load_ssh_identity(raw, identity_path)]
    else:
        identities = _load_identity_file(text, identity_path)

    if not identities:
        raise IdentityLoadError(f"Failed to load identities from '{identity_path}': no identities found")
    LOG.debug(
        "Loaded identities",
        extra={"identity_file": str(identity_path), "count": len(identities)},
    )
    return identities


def decrypt(ciphertext: bytes, identities: Sequence[Identity], *, path: str | Path, identity_path: str | Path) -> bytes:
    """Decrypt an in-memory container with the given identities.

    The container header names the recipients it was sealed to, so at most one
    identity matches.
    """

    try:
        return pyrage.decrypt(ciphertext, list(identities))
    except pyrage.DecryptError as exc:
        raise DecryptionError(
            f"Failed to decrypt '{path}' with identity '{identity_path}': {exc}"
        ) from None


def decrypt_file(ciphertext_path: str | Path, identity_path: str | Path) -> bytes:
    """Read and decrypt ``ciphertext_path`` using the identities in ``identity_path``."""

    ciphertext = read_bytes(ciphertext_path, kind="secrets")
    identities = load_identities(identity_path)
    plaintext = decrypt(ciphertext, identities, path=ciphertext_path, identity_path=identity_path)
    LOG.debug(
        "Decrypted secrets file",
        extra={"secrets_file": str(ciphertext_path), "identity_file": str(identity_path)},
    )
    return plaintext


def _load_identity_file(text: str, identity_path: str | Path) -> list[Identity]:
    identities: list[Identity] = []
    for lineno, line in enumerate(text.splitlines(), start=1):
        entry = line.strip()
        if not entry or entry.startswith("#"):
            continue
        if entry.startswith(PLUGIN_PREFIX):
            raise IdentityLoadError(
                f"Failed to load identities from '{identity_path}': "
                f"plugin identity on line {lineno} is not supported"
            )
        if not entry.startswith(SECRET_KEY_PREFIX):
            raise IdentityParseError(
                f"Failed to parse identity file '{identity_path}': "
                f"unrecognized entry on line {lineno}"
            )
        try:
            identities.append(x25519.Identity.from_str(entry))
        except (pyrage.IdentityError, ValueError):
            # The library error can quote the key, so it is not chained.
            raise IdentityLoadError(
                f"Failed to load identities from '{identity_path}': "
                f"invalid secret key on line {lineno}"
            ) from None
    return identities


def _load_ssh_identity(raw: bytes, identity_path: str | Path) -> Identity:
    try:
        return ssh.Identity.from_buffer(raw)
    except (pyrage.IdentityError, ValueError):
        raise IdentityLoadError(
            f"Failed to load identities from '{identity_path}': unusable SSH key"
        ) from None


__all__ = ["decrypt", "decrypt_file", "load_identities", "read_bytes"]
