"""Shared fixtures producing age identities and encrypted documents."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Callable

import pyrage
import pytest
from pyrage import x25519


@pytest.fixture
def identity() -> x25519.Identity:
    return x25519.Identity.generate()


@pytest.fixture
def identity_file(tmp_path: Path, identity: x25519.Identity) -> Path:
    path = tmp_path / "identity.txt"
    path.write_text(
        "# created: 2026-10-17T09:00:00Z\n"
        f"# public key: {identity.to_public()}\n"
        f"{identity}\n"
    )
    return path


@pytest.fixture
def seal(tmp_path: Path, identity: x25519.Identity) -> Callable[..., Path]:
    """Encrypt bytes or a JSON-able document to the fixture identity."""

    def _seal(document: object, *, name: str = "secrets.age", to: x25519.Identity | None = None) -> Path:
        if isinstance(document, bytes):
            plaintext = document
        else:
            plaintext = json.dumps(document).encode("utf-8")
        recipient = (to or identity).to_public()
        path = tmp_path / name
        path.write_bytes(pyrage.encrypt(plaintext, [recipient]))
        return path

    return _seal
