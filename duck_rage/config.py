"""App configuration loading helpers."""

from __future__ import annotations

import logging
from pathlib import Path

import tomllib

from pydantic import BaseModel, Field, ValidationError, field_validator

LOG = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".config" / "duck-rage"
CONFIG_FILE = CONFIG_DIR / "config.toml"


class AppConfig(BaseModel):
    """Shape of the duck-rage configuration file."""

    database: str = ":memory:"
    identity_file: Path = Field(default_factory=lambda: CONFIG_DIR / "identity.txt")
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown log level '{value}'")
        return level

    def with_overrides(self, **updates: object) -> AppConfig:
        """Return a copy with non-``None`` values applied."""

        applied = {key: value for key, value in updates.items() if value is not None}
        return self.model_copy(update=applied)


def load_config(path: Path | None = None) -> AppConfig:
    """Load configuration from disk; fall back to defaults if missing."""

    try:
        data = _read_config_file(path or CONFIG_FILE)
    except FileNotFoundError:
        return AppConfig()
    except (tomllib.TOMLDecodeError, OSError):
        LOG.warning("Ignoring unreadable config file", extra={"path": str(path or CONFIG_FILE)})
        return AppConfig()
    try:
        return AppConfig(**data)
    except ValidationError:
        LOG.warning("Ignoring invalid config file", extra={"path": str(path or CONFIG_FILE)})
        return AppConfig()


def _read_config_file(path: Path) -> dict[str, object]:
    with path.open("rb") as handle:
        raw = tomllib.load(handle)
    data: dict[str, object] = {}
    database = raw.get("database")
    if isinstance(database, str):
        data["database"] = database
    identity_file = raw.get("identity_file")
    if isinstance(identity_file, str):
        data["identity_file"] = Path(identity_file).expanduser()
    log_level = raw.get("log_level")
    if isinstance(log_level, str):
        data["log_level"] = log_level.upper()
    return data


__all__ = ["AppConfig", "CONFIG_FILE", "load_config"]
