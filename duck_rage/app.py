"""Command-line entrypoint provisioning a secret into a DuckDB database."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import duckdb

from .config import AppConfig, load_config
from .errors import DuckRageError
from .registry import provision_secret

LOG = logging.getLogger(__name__)


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="duck-rage",
        description="Decrypt a password from an age-encrypted JSON file and register it as a DuckDB secret.",
    )
    parser.add_argument("db_type", help="postgres or mysql")
    parser.add_argument("host")
    parser.add_argument("port")
    parser.add_argument("database_name", metavar="database")
    parser.add_argument("user")
    parser.add_argument("secrets_file", help="path to age-encrypted JSON file")
    parser.add_argument("secret_key", help="JSON key whose value is the password")
    parser.add_argument("--database", dest="duckdb_path", help="DuckDB database file (default: config or :memory:)")
    parser.add_argument("--identity-file", type=Path, help="age identity file (default: config)")
    parser.add_argument("--config", type=Path, help="path to config.toml")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    config: AppConfig = load_config(args.config).with_overrides(
        database=args.duckdb_path,
        identity_file=args.identity_file,
    )
    logging.basicConfig(level=config.log_level)

    try:
        connection = duckdb.connect(config.database)
    except duckdb.Error as exc:
        print(f"Cannot open DuckDB database '{config.database}': {exc}", file=sys.stderr)
        return 1
    try:
        result = provision_secret(
            connection,
            args.db_type,
            args.host,
            args.port,
            args.database_name,
            args.user,
            args.secrets_file,
            args.secret_key,
            str(config.identity_file),
        )
    except DuckRageError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    finally:
        connection.close()
    for (status,) in result.rows:
        print(status)
    LOG.debug("Provisioning finished", extra={"elapsed_ms": result.elapsed_ms})
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
