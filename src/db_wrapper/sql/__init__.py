# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Database adapters for MySQL, PostgreSQL and SQLite.

Usage:
    adapter = get_adapter("mysql:")    # MySQL/MariaDB (PyMySQL)
    adapter = get_adapter("pgsql:")    # PostgreSQL (psycopg)
    adapter = get_adapter("sqlite")    # SQLite (standard library)

    conn = adapter.connect(settings)
    cursor = adapter.cursor(conn)
"""

from .base import (
    CONNECTION_MISSING_SQLSTATE,
    GENERAL_ERROR_SQLSTATE,
    NO_ERROR_SQLSTATE,
    DbAdapter,
    ErrorInfo,
)
from .sqlite import SqliteAdapter

__all__ = [
    "ADAPTERS",
    "CONNECTION_MISSING_SQLSTATE",
    "DbAdapter",
    "ErrorInfo",
    "GENERAL_ERROR_SQLSTATE",
    "NO_ERROR_SQLSTATE",
    "POSTGRES_KINDS",
    "SqliteAdapter",
    "get_adapter",
    "normalize_driver",
]

POSTGRES_KINDS = ("pgsql", "postgres", "postgresql")
MYSQL_KINDS = ("mysql", "mariadb")

# Adapter registry
ADAPTERS: dict[str, type[DbAdapter]] = {
    "sqlite": SqliteAdapter,
    "sqlite3": SqliteAdapter,
}


def normalize_driver(driver: str) -> str:
    """Return the driver kind without trailing colon, in lower case."""
    return driver.strip().rstrip(":").lower()


def get_adapter(driver: str) -> DbAdapter:
    """Create database adapter from a driver kind.

    Driver kinds:
        - "mysql:" or "mariadb:" → MySQL (PyMySQL)
        - "pgsql:", "postgres:" or "postgresql:" → PostgreSQL (psycopg)
        - "sqlite:" or "sqlite3" → SQLite

    Args:
        driver: Driver kind, the trailing colon is optional.

    Returns:
        Configured DbAdapter instance.

    Raises:
        ValueError: If the driver kind is unknown.
        ImportError: If the driver library is not installed.
    """
    kind = normalize_driver(driver)

    if kind in ADAPTERS:
        return ADAPTERS[kind]()

    # Lazy imports to avoid ImportError when optional drivers are missing
    if kind in POSTGRES_KINDS:
        from .postgresql import PostgresAdapter

        adapter: DbAdapter = PostgresAdapter()
        for alias in POSTGRES_KINDS:
            ADAPTERS[alias] = PostgresAdapter
        return adapter

    if kind in MYSQL_KINDS:
        from .mysql import MysqlAdapter

        adapter = MysqlAdapter()
        for alias in MYSQL_KINDS:
            ADAPTERS[alias] = MysqlAdapter
        return adapter

    raise ValueError(
        f"Unknown database driver: '{driver}'. "
        "Supported: mysql, pgsql, sqlite"
    )
