# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Compatibility wrapper for code written against the ADOdb CRUD API.

Applications that only use the basic ADOdb calls can switch to plain DB-API
drivers by replacing their connection object with a :class:`Wrapper`.

Features:
    - execute/update/delete/get_one/get_all/get_last_id with legacy aliases
    - ``?`` positional parameters on every dialect
    - MySQL/MariaDB (PyMySQL), PostgreSQL (psycopg) and SQLite backends
    - Sticky last-error reporting instead of exceptions

Example::

    from db_wrapper import Wrapper

    db = Wrapper("localhost", "app", "user", "secret")
    db.execute("INSERT INTO users (surname, forename) VALUES (?, ?)", ["Smith", "Alice"])
    for user in db.get_all("SELECT * FROM users ORDER BY surname"):
        print(user["surname"], user["forename"])
"""

from .config_loader import load_connection_settings
from .models import ConnectionSettings, ErrorMode, FetchMode, WrapperOptions
from .sql import ErrorInfo, get_adapter
from .statement import Statement, StatementKind
from .wrapper import StatementMissingError, Wrapper

__version__ = "0.1.0"

__all__ = [
    "ConnectionSettings",
    "ErrorInfo",
    "ErrorMode",
    "FetchMode",
    "Statement",
    "StatementKind",
    "StatementMissingError",
    "Wrapper",
    "WrapperOptions",
    "get_adapter",
    "load_connection_settings",
]
