# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""SQLite adapter using the standard library sqlite3 module."""

from __future__ import annotations

import sqlite3
from typing import TYPE_CHECKING, Any

from .base import GENERAL_ERROR_SQLSTATE, NO_ERROR_SQLSTATE, DbAdapter, ErrorInfo

if TYPE_CHECKING:
    from ..models import ConnectionSettings


class SqliteAdapter(DbAdapter):
    """SQLite adapter. Host and charset are ignored, the database is a file path."""

    name = "sqlite"
    last_id_query = "SELECT last_insert_rowid();"

    @property
    def errors(self) -> tuple[type[BaseException], ...]:
        return (sqlite3.Error,)

    def build_dsn(
        self, host: str, database: str, charset: str, port: int | None = None
    ) -> str:
        return f"sqlite:{database or ':memory:'}"

    def connect(self, settings: ConnectionSettings) -> sqlite3.Connection:
        """Open the database file in autocommit mode.

        The connection may be used from other threads; the wrapper serializes
        access itself.
        """
        options = settings.options
        kwargs: dict[str, Any] = {"check_same_thread": False}
        if options.connect_timeout is not None:
            kwargs["timeout"] = options.connect_timeout
        kwargs.update(options.driver_options())
        if options.autocommit:
            kwargs["isolation_level"] = None
        return sqlite3.connect(settings.database or ":memory:", **kwargs)

    def error_info(self, connection: Any) -> ErrorInfo:
        """sqlite3 has no connection-level error state, report success."""
        return ErrorInfo(NO_ERROR_SQLSTATE)

    def error_info_from_exception(self, exc: BaseException) -> ErrorInfo:
        code = getattr(exc, "sqlite_errorcode", None)
        return ErrorInfo(GENERAL_ERROR_SQLSTATE, code, str(exc))
