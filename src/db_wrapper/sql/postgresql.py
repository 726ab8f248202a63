# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""PostgreSQL adapter using psycopg3."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..logger import get_logger
from .base import (
    CONNECTION_MISSING_SQLSTATE,
    GENERAL_ERROR_SQLSTATE,
    NO_ERROR_SQLSTATE,
    DbAdapter,
    ErrorInfo,
)

if TYPE_CHECKING:
    from ..models import ConnectionSettings

logger = get_logger("PostgresAdapter")

# MySQL charset names that PostgreSQL knows under another name.
_CHARSET_ALIASES = {"utf8mb4": "UTF8", "utf8": "UTF8", "latin1": "LATIN1"}


class PostgresAdapter(DbAdapter):
    """PostgreSQL adapter using psycopg3.

    Converts ``?`` placeholders to ``%s`` for psycopg compatibility.
    """

    name = "postgresql"
    last_id_query = "SELECT LASTVAL();"
    uses_format_paramstyle = True

    def __init__(self):
        # Verify psycopg is available at init time
        try:
            import psycopg
        except ImportError as e:
            raise ImportError(
                "PostgreSQL support requires psycopg. "
                "Install with: pip install legacy-db-wrapper[postgresql]"
            ) from e
        self._psycopg = psycopg

    @property
    def errors(self) -> tuple[type[BaseException], ...]:
        return (self._psycopg.Error,)

    def _client_encoding(self, charset: str) -> str:
        return _CHARSET_ALIASES.get(charset.lower(), charset)

    def build_dsn(
        self, host: str, database: str, charset: str, port: int | None = None
    ) -> str:
        from psycopg.conninfo import make_conninfo

        params: dict[str, Any] = {"host": host, "dbname": database}
        if port:
            params["port"] = port
        if charset:
            params["client_encoding"] = self._client_encoding(charset)
        return make_conninfo("", **params)

    def connect(self, settings: ConnectionSettings) -> Any:
        """Open a connection with server-side binding unless emulation is requested."""
        options = settings.options
        kwargs: dict[str, Any] = {"autocommit": options.autocommit}
        if options.connect_timeout is not None:
            kwargs["connect_timeout"] = options.connect_timeout
        if options.emulate_prepares:
            kwargs["cursor_factory"] = self._psycopg.ClientCursor
        if settings.user is not None:
            kwargs["user"] = settings.user
        if settings.password is not None:
            kwargs["password"] = settings.password
        kwargs.update(options.driver_options())
        dsn = self.build_dsn(
            settings.host, settings.database, settings.charset, settings.port
        )
        return self._psycopg.connect(dsn, **kwargs)

    def last_insert_id(self, connection: Any, cursor: Any) -> int | None:
        """Read the session's last sequence value, psycopg has no lastrowid."""
        with connection.cursor() as cur:
            cur.execute("SELECT LASTVAL()")
            row = cur.fetchone()
        return row[0] if row else None

    def error_info(self, connection: Any) -> ErrorInfo:
        if connection.closed or connection.broken:
            return ErrorInfo(CONNECTION_MISSING_SQLSTATE, None, "connection is closed")
        status = connection.info.transaction_status
        if status == self._psycopg.pq.TransactionStatus.INERROR:
            logger.debug("Connection is inside a failed transaction")
            return ErrorInfo(
                "25P02", None, "current transaction is aborted"
            )
        return ErrorInfo(NO_ERROR_SQLSTATE)

    def error_info_from_exception(self, exc: BaseException) -> ErrorInfo:
        sqlstate = getattr(exc, "sqlstate", None) or GENERAL_ERROR_SQLSTATE
        diag = getattr(exc, "diag", None)
        message = (diag.message_primary if diag else None) or str(exc)
        return ErrorInfo(sqlstate, sqlstate, message)
