# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""MySQL/MariaDB adapter using PyMySQL."""

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

logger = get_logger("MysqlAdapter")


class MysqlAdapter(DbAdapter):
    """MySQL/MariaDB adapter using PyMySQL.

    Converts ``?`` placeholders to ``%s`` for PyMySQL compatibility.
    """

    name = "mysql"
    last_id_query = "SELECT LAST_INSERT_ID();"
    uses_format_paramstyle = True

    def __init__(self):
        # Verify PyMySQL is available at init time
        try:
            import pymysql
        except ImportError as e:
            raise ImportError(
                "MySQL support requires PyMySQL. "
                "Install with: pip install legacy-db-wrapper[mysql]"
            ) from e
        self._pymysql = pymysql

    @property
    def errors(self) -> tuple[type[BaseException], ...]:
        return (self._pymysql.MySQLError,)

    def build_dsn(
        self, host: str, database: str, charset: str, port: int | None = None
    ) -> str:
        dsn = f"mysql:host={host}"
        if port:
            dsn += f";port={port}"
        return f"{dsn};dbname={database};charset={charset}"

    def connect(self, settings: ConnectionSettings) -> Any:
        options = settings.options
        if not options.emulate_prepares:
            logger.debug("PyMySQL always interpolates parameters client-side")
        kwargs: dict[str, Any] = {
            "host": settings.host,
            "database": settings.database,
            "charset": settings.charset,
            "autocommit": options.autocommit,
        }
        if settings.port:
            kwargs["port"] = settings.port
        if settings.user is not None:
            kwargs["user"] = settings.user
        if settings.password is not None:
            kwargs["password"] = settings.password
        if options.connect_timeout is not None:
            kwargs["connect_timeout"] = options.connect_timeout
        kwargs.update(options.driver_options())
        return self._pymysql.connect(**kwargs)

    def error_info(self, connection: Any) -> ErrorInfo:
        if not connection.open:
            return ErrorInfo(CONNECTION_MISSING_SQLSTATE, None, "connection is closed")
        return ErrorInfo(NO_ERROR_SQLSTATE)

    def error_info_from_exception(self, exc: BaseException) -> ErrorInfo:
        # PyMySQL errors carry (errno, message) in args
        if len(exc.args) >= 2 and isinstance(exc.args[0], int):
            return ErrorInfo(GENERAL_ERROR_SQLSTATE, exc.args[0], str(exc.args[1]))
        return ErrorInfo(GENERAL_ERROR_SQLSTATE, None, str(exc))
