# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Base adapter class for blocking DB-API database backends."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, NamedTuple

if TYPE_CHECKING:
    from ..models import ConnectionSettings

NO_ERROR_SQLSTATE = "00000"
GENERAL_ERROR_SQLSTATE = "HY000"
CONNECTION_MISSING_SQLSTATE = "08003"

# Quoted literals are matched first so markers inside them are left alone.
_MARKER_RE = re.compile(r"'(?:[^']|'')*'|\"(?:[^\"]|\"\")*\"|\?|%")


class ErrorInfo(NamedTuple):
    """Structured error triple: SQLSTATE, driver error code, message."""

    sqlstate: str
    code: int | str | None = None
    message: str | None = None

    def __str__(self) -> str:
        return self.message or self.sqlstate


class DbAdapter(ABC):
    """Abstract base class for blocking database adapters.

    One adapter per SQL dialect. The adapter owns no state: connections and
    cursors are created through it and handed back to the caller.
    """

    name: str = ""
    last_id_query: str = ""
    uses_format_paramstyle: bool = False

    @property
    @abstractmethod
    def errors(self) -> tuple[type[BaseException], ...]:
        """Driver exception classes that count as ordinary database errors."""
        ...

    @abstractmethod
    def build_dsn(
        self, host: str, database: str, charset: str, port: int | None = None
    ) -> str:
        """Return the printable connection string for this dialect."""
        ...

    @abstractmethod
    def connect(self, settings: ConnectionSettings) -> Any:
        """Open and return a DB-API connection."""
        ...

    @abstractmethod
    def error_info(self, connection: Any) -> ErrorInfo:
        """Return the connection-level error state."""
        ...

    def cursor(self, connection: Any) -> Any:
        """Create a cursor on the given connection."""
        return connection.cursor()

    def close(self, connection: Any) -> None:
        """Close a connection opened by this adapter."""
        connection.close()

    def convert_placeholders(self, query: str) -> str:
        """Convert ``?`` markers to ``%s`` for drivers using the format paramstyle.

        Literal ``%`` signs are doubled everywhere, including inside quoted
        literals, since the driver formats the whole string.
        """
        if not self.uses_format_paramstyle:
            return query

        def _replace(match: re.Match[str]) -> str:
            token = match.group(0)
            if token == "?":
                return "%s"
            return token.replace("%", "%%")

        return _MARKER_RE.sub(_replace, query)

    def last_insert_id(self, connection: Any, cursor: Any) -> int | None:
        """Return the identifier generated by the last INSERT."""
        return cursor.lastrowid

    def error_info_from_exception(self, exc: BaseException) -> ErrorInfo:
        """Build an ErrorInfo from a driver exception."""
        return ErrorInfo(GENERAL_ERROR_SQLSTATE, None, str(exc))
