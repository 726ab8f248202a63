# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Wrapper exposing the CRUD subset of the legacy database access API.

The wrapper owns one connection and the statement issued last. Ordinary
database errors never leave its public methods: they are recorded and
the method returns its failure value (``False``, ``None`` or ``[]``).
The recorded error is read back with :meth:`Wrapper.error_message`.

A wrapper instance tracks a single active statement. A new query issued
before the previous results were consumed replaces them.

Example::

    db = Wrapper("localhost", "app", "user", "secret")
    if not db:
        print(db.error_message())

    db.execute("INSERT INTO users (name) VALUES (?)", ["Alice"])
    users = db.get_all("SELECT * FROM users")
"""

from __future__ import annotations

import threading
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from .logger import get_logger
from .models import ConnectionSettings, WrapperOptions
from .sql import (
    CONNECTION_MISSING_SQLSTATE,
    GENERAL_ERROR_SQLSTATE,
    NO_ERROR_SQLSTATE,
    DbAdapter,
    ErrorInfo,
    get_adapter,
)
from .statement import Row, Statement, StatementKind

if TYPE_CHECKING:
    from pathlib import Path

logger = get_logger("DbWrapper")

NO_CONNECTION_MESSAGE = "No database connection."


class StatementMissingError(RuntimeError):
    """Raised when fetching without a query and without a previous statement."""


class _ConnectionMissing(Exception):
    """Internal: a query was issued on a wrapper without connection."""


class Wrapper:
    """Database wrapper compatible with basic ADOdb calls.

    Attributes:
        adapter: Dialect adapter, None if the driver could not be resolved.
        connection: Live DB-API connection, None if connecting failed.
        driver: Driver kind given at construction.
        dsn: Printable connection string (without credentials).
        last_statement: Statement issued last, reused by fetches without query.
        last_query: Query text of ``last_statement`` when issued through a fetch.
        last_error: Sticky error, None when no error is recorded.
    """

    def __init__(
        self,
        host: str,
        database: str,
        user: str | None = None,
        password: str | None = None,
        driver: str = "mysql:",
        charset: str = "utf8mb4",
        options: WrapperOptions | Mapping[str, Any] | None = None,
    ):
        """Connect to the database.

        Connection failures do not raise: the wrapper is left without
        connection, evaluates as false and reports the failure through
        :meth:`error_message`.

        Args:
            host: Database server host, optionally ``host:port``.
            database: Database name (file path for SQLite).
            user: Login user.
            password: Login password.
            driver: Driver kind, e.g. ``mysql:``, ``pgsql:`` or ``sqlite:``.
            charset: Connection character set.
            options: Connection options, see :class:`WrapperOptions`.
        """
        try:
            if options is None:
                options = WrapperOptions()
            elif not isinstance(options, WrapperOptions):
                options = WrapperOptions.model_validate(dict(options))
            settings = ConnectionSettings(
                host=host,
                database=database,
                user=user,
                password=password,
                driver=driver,
                charset=charset,
                options=options,
            )
        except ValidationError as e:
            self._init_state(None, driver)
            logger.error(f"Invalid connection settings: {e}")
            self.last_error = ErrorInfo("IM002", None, f"invalid connection settings: {e}")
            return

        self._init_state(settings, settings.driver)
        self._connect()

    @classmethod
    def from_settings(cls, settings: ConnectionSettings) -> Wrapper:
        """Create a wrapper from validated connection settings."""
        wrapper = cls.__new__(cls)
        wrapper._init_state(settings, settings.driver)
        wrapper._connect()
        return wrapper

    @classmethod
    def from_config(cls, config_path: str | Path, section: str = "database") -> Wrapper:
        """Create a wrapper from an INI configuration file.

        Raises:
            FileNotFoundError: If the configuration file does not exist.
            ValueError: If the section is missing or invalid.
        """
        from .config_loader import load_connection_settings

        return cls.from_settings(load_connection_settings(config_path, section))

    def _init_state(self, settings: ConnectionSettings | None, driver: str) -> None:
        self.settings = settings
        self.driver = driver
        self.adapter: DbAdapter | None = None
        self.connection: Any = None
        self.dsn: str | None = None
        self.last_statement: Statement | None = None
        self.last_query: str | None = None
        self.last_error: ErrorInfo | None = None
        self._lock = threading.RLock()

    def _connect(self) -> None:
        settings = self.settings
        try:
            self.adapter = get_adapter(settings.driver)
        except (ValueError, ImportError) as e:
            logger.error(f"Could not find driver '{settings.driver}': {e}")
            self.last_error = ErrorInfo("IM002", None, f"could not find driver: {e}")
            return

        self.dsn = self.adapter.build_dsn(
            settings.host, settings.database, settings.charset, settings.port
        )
        try:
            self.connection = self.adapter.connect(settings)
        except self.adapter.errors as e:
            info = self.adapter.error_info_from_exception(e)
            if info.sqlstate == GENERAL_ERROR_SQLSTATE:
                info = info._replace(sqlstate="08001")
            self.last_error = info
            logger.error(f"Connection to {self.dsn} failed: {info}")
            return
        logger.info(f"Connected to {self.dsn}")

    @property
    def is_connected(self) -> bool:
        return self.connection is not None

    def __bool__(self) -> bool:
        return self.is_connected

    def close(self) -> None:
        """Release the statement and the connection."""
        with self._lock:
            if self.last_statement is not None:
                self._close_statement(self.last_statement)
                self.last_statement = None
                self.last_query = None
            if self.connection is not None and self.adapter is not None:
                self.adapter.close(self.connection)
                self.connection = None
                logger.info(f"Closed connection to {self.dsn}")

    def __enter__(self) -> Wrapper:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _errors(self) -> tuple[type[BaseException], ...]:
        if self.adapter is None:
            return (_ConnectionMissing,)
        return (_ConnectionMissing, *self.adapter.errors)

    def _record_error(self, exc: BaseException, query: str | None = None) -> None:
        if isinstance(exc, _ConnectionMissing) or self.adapter is None:
            self.last_error = ErrorInfo(CONNECTION_MISSING_SQLSTATE, None, NO_CONNECTION_MESSAGE)
        else:
            self.last_error = self.adapter.error_info_from_exception(exc)
        logger.warning(f"Statement failed: {self.last_error} (query: {query})")

    def _close_statement(self, statement: Statement) -> None:
        try:
            statement.close()
        except self._errors() as e:
            logger.debug(f"Ignoring error while closing statement: {e}")

    def _prepare(self, query: str, parameters: Sequence[Any] | None) -> Statement:
        if self.connection is None or self.adapter is None:
            raise _ConnectionMissing(NO_CONNECTION_MESSAGE)
        previous = self.last_statement
        if previous is not None and not previous.detached:
            self._close_statement(previous)
        self.last_statement = Statement(self.adapter, self.connection, query, parameters)
        return self.last_statement.execute()

    def _query(self, query: str, parameters: Sequence[Any] | None = None) -> Statement:
        """Issue a query and make it the statement reused by later fetches.

        Raises:
            _ConnectionMissing: If the wrapper has no connection.
            Exception: Any driver error raised while executing.
        """
        # A failed query must run again when retried with the same text
        self.last_query = None
        statement = self._prepare(query, parameters)
        self.last_query = query
        return statement

    def error_message(self) -> ErrorInfo | None:
        """Return the last database error.

        A recorded error is sticky. Without one, the connection state and
        then the last statement are checked. A ``00000`` SQLSTATE means no
        error and is reported as None.
        """
        with self._lock:
            if self.last_error is None:
                info: ErrorInfo | None = None
                if self.connection is not None and self.adapter is not None:
                    info = self.adapter.error_info(self.connection)
                if (info is None or info.sqlstate == NO_ERROR_SQLSTATE) and (
                    self.last_statement is not None
                ):
                    info = self.last_statement.error_info or info
                if info is not None and info.sqlstate == NO_ERROR_SQLSTATE:
                    info = None
                self.last_error = info
            return self.last_error

    def reset_error(self) -> ErrorInfo | None:
        """Forget the recorded error and check the current state again."""
        with self._lock:
            self.last_error = None
            return self.error_message()

    def execute(self, query: str, parameters: Sequence[Any] | None = None) -> Any:
        """Execute a statement, shaping the result from its leading keyword.

        Returns:
            INSERT: the generated row identifier.
            UPDATE/DELETE: the number of affected rows.
            SELECT: all rows as a list of mappings.
            False on failure or for any other statement.
        """
        with self._lock:
            if self.connection is None:
                self.last_error = ErrorInfo(
                    CONNECTION_MISSING_SQLSTATE, None, NO_CONNECTION_MESSAGE
                )
                return False
            try:
                # Not a fetch query: later fetches with this text re-issue it
                self.last_query = None
                statement = self._prepare(query, parameters)
                kind = StatementKind.of(query)
                if kind is StatementKind.INSERT:
                    return self.adapter.last_insert_id(self.connection, statement.cursor)
                if kind in (StatementKind.UPDATE, StatementKind.DELETE):
                    return statement.row_count
                if kind is StatementKind.SELECT:
                    return statement.fetch_all()
            except self._errors() as e:
                self._record_error(e, query)
                return False
            return False

    def query(self, query: str, parameters: Sequence[Any] | None = None) -> Statement | None:
        """Issue a query and return its statement handle, None on failure.

        The handle can be passed to :meth:`get_one` and :meth:`get_all`
        in place of the query text.
        """
        with self._lock:
            try:
                statement = self._query(query, parameters)
            except self._errors() as e:
                self._record_error(e, query)
                return None
            # Owned by the caller from now on, later queries leave it open
            statement.detached = True
            return statement

    def _row_count(self, query: str, parameters: Sequence[Any]) -> int | bool:
        with self._lock:
            try:
                return self._query(query, parameters).row_count
            except self._errors() as e:
                self._record_error(e, query)
                return False

    def update(self, query: str, parameters: Sequence[Any]) -> int | bool:
        """Run an UPDATE and return the affected row count, False on failure."""
        return self._row_count(query, parameters)

    def delete(self, query: str, parameters: Sequence[Any]) -> int | bool:
        """Run a DELETE and return the affected row count, False on failure."""
        return self._row_count(query, parameters)

    def _active_statement(
        self, query: str | Statement | None, parameters: Sequence[Any] | None
    ) -> Statement:
        if isinstance(query, Statement):
            return query
        if query is not None and query != self.last_query:
            return self._query(query, parameters)
        if self.last_statement is None:
            raise StatementMissingError("No query given and no statement issued before")
        return self.last_statement

    def get_one(
        self,
        query: str | Statement | None = None,
        parameters: Sequence[Any] | None = None,
    ) -> Row | None:
        """Fetch the next row of the active statement.

        The query is issued only if it differs from the one issued last;
        otherwise the existing cursor moves on to its next row.

        Returns:
            The row mapping, None when no row remains or on failure.

        Raises:
            StatementMissingError: If no query is given and none was issued.
        """
        with self._lock:
            try:
                return self._active_statement(query, parameters).fetch_one()
            except self._errors() as e:
                self._record_error(e, query if isinstance(query, str) else None)
                return None

    def get_all(
        self,
        query: str | Statement | None = None,
        parameters: Sequence[Any] | None = None,
    ) -> list[Row]:
        """Fetch every remaining row of the active statement.

        Same reuse rule as :meth:`get_one`. Returns an empty list on failure.

        Raises:
            StatementMissingError: If no query is given and none was issued.
        """
        with self._lock:
            try:
                return self._active_statement(query, parameters).fetch_all()
            except self._errors() as e:
                self._record_error(e, query if isinstance(query, str) else None)
                return []

    def get_last_id(self) -> Any:
        """Return the last inserted identifier with the dialect's SQL function.

        The value is read with a separate query, so it is only correct on the
        session that performed the INSERT.
        """
        with self._lock:
            if self.adapter is None:
                self.last_error = ErrorInfo(
                    CONNECTION_MISSING_SQLSTATE, None, NO_CONNECTION_MESSAGE
                )
                return None
            # Always re-issue, a cursor left by a previous call is exhausted
            self.last_query = None
            row = self.get_one(self.adapter.last_id_query)
        if not row:
            return None
        return next(iter(row.values()))

    # Legacy names
    ErrorMsg = error_message
    Execute = execute
    Update = update
    Delete = delete
    GetOne = get_one
    GetAll = get_all
    GetLastId = get_last_id

    def __repr__(self) -> str:
        state = "connected" if self.is_connected else "disconnected"
        return f"Wrapper({self.dsn or self.driver!r}, {state})"
