# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Statement handle: an executed query with its result cursor.

Rows are turned into plain ``{column: value}`` mappings at fetch time,
using the cursor description. Composite values nested inside a row
(mappings, named tuples, arrays) are normalized to dicts and lists.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from enum import Enum
from typing import TYPE_CHECKING, Any

from .logger import get_logger

if TYPE_CHECKING:
    from .sql.base import DbAdapter, ErrorInfo

logger = get_logger("Statement")

Row = dict[str, Any]


class StatementKind(str, Enum):
    """Result shape of a statement, derived from its leading keyword."""

    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    SELECT = "SELECT"

    @classmethod
    def of(cls, query: str) -> StatementKind | None:
        """Classify a query by case-insensitive prefix match.

        The raw text is matched: leading whitespace, comments or a WITH
        clause make the query unclassified.
        """
        upper = query.upper()
        for kind in cls:
            if upper.startswith(kind.value):
                return kind
        return None


def normalize_value(value: Any) -> Any:
    """Convert composite values to plain dicts and lists, recursively."""
    if isinstance(value, Mapping):
        return {str(k): normalize_value(v) for k, v in value.items()}
    if hasattr(value, "_asdict"):
        return {k: normalize_value(v) for k, v in value._asdict().items()}
    if isinstance(value, (list, tuple)):
        return [normalize_value(v) for v in value]
    return value


class Statement:
    """A prepared and executed statement with its result cursor.

    Attributes:
        query: Query text as given by the caller.
        parameters: Positional parameters bound to the query, or None.
        error_info: Error raised by ``execute``, None if it succeeded.
        detached: Handed out to the caller; the wrapper does not close it
            when the next query replaces it.
    """

    def __init__(
        self,
        adapter: DbAdapter,
        connection: Any,
        query: str,
        parameters: Sequence[Any] | None = None,
    ):
        self.adapter = adapter
        self.query = query
        self.parameters = tuple(parameters) if parameters is not None else None
        self.error_info: ErrorInfo | None = None
        self.detached = False
        self.cursor = adapter.cursor(connection)

    def execute(self) -> Statement:
        """Run the query, recording the error before re-raising it."""
        logger.debug(f"Executing: {self.query}")
        try:
            if self.parameters is None:
                self.cursor.execute(self.query)
            else:
                self.cursor.execute(
                    self.adapter.convert_placeholders(self.query), self.parameters
                )
        except self.adapter.errors as e:
            self.error_info = self.adapter.error_info_from_exception(e)
            raise
        return self

    @property
    def kind(self) -> StatementKind | None:
        return StatementKind.of(self.query)

    @property
    def columns(self) -> list[str]:
        """Column names of the result set, empty if the query returns no rows."""
        description = self.cursor.description
        if not description:
            return []
        return [col[0] for col in description]

    @property
    def row_count(self) -> int:
        """Number of rows affected by the statement."""
        return self.cursor.rowcount

    def _to_mapping(self, row: Any) -> Row:
        if isinstance(row, Mapping):
            return {str(k): normalize_value(v) for k, v in row.items()}
        return {
            col: normalize_value(value)
            for col, value in zip(self.columns, row, strict=True)
        }

    def fetch_one(self) -> Row | None:
        """Fetch the next row as a mapping, None when no row remains."""
        row = self.cursor.fetchone()
        if row is None:
            return None
        return self._to_mapping(row)

    def fetch_all(self) -> list[Row]:
        """Fetch every remaining row as a list of mappings."""
        return [self._to_mapping(row) for row in self.cursor.fetchall()]

    def __iter__(self) -> Iterator[Row]:
        while (row := self.fetch_one()) is not None:
            yield row

    def close(self) -> None:
        self.cursor.close()

    def __repr__(self) -> str:
        return f"Statement({self.query!r})"
