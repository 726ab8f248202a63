# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Unit tests for get_one, get_all, query and get_last_id."""

from __future__ import annotations

import sqlite3

import pytest

from db_wrapper import Statement, StatementMissingError, Wrapper


class TestGetOne:
    """Tests for single-row fetching."""

    def test_single_column_returns_mapping(self, users):
        row = users.get_one("SELECT name FROM users WHERE id = ?", [1])
        assert row == {"name": "Alice"}

    def test_multi_column_returns_mapping(self, users):
        row = users.get_one("SELECT id, name FROM users WHERE id = ?", [2])
        assert row == {"id": 2, "name": "Bob"}

    def test_no_row_returns_none(self, users):
        assert users.get_one("SELECT name FROM users WHERE id = ?", [99]) is None

    def test_same_query_moves_cursor(self, users):
        query = "SELECT name FROM users ORDER BY id"

        assert users.get_one(query) == {"name": "Alice"}
        assert users.get_one(query) == {"name": "Bob"}
        assert users.get_one(query) is None

    def test_without_query_continues(self, users):
        assert users.get_one("SELECT name FROM users ORDER BY id") == {"name": "Alice"}
        assert users.get_one() == {"name": "Bob"}
        assert users.get_one() is None

    def test_different_query_reissues(self, users):
        assert users.get_one("SELECT name FROM users ORDER BY id") == {"name": "Alice"}
        assert users.get_one("SELECT name FROM users ORDER BY id DESC") == {"name": "Bob"}

    def test_reuse_does_not_repeat_side_effect(self, db: Wrapper):
        calls = []

        def bump():
            calls.append(1)
            return len(calls)

        db.connection.create_function("bump", 0, bump)
        query = "SELECT bump()"

        assert db.get_one(query) == {"bump()": 1}
        # Same text: the exhausted cursor is reused, bump() is not called again
        assert db.get_one(query) is None
        assert len(calls) == 1

    def test_failure_returns_none(self, db):
        assert db.get_one("SELECT nope FROM users") is None
        assert "no such column" in db.error_message().message

    def test_without_any_statement_raises(self, db_path):
        with Wrapper("", str(db_path), driver="sqlite") as db:
            with pytest.raises(StatementMissingError):
                db.get_one()


class TestGetAll:
    """Tests for result set fetching."""

    def test_all_rows(self, users):
        assert users.get_all("SELECT id, name FROM users ORDER BY id") == [
            {"id": 1, "name": "Alice"},
            {"id": 2, "name": "Bob"},
        ]

    def test_with_parameters(self, users):
        rows = users.get_all("SELECT name FROM users WHERE name = ?", ["Bob"])
        assert rows == [{"name": "Bob"}]

    def test_remaining_rows_after_get_one(self, users):
        query = "SELECT name FROM users ORDER BY id"
        users.get_one(query)

        assert users.get_all(query) == [{"name": "Bob"}]
        assert users.get_all() == []

    def test_non_select_statement_yields_empty(self, users):
        users.update("UPDATE users SET active = ?", [0])
        assert users.get_all() == []

    def test_failure_returns_empty_list(self, db):
        assert db.get_all("SELECT * FROM nowhere") == []
        assert db.error_message() is not None

    def test_without_any_statement_raises(self, db_path):
        with Wrapper("", str(db_path), driver="sqlite") as db:
            with pytest.raises(StatementMissingError):
                db.get_all()


class TestStatementHandle:
    """Tests for explicit statement handles returned by query()."""

    def test_handle_survives_other_queries(self, users):
        stmt = users.query("SELECT name FROM users ORDER BY id")
        assert isinstance(stmt, Statement)

        assert users.get_one("SELECT COUNT(*) FROM users") == {"COUNT(*)": 2}
        assert users.get_one(stmt) == {"name": "Alice"}
        assert users.get_all(stmt) == [{"name": "Bob"}]

    def test_replaced_statement_is_closed(self, users):
        users.get_one("SELECT name FROM users ORDER BY id")
        first = users.last_statement

        users.get_one("SELECT COUNT(*) FROM users")

        assert users.last_statement is not first
        with pytest.raises(sqlite3.ProgrammingError):
            first.cursor.fetchone()

    def test_replaced_handle_stays_open(self, users):
        stmt = users.query("SELECT name FROM users ORDER BY id")
        users.get_all("SELECT id FROM users")
        users.get_one("SELECT COUNT(*) FROM users")

        assert stmt.fetch_all() == [{"name": "Alice"}, {"name": "Bob"}]

    def test_query_becomes_last_statement(self, users):
        stmt = users.query("SELECT id FROM users ORDER BY id")

        assert users.last_statement is stmt
        assert users.last_query == "SELECT id FROM users ORDER BY id"
        assert users.get_one() == {"id": 1}

    def test_query_failure_returns_none(self, db):
        assert db.query("SELECT * FROM nowhere") is None
        assert db.error_message() is not None


class TestGetLastId:
    """Tests for the dialect-specific last inserted id query."""

    def test_after_insert(self, users):
        users.execute("INSERT INTO users (name) VALUES (?)", ["Carol"])
        assert users.get_last_id() == 3

    def test_repeated_calls(self, users):
        assert users.get_last_id() == 2
        assert users.get_last_id() == 2

    def test_returns_scalar_not_mapping(self, users):
        """get_one returns the row mapping, get_last_id its first value."""
        assert users.get_one("SELECT last_insert_rowid();") == {"last_insert_rowid()": 2}
        assert users.get_last_id() == 2

    def test_uses_dialect_query(self, users):
        users.get_last_id()
        assert users.last_statement.query == "SELECT last_insert_rowid();"


class TestLegacyNames:
    """ADOdb-style method names."""

    def test_aliases(self, db):
        assert db.Execute("INSERT INTO users (name) VALUES (?)", ["Alice"]) == 1
        assert db.GetOne("SELECT name FROM users") == {"name": "Alice"}
        assert db.GetAll("SELECT id FROM users") == [{"id": 1}]
        assert db.Update("UPDATE users SET active = ? WHERE id = ?", [0, 1]) == 1
        assert db.GetLastId() == 1
        assert db.Delete("DELETE FROM users WHERE id = ?", [1]) == 1
        assert db.ErrorMsg() is None
