# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Fixtures for unit tests: wrappers over temporary SQLite databases."""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest

from db_wrapper import Wrapper

USERS_DDL = """
CREATE TABLE users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    active INTEGER NOT NULL DEFAULT 1
)
"""


@pytest.fixture()
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "wrapper_test.db"


@pytest.fixture()
def db(db_path: Path) -> Generator[Wrapper, None, None]:
    """Connected wrapper with an empty ``users`` table."""
    wrapper = Wrapper("", str(db_path), driver="sqlite:")
    assert wrapper, wrapper.error_message()
    wrapper.execute(USERS_DDL)
    try:
        yield wrapper
    finally:
        wrapper.close()


@pytest.fixture()
def users(db: Wrapper) -> Wrapper:
    """Wrapper whose ``users`` table holds Alice (id 1) and Bob (id 2)."""
    db.execute("INSERT INTO users (name) VALUES (?)", ["Alice"])
    db.execute("INSERT INTO users (name) VALUES (?)", ["Bob"])
    return db
