# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Fixtures for PostgreSQL integration tests using testcontainers."""

from __future__ import annotations

import pytest

from db_wrapper import Wrapper


@pytest.fixture(scope="session")
def pg_container():
    """Spin up a real PostgreSQL container for integration tests.

    Yields the container; it is stopped and removed after the test session.
    Requires Docker to be running.
    """
    pytest.importorskip("psycopg")
    try:
        from testcontainers.postgres import PostgresContainer
    except ImportError:
        pytest.skip("testcontainers not installed")

    container = PostgresContainer("postgres:15")
    try:
        container.start()
    except Exception as e:
        pytest.skip(f"PostgreSQL container unavailable: {e}")
    try:
        yield container
    finally:
        container.stop()


@pytest.fixture()
def pg_db(pg_container):
    """Wrapper connected to the container with an empty ``users`` table."""
    db = Wrapper(
        f"{pg_container.get_container_host_ip()}:{pg_container.get_exposed_port(5432)}",
        pg_container.dbname,
        pg_container.username,
        pg_container.password,
        driver="pgsql:",
        charset="utf8",
    )
    assert db, db.error_message()
    db.execute("DROP TABLE IF EXISTS users")
    db.execute(
        "CREATE TABLE users (id SERIAL PRIMARY KEY, name TEXT NOT NULL, active INTEGER NOT NULL DEFAULT 1)"
    )
    try:
        yield db
    finally:
        db.execute("DROP TABLE IF EXISTS users")
        db.close()
