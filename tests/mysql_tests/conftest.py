# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Fixtures for MySQL integration tests using testcontainers."""

from __future__ import annotations

import pytest

from db_wrapper import Wrapper


@pytest.fixture(scope="session")
def mysql_container():
    """Spin up a real MySQL container for integration tests.

    Requires Docker to be running.
    """
    pytest.importorskip("pymysql")
    try:
        from testcontainers.mysql import MySqlContainer
    except ImportError:
        pytest.skip("testcontainers not installed")

    container = MySqlContainer("mysql:8.0")
    try:
        container.start()
    except Exception as e:
        pytest.skip(f"MySQL container unavailable: {e}")
    try:
        yield container
    finally:
        container.stop()


@pytest.fixture()
def mysql_host(mysql_container) -> str:
    return f"{mysql_container.get_container_host_ip()}:{mysql_container.get_exposed_port(3306)}"


@pytest.fixture()
def mysql_db(mysql_container, mysql_host):
    """Wrapper on the default driver with an empty ``users`` table."""
    db = Wrapper(
        mysql_host,
        mysql_container.dbname,
        mysql_container.username,
        mysql_container.password,
    )
    assert db, db.error_message()
    db.execute("DROP TABLE IF EXISTS users")
    db.execute(
        "CREATE TABLE users ("
        "id INT AUTO_INCREMENT PRIMARY KEY, "
        "name VARCHAR(100) NOT NULL, "
        "active TINYINT NOT NULL DEFAULT 1)"
    )
    try:
        yield db
    finally:
        db.execute("DROP TABLE IF EXISTS users")
        db.close()
