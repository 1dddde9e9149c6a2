"""Shared fixtures: a mocked Database handle with a scripted connection and cursor."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from db.connection import Database


@pytest.fixture
def cursor() -> MagicMock:
    return MagicMock()


@pytest.fixture
def conn(cursor: MagicMock) -> MagicMock:
    connection = MagicMock()
    connection.cursor.return_value.__enter__.return_value = cursor
    return connection


@pytest.fixture
def db(conn: MagicMock) -> MagicMock:
    """Database whose ad-hoc queries return [] and whose `run` calls the function inline."""
    database = MagicMock(spec=Database)
    database.query = AsyncMock(return_value=[])
    database.run = AsyncMock(side_effect=lambda func, *args: func(*args))
    database.get_connection.return_value = conn
    return database
