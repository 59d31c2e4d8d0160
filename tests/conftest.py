from collections.abc import Generator
from pathlib import Path

import pytest

from sqlmux.adapters.sqlite import SqliteConnection

here = Path(__file__).parent
root_path = here.parent


@pytest.fixture
def sqlite_connection() -> "Generator[SqliteConnection, None, None]":
    """An in-memory SQLite connection with a ``users`` table."""
    connection = SqliteConnection()
    connection.query(
        """
        CREATE TABLE users (
            id INTEGER PRIMARY KEY,
            name VARCHAR(50) NOT NULL,
            email VARCHAR(100),
            balance NUMERIC(10,2) DEFAULT 0,
            status TEXT DEFAULT 'active'
        )
        """
    )
    yield connection
    connection.connect().connection.close()
