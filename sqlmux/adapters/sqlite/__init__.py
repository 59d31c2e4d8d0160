"""SQLite adapter for sqlmux."""

from sqlmux.adapters.sqlite.connection import SqliteConnection
from sqlmux.adapters.sqlite.driver import SqliteDriver

__all__ = ("SqliteConnection", "SqliteDriver")
