"""PostgreSQL adapter for sqlmux."""

from sqlmux.adapters.pgsql.connection import PgsqlConnection
from sqlmux.adapters.pgsql.driver import PgsqlDriver

__all__ = ("PgsqlConnection", "PgsqlDriver")
