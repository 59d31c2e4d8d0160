"""MySQL adapter for sqlmux."""

from sqlmux.adapters.mysql.connection import MysqlConnection
from sqlmux.adapters.mysql.driver import MysqlDriver

__all__ = ("MysqlConnection", "MysqlDriver")
