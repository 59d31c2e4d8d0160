import sqlite3
from typing import Any, ClassVar, Optional

from sqlmux.driver import DBAPIDriver, ParameterStyle

__all__ = ("SqliteDriver",)


class SqliteDriver(DBAPIDriver):
    """DB-API driver over the standard library ``sqlite3`` module."""

    module_name = "sqlite3"
    dialect = "sqlite"
    parameter_style = ParameterStyle.NAMED
    username_key = None
    password_key = None
    integer_dsn_keys: ClassVar["frozenset[str]"] = frozenset()
    # autocommit; the connection may be handed between threads by the manager
    default_options: ClassVar["dict[str, Any]"] = {"isolation_level": None, "check_same_thread": False}

    def __init__(self, module: Optional[Any] = None) -> None:
        super().__init__(module if module is not None else sqlite3)
