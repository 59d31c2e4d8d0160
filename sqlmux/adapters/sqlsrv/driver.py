from typing import Any, ClassVar

from sqlmux.driver import DBAPIDriver

__all__ = ("SqlsrvDriver",)


class SqlsrvDriver(DBAPIDriver):
    """DB-API driver over pymssql."""

    module_name = "pymssql"
    install_package = "mssql"
    dialect = "tsql"
    dsn_key_map: ClassVar["dict[str, str]"] = {"Server": "server", "Database": "database", "Port": "port"}
    # pymssql accepts the port as a string
    integer_dsn_keys: ClassVar["frozenset[str]"] = frozenset()
    default_options: ClassVar["dict[str, Any]"] = {"autocommit": True}
