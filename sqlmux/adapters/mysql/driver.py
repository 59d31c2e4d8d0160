from typing import Any, ClassVar

from sqlmux.driver import DBAPIDriver

__all__ = ("MysqlDriver",)


class MysqlDriver(DBAPIDriver):
    """DB-API driver over PyMySQL."""

    module_name = "pymysql"
    install_package = "mysql"
    dialect = "mysql"
    dsn_key_map: ClassVar["dict[str, str]"] = {"dbname": "database"}
    default_options: ClassVar["dict[str, Any]"] = {"autocommit": True}
