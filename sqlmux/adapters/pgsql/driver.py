from typing import Any, ClassVar

from sqlmux.driver import DBAPIDriver

__all__ = ("PgsqlDriver",)


class PgsqlDriver(DBAPIDriver):
    """DB-API driver over psycopg 3."""

    module_name = "psycopg"
    install_package = "postgres"
    dialect = "postgres"
    default_options: ClassVar["dict[str, Any]"] = {"autocommit": True}
