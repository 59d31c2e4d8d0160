from typing import Any, ClassVar

from sqlmux.adapters.mysql.driver import MysqlDriver
from sqlmux.connection import AbstractConnection, ColumnInfo
from sqlmux.core.limits import LimitOffsetRenderer

__all__ = ("MysqlConnection",)


class MysqlConnection(AbstractConnection):
    """MySQL connection with backtick-quoted identifiers."""

    dsn_prefix = "mysql"
    dsn_defaults: ClassVar["dict[str, Any]"] = {
        "host": None,
        "port": None,
        "dbname": None,
        "unix_socket": None,
        "charset": None,
    }
    ident_quote_prefix = "`"
    ident_quote_suffix = "`"
    # MySQL has no OFFSET without LIMIT; this is the documented "all rows" limit
    limit_renderer = LimitOffsetRenderer(unbounded_limit="18446744073709551615")
    driver_type = MysqlDriver

    def fetch_table_list(self) -> "list[str]":
        return self.fetch_col("SHOW TABLES")

    def fetch_table_cols(self, table: str) -> "dict[str, ColumnInfo]":
        columns: dict[str, ColumnInfo] = {}
        for row in self.fetch_all(f"SHOW COLUMNS FROM {self.quote_name(table)}"):
            type_name, size, scope = self.get_type_size_scope(row["Type"])
            columns[row["Field"]] = ColumnInfo(
                name=row["Field"],
                type=type_name,
                size=size,
                scope=scope,
                default=row["Default"],
                require=row["Null"] == "NO",
                primary=row["Key"] == "PRI",
                autoinc="auto_increment" in (row["Extra"] or "").lower(),
            )
        return columns
