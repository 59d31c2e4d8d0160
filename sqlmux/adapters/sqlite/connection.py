from typing import Any, ClassVar, Optional

from sqlmux.adapters.sqlite.driver import SqliteDriver
from sqlmux.connection import AbstractConnection, ColumnInfo
from sqlmux.core.limits import LimitOffsetRenderer

__all__ = ("SqliteConnection",)


class SqliteConnection(AbstractConnection):
    """SQLite connection; the ``database`` DSN key is a file path or ``:memory:``."""

    dsn_prefix = "sqlite"
    dsn_defaults: ClassVar["dict[str, Any]"] = {"database": ":memory:"}
    ident_quote_prefix = '"'
    ident_quote_suffix = '"'
    limit_renderer = LimitOffsetRenderer(unbounded_limit="-1")
    driver_type = SqliteDriver

    def fetch_table_list(self) -> "list[str]":
        return self.fetch_col(
            "SELECT name FROM sqlite_master WHERE type = 'table' AND name NOT LIKE 'sqlite_%' ORDER BY name"
        )

    def fetch_table_cols(self, table: str) -> "dict[str, ColumnInfo]":
        rows = self.fetch_all(f"PRAGMA table_info({self.quote_name(table)})")
        primary_count = sum(1 for row in rows if row["pk"])
        columns: dict[str, ColumnInfo] = {}
        for row in rows:
            type_name, size, scope = self.get_type_size_scope(row["type"] or "")
            primary = bool(row["pk"])
            columns[row["name"]] = ColumnInfo(
                name=row["name"],
                type=type_name,
                size=size,
                scope=scope,
                default=_parse_default(row["dflt_value"]),
                require=bool(row["notnull"]),
                primary=primary,
                # a lone INTEGER PRIMARY KEY aliases the rowid
                autoinc=primary and primary_count == 1 and type_name == "integer",
            )
        return columns


def _parse_default(value: "Optional[str]") -> Any:
    if value is None or value.upper() == "NULL":
        return None
    if len(value) >= 2 and value[0] == value[-1] == "'":
        return value[1:-1].replace("''", "'")
    return value
