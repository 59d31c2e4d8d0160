import re
from typing import Any, ClassVar, Final, Optional

from sqlmux.adapters.sqlsrv.driver import SqlsrvDriver
from sqlmux.connection import AbstractConnection, ColumnInfo
from sqlmux.core.limits import OffsetFetchRenderer, RowNumberRenderer

__all__ = ("SqlsrvConnection", "SqlsrvDenaliConnection")

_WRAPPED_DEFAULT_RE: Final = re.compile(r"^\((.*)\)$", re.DOTALL)
_NUMERIC_TYPES: Final = frozenset({"numeric", "decimal"})

_COLUMNS_QUERY: Final = """
SELECT c.COLUMN_NAME AS name, c.DATA_TYPE AS type, c.CHARACTER_MAXIMUM_LENGTH AS char_length,
       c.NUMERIC_PRECISION AS num_precision, c.NUMERIC_SCALE AS num_scale,
       c.IS_NULLABLE AS nullable, c.COLUMN_DEFAULT AS default_value,
       COLUMNPROPERTY(OBJECT_ID(c.TABLE_SCHEMA + '.' + c.TABLE_NAME), c.COLUMN_NAME, 'IsIdentity') AS is_identity,
       CASE WHEN EXISTS (
           SELECT 1
           FROM INFORMATION_SCHEMA.TABLE_CONSTRAINTS tc
           JOIN INFORMATION_SCHEMA.KEY_COLUMN_USAGE kcu
             ON kcu.CONSTRAINT_NAME = tc.CONSTRAINT_NAME AND kcu.TABLE_SCHEMA = tc.TABLE_SCHEMA
           WHERE tc.CONSTRAINT_TYPE = 'PRIMARY KEY'
             AND tc.TABLE_SCHEMA = c.TABLE_SCHEMA
             AND tc.TABLE_NAME = c.TABLE_NAME
             AND kcu.COLUMN_NAME = c.COLUMN_NAME
       ) THEN 1 ELSE 0 END AS is_primary
FROM INFORMATION_SCHEMA.COLUMNS c
WHERE c.TABLE_NAME = :table
ORDER BY c.ORDINAL_POSITION
"""


class SqlsrvConnection(AbstractConnection):
    """Microsoft SQL Server 2005/2008 connection.

    Limits render as ``TOP n``; offsets page with ``ROW_NUMBER()``.
    """

    dsn_prefix = "sqlsrv"
    dsn_defaults: ClassVar["dict[str, Any]"] = {"Server": None, "Database": None}
    ident_quote_prefix = "["
    ident_quote_suffix = "]"
    limit_renderer = RowNumberRenderer()
    driver_type = SqlsrvDriver

    def last_insert_id(self, table: "Optional[str]" = None, column: "Optional[str]" = None) -> Any:
        return self.fetch_value("SELECT @@IDENTITY")

    def fetch_table_list(self) -> "list[str]":
        return self.fetch_col(
            "SELECT TABLE_NAME FROM INFORMATION_SCHEMA.TABLES WHERE TABLE_TYPE = 'BASE TABLE' ORDER BY TABLE_NAME"
        )

    def fetch_table_cols(self, table: str) -> "dict[str, ColumnInfo]":
        columns: dict[str, ColumnInfo] = {}
        for row in self.fetch_all(_COLUMNS_QUERY, {"table": table}):
            type_name = row["type"]
            numeric = type_name in _NUMERIC_TYPES
            size = row["char_length"]
            if size is None and numeric:
                size = row["num_precision"]
            columns[row["name"]] = ColumnInfo(
                name=row["name"],
                type=type_name,
                size=size,
                scope=row["num_scale"] if numeric else None,
                default=_parse_default(row["default_value"]),
                require=row["nullable"] == "NO",
                primary=bool(row["is_primary"]),
                autoinc=bool(row["is_identity"]),
            )
        return columns


class SqlsrvDenaliConnection(SqlsrvConnection):
    """Microsoft SQL Server 2012+ connection paging with ``OFFSET ... FETCH``."""

    limit_renderer = OffsetFetchRenderer()


def _parse_default(value: "Optional[str]") -> Any:
    """Unwrap defaults stored as ``((0))`` or ``('text')``."""
    if value is None:
        return None
    while match := _WRAPPED_DEFAULT_RE.match(value):
        value = match[1]
    if value.upper() == "NULL":
        return None
    if len(value) >= 2 and value[0] == value[-1] == "'":
        return value[1:-1].replace("''", "'")
    if value.startswith("N'") and value.endswith("'"):
        return value[2:-1].replace("''", "'")
    return value
