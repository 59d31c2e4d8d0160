import re
from typing import Any, ClassVar, Final, Optional

from sqlmux.adapters.pgsql.driver import PgsqlDriver
from sqlmux.connection import AbstractConnection, ColumnInfo

__all__ = ("PgsqlConnection",)

_LITERAL_DEFAULT_RE: Final = re.compile(r"^'(.*)'::[\w\s]+$", re.DOTALL)
_NUMERIC_TYPES: Final = frozenset({"numeric", "decimal"})

_COLUMNS_QUERY: Final = """
SELECT c.column_name, c.data_type, c.character_maximum_length, c.numeric_precision,
       c.numeric_scale, c.is_nullable, c.column_default,
       EXISTS (
           SELECT 1
           FROM information_schema.table_constraints tc
           JOIN information_schema.key_column_usage kcu
             ON kcu.constraint_name = tc.constraint_name AND kcu.table_schema = tc.table_schema
           WHERE tc.constraint_type = 'PRIMARY KEY'
             AND tc.table_schema = c.table_schema
             AND tc.table_name = c.table_name
             AND kcu.column_name = c.column_name
       ) AS is_primary
FROM information_schema.columns c
WHERE c.table_schema = {schema} AND c.table_name = :table
ORDER BY c.ordinal_position
"""


class PgsqlConnection(AbstractConnection):
    """PostgreSQL connection."""

    dsn_prefix = "pgsql"
    dsn_defaults: ClassVar["dict[str, Any]"] = {"host": None, "port": None, "dbname": None}
    ident_quote_prefix = '"'
    ident_quote_suffix = '"'
    driver_type = PgsqlDriver

    def last_insert_id(self, table: "Optional[str]" = None, column: "Optional[str]" = None) -> Any:
        """Return the current value of ``<table>_<column>_seq``, or ``LASTVAL()`` without a table."""
        if table and column:
            return self.fetch_value("SELECT CURRVAL(:sequence)", {"sequence": f"{table}_{column}_seq"})
        return self.fetch_value("SELECT LASTVAL()")

    def fetch_table_list(self) -> "list[str]":
        return self.fetch_col(
            "SELECT table_name FROM information_schema.tables "
            "WHERE table_schema = current_schema() AND table_type = 'BASE TABLE' ORDER BY table_name"
        )

    def fetch_table_cols(self, table: str) -> "dict[str, ColumnInfo]":
        schema, _, name = table.rpartition(".")
        data: dict[str, Any] = {"table": name}
        if schema:
            data["schema"] = schema
            query = _COLUMNS_QUERY.format(schema=":schema")
        else:
            query = _COLUMNS_QUERY.format(schema="current_schema()")

        columns: dict[str, ColumnInfo] = {}
        for row in self.fetch_all(query, data):
            type_name = row["data_type"]
            numeric = type_name in _NUMERIC_TYPES
            size = row["character_maximum_length"]
            if size is None and numeric:
                size = row["numeric_precision"]
            default = row["column_default"]
            autoinc = bool(default) and default.startswith("nextval(")
            columns[row["column_name"]] = ColumnInfo(
                name=row["column_name"],
                type=type_name,
                size=size,
                scope=row["numeric_scale"] if numeric else None,
                default=None if autoinc else _parse_default(default),
                require=row["is_nullable"] == "NO",
                primary=bool(row["is_primary"]),
                autoinc=autoinc,
            )
        return columns


def _parse_default(value: "Optional[str]") -> Any:
    if value is None or value.upper().startswith("NULL"):
        return None
    match = _LITERAL_DEFAULT_RE.match(value)
    if match:
        return match[1].replace("''", "'")
    return value
