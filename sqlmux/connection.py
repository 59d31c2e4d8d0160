"""Base class for dialect connections.

A connection owns one lazily opened driver handle and layers quoting,
binding and fetch helpers over it. Dialect subclasses supply the DSN prefix,
identifier quote characters, a limit/offset renderer, a driver type and the
schema introspection queries.
"""

import threading
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar, Optional, Union, overload

from sqlmux.config import render_dsn_string
from sqlmux.core.binding import StatementBinder
from sqlmux.core.identifiers import IdentifierQuoter
from sqlmux.core.limits import LimitOffsetRenderer
from sqlmux.core.quoting import ValueQuoter
from sqlmux.driver import FetchMode
from sqlmux.exceptions import EmptyWhereClauseError
from sqlmux.observability import LifecycleDispatcher
from sqlmux.utils.logging import get_logger
from sqlmux.utils.type_guards import is_select_builder

if TYPE_CHECKING:
    from sqlmux.core.quoting import ClauseSpec
    from sqlmux.driver import DriverProtocol, StatementProtocol
    from sqlmux.observability import LifecycleConfig
    from sqlmux.typing import QuerySpec, Row, SelectBuilder, StatementData

__all__ = ("AbstractConnection", "ColumnInfo")

logger = get_logger("connection")


@dataclass
class ColumnInfo:
    """Description of one table column."""

    name: str
    type: str
    size: Optional[int] = None
    scope: Optional[int] = None
    default: Any = None
    require: bool = False
    primary: bool = False
    autoinc: bool = False


class AbstractConnection(ABC):
    """A lazily connected database connection for one dialect."""

    dsn_prefix: ClassVar[str] = ""
    dsn_defaults: ClassVar["dict[str, Any]"] = {}
    ident_quote_prefix: ClassVar[str] = '"'
    ident_quote_suffix: ClassVar[str] = '"'
    limit_renderer: ClassVar[LimitOffsetRenderer] = LimitOffsetRenderer()
    driver_type: ClassVar["type[DriverProtocol]"]

    def __init__(
        self,
        dsn: "Optional[Mapping[str, Any]]" = None,
        username: "Optional[str]" = None,
        password: "Optional[str]" = None,
        options: "Optional[Mapping[str, Any]]" = None,
        *,
        lifecycle: "Optional[LifecycleConfig]" = None,
        driver: "Optional[DriverProtocol]" = None,
    ) -> None:
        """Initialize an unconnected connection.

        Args:
            dsn: DSN pairs merged over the dialect's default DSN keys.
            username: Username for the driver.
            password: Password for the driver.
            options: Driver options passed to ``connect()``.
            lifecycle: Hooks fired around connect and query.
            driver: Driver capability; defaults to a new ``driver_type``.
        """
        self._dsn: dict[str, Any] = {**self.dsn_defaults, **(dsn or {})}
        self._username = username
        self._password = password
        self._options: dict[str, Any] = dict(options or {})
        self._lifecycle = LifecycleDispatcher(lifecycle)
        self._driver: DriverProtocol = driver if driver is not None else self.driver_type()
        self._handle: Any = None
        self._connect_lock = threading.Lock()
        self._identifiers = IdentifierQuoter(self.ident_quote_prefix, self.ident_quote_suffix)
        self._values = ValueQuoter(self._quote_scalar)
        self._binder = StatementBinder()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.get_dsn_string()!r})"

    @property
    def dsn(self) -> "dict[str, Any]":
        return dict(self._dsn)

    @property
    def driver(self) -> "DriverProtocol":
        return self._driver

    @property
    def dialect(self) -> str:
        """The sqlglot dialect name of the driver."""
        return self._driver.dialect

    @property
    def is_connected(self) -> bool:
        return self._handle is not None

    def get_params(self) -> "dict[str, Any]":
        """Return the constructor parameters (DSN after merging defaults)."""
        return {
            "dsn": dict(self._dsn),
            "username": self._username,
            "password": self._password,
            "options": dict(self._options),
        }

    def get_dsn_string(self) -> str:
        return render_dsn_string(self.dsn_prefix, self._dsn)

    def connect(self) -> Any:
        """Open the driver handle on first call and return it on every call."""
        if self._handle is not None:
            return self._handle
        with self._connect_lock:
            if self._handle is None:
                self._lifecycle.pre_connect(self)
                logger.debug("Connecting to %s", self.get_dsn_string())
                self._handle = self._driver.connect(
                    self.get_dsn_string(), self._username, self._password, dict(self._options)
                )
                self._lifecycle.post_connect(self)
        return self._handle

    def query(self, spec: "QuerySpec", data: "StatementData" = None) -> "StatementProtocol":
        """Prepare, bind and execute a statement.

        Args:
            spec: SQL text, or a builder rendered with this dialect's limit/offset clauses.
            data: Values for named placeholders.

        Returns:
            The executed statement.
        """
        text = self.convert_select(spec) if is_select_builder(spec) else str(spec)
        handle = self.connect()
        self._lifecycle.pre_query(self, text, data)
        logger.debug("Executing on %s: %s", self.dsn_prefix, text)
        statement = self._driver.prepare(handle, text)
        self._binder.bind(statement, data)
        statement.execute()
        self._lifecycle.post_query(self, statement)
        return statement

    def convert_select(self, select: "SelectBuilder") -> str:
        return self.limit_renderer.render(str(select), select.limit, select.offset)

    def fetch_all(self, spec: "QuerySpec", data: "StatementData" = None) -> "list[Row]":
        """Fetch all rows as column-keyed dicts."""
        statement = self.query(spec, data)
        try:
            return statement.fetch_all(FetchMode.ASSOC)
        finally:
            statement.close()

    def fetch_assoc(self, spec: "QuerySpec", data: "StatementData" = None) -> "dict[Any, Row]":
        """Fetch all rows keyed by their first column.

        When several rows share a first-column value, the last one wins.
        """
        statement = self.query(spec, data)
        rows: dict[Any, Row] = {}
        try:
            while (row := statement.fetch(FetchMode.ASSOC)) is not None:
                rows[next(iter(row.values()))] = row
        finally:
            statement.close()
        return rows

    def fetch_col(self, spec: "QuerySpec", data: "StatementData" = None) -> "list[Any]":
        """Fetch the first column of every row."""
        return [row[0] for row in self._fetch_rows(spec, data)]

    def fetch_value(self, spec: "QuerySpec", data: "StatementData" = None) -> Any:
        """Fetch the first column of the first row, or None."""
        if is_select_builder(spec):
            spec.limit = 1
        statement = self.query(spec, data)
        try:
            return statement.fetch_column(0)
        finally:
            statement.close()

    def fetch_pairs(self, spec: "QuerySpec", data: "StatementData" = None) -> "dict[Any, Any]":
        """Fetch the first two columns as key/value pairs."""
        return {row[0]: row[1] for row in self._fetch_rows(spec, data)}

    def fetch_one(self, spec: "QuerySpec", data: "StatementData" = None) -> "Optional[Row]":
        """Fetch the first row, or None."""
        if is_select_builder(spec):
            spec.limit = 1
        statement = self.query(spec, data)
        try:
            return statement.fetch(FetchMode.ASSOC)
        finally:
            statement.close()

    def _fetch_rows(self, spec: "QuerySpec", data: "StatementData") -> "list[Any]":
        statement = self.query(spec, data)
        try:
            return statement.fetch_all(FetchMode.NUM)
        finally:
            statement.close()

    def quote(self, value: Any) -> str:
        return self._values.quote(value)

    def quote_into(self, text: str, data: Any) -> str:
        return self._values.quote_into(text, data)

    def quote_multi(self, spec: "ClauseSpec", separator: str = "") -> str:
        return self._values.quote_multi(spec, separator)

    @overload
    def quote_name(self, spec: str) -> str: ...

    @overload
    def quote_name(self, spec: "Sequence[str]") -> "list[str]": ...

    def quote_name(self, spec: "Union[str, Sequence[str]]") -> "Union[str, list[str]]":
        return self._identifiers.quote_name(spec)

    @overload
    def quote_names_in(self, text: str) -> str: ...

    @overload
    def quote_names_in(self, text: "Sequence[str]") -> "list[str]": ...

    def quote_names_in(self, text: "Union[str, Sequence[str]]") -> "Union[str, list[str]]":
        return self._identifiers.quote_names_in(text)

    def last_insert_id(self, table: "Optional[str]" = None, column: "Optional[str]" = None) -> Any:
        """Return the last auto-increment ID generated on this connection."""
        return self._driver.last_insert_id(self.connect())

    def insert(self, table: str, data: "Mapping[str, Any]") -> int:
        """Insert one row and return the number of affected rows."""
        columns = ", ".join(self.quote_name(list(data)))
        placeholders = ", ".join(f":{key}" for key in data)
        text = f"INSERT INTO {self.quote_name(table)} ({columns}) VALUES ({placeholders})"
        return self.query(text, data).row_count

    def update(self, table: str, data: "Mapping[str, Any]", where: "Optional[ClauseSpec]" = None) -> int:
        """Update rows matching ``where`` and return the number of affected rows.

        Args:
            table: Table to update.
            data: New values keyed by column name.
            where: Conditions, composed with :meth:`quote_multi` and joined with ``AND``.
                Without conditions every row is updated.

        Returns:
            The number of affected rows.
        """
        assignments = ", ".join(f"{self.quote_name(column)} = :{column}" for column in data)
        text = f"UPDATE {self.quote_name(table)} SET {assignments}"
        if where:
            text += f" WHERE {self._where(where)}"
        return self.query(text, data).row_count

    def delete(self, table: str, where: "ClauseSpec") -> int:
        """Delete rows matching ``where`` and return the number of affected rows.

        ``where`` must not be empty; to delete every row, issue the statement with :meth:`query`.

        Raises:
            EmptyWhereClauseError: ``where`` is empty.
        """
        if not where:
            raise EmptyWhereClauseError(table)
        return self.query(f"DELETE FROM {self.quote_name(table)} WHERE {self._where(where)}").row_count

    def _where(self, where: "ClauseSpec") -> str:
        return self.quote_names_in(self.quote_multi(where, " AND "))

    def _quote_scalar(self, value: Any) -> str:
        return self._driver.quote(self.connect(), value)

    @abstractmethod
    def fetch_table_list(self) -> "list[str]":
        """Return the names of the tables in the current database."""

    @abstractmethod
    def fetch_table_cols(self, table: str) -> "dict[str, ColumnInfo]":
        """Return the columns of ``table`` keyed by name, in table order."""

    @staticmethod
    def get_type_size_scope(spec: str) -> "tuple[str, Optional[int], Optional[int]]":
        """Split a column type such as ``NUMERIC(10,2)`` into type, size and scope.

        Args:
            spec: The column type as reported by the database.

        Returns:
            The lowercased type, the size and the scope (None where absent).
        """
        spec = spec.strip().lower()
        type_name, paren, rest = spec.partition("(")
        if not paren:
            return spec, None, None
        size_text, _, scope_text = rest.partition(")")[0].partition(",")
        return type_name.strip(), _to_int(size_text), _to_int(scope_text)


def _to_int(text: str) -> "Optional[int]":
    text = text.strip()
    return int(text) if text.isdigit() else None
