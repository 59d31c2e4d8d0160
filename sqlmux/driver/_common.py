"""Driver capability contracts shared by connections and driver implementations."""

from enum import Enum
from typing import Any, Optional, Protocol, runtime_checkable

__all__ = ("DriverProtocol", "FetchMode", "ParameterStyle", "StatementProtocol")


class ParameterStyle(str, Enum):
    """DB-API ``paramstyle`` values."""

    QMARK = "qmark"
    NUMERIC = "numeric"
    NAMED = "named"
    FORMAT = "format"
    PYFORMAT = "pyformat"

    def __str__(self) -> str:
        return self.value


class FetchMode(str, Enum):
    """Row shapes returned by statement fetch methods."""

    ASSOC = "assoc"
    NUM = "num"

    def __str__(self) -> str:
        return self.value


@runtime_checkable
class StatementProtocol(Protocol):
    """A prepared statement."""

    query_string: str

    def bind_value(self, name: str, value: Any) -> None:
        """Bind ``value`` to the placeholder slot ``name``."""
        ...

    def execute(self) -> "StatementProtocol":
        """Execute with the bound values."""
        ...

    def fetch(self, mode: FetchMode = FetchMode.ASSOC) -> "Optional[Any]":
        """Return the next row, or None when exhausted."""
        ...

    def fetch_all(self, mode: FetchMode = FetchMode.ASSOC) -> "list[Any]":
        """Return all remaining rows."""
        ...

    def fetch_column(self, index: int = 0) -> "Optional[Any]":
        """Return one column of the next row, or None when exhausted."""
        ...

    @property
    def row_count(self) -> int:
        """Rows affected by the last execution."""
        ...

    def close(self) -> None:
        """Release the cursor."""
        ...


@runtime_checkable
class DriverProtocol(Protocol):
    """Transport capability a connection is built on."""

    dialect: str

    def connect(
        self, dsn_string: str, username: "Optional[str]", password: "Optional[str]", options: "dict[str, Any]"
    ) -> Any:
        """Open a driver handle."""
        ...

    def prepare(self, handle: Any, text: str) -> StatementProtocol:
        """Prepare ``text`` on an open handle."""
        ...

    def quote(self, handle: Any, value: Any) -> str:
        """Quote a scalar as a SQL literal safe for the handle's dialect."""
        ...

    def last_insert_id(self, handle: Any, name: "Optional[str]" = None) -> Any:
        """Return the last generated row ID on the handle."""
        ...
