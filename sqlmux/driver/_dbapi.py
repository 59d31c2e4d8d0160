"""DB-API 2.0 implementation of the driver capability.

Statements are prepared client-side. On prepare, the second and later uses
of a named placeholder become slots ``name2``, ``name3``, ... in the same way
emulating drivers name them; on execute, the bound slots are rewritten into
the driver module's ``paramstyle``. Placeholders that were never bound are
left verbatim, so casts such as ``value::int`` survive.
"""

import contextlib
from collections.abc import Mapping
from typing import Any, ClassVar, Optional, Union

from sqlglot import exp

from sqlmux.config import parse_dsn_string
from sqlmux.core.binding import iter_placeholder_slots
from sqlmux.driver._common import FetchMode, ParameterStyle
from sqlmux.utils.logging import get_logger
from sqlmux.utils.module_loader import import_driver_module

__all__ = ("DBAPIDriver", "DBAPIHandle", "DBAPIStatement", "convert_placeholders")

logger = get_logger("driver.dbapi")

Parameters = Union["dict[str, Any]", "list[Any]", None]


def convert_placeholders(
    text: str, style: ParameterStyle, bound: "Mapping[str, Any]"
) -> "tuple[str, Parameters]":
    """Rewrite the bound ``:name`` slots of ``text`` into ``style``.

    Args:
        text: SQL text with ``:name`` placeholders.
        style: Target DB-API paramstyle.
        bound: Values keyed by slot name (``name``, ``name2``, ...).

    Returns:
        The SQL text and the parameters to pass to ``cursor.execute``.
    """
    if not bound:
        return text, None

    escape_percent = style in {ParameterStyle.FORMAT, ParameterStyle.PYFORMAT}
    pieces: list[str] = []
    positional: list[Any] = []
    named: dict[str, Any] = {}
    last = 0
    for match, slot in iter_placeholder_slots(text):
        chunk = text[last : match.start()]
        pieces.append(chunk.replace("%", "%%") if escape_percent else chunk)
        last = match.end()
        if slot not in bound:
            pieces.append(match[0])
            continue
        value = bound[slot]
        if style is ParameterStyle.NAMED:
            pieces.append(f":{slot}")
            named[slot] = value
        elif style is ParameterStyle.PYFORMAT:
            pieces.append(f"%({slot})s")
            named[slot] = value
        elif style is ParameterStyle.QMARK:
            pieces.append("?")
            positional.append(value)
        elif style is ParameterStyle.FORMAT:
            pieces.append("%s")
            positional.append(value)
        else:
            positional.append(value)
            pieces.append(f":{len(positional)}")
    tail = text[last:]
    pieces.append(tail.replace("%", "%%") if escape_percent else tail)

    if style in {ParameterStyle.NAMED, ParameterStyle.PYFORMAT}:
        return "".join(pieces), named
    return "".join(pieces), positional


class DBAPIHandle:
    """An open DB-API connection plus the cursor of its last execution."""

    __slots__ = ("connection", "last_cursor")

    def __init__(self, connection: Any) -> None:
        self.connection = connection
        self.last_cursor: Optional[Any] = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.connection!r})"


class DBAPIStatement:
    """A client-side prepared statement on a :class:`DBAPIHandle`."""

    __slots__ = ("_bound", "_columns", "_cursor", "_handle", "_style", "query_string")

    def __init__(self, handle: DBAPIHandle, query_string: str, style: ParameterStyle) -> None:
        self.query_string = query_string
        self._handle = handle
        self._style = style
        self._bound: dict[str, Any] = {}
        self._cursor: Optional[Any] = None
        self._columns: list[str] = []

    def bind_value(self, name: str, value: Any) -> None:
        self._bound[name] = value

    @property
    def bound_values(self) -> "dict[str, Any]":
        return dict(self._bound)

    def execute(self) -> "DBAPIStatement":
        sql, parameters = convert_placeholders(self.query_string, self._style, self._bound)
        cursor = self._handle.connection.cursor()
        if parameters is None:
            cursor.execute(sql)
        else:
            cursor.execute(sql, parameters)
        self._cursor = cursor
        self._columns = [column[0] for column in cursor.description or ()]
        self._handle.last_cursor = cursor
        return self

    @property
    def column_names(self) -> "list[str]":
        return list(self._columns)

    @property
    def row_count(self) -> int:
        if self._cursor is None:
            return 0
        return self._cursor.rowcount

    def fetch(self, mode: FetchMode = FetchMode.ASSOC) -> "Optional[Any]":
        row = self._require_cursor().fetchone()
        if row is None:
            return None
        return self._shape(row, mode)

    def fetch_all(self, mode: FetchMode = FetchMode.ASSOC) -> "list[Any]":
        return [self._shape(row, mode) for row in self._require_cursor().fetchall()]

    def fetch_column(self, index: int = 0) -> "Optional[Any]":
        row = self._require_cursor().fetchone()
        if row is None:
            return None
        return tuple(row)[index]

    def close(self) -> None:
        if self._cursor is not None:
            with contextlib.suppress(Exception):
                self._cursor.close()

    def _require_cursor(self) -> Any:
        if self._cursor is None:
            msg = "Statement has not been executed."
            raise RuntimeError(msg)
        return self._cursor

    def _shape(self, row: Any, mode: FetchMode) -> Any:
        values = tuple(row)
        if mode is FetchMode.NUM:
            return values
        return dict(zip(self._columns, values))


class DBAPIDriver:
    """Driver capability over a DB-API 2.0 module.

    Subclasses name the module, the sqlglot dialect used for literal quoting,
    and how DSN keys map onto ``connect()`` keyword arguments.
    """

    module_name: ClassVar[str] = ""
    install_package: ClassVar[Optional[str]] = None
    dialect: ClassVar[str] = ""
    parameter_style: ClassVar[Optional[ParameterStyle]] = None
    dsn_key_map: ClassVar["dict[str, str]"] = {}
    integer_dsn_keys: ClassVar["frozenset[str]"] = frozenset({"port"})
    username_key: ClassVar[Optional[str]] = "user"
    password_key: ClassVar[Optional[str]] = "password"
    default_options: ClassVar["dict[str, Any]"] = {}

    def __init__(self, module: Optional[Any] = None) -> None:
        self._module = module

    def __repr__(self) -> str:
        return f"{type(self).__name__}(module={self.module_name!r}, dialect={self.dialect!r})"

    @property
    def module(self) -> Any:
        if self._module is None:
            self._module = import_driver_module(self.module_name, self.install_package)
        return self._module

    @property
    def style(self) -> ParameterStyle:
        if self.parameter_style is not None:
            return self.parameter_style
        return ParameterStyle(self.module.paramstyle)

    def connect_kwargs(
        self, dsn: "Mapping[str, str]", username: "Optional[str]", password: "Optional[str]"
    ) -> "dict[str, Any]":
        """Translate DSN pairs and credentials into ``connect()`` keyword arguments."""
        kwargs: dict[str, Any] = {}
        for key, value in dsn.items():
            target = self.dsn_key_map.get(key, key)
            kwargs[target] = int(value) if target in self.integer_dsn_keys else value
        if username is not None and self.username_key:
            kwargs[self.username_key] = username
        if password is not None and self.password_key:
            kwargs[self.password_key] = password
        return kwargs

    def connect(
        self, dsn_string: str, username: "Optional[str]", password: "Optional[str]", options: "dict[str, Any]"
    ) -> DBAPIHandle:
        _, dsn = parse_dsn_string(dsn_string)
        kwargs = self.connect_kwargs(dsn, username, password)
        kwargs.update(self.default_options)
        kwargs.update(options)
        logger.debug("Opening %s connection to %s", self.module_name, dsn_string)
        return DBAPIHandle(self.module.connect(**kwargs))

    def prepare(self, handle: DBAPIHandle, text: str) -> DBAPIStatement:
        return DBAPIStatement(handle, text, self.style)

    def quote(self, handle: DBAPIHandle, value: Any) -> str:
        """Render ``value`` as a string literal for this driver's dialect."""
        if value is None:
            return exp.null().sql(dialect=self.dialect or None)
        if isinstance(value, bool):
            value = int(value)
        if isinstance(value, (bytes, bytearray)):
            value = value.decode()
        return exp.Literal.string(str(value)).sql(dialect=self.dialect or None)

    def last_insert_id(self, handle: DBAPIHandle, name: "Optional[str]" = None) -> Any:
        if handle.last_cursor is None:
            return None
        return getattr(handle.last_cursor, "lastrowid", None)
