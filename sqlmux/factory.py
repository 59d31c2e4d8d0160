"""Construct connections by adapter name."""

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Optional, Union

from sqlmux.config import normalize_connection_params
from sqlmux.connection import AbstractConnection
from sqlmux.exceptions import ConnectionFactoryError
from sqlmux.observability import merge_lifecycle
from sqlmux.utils.logging import get_logger
from sqlmux.utils.module_loader import import_string

if TYPE_CHECKING:
    from sqlmux.observability import LifecycleConfig

__all__ = ("DEFAULT_ADAPTERS", "ConnectionFactory")

logger = get_logger("factory")

DEFAULT_ADAPTERS: "dict[str, Union[str, type[Any]]]" = {
    "mysql": "sqlmux.adapters.mysql.MysqlConnection",
    "pgsql": "sqlmux.adapters.pgsql.PgsqlConnection",
    "sqlite": "sqlmux.adapters.sqlite.SqliteConnection",
    "sqlsrv": "sqlmux.adapters.sqlsrv.SqlsrvConnection",
    "sqlsrv_denali": "sqlmux.adapters.sqlsrv.SqlsrvDenaliConnection",
}


class ConnectionFactory:
    """Maps adapter names to connection classes and constructs them.

    Map values are classes or dotted import paths; paths are imported on
    first use so that unused adapters never load their driver.
    """

    __slots__ = ("_adapters", "_lifecycle")

    def __init__(
        self,
        adapters: "Optional[Mapping[str, Union[str, type[Any]]]]" = None,
        lifecycle: "Optional[LifecycleConfig]" = None,
    ) -> None:
        """Initialize the factory.

        Args:
            adapters: Entries added to, or replacing, the default adapter map.
            lifecycle: Hooks handed to every :class:`~sqlmux.connection.AbstractConnection` built here.
        """
        self._adapters: dict[str, Union[str, type[Any]]] = {**DEFAULT_ADAPTERS, **(adapters or {})}
        self._lifecycle = lifecycle

    @property
    def adapters(self) -> "tuple[str, ...]":
        return tuple(self._adapters)

    def get_class(self, adapter: str) -> "type[Any]":
        """Resolve the connection class mapped to ``adapter``.

        Raises:
            ConnectionFactoryError: If nothing is mapped to ``adapter``.
        """
        target = self._adapters.get(adapter)
        if target is None:
            logger.error("Unknown adapter %r; known adapters: %s", adapter, ", ".join(self._adapters))
            raise ConnectionFactoryError(adapter)
        if isinstance(target, str):
            target = import_string(target)
            self._adapters[adapter] = target
        return target

    def new_instance(
        self,
        adapter: str,
        params: "Optional[Mapping[str, Any]]" = None,
        lifecycle: "Optional[LifecycleConfig]" = None,
    ) -> Any:
        """Construct a connection for ``adapter``.

        Args:
            adapter: Adapter name, e.g. ``mysql``.
            params: ``dsn``, ``username``, ``password`` and ``options``; other keys are ignored.
            lifecycle: Hooks appended after the factory's own hooks.

        Returns:
            The new, unconnected connection.
        """
        cls = self.get_class(adapter)
        normalized = normalize_connection_params(params)
        kwargs: dict[str, Any] = {
            "dsn": normalized.get("dsn") or {},
            "username": normalized.get("username"),
            "password": normalized.get("password"),
            "options": normalized.get("options") or {},
        }
        if isinstance(cls, type) and issubclass(cls, AbstractConnection):
            kwargs["lifecycle"] = merge_lifecycle(self._lifecycle, lifecycle)
        logger.debug("Creating %s connection for adapter %r", cls.__name__, adapter)
        return cls(**kwargs)
