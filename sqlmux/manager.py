"""Replica-aware connection routing.

The manager holds one default configuration plus named master and slave
configurations merged over it. Connections are built lazily through a
:class:`~sqlmux.factory.ConnectionFactory` and cached per resolved name for
the life of the manager.

Writes go to the default connection or a master. Reads prefer the slaves,
then the masters, and always include the default connection in the pool.
"""

import logging
import random
import threading
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, Final, Optional, Protocol, TypeVar, cast

from typing_extensions import Self

from sqlmux.config import ConnectionConfig
from sqlmux.exceptions import ImproperConfigurationError, NoSuchMasterError, NoSuchSlaveError
from sqlmux.factory import ConnectionFactory
from sqlmux.utils.logging import ROUTING_LOGGER_NAME, get_logger, log_with_context

if TYPE_CHECKING:
    from sqlmux.connection import AbstractConnection
    from sqlmux.observability import LifecycleConfig

__all__ = ("DEFAULT", "MASTER", "SLAVE", "ConnectionManager", "RandomSource")

logger = get_logger("manager")
routing_logger = get_logger(ROUTING_LOGGER_NAME)

T = TypeVar("T")

DEFAULT: Final = "default"
MASTER: Final = "master"
SLAVE: Final = "slave"


class RandomSource(Protocol):
    """Anything with ``random.Random.choice`` semantics."""

    def choice(self, seq: "Sequence[T]") -> "T": ...


class ConnectionManager:
    """Routes reads and writes over a default connection, masters and slaves."""

    __slots__ = ("_cache", "_default", "_factory", "_lock", "_masters", "_random", "_slaves")

    def __init__(
        self,
        factory: ConnectionFactory,
        default: "Mapping[str, Any]",
        masters: "Optional[Mapping[str, Mapping[str, Any]]]" = None,
        slaves: "Optional[Mapping[str, Mapping[str, Any]]]" = None,
        *,
        random_source: "Optional[RandomSource]" = None,
    ) -> None:
        """Initialize the manager.

        Args:
            factory: Builds connections from resolved configurations.
            default: The default configuration block; must name an ``adapter``.
            masters: Partial configuration blocks by master name.
            slaves: Partial configuration blocks by slave name.
            random_source: Picks pool members; defaults to a private ``random.Random``.

        Raises:
            ImproperConfigurationError: If a resolved configuration has no adapter.
        """
        self._factory = factory
        self._default = ConnectionConfig.from_params(default)
        self._masters = {name: self._default.merge(params) for name, params in (masters or {}).items()}
        self._slaves = {name: self._default.merge(params) for name, params in (slaves or {}).items()}
        self._random: RandomSource = random_source if random_source is not None else random.Random()  # noqa: S311
        self._cache: dict[tuple[str, str], AbstractConnection] = {}
        self._lock = threading.Lock()

        self._check_adapter(DEFAULT, DEFAULT, self._default)
        for name, config in self._masters.items():
            self._check_adapter(MASTER, name, config)
        for name, config in self._slaves.items():
            self._check_adapter(SLAVE, name, config)

    @classmethod
    def from_config(
        cls,
        config: "Mapping[str, Any]",
        factory: "Optional[ConnectionFactory]" = None,
        *,
        lifecycle: "Optional[LifecycleConfig]" = None,
        random_source: "Optional[RandomSource]" = None,
    ) -> Self:
        """Build a manager from one ``{"default": ..., "masters": ..., "slaves": ...}`` mapping.

        Args:
            config: The combined configuration; ``default`` is required.
            factory: Factory to use; defaults to one with the built-in adapters.
            lifecycle: Hooks for a default factory; ignored when ``factory`` is given.
            random_source: Passed through to the constructor.

        Raises:
            ImproperConfigurationError: If ``default`` is missing.

        Returns:
            The manager.
        """
        if "default" not in config:
            msg = "Connection manager configuration requires a 'default' block."
            raise ImproperConfigurationError(msg)
        return cls(
            factory if factory is not None else ConnectionFactory(lifecycle=lifecycle),
            config["default"],
            config.get("masters"),
            config.get("slaves"),
            random_source=random_source,
        )

    @property
    def masters(self) -> "tuple[str, ...]":
        return tuple(self._masters)

    @property
    def slaves(self) -> "tuple[str, ...]":
        return tuple(self._slaves)

    def get_default(self) -> "AbstractConnection":
        return self._get(DEFAULT, DEFAULT)

    def get_master(self, name: str) -> "AbstractConnection":
        """Return the connection for master ``name``.

        Raises:
            NoSuchMasterError: If no master is configured under ``name``.
        """
        if name not in self._masters:
            raise NoSuchMasterError(name)
        return self._get(MASTER, name)

    def get_slave(self, name: str) -> "AbstractConnection":
        """Return the connection for slave ``name``.

        Raises:
            NoSuchSlaveError: If no slave is configured under ``name``.
        """
        if name not in self._slaves:
            raise NoSuchSlaveError(name)
        return self._get(SLAVE, name)

    def get_write(self) -> "AbstractConnection":
        """Return a random connection from the default connection and the masters."""
        pool = [(DEFAULT, DEFAULT), *((MASTER, name) for name in self._masters)]
        return self._pick("write", pool)

    def get_read(self) -> "AbstractConnection":
        """Return a random connection for reading.

        The pool is the default connection plus the slaves; without slaves, the
        default connection plus the masters; otherwise the default connection alone.
        """
        pool = [(DEFAULT, DEFAULT)]
        if self._slaves:
            pool.extend((SLAVE, name) for name in self._slaves)
        elif self._masters:
            pool.extend((MASTER, name) for name in self._masters)
        return self._pick("read", pool)

    def _pick(self, purpose: str, pool: "list[tuple[str, str]]") -> "AbstractConnection":
        role, name = self._random.choice(pool)
        log_with_context(
            routing_logger,
            logging.DEBUG,
            f"Routing {purpose} to {role} {name!r}",
            purpose=purpose,
            role=role,
            name=name,
            pool_size=len(pool),
        )
        return self._get(role, name)

    def _get(self, role: str, name: str) -> "AbstractConnection":
        key = (role, name)
        with self._lock:
            connection = self._cache.get(key)
            if connection is None:
                config = self._config(role, name)
                logger.debug("Creating %s connection %r", role, name)
                connection = cast(
                    "AbstractConnection",
                    self._factory.new_instance(cast("str", config.adapter), config.connection_params()),
                )
                self._cache[key] = connection
            return connection

    def _config(self, role: str, name: str) -> ConnectionConfig:
        if role == MASTER:
            return self._masters[name]
        if role == SLAVE:
            return self._slaves[name]
        return self._default

    @staticmethod
    def _check_adapter(role: str, name: str, config: ConnectionConfig) -> None:
        if not config.adapter:
            msg = f"The {role} connection {name!r} does not name an adapter."
            logger.error(msg)
            raise ImproperConfigurationError(msg)
