"""sqlmux: SQL quoting, placeholder binding and replica-aware connection routing."""

from sqlmux import adapters, config, core, driver, exceptions, observability, typing, utils
from sqlmux.__metadata__ import __version__
from sqlmux.config import ConnectionConfig, ConnectionParams
from sqlmux.connection import AbstractConnection, ColumnInfo
from sqlmux.exceptions import (
    ConnectionFactoryError,
    EmptyWhereClauseError,
    ImproperConfigurationError,
    MissingDependencyError,
    NoSuchMasterError,
    NoSuchSlaveError,
    NotEnoughValuesError,
    SQLMuxError,
)
from sqlmux.factory import ConnectionFactory
from sqlmux.manager import ConnectionManager
from sqlmux.observability import LifecycleConfig

__all__ = (
    "AbstractConnection",
    "ColumnInfo",
    "ConnectionConfig",
    "ConnectionFactory",
    "ConnectionFactoryError",
    "ConnectionManager",
    "ConnectionParams",
    "EmptyWhereClauseError",
    "ImproperConfigurationError",
    "LifecycleConfig",
    "MissingDependencyError",
    "NoSuchMasterError",
    "NoSuchSlaveError",
    "NotEnoughValuesError",
    "SQLMuxError",
    "__version__",
    "adapters",
    "config",
    "core",
    "driver",
    "exceptions",
    "observability",
    "typing",
    "utils",
)
