from typing import Any, Optional

__all__ = (
    "ConnectionFactoryError",
    "EmptyWhereClauseError",
    "ImproperConfigurationError",
    "MissingDependencyError",
    "NoSuchMasterError",
    "NoSuchReplicaError",
    "NoSuchSlaveError",
    "NotEnoughValuesError",
    "ParameterError",
    "SQLMuxError",
)


class SQLMuxError(Exception):
    """Base exception class from which all sqlmux exceptions inherit."""

    detail: str

    def __init__(self, *args: Any, detail: str = "") -> None:
        """Initialize ``SQLMuxError``.

        Args:
            *args: args are converted to :class:`str` before passing to :class:`Exception`
            detail: detail of the exception.
        """
        str_args = [str(arg) for arg in args if arg]
        if not detail:
            if str_args:
                detail, *str_args = str_args
            elif hasattr(self, "detail"):
                detail = self.detail
        self.detail = detail
        super().__init__(*str_args)

    def __repr__(self) -> str:
        if self.detail:
            return f"{self.__class__.__name__} - {self.detail}"
        return self.__class__.__name__

    def __str__(self) -> str:
        return " ".join((*self.args, self.detail)).strip()


class MissingDependencyError(SQLMuxError, ImportError):
    """Missing optional dependency.

    This exception is raised only when a module depends on a dependency that has not been installed.
    """

    def __init__(self, package: str, install_package: Optional[str] = None) -> None:
        super().__init__(
            f"Package {package!r} is not installed but required. You can install it by running "
            f"'pip install sqlmux[{install_package or package}]' to install sqlmux with the required extra "
            f"or 'pip install {package}' to install the package separately",
        )


class ImproperConfigurationError(SQLMuxError):
    """Improper Configuration error.

    Raised when connection parameters or adapter mappings cannot be used as given.
    """


class ConnectionFactoryError(ImproperConfigurationError):
    """Raised when the factory has no connection class mapped to an adapter name."""

    adapter: str

    def __init__(self, adapter: str) -> None:
        super().__init__(detail=f"No connection class is mapped to adapter {adapter!r}.")
        self.adapter = adapter


class NoSuchReplicaError(SQLMuxError, LookupError):
    """Base class for lookups of unconfigured replica names."""

    role: str = "replica"
    name: str

    def __init__(self, name: str) -> None:
        super().__init__(detail=f"No {self.role} named {name!r} is configured.")
        self.name = name


class NoSuchMasterError(NoSuchReplicaError):
    """Raised when a master name is not configured."""

    role = "master"


class NoSuchSlaveError(NoSuchReplicaError):
    """Raised when a slave name is not configured."""

    role = "slave"


class ParameterError(SQLMuxError):
    """Base class for parameter-related errors."""

    sql: Optional[str]

    def __init__(self, message: str, sql: Optional[str] = None) -> None:
        """Initialize with optional SQL context."""
        detail_message = message
        if sql:
            detail_message = f"{message}\nSQL: {sql}"
        super().__init__(detail=detail_message)
        self.sql = sql


class NotEnoughValuesError(ParameterError):
    """Raised when fewer values than positional placeholders are supplied."""

    placeholders: int
    values: int

    def __init__(self, placeholders: int, values: int, sql: Optional[str] = None) -> None:
        super().__init__(f"Text has {placeholders} placeholders but only {values} values were supplied.", sql)
        self.placeholders = placeholders
        self.values = values


class EmptyWhereClauseError(SQLMuxError, ValueError):
    """Raised when a DELETE is requested without a WHERE condition."""

    table: str

    def __init__(self, table: str) -> None:
        super().__init__(
            detail=f"Refusing to delete from {table!r} without a WHERE condition; use query() to delete all rows."
        )
        self.table = table
