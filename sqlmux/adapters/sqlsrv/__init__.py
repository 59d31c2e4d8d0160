"""Microsoft SQL Server adapter for sqlmux."""

from sqlmux.adapters.sqlsrv.connection import SqlsrvConnection, SqlsrvDenaliConnection
from sqlmux.adapters.sqlsrv.driver import SqlsrvDriver

__all__ = ("SqlsrvConnection", "SqlsrvDenaliConnection", "SqlsrvDriver")
