"""Driver capability and the DB-API implementation."""

from sqlmux.driver._common import DriverProtocol, FetchMode, ParameterStyle, StatementProtocol
from sqlmux.driver._dbapi import DBAPIDriver, DBAPIHandle, DBAPIStatement, convert_placeholders

__all__ = (
    "DBAPIDriver",
    "DBAPIHandle",
    "DBAPIStatement",
    "DriverProtocol",
    "FetchMode",
    "ParameterStyle",
    "StatementProtocol",
    "convert_placeholders",
)
