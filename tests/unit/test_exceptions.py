import pytest

from sqlmux.exceptions import (
    ConnectionFactoryError,
    EmptyWhereClauseError,
    ImproperConfigurationError,
    MissingDependencyError,
    NoSuchMasterError,
    NoSuchReplicaError,
    NoSuchSlaveError,
    NotEnoughValuesError,
    ParameterError,
    SQLMuxError,
)


def test_exception_hierarchy() -> None:
    """Test exception classes inherit correctly."""
    assert issubclass(ConnectionFactoryError, ImproperConfigurationError)
    assert issubclass(ImproperConfigurationError, SQLMuxError)
    assert issubclass(NoSuchMasterError, NoSuchReplicaError)
    assert issubclass(NoSuchSlaveError, NoSuchReplicaError)
    assert issubclass(NoSuchReplicaError, LookupError)
    assert issubclass(NotEnoughValuesError, ParameterError)
    assert issubclass(EmptyWhereClauseError, ValueError)
    assert issubclass(MissingDependencyError, ImportError)


def test_detail_in_str_and_repr() -> None:
    exc = SQLMuxError("bad", detail="thing")
    assert str(exc) == "bad thing"
    assert repr(exc) == "SQLMuxError - thing"
    assert repr(SQLMuxError()) == "SQLMuxError"


def test_connection_factory_error_names_adapter() -> None:
    exc = ConnectionFactoryError("oracle")
    assert exc.adapter == "oracle"
    assert "'oracle'" in str(exc)


@pytest.mark.parametrize(("error_cls", "role"), [(NoSuchMasterError, "master"), (NoSuchSlaveError, "slave")])
def test_replica_errors_name_role(error_cls: "type[NoSuchReplicaError]", role: str) -> None:
    exc = error_cls("missing")
    assert exc.name == "missing"
    assert str(exc) == f"No {role} named 'missing' is configured."


def test_not_enough_values_carries_counts_and_sql() -> None:
    exc = NotEnoughValuesError(2, 1, "a = ? AND b = ?")
    assert exc.placeholders == 2
    assert exc.values == 1
    assert exc.sql == "a = ? AND b = ?"
    assert "SQL: a = ? AND b = ?" in str(exc)


def test_missing_dependency_suggests_extra() -> None:
    exc = MissingDependencyError("pymysql", "mysql")
    assert "pip install sqlmux[mysql]" in str(exc)
    assert "pip install pymysql" in str(exc)


def test_empty_where_clause_error() -> None:
    exc = EmptyWhereClauseError("users")
    assert exc.table == "users"
    assert "'users'" in str(exc)
