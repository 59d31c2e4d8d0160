import pytest

from sqlmux.exceptions import MissingDependencyError
from sqlmux.utils.module_loader import import_driver_module, import_string


def test_import_string() -> None:
    cls = import_string("sqlmux.config.ConnectionConfig")
    from sqlmux.config import ConnectionConfig

    assert cls is ConnectionConfig

    module = import_string("sqlmux.config")
    assert module.__name__ == "sqlmux.config"

    with pytest.raises(ImportError):
        import_string("sqlmux.config.NoSuchThing")

    with pytest.raises(ImportError):
        import_string("imaginary_module_that_does_not_exist.Thing")


def test_import_driver_module() -> None:
    assert import_driver_module("sqlite3").__name__ == "sqlite3"


def test_import_driver_module_missing() -> None:
    with pytest.raises(MissingDependencyError, match=r"sqlmux\[extra\]"):
        import_driver_module("imaginary_driver_module", "extra")
