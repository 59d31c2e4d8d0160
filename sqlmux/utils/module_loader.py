"""Dotted-path imports used to resolve connection classes and driver modules."""

import importlib
from types import ModuleType
from typing import Any, Optional

from sqlmux.exceptions import MissingDependencyError

__all__ = (
    "import_driver_module",
    "import_string",
)


def _import_longest_prefix(parts: "list[str]") -> "tuple[ModuleType, list[str]]":
    for end in range(len(parts), 0, -1):
        try:
            module = importlib.import_module(".".join(parts[:end]))
        except ModuleNotFoundError:
            continue
        return module, parts[end:]
    msg = f"{'.'.join(parts)} doesn't look like a module path"
    raise ImportError(msg)


def import_string(dotted_path: str) -> Any:
    """Import the object named by a dotted path.

    The longest importable prefix of the path is imported as a module and the
    remaining names are looked up as attributes, so both
    ``sqlmux.adapters.mysql.MysqlConnection`` and ``sqlmux.adapters.mysql``
    resolve.

    Args:
        dotted_path: Module path, optionally followed by attribute names.

    Raises:
        ImportError: No prefix is importable, or an attribute is missing.

    Returns:
        The module or attribute.
    """
    try:
        module, attrs = _import_longest_prefix(dotted_path.split("."))
        obj: Any = module
        for attr in attrs:
            try:
                obj = getattr(obj, attr)
            except AttributeError as e:
                msg = f"Module '{module.__name__}' has no attribute '{attr}' in '{dotted_path}'"
                raise ImportError(msg) from e
    except Exception as e:
        msg = f"Could not import '{dotted_path}': {e}"
        raise ImportError(msg) from e
    return obj


def import_driver_module(module_name: str, install_package: Optional[str] = None) -> Any:
    """Import a DB-API driver module on first use.

    Args:
        module_name: Importable module name, e.g. ``pymysql``.
        install_package: Extra name to suggest when the module is missing.

    Raises:
        MissingDependencyError: The driver package is not installed.

    Returns:
        The imported module.
    """
    try:
        return importlib.import_module(module_name)
    except ModuleNotFoundError as e:
        raise MissingDependencyError(module_name, install_package) from e
