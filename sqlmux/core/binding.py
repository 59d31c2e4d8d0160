"""Named-placeholder binding.

Drivers that emulate prepared statements treat the second and later uses of
``:name`` in one statement as separate slots called ``name2``, ``name3`` and
so on. The binder walks the placeholders in text order and binds each
occurrence to the slot name the driver expects.
"""

import logging
import re
from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING, Any, Final, Optional

from mypy_extensions import mypyc_attr

from sqlmux.exceptions import ParameterError
from sqlmux.utils.logging import get_logger

if TYPE_CHECKING:
    from sqlmux.driver import StatementProtocol

__all__ = ("PLACEHOLDER_PATTERN", "StatementBinder", "find_placeholders", "iter_placeholder_slots", "slot_name")

logger = get_logger("core.binding")

PLACEHOLDER_PATTERN: Final = re.compile(r"(?<=\W):([a-zA-Z_][a-zA-Z0-9_]*)", re.MULTILINE)


def find_placeholders(text: str) -> "list[str]":
    """Return the names of all ``:name`` placeholders in text order, repeats included."""
    return PLACEHOLDER_PATTERN.findall(text)


def slot_name(name: str, occurrence: int) -> str:
    """Return the driver slot for the N-th (1-based) occurrence of ``name``."""
    return name if occurrence == 1 else f"{name}{occurrence}"


def iter_placeholder_slots(text: str) -> "Iterator[tuple[re.Match[str], str]]":
    """Yield each placeholder match with the slot name the driver assigns it."""
    seen: dict[str, int] = {}
    for match in PLACEHOLDER_PATTERN.finditer(text):
        name = match[1]
        seen[name] = seen.get(name, 0) + 1
        yield match, slot_name(name, seen[name])


@mypyc_attr(allow_interpreted_subclasses=True)
class StatementBinder:
    """Binds a mapping of values onto a prepared statement's named placeholders."""

    __slots__ = ()

    def bind(self, statement: "StatementProtocol", data: "Optional[Mapping[str, Any]]") -> "list[tuple[str, Any]]":
        """Bind ``data`` to every placeholder occurrence in ``statement``.

        Placeholders without an entry in ``data`` are skipped, so optional
        placeholders may be bound by other means. ``None`` values are bound.

        Args:
            statement: A prepared statement exposing ``query_string`` and ``bind_value``.
            data: Values keyed by placeholder name.

        Raises:
            ParameterError: A repeat of a bound placeholder would take the slot
                name of another placeholder, e.g. a second ``:a`` next to ``:a2``.

        Returns:
            The (slot, value) pairs bound, in text order.
        """
        if not data:
            return []

        placeholders = find_placeholders(statement.query_string)
        names = set(placeholders)
        bound: list[tuple[str, Any]] = []
        repeat: dict[str, int] = {}
        for key in placeholders:
            if key not in data:
                continue
            repeat[key] = repeat.get(key, 0) + 1
            name = slot_name(key, repeat[key])
            if repeat[key] > 1 and name in names:
                msg = f"Repeated placeholder :{key} needs slot {name!r}, which clashes with placeholder :{name}"
                raise ParameterError(msg, statement.query_string)
            statement.bind_value(name, data[key])
            bound.append((name, data[key]))

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Bound %d placeholder slot(s): %s", len(bound), [name for name, _ in bound])
        return bound
