from collections.abc import Mapping
from typing import Any, Optional, Protocol, Union, runtime_checkable

from typing_extensions import TypeAlias

__all__ = ("QuerySpec", "Row", "SelectBuilder", "StatementData")


@runtime_checkable
class SelectBuilder(Protocol):
    """A query builder that renders itself to SQL text with ``str()``.

    ``limit`` and ``offset`` are left out of the rendered text; the connection
    renders them for its dialect.
    """

    limit: Optional[int]
    offset: Optional[int]

    def __str__(self) -> str: ...


QuerySpec: TypeAlias = Union[str, SelectBuilder]
"""SQL text, or a builder rendered by the connection."""

StatementData: TypeAlias = Optional["Mapping[str, Any]"]
"""Values keyed by named placeholder."""

Row: TypeAlias = "dict[str, Any]"
