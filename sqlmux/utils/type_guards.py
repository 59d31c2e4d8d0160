"""Type guard functions for runtime checks."""

from typing import TYPE_CHECKING, Any

from typing_extensions import TypeGuard

if TYPE_CHECKING:
    from sqlmux.typing import SelectBuilder

__all__ = ("is_select_builder",)


def is_select_builder(obj: Any) -> "TypeGuard[SelectBuilder]":
    """Check if a query spec is a builder rather than SQL text.

    Args:
        obj: Value to check

    Returns:
        True if the object exposes ``limit`` and ``offset`` and is not a string
    """
    return not isinstance(obj, str) and hasattr(obj, "limit") and hasattr(obj, "offset")
