"""SQL text engine: identifier quoting, value quoting, placeholder binding and paging."""

from sqlmux.core.binding import PLACEHOLDER_PATTERN, StatementBinder, find_placeholders, iter_placeholder_slots
from sqlmux.core.identifiers import IdentifierQuoter
from sqlmux.core.limits import LimitOffsetRenderer, OffsetFetchRenderer, RowNumberRenderer
from sqlmux.core.quoting import ClauseSpec, ValueQuoter, is_value_list

__all__ = (
    "PLACEHOLDER_PATTERN",
    "ClauseSpec",
    "IdentifierQuoter",
    "LimitOffsetRenderer",
    "OffsetFetchRenderer",
    "RowNumberRenderer",
    "StatementBinder",
    "ValueQuoter",
    "find_placeholders",
    "is_value_list",
    "iter_placeholder_slots",
)
