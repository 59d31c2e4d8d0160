"""LIMIT/OFFSET rendering strategies for query builders.

Each connection class carries one renderer; call sites never branch on the dialect.
"""

import re
from typing import Final, Optional

__all__ = ("LimitOffsetRenderer", "OffsetFetchRenderer", "RowNumberRenderer")

_SELECT_HEAD_RE: Final = re.compile(r"^(\s*SELECT(?:\s+DISTINCT)?)\s", re.IGNORECASE)


class LimitOffsetRenderer:
    """Appends ``LIMIT n`` and ``OFFSET n`` clauses.

    Dialects that reject ``OFFSET`` without ``LIMIT`` set ``unbounded_limit``
    to the literal that means "no limit" for them.
    """

    __slots__ = ("unbounded_limit",)

    def __init__(self, unbounded_limit: Optional[str] = None) -> None:
        self.unbounded_limit = unbounded_limit

    def render(self, text: str, limit: Optional[int], offset: Optional[int]) -> str:
        lines = [text.rstrip()]
        if limit:
            lines.append(f"LIMIT {int(limit)}")
        elif offset and self.unbounded_limit:
            lines.append(f"LIMIT {self.unbounded_limit}")
        if offset:
            lines.append(f"OFFSET {int(offset)}")
        return "\n".join(lines)


class OffsetFetchRenderer(LimitOffsetRenderer):
    """SQL Server 2012+ ``OFFSET ... ROWS FETCH NEXT ... ROWS ONLY``.

    The rendered query **must** end with an ORDER BY clause; OFFSET is a
    sub-clause of ORDER BY and FETCH cannot be used without OFFSET.
    """

    __slots__ = ()

    def render(self, text: str, limit: Optional[int], offset: Optional[int]) -> str:
        if not limit and not offset:
            return text
        lines = [text.rstrip(), f"OFFSET {int(offset or 0)} ROWS"]
        if limit:
            lines.append(f"FETCH NEXT {int(limit)} ROWS ONLY")
        return "\n".join(lines)


class RowNumberRenderer(LimitOffsetRenderer):
    """SQL Server 2005/2008: ``TOP n`` for plain limits, ROW_NUMBER() paging for offsets.

    With an offset the query is wrapped in a derived table, so it must not
    carry its own ORDER BY.
    """

    __slots__ = ()

    def render(self, text: str, limit: Optional[int], offset: Optional[int]) -> str:
        if not offset:
            if not limit:
                return text
            return _SELECT_HEAD_RE.sub(lambda m: f"{m[1]} TOP {int(limit)} ", text, count=1)

        start = int(offset)
        condition = f"[__rownum] > {start}"
        if limit:
            condition += f" AND [__rownum] <= {start + int(limit)}"
        return "\n".join(
            (
                "SELECT * FROM (",
                "SELECT ROW_NUMBER() OVER (ORDER BY (SELECT 0)) AS [__rownum], [__sub].*",
                f"FROM ({text.rstrip()}) AS [__sub]",
                ") AS [__outer]",
                f"WHERE {condition}",
            )
        )
