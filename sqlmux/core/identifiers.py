"""Dialect-aware identifier quoting.

The dialect only supplies a quote prefix and suffix. ``quote_name`` handles
``table.column``, ``name alias`` and ``name AS alias`` specs; ``quote_names_in``
quotes ``table.column`` references inside a larger SQL fragment while leaving
string literals untouched. Neither understands comments or nested quoting;
they are text transforms, not a SQL parser.
"""

import re
from collections.abc import Sequence
from typing import Final, Union, overload

from mypy_extensions import mypyc_attr

__all__ = ("IdentifierQuoter",)

# A run of quotes (optionally backslash-escaped) closed by the same run.
_LITERAL_SPLIT_RE: Final = re.compile(r"""(('+|"+|\\'+|\\"+).*?\2)""", re.DOTALL)
_QUALIFIED_NAME_RE: Final = re.compile(r"\b([a-z_][a-z0-9_]*)\.([a-z_][a-z0-9_]*)\b", re.IGNORECASE)
_AS: Final = " AS "


@mypyc_attr(allow_interpreted_subclasses=True)
class IdentifierQuoter:
    """Quotes identifier names with a dialect's prefix and suffix."""

    __slots__ = ("prefix", "suffix")

    def __init__(self, prefix: str = '"', suffix: str = '"') -> None:
        self.prefix = prefix
        self.suffix = suffix

    def __repr__(self) -> str:
        return f"{type(self).__name__}(prefix={self.prefix!r}, suffix={self.suffix!r})"

    @overload
    def quote_name(self, spec: str) -> str: ...

    @overload
    def quote_name(self, spec: "Sequence[str]") -> "list[str]": ...

    def quote_name(self, spec: "Union[str, Sequence[str]]") -> "Union[str, list[str]]":
        """Quote an identifier spec such as ``table.col AS alias``.

        The rightmost `` AS `` (any case) splits original and alias; failing
        that the rightmost space does; failing that the rightmost dot splits
        table and column. The original part is quoted recursively, the alias
        and the dotted halves are quoted as single names.

        Args:
            spec: The identifier spec, or a sequence of specs.

        Returns:
            The quoted spec, or a list of quoted specs in the same order.
        """
        if not isinstance(spec, str):
            return [self.quote_name(item) for item in spec]

        spec = spec.strip()

        pos = spec.upper().rfind(_AS)
        if pos > 0:
            original = self.quote_name(spec[:pos])
            alias = self.quote_single(spec[pos + len(_AS) :])
            return f"{original}{_AS}{alias}"

        pos = spec.rfind(" ")
        if pos > 0:
            original = self.quote_name(spec[:pos])
            alias = self.quote_single(spec[pos + 1 :])
            return f"{original} {alias}"

        pos = spec.rfind(".")
        if pos > 0:
            table = self.quote_single(spec[:pos])
            column = self.quote_single(spec[pos + 1 :])
            return f"{table}.{column}"

        return self.quote_single(spec)

    def quote_single(self, name: str) -> str:
        """Wrap one raw name in the quote prefix and suffix; ``*`` is left alone."""
        name = name.strip()
        if name == "*":
            return name
        return f"{self.prefix}{name}{self.suffix}"

    @overload
    def quote_names_in(self, text: str) -> str: ...

    @overload
    def quote_names_in(self, text: "Sequence[str]") -> "list[str]": ...

    def quote_names_in(self, text: "Union[str, Sequence[str]]") -> "Union[str, list[str]]":
        """Quote every ``table.column`` reference in a SQL fragment.

        Single- and double-quoted literals pass through unchanged. A trailing
        `` AS alias`` in the last piece of SQL text has its alias quoted too.

        Args:
            text: SQL fragment, or a sequence of fragments.

        Returns:
            The fragment with names quoted, or a list of fragments.
        """
        if not isinstance(text, str):
            return [self.quote_names_in(item) for item in text]

        pieces = _LITERAL_SPLIT_RE.split(text)
        last = len(pieces) - 1
        out: list[str] = []
        for index, piece in enumerate(pieces):
            # every third piece is the captured closing-quote run, already part of the literal before it
            if (index + 1) % 3 == 0:
                continue
            if "'" in piece or '"' in piece:
                out.append(piece)
                continue
            if index == last:
                pos = piece.upper().rfind(_AS)
                if pos > 0:
                    alias = self.quote_single(piece[pos + len(_AS) :])
                    piece = f"{piece[:pos]}{_AS}{alias}"
            out.append(self._quote_qualified_names(piece))
        return "".join(out)

    def _quote_qualified_names(self, text: str) -> str:
        if "." not in text:
            return text
        prefix, suffix = self.prefix, self.suffix
        return _QUALIFIED_NAME_RE.sub(lambda m: f"{prefix}{m[1]}{suffix}.{prefix}{m[2]}{suffix}", text)
