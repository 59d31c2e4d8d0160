"""Value quoting into SQL text with positional ``?`` placeholders."""

from collections.abc import Callable, Iterable, Mapping
from typing import Any, Union

from mypy_extensions import mypyc_attr

from sqlmux.exceptions import NotEnoughValuesError

__all__ = ("ClauseSpec", "ValueQuoter", "is_value_list")

PLACEHOLDER = "?"

ClauseSpec = Union[str, "Mapping[Union[str, int], Any]", "Iterable[Union[str, tuple[str, Any]]]"]


def is_value_list(value: Any) -> bool:
    """Return True for values quoted as a comma-separated list."""
    return isinstance(value, (list, tuple))


@mypyc_attr(allow_interpreted_subclasses=True)
class ValueQuoter:
    """Quotes values into SQL text.

    Scalars go through ``quote_scalar``, which is expected to be the driver's
    own quoting primitive for the live connection.
    """

    __slots__ = ("_quote_scalar",)

    def __init__(self, quote_scalar: "Callable[[Any], str]") -> None:
        self._quote_scalar = quote_scalar

    def quote(self, value: Any) -> str:
        """Quote a scalar, or a list/tuple as ``a, b, c`` for ``IN (...)`` lists."""
        if is_value_list(value):
            return ", ".join(self.quote(item) for item in value)
        return self._quote_scalar(value)

    def quote_into(self, text: str, data: Any) -> str:
        """Quote ``data`` into the ``?`` placeholders of ``text``.

        One placeholder takes all of ``data`` (a list becomes an IN-list).
        Several placeholders take successive values of ``data``; a quoted value
        that itself contains ``?`` is never treated as a placeholder.

        Args:
            text: Text with ``?`` placeholders.
            data: The value, or values, to quote.

        Raises:
            NotEnoughValuesError: More placeholders than values.

        Returns:
            The text with quoted values in place of the placeholders.
        """
        count = text.count(PLACEHOLDER)
        if not count:
            return text

        if count == 1:
            return text.replace(PLACEHOLDER, self.quote(data), 1)

        values = _as_value_list(data)
        if len(values) < count:
            raise NotEnoughValuesError(count, len(values), text)

        offset = 0
        for value in values:
            pos = text.find(PLACEHOLDER, offset)
            if pos == -1:
                break
            quoted = self.quote(value)
            text = f"{text[:pos]}{quoted}{text[pos + 1 :]}"
            offset = pos + len(quoted)
        return text

    def quote_multi(self, spec: "ClauseSpec", separator: str = "") -> str:
        """Compose clause pieces, quoting values into placeholder text.

        ``spec`` may be a plain string (used as-is), a mapping, or a sequence.
        In a mapping an ``int`` key marks its value as literal text and any
        other key is placeholder text bound with :meth:`quote_into`. In a
        sequence a bare string is literal text and a ``(text, value)`` pair is
        placeholder text with its value.

        Args:
            spec: The clause pieces.
            separator: Joins the pieces, e.g. ``" AND "``.

        Returns:
            The composed clause.
        """
        return separator.join(self._compose(spec))

    def _compose(self, spec: "ClauseSpec") -> "list[str]":
        if isinstance(spec, str):
            return [spec]
        pieces: list[str] = []
        if isinstance(spec, Mapping):
            for key, value in spec.items():
                if isinstance(key, int):
                    pieces.append(str(value))
                else:
                    pieces.append(self.quote_into(key, value))
            return pieces
        for item in spec:
            if isinstance(item, tuple):
                text, value = item
                pieces.append(self.quote_into(text, value))
            else:
                pieces.append(str(item))
        return pieces


def _as_value_list(data: Any) -> "list[Any]":
    if data is None:
        return []
    if is_value_list(data):
        return list(data)
    return [data]
