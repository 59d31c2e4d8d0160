"""Tests for named-placeholder binding."""

from typing import Any
from unittest.mock import Mock

import pytest

from sqlmux.core.binding import StatementBinder, find_placeholders, iter_placeholder_slots, slot_name
from sqlmux.exceptions import ParameterError


def make_statement(query_string: str) -> Mock:
    statement = Mock()
    statement.query_string = query_string
    return statement


def test_find_placeholders_in_text_order() -> None:
    assert find_placeholders("SELECT * FROM t WHERE a = :a AND b IN (:b, :a)") == ["a", "b", "a"]


@pytest.mark.parametrize("text", ["SELECT '2020-01-01 10:30'", "SELECT x:y FROM t", ":leading"])
def test_find_placeholders_requires_non_word_before(text: str) -> None:
    assert find_placeholders(text) == []


def test_cast_is_left_to_the_caller() -> None:
    statement = make_statement("SELECT :value::int")

    assert find_placeholders(statement.query_string) == ["value", "int"]
    assert StatementBinder().bind(statement, {"value": "5"}) == [("value", "5")]


def test_placeholder_after_newline() -> None:
    assert find_placeholders("SELECT *\nFROM t WHERE id =\n:id") == ["id"]


@pytest.mark.parametrize(("occurrence", "expected"), [(1, "name"), (2, "name2"), (3, "name3")])
def test_slot_name(occurrence: int, expected: str) -> None:
    assert slot_name("name", occurrence) == expected


def test_iter_placeholder_slots_numbers_repeats() -> None:
    slots = [slot for _, slot in iter_placeholder_slots("a = :x OR b = :y OR c = :x OR d = :x")]
    assert slots == ["x", "y", "x2", "x3"]


def test_bind_repeated_placeholder_binds_each_slot() -> None:
    statement = make_statement("SELECT * FROM t WHERE a = :name OR b = :name")

    bound = StatementBinder().bind(statement, {"name": "x"})

    assert bound == [("name", "x"), ("name2", "x")]
    assert [call.args for call in statement.bind_value.call_args_list] == [("name", "x"), ("name2", "x")]


def test_bind_skips_missing_keys() -> None:
    statement = make_statement("UPDATE t SET a = :a, b = :b WHERE id = :id")

    bound = StatementBinder().bind(statement, {"a": 1, "id": 7})

    assert bound == [("a", 1), ("id", 7)]


def test_bind_binds_none_values() -> None:
    statement = make_statement("UPDATE t SET a = :a")
    assert StatementBinder().bind(statement, {"a": None}) == [("a", None)]
    statement.bind_value.assert_called_once_with("a", None)


@pytest.mark.parametrize("data", [None, {}])
def test_bind_without_data_is_noop(data: "dict[str, Any] | None") -> None:
    statement = make_statement("SELECT :a")
    assert StatementBinder().bind(statement, data) == []
    statement.bind_value.assert_not_called()


def test_bind_rejects_repeat_slot_clashing_with_placeholder() -> None:
    statement = make_statement("SELECT :a, :a, :a2")
    with pytest.raises(ParameterError, match="clashes with placeholder :a2"):
        StatementBinder().bind(statement, {"a": 1, "a2": 5})
    statement.bind_value.assert_called_once_with("a", 1)


def test_bind_allows_numbered_name_without_repeat() -> None:
    statement = make_statement("SELECT :a, :a2")
    assert StatementBinder().bind(statement, {"a": 1, "a2": 5}) == [("a", 1), ("a2", 5)]
