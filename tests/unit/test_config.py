"""Tests for connection configuration merging and DSN strings."""

import pytest

from sqlmux.config import (
    ConnectionConfig,
    merge_connection_config,
    normalize_connection_params,
    parse_dsn_string,
    render_dsn_string,
)
from sqlmux.exceptions import ImproperConfigurationError


def test_render_dsn_string_skips_none_and_keeps_order() -> None:
    dsn = {"host": "localhost", "port": None, "dbname": "test", "charset": None}
    assert render_dsn_string("mysql", dsn) == "mysql:host=localhost;dbname=test"


def test_render_dsn_string_without_values() -> None:
    assert render_dsn_string("pgsql", {"host": None}) == "pgsql:"


def test_parse_dsn_string() -> None:
    prefix, dsn = parse_dsn_string(r"sqlsrv:Server=localhost\SQLEXPRESS;Database=test")
    assert prefix == "sqlsrv"
    assert dsn == {"Server": r"localhost\SQLEXPRESS", "Database": "test"}


def test_parse_dsn_string_value_with_equals() -> None:
    assert parse_dsn_string("pgsql:options=-c search_path=app")[1] == {"options": "-c search_path=app"}


@pytest.mark.parametrize("dsn_string", ["host=localhost", ":host=localhost", ""])
def test_parse_dsn_string_requires_prefix(dsn_string: str) -> None:
    with pytest.raises(ImproperConfigurationError):
        parse_dsn_string(dsn_string)


def test_merge_connection_config_merges_dsn_keys() -> None:
    base = {"adapter": "mysql", "dsn": {"host": "d", "dbname": "app"}, "username": "u", "options": {"a": 1}}
    override = {"dsn": {"host": "m2", "port": 3307}, "options": {"b": 2}}

    merged = merge_connection_config(base, override)

    assert merged["dsn"] == {"host": "m2", "dbname": "app", "port": 3307}
    assert list(merged["dsn"]) == ["host", "dbname", "port"]
    assert merged["username"] == "u"
    assert merged["options"] == {"b": 2}
    assert merged["adapter"] == "mysql"
    assert base["dsn"] == {"host": "d", "dbname": "app"}


def test_merge_connection_config_replaces_adapter_and_credentials() -> None:
    base = {"adapter": "mysql", "username": "u", "password": "p"}
    merged = merge_connection_config(base, {"adapter": "pgsql", "password": None})
    assert merged == {"adapter": "pgsql", "username": "u", "password": None}


def test_merge_is_idempotent() -> None:
    base = {"adapter": "mysql", "dsn": {"host": "d", "dbname": "app"}}
    override = {"dsn": {"host": "s2"}}
    once = merge_connection_config(base, override)
    twice = merge_connection_config(once, override)
    assert once == twice
    assert render_dsn_string("mysql", once["dsn"]) == render_dsn_string("mysql", twice["dsn"])


@pytest.mark.parametrize("key", ["dsn", "options"])
def test_normalize_rejects_non_mapping(key: str) -> None:
    with pytest.raises(ImproperConfigurationError, match=key):
        normalize_connection_params({key: "host=localhost"})


def test_normalize_copies_nested_mappings() -> None:
    dsn = {"host": "d"}
    normalized = normalize_connection_params({"dsn": dsn})
    normalized["dsn"]["host"] = "x"
    assert dsn == {"host": "d"}


def test_connection_config_from_params_and_merge() -> None:
    config = ConnectionConfig.from_params({"adapter": "sqlite", "dsn": {"database": "app.db"}})
    replica = config.merge({"dsn": {"database": "replica.db"}, "username": "reader"})

    assert replica.adapter == "sqlite"
    assert replica.dsn == {"database": "replica.db"}
    assert replica.username == "reader"
    assert config.dsn == {"database": "app.db"}
    assert replica.connection_params() == {
        "dsn": {"database": "replica.db"},
        "username": "reader",
        "password": None,
        "options": {},
    }
    assert replica.as_params()["adapter"] == "sqlite"
