"""Connection configuration: typed parameter mappings, merging and DSN strings.

A configuration block looks like::

    {
        "adapter": "mysql",
        "dsn": {"host": "db.example.com", "dbname": "app"},
        "username": "app",
        "password": "secret",
        "options": {"connect_timeout": 5},
    }

Named master and slave blocks are partial; they are merged over the default
block with :func:`merge_connection_config`.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional, TypedDict, cast

from typing_extensions import NotRequired, Self

from sqlmux.exceptions import ImproperConfigurationError

__all__ = (
    "CONNECTION_FIELDS",
    "ConnectionConfig",
    "ConnectionParams",
    "merge_connection_config",
    "normalize_connection_params",
    "parse_dsn_string",
    "render_dsn_string",
)

CONNECTION_FIELDS = ("dsn", "username", "password", "options")


class ConnectionParams(TypedDict, total=False):
    """Raw connection configuration block."""

    adapter: NotRequired[str]
    dsn: NotRequired["dict[str, Any]"]
    username: NotRequired[Optional[str]]
    password: NotRequired[Optional[str]]
    options: NotRequired["dict[str, Any]"]


@dataclass(frozen=True)
class ConnectionConfig:
    """A fully merged connection configuration."""

    adapter: Optional[str] = None
    dsn: "dict[str, Any]" = field(default_factory=dict)
    username: Optional[str] = None
    password: Optional[str] = None
    options: "dict[str, Any]" = field(default_factory=dict)

    @classmethod
    def from_params(cls, params: "Mapping[str, Any]") -> Self:
        """Build a config from a raw configuration block."""
        normalized = normalize_connection_params(params)
        return cls(
            adapter=normalized.get("adapter"),
            dsn=dict(normalized.get("dsn") or {}),
            username=normalized.get("username"),
            password=normalized.get("password"),
            options=dict(normalized.get("options") or {}),
        )

    def merge(self, override: "Mapping[str, Any]") -> Self:
        """Return a new config with ``override`` merged over this one."""
        return type(self).from_params(merge_connection_config(self.as_params(), override))

    def as_params(self) -> "ConnectionParams":
        """Return the configuration as a raw block, including the adapter name."""
        params = self.connection_params()
        params["adapter"] = cast("str", self.adapter)
        return params

    def connection_params(self) -> "ConnectionParams":
        """Return the constructor parameters handed to a connection class."""
        return {
            "dsn": dict(self.dsn),
            "username": self.username,
            "password": self.password,
            "options": dict(self.options),
        }


def normalize_connection_params(params: "Optional[Mapping[str, Any]]") -> "dict[str, Any]":
    """Copy a configuration block and validate its nested mappings.

    Args:
        params: Raw configuration block.

    Raises:
        ImproperConfigurationError: If ``dsn`` or ``options`` is not a mapping.

    Returns:
        A shallow copy with ``dsn`` and ``options`` copied as plain dicts.
    """
    normalized: dict[str, Any] = dict(params) if params else {}
    for key in ("dsn", "options"):
        value = normalized.get(key)
        if value is None:
            continue
        if not isinstance(value, Mapping):
            msg = f"The '{key}' field of a connection configuration must be a mapping, got {type(value).__name__}."
            raise ImproperConfigurationError(msg)
        normalized[key] = dict(value)
    return normalized


def merge_connection_config(base: "Mapping[str, Any]", override: "Mapping[str, Any]") -> "dict[str, Any]":
    """Merge a named configuration block over a base block.

    Only ``dsn`` merges key by key, keeping the base key order and appending
    new keys. Every other field present in ``override`` replaces the base value.
    Neither input is modified.

    Args:
        base: The default configuration block.
        override: The named (partial) configuration block.

    Returns:
        The merged configuration block.
    """
    merged = normalize_connection_params(base)
    extra = normalize_connection_params(override)
    for key, value in extra.items():
        if key == "dsn":
            dsn = dict(merged.get("dsn") or {})
            dsn.update(value or {})
            merged["dsn"] = dsn
        else:
            merged[key] = value
    return merged


def render_dsn_string(prefix: str, dsn: "Mapping[str, Any]") -> str:
    """Render ``prefix:key=val;key=val``, skipping ``None`` values.

    Args:
        prefix: Dialect prefix, e.g. ``mysql``.
        dsn: Ordered DSN mapping.

    Returns:
        The DSN string.
    """
    text = f"{prefix}:"
    for key, value in dsn.items():
        if value is not None:
            text += f"{key}={value};"
    return text.rstrip(";")


def parse_dsn_string(dsn_string: str) -> "tuple[str, dict[str, str]]":
    """Split a DSN string rendered by :func:`render_dsn_string`.

    Values may contain ``=``; only the first one in each pair separates key from value.

    Args:
        dsn_string: The DSN string.

    Raises:
        ImproperConfigurationError: If the string has no ``prefix:`` part.

    Returns:
        The prefix and the DSN mapping in order.
    """
    prefix, sep, body = dsn_string.partition(":")
    if not sep or not prefix:
        msg = f"Malformed DSN string {dsn_string!r}; expected '<prefix>:key=value;...'."
        raise ImproperConfigurationError(msg)
    dsn: dict[str, str] = {}
    for pair in body.split(";"):
        if not pair:
            continue
        key, _, value = pair.partition("=")
        dsn[key] = value
    return prefix, dsn
