"""Lifecycle hooks fired around connect and query."""

from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any, Optional, TypedDict, cast

from typing_extensions import NotRequired

from sqlmux.utils.logging import get_logger

if TYPE_CHECKING:
    from sqlmux.connection import AbstractConnection

__all__ = ("LIFECYCLE_EVENTS", "LifecycleConfig", "LifecycleDispatcher", "LifecycleHook", "merge_lifecycle")

logger = get_logger("observability.lifecycle")

LifecycleHook = Callable[..., None]

LIFECYCLE_EVENTS = ("pre_connect", "post_connect", "pre_query", "post_query")


class LifecycleConfig(TypedDict, total=False):
    """Hooks per lifecycle event.

    ``pre_connect`` and ``post_connect`` hooks receive the connection;
    ``pre_query`` hooks receive the connection, the SQL text and the bound data;
    ``post_query`` hooks receive the connection and the executed statement.
    """

    pre_connect: NotRequired["list[LifecycleHook]"]
    post_connect: NotRequired["list[LifecycleHook]"]
    pre_query: NotRequired["list[LifecycleHook]"]
    post_query: NotRequired["list[LifecycleHook]"]


def merge_lifecycle(
    base: "Optional[LifecycleConfig]", override: "Optional[LifecycleConfig]"
) -> "Optional[LifecycleConfig]":
    """Concatenate hook lists, base hooks first."""
    if base is None and override is None:
        return None
    merged: dict[str, list[Any]] = {}
    for config in (base, override):
        if not config:
            continue
        for event, hooks in config.items():
            merged.setdefault(event, []).extend(cast("Iterable[Any]", hooks))
    return cast("LifecycleConfig", merged)


class LifecycleDispatcher:
    """Fires lifecycle hooks in registration order."""

    __slots__ = ("_hooks",)

    def __init__(self, config: "Optional[LifecycleConfig]" = None) -> None:
        hooks: dict[str, tuple[LifecycleHook, ...]] = {}
        for event, event_hooks in (config or {}).items():
            if event not in LIFECYCLE_EVENTS:
                logger.warning("Ignoring hooks for unknown lifecycle event %r", event)
                continue
            hooks[event] = tuple(cast("Iterable[LifecycleHook]", event_hooks))
        self._hooks = hooks

    @property
    def has_hooks(self) -> bool:
        return any(self._hooks.values())

    def emit(self, event: str, connection: "AbstractConnection", *args: Any) -> None:
        """Call every hook registered for ``event``."""
        for hook in self._hooks.get(event, ()):
            hook(connection, *args)

    def pre_connect(self, connection: "AbstractConnection") -> None:
        self.emit("pre_connect", connection)

    def post_connect(self, connection: "AbstractConnection") -> None:
        self.emit("post_connect", connection)

    def pre_query(self, connection: "AbstractConnection", sql: str, data: "Any") -> None:
        self.emit("pre_query", connection, sql, data)

    def post_query(self, connection: "AbstractConnection", statement: "Any") -> None:
        self.emit("post_query", connection, statement)
