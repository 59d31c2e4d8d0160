"""Observability hooks for connection and statement lifecycle events."""

from sqlmux.observability._lifecycle import (
    LIFECYCLE_EVENTS,
    LifecycleConfig,
    LifecycleDispatcher,
    LifecycleHook,
    merge_lifecycle,
)

__all__ = ("LIFECYCLE_EVENTS", "LifecycleConfig", "LifecycleDispatcher", "LifecycleHook", "merge_lifecycle")
