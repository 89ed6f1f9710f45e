"""Persisted proctoring state."""

from .namespace import NamespacedState
from .store import InMemoryStateStore, JsonFileStateStore, StateStore, ensure_utc

__all__ = [
    "InMemoryStateStore",
    "JsonFileStateStore",
    "NamespacedState",
    "StateStore",
    "ensure_utc",
]
