"""Durable, resumable record of processed lessons."""

from notion2noji_core.state.backends import (
    InMemoryStateBackend,
    JsonFileStateBackend,
    StateBackend,
    StateLoadError,
)
from notion2noji_core.state.store import ProcessingStateStore

__all__ = [
    "InMemoryStateBackend",
    "JsonFileStateBackend",
    "ProcessingStateStore",
    "StateBackend",
    "StateLoadError",
]
