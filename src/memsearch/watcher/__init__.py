"""Watcher module for monitoring memory files."""

from .debounce import DebouncedCall
from .handler import MemoryChangeHandler
from .watcher import MemoryWatcher

__all__ = ["MemoryWatcher", "MemoryChangeHandler", "DebouncedCall"]
