"""File system event handler for memory files."""

import os
from collections.abc import Callable
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler

from ..config.models import MEMORY_DIRNAME, MEMORY_FILENAME
from ..utils.logging import get_logger

logger = get_logger(__name__)


class MemoryChangeHandler(FileSystemEventHandler):
    """
    Forwards changes to memory files.

    Relevant paths are ``MEMORY.md`` directly under the workspace root and any
    ``*.md`` file below ``<root>/memory``. Directory events are ignored.
    """

    def __init__(self, workspace_root: Path, on_change: Callable[[Path], None]):
        """
        Initialize the handler.

        Args:
            workspace_root: The workspace directory being watched
            on_change: Called with the path of every relevant change
        """
        super().__init__()
        self.workspace_root = Path(workspace_root).resolve()
        self.memory_dir = (self.workspace_root / MEMORY_DIRNAME).resolve()
        self.on_change = on_change

    def is_relevant(self, path: Path) -> bool:
        """Check whether a path is a memory file."""
        path = Path(path)
        if not path.name.endswith(".md"):
            return False

        parent = path.parent.resolve()
        if parent == self.workspace_root:
            return path.name == MEMORY_FILENAME

        return parent == self.memory_dir or self.memory_dir in parent.parents

    def _dispatch_path(self, event: FileSystemEvent, raw_path) -> bool:
        if not raw_path:
            return False
        path = Path(os.fsdecode(raw_path))
        if not self.is_relevant(path):
            return False

        logger.debug(f"Memory file {event.event_type}: {path}")
        self.on_change(path)
        return True

    def on_any_event(self, event: FileSystemEvent):
        """Handle created, modified, deleted and moved events."""
        if event.is_directory:
            return
        if event.event_type not in {"created", "modified", "deleted", "moved"}:
            return

        if not self._dispatch_path(event, event.src_path):
            # A rename into a memory location only matches on the destination
            self._dispatch_path(event, getattr(event, "dest_path", ""))
