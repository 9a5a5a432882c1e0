"""Watches the memory corpus for changes."""

import threading
from collections.abc import Callable
from pathlib import Path

from watchdog.observers import Observer

from ..config.models import MEMORY_DIRNAME, MEMORY_FILENAME
from ..utils.logging import get_logger
from .handler import MemoryChangeHandler

logger = get_logger(__name__)


class MemoryWatcher:
    """
    Watches ``<root>/memory`` (recursively) and ``<root>/MEMORY.md``.

    Uses watchdog for cross-platform file system monitoring. Locations that
    do not exist when ``start()`` is called are not watched; if neither
    exists the watcher stays stopped.
    """

    def __init__(self, workspace_root: Path | str, on_change: Callable[[Path], None]):
        """
        Initialize the memory watcher.

        Args:
            workspace_root: The workspace directory
            on_change: Callback invoked for every relevant file change
        """
        self.workspace_root = Path(workspace_root)
        self.on_change = on_change

        self._observer: Observer | None = None
        self._handler: MemoryChangeHandler | None = None
        self._watched: list[Path] = []
        self._running = False
        self._lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        """Check if the watcher is currently running."""
        return self._running

    @property
    def watched_paths(self) -> list[Path]:
        """Get the locations being watched."""
        return list(self._watched)

    def start(self) -> bool:
        """
        Start watching whichever memory locations exist.

        Returns:
            True if the watcher is running afterwards, False otherwise
        """
        with self._lock:
            if self._running:
                logger.warning("Watcher is already running")
                return True

            memory_dir = self.workspace_root / MEMORY_DIRNAME
            memory_file = self.workspace_root / MEMORY_FILENAME

            observer = Observer()
            handler = MemoryChangeHandler(self.workspace_root, self.on_change)
            watched: list[Path] = []

            if memory_dir.is_dir():
                observer.schedule(handler, str(memory_dir), recursive=True)
                watched.append(memory_dir)

            if memory_file.is_file():
                # Watch the root itself; the handler filters down to MEMORY.md
                observer.schedule(handler, str(self.workspace_root), recursive=False)
                watched.append(memory_file)

            if not watched:
                logger.info(f"No memory files to watch under {self.workspace_root}")
                return False

            observer.start()
            self._observer = observer
            self._handler = handler
            self._watched = watched
            self._running = True

            for path in watched:
                logger.info(f"Watching: {path}")
            return True

    def stop(self):
        """Stop watching."""
        with self._lock:
            if not self._running:
                return

            if self._observer:
                self._observer.stop()
                self._observer.join(timeout=5.0)
                self._observer = None

            self._handler = None
            self._watched = []
            self._running = False
            logger.info("Memory watcher stopped")

    def __enter__(self):
        """Context manager entry."""
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.stop()
        return False
