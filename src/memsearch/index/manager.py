"""Index manager: build, load, persist and keep the memory index fresh."""

import threading
import time
from pathlib import Path

from ..config import MemSearchConfig
from ..utils.logging import get_logger
from ..watcher import DebouncedCall, MemoryWatcher
from .discovery import discover_files
from .document import Document, DocumentReadError, index_file
from .snapshot import (
    IndexSnapshot,
    SnapshotError,
    count_unique_terms,
    is_snapshot_current,
    load_snapshot,
    save_snapshot,
)
from .tokenizer import Tokenizer

logger = get_logger(__name__)


class IndexManager:
    """
    Owns the in-memory document collection and its persisted snapshot.

    The collection is only ever replaced as a whole, after a build has
    completed and been saved, so readers see either the previous or the new
    collection. Builds are serialized; a build in progress is never cancelled.
    """

    def __init__(self, config: MemSearchConfig, tokenizer: Tokenizer | None = None):
        """
        Initialize the index manager.

        Args:
            config: Configuration supplying the workspace root and snapshot path
            tokenizer: Optional tokenizer (defaults to a standard Tokenizer)
        """
        self.config = config
        self.workspace_root = Path(config.workspace_root)
        self.index_path = config.get_index_path()
        self.tokenizer = tokenizer or Tokenizer()

        self._documents: tuple[Document, ...] = ()
        self._ready = False
        self._build_lock = threading.Lock()
        self._rebuild = DebouncedCall(self._rebuild_after_change, config.index.debounce_seconds)
        self._watcher: MemoryWatcher | None = None

    @property
    def ready(self) -> bool:
        """True once a build or load has succeeded."""
        return self._ready

    @property
    def documents(self) -> tuple[Document, ...]:
        """The current document collection."""
        return self._documents

    @property
    def watching(self) -> bool:
        """Check whether file watching is active."""
        return self._watcher is not None and self._watcher.is_running

    @property
    def rebuild_pending(self) -> bool:
        """Check whether a debounced rebuild is scheduled."""
        return self._rebuild.pending

    def unique_term_count(self) -> int:
        """Count distinct terms across the current collection."""
        return count_unique_terms(self._documents)

    def initialize(self, watch: bool | None = None, rebuild: bool = False) -> bool:
        """
        Load or build the index and optionally start watching.

        Never raises; a failure leaves the manager not ready.

        Args:
            watch: Start the file watcher (defaults to config.index.watch_enabled)
            rebuild: Build from the memory files even if the snapshot is current

        Returns:
            True if the index is ready
        """
        if watch is None:
            watch = self.config.index.watch_enabled

        try:
            if rebuild:
                self.build_index()
            else:
                self.load_or_build()
        except Exception:
            logger.exception("Failed to initialize memory index")
            self._ready = False
            return False

        if watch:
            self.start_watching()

        self._ready = True
        logger.info(f"Memory search initialized: {len(self._documents)} documents indexed")
        return True

    def load_or_build(self):
        """Load the snapshot if it is current, otherwise rebuild."""
        if self.is_index_current():
            self.load_index()
        else:
            self.build_index()

    def is_index_current(self) -> bool:
        """Check whether the snapshot is newer than every memory file."""
        try:
            files = discover_files(self.workspace_root)
        except OSError as e:
            logger.debug(f"Discovery failed during staleness check: {e}")
            return False
        return is_snapshot_current(self.index_path, files)

    def load_index(self):
        """Load the persisted snapshot, rebuilding if it cannot be used."""
        try:
            snapshot = load_snapshot(self.index_path)
        except SnapshotError as e:
            logger.warning(f"Failed to load index, rebuilding: {e}")
            self.build_index()
            return

        self._documents = tuple(snapshot.documents)
        self._ready = True
        logger.info(f"Loaded index: {len(self._documents)} documents")

    def build_index(self) -> IndexSnapshot:
        """
        Rebuild the index from the memory files and persist it.

        Files that cannot be read are skipped with a warning.

        Returns:
            The snapshot that was installed

        Raises:
            OSError: If the snapshot cannot be written; the previous
                collection stays installed
        """
        with self._build_lock:
            logger.info("Building memory index...")
            start = time.monotonic()

            documents: list[Document] = []
            failures: list[Path] = []
            for file_path in sorted(discover_files(self.workspace_root)):
                try:
                    documents.append(index_file(file_path, self.tokenizer))
                except DocumentReadError as e:
                    logger.warning(f"Failed to index {file_path}: {e}")
                    failures.append(file_path)

            snapshot = IndexSnapshot(documents=documents)
            save_snapshot(snapshot, self.index_path)

            self._documents = tuple(documents)
            self._ready = True

            elapsed_ms = (time.monotonic() - start) * 1000
            logger.info(
                f"Index built in {elapsed_ms:.0f}ms: {snapshot.file_count} documents, "
                f"{snapshot.term_count} unique terms"
                + (f", {len(failures)} skipped" if failures else "")
            )
            return snapshot

    def schedule_rebuild(self):
        """Schedule a rebuild after the debounce window, restarting any pending one."""
        self._rebuild.schedule()

    def force_rebuild(self) -> IndexSnapshot:
        """Cancel any pending rebuild and rebuild immediately."""
        if self._rebuild.cancel():
            logger.debug("Cancelled pending rebuild")
        return self.build_index()

    def _rebuild_after_change(self):
        logger.info("Memory files changed, rebuilding index...")
        try:
            self.build_index()
        except Exception as e:
            logger.error(f"Rebuild after file change failed: {e}")

    def _on_file_change(self, path: Path):
        self.schedule_rebuild()

    def start_watching(self) -> bool:
        """
        Start watching memory files for changes.

        Returns:
            True if watching, False if there was nothing to watch or setup failed
        """
        if self.watching:
            return True

        watcher = MemoryWatcher(self.workspace_root, on_change=self._on_file_change)
        try:
            started = watcher.start()
        except Exception as e:
            logger.warning(f"Failed to set up file watching: {e}")
            return False

        if started:
            self._watcher = watcher
            logger.info("File watching enabled for memory files")
        return started

    def stop_watching(self):
        """Stop watching memory files."""
        if self._watcher is not None:
            self._watcher.stop()
            self._watcher = None

    def close(self):
        """Stop watching, then cancel any pending rebuild."""
        self.stop_watching()
        self._rebuild.cancel()
