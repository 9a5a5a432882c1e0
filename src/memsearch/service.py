"""Public memory search operations used by the host agent runtime."""

import threading
from dataclasses import dataclass
from typing import Any

from .config import MemSearchConfig, get_config
from .index import IndexManager
from .search import SearchEngine, SearchResult
from .utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class IndexStatus:
    """Snapshot of the index state for status reporting."""

    ready: bool
    doc_count: int
    index_size: int  # distinct terms, not bytes
    watching: bool

    def to_dict(self) -> dict:
        return {
            "ready": self.ready,
            "docCount": self.doc_count,
            "indexSize": self.index_size,
            "watching": self.watching,
        }


@dataclass
class RebuildResult:
    """Outcome of an explicit rebuild."""

    success: bool
    status: IndexStatus | None = None
    error: str | None = None

    def to_dict(self) -> dict:
        if not self.success:
            return {"success": False, "error": self.error or "unknown error"}
        output: dict[str, Any] = {"success": True}
        if self.status is not None:
            output.update(self.status.to_dict())
        return output


class MemorySearch:
    """
    Owns one index and answers search, status and rebuild requests.

    The index is loaded or built on first use. Concurrent first callers
    wait for the same initialization instead of racing separate builds.
    None of the public methods raise.
    """

    def __init__(self, config: MemSearchConfig, index_manager: IndexManager | None = None):
        """
        Initialize the facade.

        Args:
            config: Configuration for the workspace and index
            index_manager: Optional pre-configured IndexManager
        """
        self.config = config
        self.index_manager = index_manager or IndexManager(config)
        self.engine = SearchEngine(self.index_manager)
        self._initialized = False
        self._init_lock = threading.Lock()

    def ensure_initialized(self) -> bool:
        """Initialize the index once; returns whether it is ready."""
        self._initialize_once()
        return self.index_manager.ready

    def _initialize_once(self, rebuild: bool = False) -> bool:
        """Run initialization if nobody has yet; returns True if this call ran it."""
        with self._init_lock:
            if self._initialized:
                return False
            self.index_manager.initialize(rebuild=rebuild)
            self._initialized = True
            return True

    def search(
        self,
        query: str,
        limit: int | None = None,
        score_threshold: float | None = None,
    ) -> list[SearchResult]:
        """
        Search memory files.

        Args:
            query: Free-text query
            limit: Maximum number of results (defaults to config.search.limit)
            score_threshold: Minimum score (defaults to config.search.score_threshold)

        Returns:
            Ranked results, or an empty list on any failure
        """
        if limit is None:
            limit = self.config.search.limit
        if score_threshold is None:
            score_threshold = self.config.search.score_threshold

        try:
            logger.info(f"Memory search: {query!r}")
            self.ensure_initialized()
            results = self.engine.search(query, limit=limit, score_threshold=score_threshold)
            logger.info(f"Found {len(results)} result(s)")
            return results
        except Exception:
            logger.exception("Memory search failed")
            return []

    def get_status(self) -> IndexStatus:
        """Report readiness and index counts."""
        try:
            self.ensure_initialized()
            return IndexStatus(
                ready=self.index_manager.ready,
                doc_count=len(self.index_manager.documents),
                index_size=self.index_manager.unique_term_count(),
                watching=self.index_manager.watching,
            )
        except Exception:
            logger.exception("Failed to get memory search status")
            return IndexStatus(ready=False, doc_count=0, index_size=0, watching=False)

    def rebuild(self) -> RebuildResult:
        """Rebuild the index now, cancelling any pending debounced rebuild."""
        try:
            # A cold instance builds during initialization
            if not (self._initialize_once(rebuild=True) and self.index_manager.ready):
                self.index_manager.force_rebuild()
            return RebuildResult(success=True, status=self.get_status())
        except Exception as e:
            logger.error(f"Failed to rebuild memory index: {e}")
            return RebuildResult(success=False, error=str(e))

    def close(self):
        """Stop watching and cancel pending rebuilds."""
        self.index_manager.close()


_default_search: MemorySearch | None = None
_default_lock = threading.Lock()


def get_memory_search(config: MemSearchConfig | None = None) -> MemorySearch:
    """
    Get the process-wide MemorySearch, creating it on first use.

    Args:
        config: Configuration for the first creation (defaults to get_config())

    Returns:
        The shared MemorySearch instance
    """
    global _default_search
    with _default_lock:
        if _default_search is None:
            _default_search = MemorySearch(config or get_config())
        return _default_search


def reset_memory_search():
    """Close and discard the process-wide MemorySearch."""
    global _default_search
    with _default_lock:
        if _default_search is not None:
            _default_search.close()
            _default_search = None


def search_memory(
    query: str,
    options: dict | None = None,
    *,
    limit: int | None = None,
    score_threshold: float | None = None,
) -> list[dict]:
    """
    Search memory files.

    Args:
        query: Free-text query
        options: Optional {"limit": int, "scoreThreshold": float}
        limit: Keyword alternative to options["limit"]
        score_threshold: Keyword alternative to options["scoreThreshold"]

    Returns:
        List of {path, score, lineNumbers, snippets}; empty on any failure
    """
    try:
        options = options or {}
        if limit is None:
            limit = options.get("limit")
        if score_threshold is None:
            score_threshold = options.get("scoreThreshold", options.get("score_threshold"))

        results = get_memory_search().search(query, limit=limit, score_threshold=score_threshold)
        return [result.to_dict() for result in results]
    except Exception:
        logger.exception("Memory search failed")
        return []


def get_memory_search_status() -> dict:
    """Get {ready, docCount, indexSize, watching} for the shared index."""
    try:
        return get_memory_search().get_status().to_dict()
    except Exception:
        logger.exception("Failed to get memory search status")
        return IndexStatus(ready=False, doc_count=0, index_size=0, watching=False).to_dict()


def rebuild_memory_index() -> dict:
    """Force a rebuild of the shared index."""
    try:
        return get_memory_search().rebuild().to_dict()
    except Exception as e:
        logger.error(f"Failed to rebuild memory index: {e}")
        return {"success": False, "error": str(e)}
