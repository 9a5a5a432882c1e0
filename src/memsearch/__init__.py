"""
memsearch - local full-text search over memory notes.

Indexes MEMORY.md and the memory/ folder of a workspace with TF-IDF,
persists the index to disk and rebuilds it when the notes change.
"""

__version__ = "0.1.0"
__license__ = "MIT"

from .config import MemSearchConfig, get_config
from .index import IndexManager, Tokenizer
from .search import SearchEngine, SearchResult
from .service import (
    IndexStatus,
    MemorySearch,
    RebuildResult,
    get_memory_search,
    get_memory_search_status,
    rebuild_memory_index,
    reset_memory_search,
    search_memory,
)
from .utils.logging import get_logger

__all__ = [
    "MemSearchConfig",
    "get_config",
    "get_logger",
    # Index
    "IndexManager",
    "Tokenizer",
    # Search
    "SearchEngine",
    "SearchResult",
    # Public operations
    "MemorySearch",
    "IndexStatus",
    "RebuildResult",
    "get_memory_search",
    "reset_memory_search",
    "search_memory",
    "get_memory_search_status",
    "rebuild_memory_index",
]
