"""Search module for ranked memory search."""

from .engine import SearchEngine, SearchResult, find_matching_lines

__all__ = [
    "SearchEngine",
    "SearchResult",
    "find_matching_lines",
]
