"""Index module: tokenization, documents, scoring and persistence."""

from .discovery import discover_files
from .document import Document, DocumentReadError, LineEntry, index_file
from .manager import IndexManager
from .scorer import TFIDFScorer
from .snapshot import (
    SNAPSHOT_VERSION,
    IndexSnapshot,
    SnapshotError,
    is_snapshot_current,
    load_snapshot,
    save_snapshot,
)
from .tokenizer import STOP_WORDS, Tokenizer

__all__ = [
    "Tokenizer",
    "STOP_WORDS",
    "Document",
    "LineEntry",
    "DocumentReadError",
    "index_file",
    "discover_files",
    "TFIDFScorer",
    "IndexSnapshot",
    "SnapshotError",
    "SNAPSHOT_VERSION",
    "save_snapshot",
    "load_snapshot",
    "is_snapshot_current",
    "IndexManager",
]
