"""On-disk persistence of the index with staleness detection."""

import json
import os
import tempfile
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from ..utils.logging import get_logger
from .document import Document

logger = get_logger(__name__)

SNAPSHOT_VERSION = "1.0.0"


class SnapshotError(Exception):
    """Raised when a persisted snapshot cannot be read or is incompatible."""

    pass


def count_unique_terms(documents: Iterable[Document]) -> int:
    """Count distinct terms across all documents."""
    terms: set[str] = set()
    for document in documents:
        terms.update(document.term_freqs)
    return len(terms)


@dataclass
class IndexSnapshot:
    """A complete, persisted build of the index."""

    documents: list[Document] = field(default_factory=list)
    created: datetime = field(default_factory=datetime.now)
    version: str = SNAPSHOT_VERSION

    @property
    def file_count(self) -> int:
        return len(self.documents)

    @property
    def term_count(self) -> int:
        return count_unique_terms(self.documents)

    def to_dict(self) -> dict:
        """Convert to the JSON snapshot format."""
        return {
            "version": self.version,
            "created": self.created.isoformat(),
            "documents": [document.to_dict() for document in self.documents],
            "fileCount": self.file_count,
            "termCount": self.term_count,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "IndexSnapshot":
        """
        Create from the JSON snapshot format.

        Raises:
            SnapshotError: If the data has the wrong version or shape
        """
        if not isinstance(data, dict):
            raise SnapshotError("Snapshot root is not an object")

        version = data.get("version")
        if version != SNAPSHOT_VERSION:
            raise SnapshotError(f"Unsupported snapshot version: {version!r}")

        try:
            documents = [Document.from_dict(item) for item in data.get("documents", [])]
            created = (
                datetime.fromisoformat(data["created"]) if data.get("created") else datetime.now()
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise SnapshotError(f"Malformed snapshot: {e}") from e

        return cls(documents=documents, created=created, version=version)


def save_snapshot(snapshot: IndexSnapshot, index_path: Path) -> None:
    """
    Write a snapshot, replacing any previous one.

    The data is written to a temporary file in the same directory and then
    renamed over the target, so readers never see a partial snapshot.
    """
    index_path = Path(index_path)
    index_path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{index_path.name}.", suffix=".tmp", dir=index_path.parent
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(snapshot.to_dict(), f, indent=2, ensure_ascii=False)
        os.replace(tmp_name, index_path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    logger.debug(f"Saved index snapshot to {index_path}")


def load_snapshot(index_path: Path) -> IndexSnapshot:
    """
    Read a snapshot from disk.

    Raises:
        SnapshotError: If the file cannot be read, parsed or validated
    """
    try:
        with open(index_path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise SnapshotError(f"Could not read snapshot {index_path}: {e}") from e

    return IndexSnapshot.from_dict(data)


def is_snapshot_current(index_path: Path, source_files: Iterable[Path]) -> bool:
    """
    Check whether a snapshot is at least as new as every source file.

    Any error while checking counts as "not current" so the caller rebuilds.
    """
    index_path = Path(index_path)
    try:
        if not index_path.is_file():
            return False

        index_mtime = index_path.stat().st_mtime
        for source in source_files:
            if Path(source).stat().st_mtime > index_mtime:
                logger.debug(f"Snapshot is older than {source}")
                return False
        return True
    except OSError as e:
        logger.debug(f"Staleness check failed, treating snapshot as stale: {e}")
        return False
