"""In-memory representation of indexed memory files."""

from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path

from ..utils.logging import get_logger
from .tokenizer import Tokenizer

logger = get_logger(__name__)


class DocumentReadError(Exception):
    """Raised when a source file cannot be read for indexing."""

    pass


@dataclass
class LineEntry:
    """A single source line with its document-mode tokens."""

    line_number: int  # 1-based
    text: str
    tokens: list[str]

    def to_dict(self) -> dict:
        return {"lineNumber": self.line_number, "text": self.text, "tokens": list(self.tokens)}

    @classmethod
    def from_dict(cls, data: dict) -> "LineEntry":
        return cls(
            line_number=int(data["lineNumber"]),
            text=data["text"],
            tokens=list(data["tokens"]),
        )


@dataclass
class Document:
    """
    An indexed file.

    ``term_freqs`` always equals the per-line token counts summed over
    ``lines``; ``lines`` is used only for evidence extraction at query time.
    """

    path: str
    term_freqs: dict[str, int] = field(default_factory=dict)
    lines: list[LineEntry] = field(default_factory=list)
    content: str = ""

    @property
    def id(self) -> str:
        """Documents are keyed by their source path."""
        return self.path

    @property
    def token_count(self) -> int:
        """Total number of tokens across all lines."""
        return sum(self.term_freqs.values())

    @classmethod
    def from_text(cls, path: str, content: str, tokenizer: Tokenizer | None = None) -> "Document":
        """
        Build a document from raw text.

        Args:
            path: Identifier of the source file
            content: Full raw text
            tokenizer: Tokenizer to use (defaults to a standard Tokenizer)

        Returns:
            Document with per-line tokens and whole-document term frequencies
        """
        tokenizer = tokenizer or Tokenizer()
        term_freqs: Counter[str] = Counter()
        lines: list[LineEntry] = []

        for line_number, text in enumerate(content.split("\n"), start=1):
            tokens = tokenizer.tokenize(text)
            lines.append(LineEntry(line_number=line_number, text=text, tokens=tokens))
            term_freqs.update(tokens)

        return cls(path=path, term_freqs=dict(term_freqs), lines=lines, content=content)

    def to_dict(self) -> dict:
        """Convert to the snapshot's JSON document shape."""
        return {
            "id": self.id,
            "path": self.path,
            "termFreqs": dict(self.term_freqs),
            "lines": [line.to_dict() for line in self.lines],
            "content": self.content,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Document":
        """Create from the snapshot's JSON document shape."""
        return cls(
            path=data["path"],
            term_freqs={term: int(count) for term, count in data["termFreqs"].items()},
            lines=[LineEntry.from_dict(line) for line in data.get("lines", [])],
            content=data.get("content", ""),
        )


def read_text(file_path: Path) -> str:
    """
    Read a memory file as UTF-8 text.

    Raises:
        DocumentReadError: If the file is missing, unreadable or not valid UTF-8
    """
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            return f.read()
    except UnicodeDecodeError as e:
        raise DocumentReadError(f"File is not valid UTF-8: {file_path}") from e
    except OSError as e:
        raise DocumentReadError(f"Could not read file {file_path}: {e}") from e


def index_file(file_path: Path | str, tokenizer: Tokenizer | None = None) -> Document:
    """
    Index a single file.

    Args:
        file_path: Path to the file
        tokenizer: Tokenizer to use

    Returns:
        The indexed Document

    Raises:
        DocumentReadError: If the file cannot be read
    """
    file_path = Path(file_path)
    content = read_text(file_path)
    document = Document.from_text(str(file_path), content, tokenizer)
    logger.debug(f"Indexed {file_path}: {len(document.lines)} lines, {len(document.term_freqs)} terms")
    return document
