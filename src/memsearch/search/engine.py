"""Search engine for ranked full-text search over memory files."""

from dataclasses import dataclass, field

from ..index import Document, IndexManager, TFIDFScorer, Tokenizer
from ..utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_LIMIT = 10
DEFAULT_SCORE_THRESHOLD = 0.01


@dataclass
class SearchResult:
    """A matching document with line-level evidence."""

    path: str
    score: float
    line_numbers: list[int] = field(default_factory=list)  # ascending
    snippets: list[str] = field(default_factory=list)  # same order as line_numbers

    def to_dict(self) -> dict:
        """Convert to the result shape handed to the host runtime."""
        return {
            "path": self.path,
            "score": self.score,
            "lineNumbers": list(self.line_numbers),
            "snippets": list(self.snippets),
        }


def terms_overlap(token: str, term: str) -> bool:
    """Check whether a token and a query term are substrings of each other."""
    return term in token or token in term


def find_matching_lines(document: Document, query_terms: list[str]) -> tuple[list[int], list[str]]:
    """
    Collect the lines of a document that mention any query term.

    Matching is a partial match in either direction, so "note" matches
    "notes" and "notes" matches "note".

    Returns:
        Tuple of (line numbers, trimmed line texts), in line order
    """
    line_numbers: list[int] = []
    snippets: list[str] = []

    for line in document.lines:
        if any(terms_overlap(token, term) for term in query_terms for token in line.tokens):
            line_numbers.append(line.line_number)
            snippets.append(line.text.strip())

    return line_numbers, snippets


class SearchEngine:
    """
    TF-IDF search over the documents held by an IndexManager.

    Scores are computed against whatever collection is installed when the
    search starts; a concurrent rebuild does not affect a running search.
    """

    def __init__(self, index_manager: IndexManager, tokenizer: Tokenizer | None = None):
        """
        Initialize the search engine.

        Args:
            index_manager: Source of the document collection
            tokenizer: Query tokenizer (defaults to the index manager's)
        """
        self.index_manager = index_manager
        self.tokenizer = tokenizer or index_manager.tokenizer

    def search(
        self,
        query: str,
        limit: int = DEFAULT_LIMIT,
        score_threshold: float = DEFAULT_SCORE_THRESHOLD,
    ) -> list[SearchResult]:
        """
        Search memory files.

        Args:
            query: Free-text query
            limit: Maximum number of results to return
            score_threshold: Documents scoring below this are discarded

        Returns:
            List of SearchResult sorted by score, highest first
        """
        documents = self.index_manager.documents

        if not self.index_manager.ready or not documents:
            logger.warning("Memory index not ready or empty")
            return []

        query_terms = self.tokenizer.tokenize_query(query or "")
        if not query_terms:
            logger.warning(f"Query {query!r} produced no valid terms")
            return []

        scorer = TFIDFScorer(documents)
        results: list[SearchResult] = []

        for document in documents:
            score = scorer.score(document, query_terms)
            if score < score_threshold:
                continue

            line_numbers, snippets = find_matching_lines(document, query_terms)
            if not line_numbers:
                # A score with no literal evidence is not reported
                logger.debug(f"Dropping {document.path}: scored {score:.4f} without matching lines")
                continue

            results.append(
                SearchResult(
                    path=document.path,
                    score=score,
                    line_numbers=line_numbers,
                    snippets=snippets,
                )
            )

        # sorted() is stable, so equal scores keep document order
        results = sorted(results, key=lambda result: result.score, reverse=True)
        return results[:limit]
