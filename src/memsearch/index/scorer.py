"""TF-IDF relevance scoring."""

import math
from collections import Counter
from collections.abc import Iterable, Sequence

from .document import Document


class TFIDFScorer:
    """
    Scores documents against query terms with raw-count TF-IDF.

    Document frequencies are computed once when the scorer is created, so
    one scorer serves one pass over a fixed document collection.
    """

    def __init__(self, documents: Sequence[Document]):
        self.documents = documents
        self.document_count = len(documents)
        self.document_frequencies: Counter[str] = Counter()

        for document in documents:
            self.document_frequencies.update(
                term for term, count in document.term_freqs.items() if count > 0
            )

    def df(self, term: str) -> int:
        """Number of documents containing the term."""
        return self.document_frequencies.get(term, 0)

    def tfidf(self, document: Document, term: str) -> float:
        """Weight of one term in one document: tf * ln(N / df)."""
        tf = document.term_freqs.get(term, 0)
        if tf <= 0:
            return 0.0

        df = self.df(term)
        if df == 0:
            return 0.0

        return tf * math.log(self.document_count / df)

    def score(self, document: Document, query_terms: Iterable[str]) -> float:
        """Sum of term weights over all query terms."""
        return sum(self.tfidf(document, term) for term in query_terms)
