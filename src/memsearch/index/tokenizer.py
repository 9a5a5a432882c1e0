"""Text normalization for documents and queries."""

import re

# Anything that is not a word character or whitespace becomes a separator
_NON_WORD = re.compile(r"[^\w\s]")

STOP_WORDS = frozenset(
    {
        "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
        "of", "with", "by", "is", "are", "was", "were", "be", "been", "have",
        "has", "had", "do", "does", "did", "will", "would", "should", "could",
        "i", "you", "he", "she", "it", "we", "they", "me", "him", "her", "us", "them",
    }
)


class Tokenizer:
    """
    Splits text into lower-case search terms.

    Documents are tokenized strictly (short tokens and stop words dropped) so
    the term tables stay small. Queries keep two-letter terms and stop words
    so short queries still find something.
    """

    def __init__(
        self,
        stop_words: frozenset[str] = STOP_WORDS,
        min_document_length: int = 3,
        min_query_length: int = 2,
    ):
        self.stop_words = stop_words
        self.min_document_length = min_document_length
        self.min_query_length = min_query_length

    @staticmethod
    def _split(text: str) -> list[str]:
        return _NON_WORD.sub(" ", text.lower()).split()

    def tokenize(self, text: str) -> list[str]:
        """Tokenize document text, dropping short tokens and stop words."""
        return [
            word
            for word in self._split(text)
            if len(word) >= self.min_document_length and word not in self.stop_words
        ]

    def tokenize_query(self, query: str) -> list[str]:
        """Tokenize a query, dropping only single-character tokens."""
        return [word for word in self._split(query) if len(word) >= self.min_query_length]
