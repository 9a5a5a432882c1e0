"""Tests for the search engine."""

import math
from unittest.mock import MagicMock

import pytest

from memsearch.config import IndexSettings, MemSearchConfig
from memsearch.index import Document, IndexManager, LineEntry, Tokenizer
from memsearch.search import SearchEngine, SearchResult, find_matching_lines


def make_manager(documents, ready: bool = True) -> MagicMock:
    """Create a stand-in IndexManager holding the given documents."""
    manager = MagicMock(spec=IndexManager)
    manager.documents = tuple(documents)
    manager.ready = ready
    manager.tokenizer = Tokenizer()
    return manager


class TestSearchResult:
    """Tests for SearchResult."""

    def test_to_dict(self):
        """Test the host-facing result shape."""
        result = SearchResult(path="/ws/MEMORY.md", score=1.5, line_numbers=[1, 4], snippets=["a", "b"])

        assert result.to_dict() == {
            "path": "/ws/MEMORY.md",
            "score": 1.5,
            "lineNumbers": [1, 4],
            "snippets": ["a", "b"],
        }


class TestFindMatchingLines:
    """Tests for line evidence extraction."""

    def test_exact_match(self):
        """Test that lines containing a query term match."""
        doc = Document.from_text("a.md", "alpha beta\ngamma\nbeta again")
        assert find_matching_lines(doc, ["beta"]) == ([1, 3], ["alpha beta", "beta again"])

    def test_partial_match_both_directions(self):
        """Test that singular/plural and prefix matches work either way."""
        doc = Document.from_text("a.md", "several notes here\nnote taking\nunrelated words")

        assert find_matching_lines(doc, ["note"])[0] == [1, 2]
        assert find_matching_lines(doc, ["notes"])[0] == [1, 2]

    def test_snippets_are_trimmed(self):
        """Test that snippets have surrounding whitespace removed."""
        doc = Document.from_text("a.md", "   - deploy checklist   ")
        assert find_matching_lines(doc, ["deploy"])[1] == ["- deploy checklist"]

    def test_no_match(self):
        """Test that unrelated lines produce no evidence."""
        doc = Document.from_text("a.md", "alpha\nbeta")
        assert find_matching_lines(doc, ["zeta"]) == ([], [])


class TestSearchEngine:
    """Tests for SearchEngine.search."""

    @pytest.fixture
    def documents(self):
        return [
            Document.from_text(
                "/ws/MEMORY.md",
                "We reviewed prompt injection defenses.\nSecurity review scheduled for next sprint.",
            ),
            Document.from_text("/ws/memory/sprint.md", "Sprint planning notes.\nRelease dates agreed."),
            Document.from_text("/ws/memory/deploy.md", "Deploy checklist for release."),
        ]

    @pytest.fixture
    def engine(self, documents):
        return SearchEngine(make_manager(documents))

    def test_prompt_injection_example(self, engine):
        """Test the prompt injection query returns the first MEMORY.md line."""
        results = engine.search("prompt injection")

        assert len(results) == 1
        result = results[0]
        assert result.path == "/ws/MEMORY.md"
        assert result.line_numbers == [1]
        assert result.snippets == ["We reviewed prompt injection defenses."]
        assert result.score == pytest.approx(2 * math.log(3))
        assert result.score > 0

    def test_empty_query_returns_nothing(self, engine):
        """Test that queries without valid terms return no results."""
        assert engine.search("") == []
        assert engine.search("...") == []
        assert engine.search("   ") == []
        assert engine.search("a") == []

    def test_not_ready_returns_nothing(self, documents):
        """Test that an index that is not ready returns no results."""
        engine = SearchEngine(make_manager(documents, ready=False))
        assert engine.search("prompt") == []

    def test_empty_index_returns_nothing(self):
        """Test that an empty index returns no results."""
        engine = SearchEngine(make_manager([]))
        assert engine.search("anything") == []

    def test_sorted_by_score(self, engine):
        """Test that results are ordered by descending score."""
        results = engine.search("release sprint")

        scores = [result.score for result in results]
        assert scores == sorted(scores, reverse=True)
        assert {result.path for result in results} == {
            "/ws/MEMORY.md",
            "/ws/memory/sprint.md",
            "/ws/memory/deploy.md",
        }

    def test_ties_keep_document_order(self):
        """Test that equal scores keep the collection order."""
        documents = [
            Document.from_text("z.md", "kafka consumer"),
            Document.from_text("a.md", "kafka producer"),
            Document.from_text("m.md", "unrelated content"),
        ]
        results = SearchEngine(make_manager(documents)).search("kafka")

        assert [result.path for result in results] == ["z.md", "a.md"]
        assert results[0].score == results[1].score

    def test_limit(self, engine):
        """Test that results are truncated to the limit."""
        assert len(engine.search("release sprint", limit=1)) == 1

    def test_score_threshold(self, engine):
        """Test that documents below the threshold are discarded."""
        assert engine.search("prompt", score_threshold=100.0) == []
        assert len(engine.search("prompt", score_threshold=0.0)) == 1

    def test_ubiquitous_term_scores_below_threshold(self):
        """Test that a term found in every document yields no results."""
        documents = [
            Document.from_text("a.md", "memory one"),
            Document.from_text("b.md", "memory two"),
        ]
        assert SearchEngine(make_manager(documents)).search("memory") == []

    def test_single_document_corpus_scores_zero(self):
        """Test that with one document every idf is zero."""
        documents = [Document.from_text("only.md", "prompt injection")]
        assert SearchEngine(make_manager(documents)).search("prompt injection") == []

    def test_score_without_matching_lines_is_dropped(self):
        """Test that a document whose terms are not in any line is excluded."""
        inconsistent = Document(
            path="ghost.md",
            term_freqs={"phantom": 3},
            lines=[LineEntry(line_number=1, text="nothing relevant", tokens=["nothing", "relevant"])],
        )
        documents = [inconsistent, Document.from_text("other.md", "something else")]

        assert SearchEngine(make_manager(documents)).search("phantom") == []

    def test_evidence_includes_partial_matches(self):
        """Test that partial matches add evidence lines beyond exact hits."""
        documents = [
            Document.from_text("a.md", "deploy notes\nnote taking\nother"),
            Document.from_text("b.md", "something else"),
        ]
        results = SearchEngine(make_manager(documents)).search("notes")

        assert results[0].line_numbers == [1, 2]
        assert results[0].snippets == ["deploy notes", "note taking"]

    def test_query_stop_words_do_not_break_search(self, engine):
        """Test that stop words in the query do not prevent matches."""
        results = engine.search("the deploy checklist")
        assert [result.path for result in results] == ["/ws/memory/deploy.md"]


class TestSearchEngineWithIndex:
    """Tests using a real IndexManager over files on disk."""

    def test_search_after_build(self, tmp_path):
        """Test searching a freshly built workspace index."""
        (tmp_path / "MEMORY.md").write_text(
            "We reviewed prompt injection defenses.\nSecurity review scheduled for next sprint.\n"
        )
        (tmp_path / "memory").mkdir()
        (tmp_path / "memory" / "sprint.md").write_text("Sprint planning notes.\n")

        manager = IndexManager(
            MemSearchConfig(workspace_root=tmp_path, index=IndexSettings(watch_enabled=False))
        )
        manager.build_index()

        results = SearchEngine(manager).search("prompt injection")

        assert [r.path for r in results] == [str(tmp_path / "MEMORY.md")]
        assert results[0].line_numbers == [1]
        assert results[0].score == pytest.approx(2 * math.log(2))
