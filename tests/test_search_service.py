"""
Tests for SearchService

Hybrid merge, deduplication, fallback and corpus stats.
"""

from unittest.mock import Mock

from conftest import FakeVectorStore, make_chunk
from notes_rag.core.models.document import Origin, RelevanceBand
from notes_rag.core.services.search_service import FALLBACK_SCORE, SearchService


class TestHybridSearch:
    """Tests for SearchService.search"""

    def test_zero_k_returns_empty_without_searching(self):
        store = FakeVectorStore([make_chunk("roadmap", source="a")])
        service = SearchService(store)

        assert service.search("roadmap", 0) == []
        assert service.search("roadmap", -1) == []
        assert store.search_calls == []

    def test_semantic_pass_requests_twice_k(self):
        store = FakeVectorStore([make_chunk("roadmap", source="a")])

        SearchService(store).search("roadmap", 3)

        assert store.search_calls == [("roadmap", 6)]

    def test_merges_semantic_and_keyword(self):
        semantic_only = make_chunk("quarterly planning notes", source="plan.md")
        keyword_only = make_chunk("the roadmap for spring", source="road.md")
        store = FakeVectorStore(
            [semantic_only, keyword_only],
            similarities={semantic_only.text: 0.6, keyword_only.text: 0.1},
        )

        results = SearchService(store).search("roadmap", 5)

        by_source = {c.chunk.metadata.source_id: c for c in results}
        assert by_source["road.md"].origin == Origin.KEYWORD
        assert by_source["road.md"].score == 1.0
        assert by_source["plan.md"].origin == Origin.SEMANTIC
        assert [c.chunk.metadata.source_id for c in results] == ["road.md", "plan.md"]

    def test_deduplicates_by_source_keeping_higher_score(self):
        first = make_chunk("roadmap part one", source="road.md")
        second = make_chunk("roadmap part two", source="road.md")
        store = FakeVectorStore(
            [first, second], similarities={first.text: 0.9, second.text: 0.4}
        )

        results = SearchService(store).search("roadmap", 5)

        assert len(results) == 1
        assert results[0].score == 1.0
        assert results[0].origin == Origin.KEYWORD

    def test_chunks_without_source_dedupe_by_text_prefix(self):
        a = make_chunk("x" * 100 + " tail a")
        b = make_chunk("x" * 100 + " tail b")
        store = FakeVectorStore([a, b], similarities={a.text: 0.8, b.text: 0.7})

        results = SearchService(store).search("nothing", 5)

        assert len(results) == 1
        assert results[0].chunk == a

    def test_results_sorted_and_truncated(self):
        chunks = [make_chunk(f"note {i}", source=f"{i}.md") for i in range(6)]
        store = FakeVectorStore(
            chunks, similarities={c.text: 0.1 * i for i, c in enumerate(chunks)}
        )

        results = SearchService(store).search("zzz", 3)

        assert [c.chunk.metadata.source_id for c in results] == ["5.md", "4.md", "3.md"]

    def test_empty_query_is_valid(self):
        chunk = make_chunk("anything", source="a.md")
        store = FakeVectorStore([chunk], similarities={chunk.text: 0.2})

        results = SearchService(store).search("", 5)

        assert [c.origin for c in results] == [Origin.SEMANTIC]


class TestFallback:
    """Tests for the degraded search path"""

    def test_semantic_failure_falls_back(self):
        chunk = make_chunk("roadmap", source="a.md")
        store = FakeVectorStore(
            [chunk], similarities={chunk.text: 0.9}, semantic_error=RuntimeError("boom")
        )

        results = SearchService(store).search("roadmap", 4)

        assert len(results) == 1
        assert results[0].origin == Origin.FALLBACK
        assert results[0].score == FALLBACK_SCORE
        assert results[0].relevance == RelevanceBand.MEDIUM
        assert store.search_calls[-1] == ("roadmap", 4)

    def test_keyword_failure_falls_back(self):
        chunk = make_chunk("roadmap", source="a.md")
        store = FakeVectorStore([chunk])
        store.all_chunks = Mock(side_effect=RuntimeError("snapshot failed"))

        results = SearchService(store).search("roadmap", 2)

        assert [c.origin for c in results] == [Origin.FALLBACK]

    def test_fallback_never_raises(self):
        store = FakeVectorStore(error=ConnectionError("index down"))

        assert SearchService(store).search("roadmap", 5) == []


class TestStats:
    """Tests for SearchService.stats"""

    def test_corpus_stats(self):
        chunks = [
            make_chunk("abcd", source="a.md"),
            make_chunk("abcdef", source="a.md"),
            make_chunk("ab", source="b.md"),
        ]

        stats = SearchService(FakeVectorStore(chunks)).stats()

        assert stats.total_chunks == 3
        assert stats.unique_sources == 2
        assert stats.average_chunk_length == 4.0
        assert stats.sample_sources == ["a.md", "b.md"]
        assert stats.to_dict()["totalDocuments"] == 3

    def test_sample_sources_capped(self):
        chunks = [make_chunk("x", source=f"{i}.md") for i in range(8)]

        stats = SearchService(FakeVectorStore(chunks)).stats()

        assert len(stats.sample_sources) == 5

    def test_empty_corpus(self):
        stats = SearchService(FakeVectorStore()).stats()

        assert stats.total_chunks == 0
        assert stats.average_chunk_length == 0.0
