"""
Tests for Reranker and the boost strategies
"""

from datetime import datetime, timedelta

import pytest

from conftest import make_chunk
from notes_rag.core.models.document import Candidate, Origin, RelevanceBand
from notes_rag.core.services.rerank_service import Reranker
from notes_rag.core.strategies.scoring import (
    DirectoryBoost,
    ExactPhraseBoost,
    FileNameBoost,
    QueryTerms,
    RecencyBoost,
    TermFrequencyBoost,
)


def candidate(chunk, score=0.5, origin=Origin.SEMANTIC) -> Candidate:
    return Candidate(chunk=chunk, score=score, origin=origin, relevance=RelevanceBand.MEDIUM)


class TestBoosts:
    """Tests for the individual boost strategies"""

    def test_exact_phrase(self, fixed_now):
        terms = QueryTerms.from_query("Garden Plan")
        hit = candidate(make_chunk("My garden plan for May"))
        miss = candidate(make_chunk("My plan for the garden"))

        assert ExactPhraseBoost().boost(terms, hit, fixed_now) == 0.2
        assert ExactPhraseBoost().boost(terms, miss, fixed_now) == 0.0

    def test_file_name(self, fixed_now):
        terms = QueryTerms.from_query("roadmap")
        hit = candidate(make_chunk("x", file_name="Q3 Roadmap"))

        assert FileNameBoost().boost(terms, hit, fixed_now) == 0.15

    def test_directory_needs_word_in_directory(self, fixed_now):
        terms = QueryTerms.from_query("work meeting")
        hit = candidate(make_chunk("x", directory="work/projects"))
        miss = candidate(make_chunk("x", directory="personal"))
        root = candidate(make_chunk("x", directory=""))

        assert DirectoryBoost().boost(terms, hit, fixed_now) == 0.1
        assert DirectoryBoost().boost(terms, miss, fixed_now) == 0.0
        assert DirectoryBoost().boost(terms, root, fixed_now) == 0.0

    def test_term_frequency_weights(self, fixed_now):
        terms = QueryTerms.from_query("budget")
        chunk = make_chunk("budget and budget", file_name="budget", directory="budget")

        # 2 content + 2 file name + 1.5 directory = 5.5 matches
        assert TermFrequencyBoost().boost(terms, candidate(chunk), fixed_now) == pytest.approx(0.275)

    def test_term_frequency_whole_words(self, fixed_now):
        terms = QueryTerms.from_query("work")
        chunk = make_chunk("workshop homework")

        assert TermFrequencyBoost().boost(terms, candidate(chunk), fixed_now) == 0.0

    def test_term_frequency_capped(self, fixed_now):
        terms = QueryTerms.from_query("note")
        chunk = make_chunk(" ".join(["note"] * 50))

        assert TermFrequencyBoost().boost(terms, candidate(chunk), fixed_now) == 0.3

    def test_recency(self, fixed_now):
        terms = QueryTerms.from_query("x")
        recent = candidate(make_chunk("x", last_modified=fixed_now - timedelta(days=3)))
        old = candidate(make_chunk("x", last_modified=fixed_now - timedelta(days=45)))
        unknown = candidate(make_chunk("x"))

        assert RecencyBoost().boost(terms, recent, fixed_now) == 0.1
        assert RecencyBoost().boost(terms, old, fixed_now) == 0.0
        assert RecencyBoost().boost(terms, unknown, fixed_now) == 0.0

    def test_recency_naive_timestamp_treated_as_utc(self, fixed_now):
        terms = QueryTerms.from_query("x")
        naive = datetime(2024, 5, 30, 12, 0)

        assert RecencyBoost().boost(terms, candidate(make_chunk("x", last_modified=naive)), fixed_now) == 0.1


class TestReranker:
    """Tests for Reranker.rerank"""

    def test_empty_input(self):
        assert Reranker().rerank([], "anything") == []

    def test_keeps_original_score(self, fixed_now):
        original = candidate(make_chunk("unrelated text"), score=0.42)

        [result] = Reranker().rerank([original], "garden", now=fixed_now)

        assert result.original_score == 0.42
        assert result.score == 0.42
        assert result.rerank_score == 0.42
        assert original.rerank_score is None

    def test_rerank_never_lowers_score(self, fixed_now):
        candidates = [
            candidate(make_chunk("garden plan", file_name="garden"), score=0.3),
            candidate(make_chunk("nothing relevant"), score=0.6),
        ]

        for result in Reranker().rerank(candidates, "garden plan", now=fixed_now):
            assert result.rerank_score >= result.original_score

    def test_frequency_only_boost(self, fixed_now):
        chunk = make_chunk(
            "meeting with John about the roadmap",
            source="/vault/work/Project Plan.md",
            file_name="Project Plan",
            directory="work",
        )

        [result] = Reranker().rerank([candidate(chunk, 0.6, Origin.KEYWORD)], "meeting John", now=fixed_now)

        boost = result.rerank_score - result.original_score
        assert boost == pytest.approx(0.1)
        assert 0 < boost <= 0.3

    def test_exact_full_text_ranks_first(self, fixed_now):
        exact = candidate(make_chunk("quarterly goals review", source="a.md"), score=0.5)
        others = [
            candidate(make_chunk("quarterly numbers", source="b.md"), score=0.6),
            candidate(make_chunk("goals for the review board", source="c.md"), score=0.65),
        ]

        results = Reranker().rerank(others + [exact], "quarterly goals review", now=fixed_now)

        assert results[0].chunk.metadata.source_id == "a.md"
        assert results[0].rerank_score - results[0].original_score >= 0.2

    def test_stable_for_equal_scores(self, fixed_now):
        first = candidate(make_chunk("alpha", source="1.md"), score=0.5)
        second = candidate(make_chunk("beta", source="2.md"), score=0.5)

        results = Reranker().rerank([first, second], "zzz", now=fixed_now)

        assert [c.chunk.metadata.source_id for c in results] == ["1.md", "2.md"]

    def test_custom_boosts(self, fixed_now):
        chunk = make_chunk("garden")

        [result] = Reranker(boosts=[]).rerank([candidate(chunk, 0.5)], "garden", now=fixed_now)

        assert result.rerank_score == 0.5

    def test_repeated_runs_are_identical(self, fixed_now):
        candidates = [
            candidate(
                make_chunk("garden plan for spring", source="a.md", file_name="garden",
                           directory="home", last_modified=fixed_now - timedelta(days=3)),
                score=0.4,
            ),
            candidate(make_chunk("plan the budget", source="b.md", directory="work"), score=0.55),
            candidate(make_chunk("spring garden notes", source="c.md"), score=0.5, origin=Origin.KEYWORD),
        ]

        first = Reranker().rerank(candidates, "garden plan", now=fixed_now)
        second = Reranker().rerank(candidates, "garden plan", now=fixed_now)

        assert first == second
        assert [c.rerank_score for c in first] == [c.rerank_score for c in second]
