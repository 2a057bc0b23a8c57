#!/usr/bin/env python3
"""
test_similarity.py
------------------
Tests for tag similarity scoring and classification.

Usage:
    python -m pytest tests/unit/taxonomy/test_similarity.py -v
"""
# --- Annotations ---
from __future__ import annotations

# --- Third-party imports ---
import pytest

# --- Local imports ---
from curator.taxonomy.similarity import MatchKind, SimilarityMatcher


@pytest.fixture
def matcher():
    return SimilarityMatcher()


class TestSimilarity:
    """Score rules in priority order."""

    @pytest.mark.parametrize("tag", ["a", "project", "area/finance", "", "Ünïcode"])
    def test_self_similarity_is_one(self, matcher, tag):
        assert matcher.similarity(tag, tag) == 1.0

    def test_case_and_marker_ignored(self, matcher):
        assert matcher.similarity("#Project", "project") == 1.0

    @pytest.mark.parametrize("a,b", [("tag", "tags"), ("box", "boxes"), ("notes", "note")])
    def test_plural(self, matcher, a, b):
        assert matcher.similarity(a, b) == 0.9
        assert matcher.classify(a, b) is MatchKind.PLURAL_SINGULAR

    def test_substring(self, matcher):
        assert matcher.similarity("project", "project/alpha") == 0.85
        assert matcher.classify("alpha", "project/alpha") is MatchKind.SUBSTRING

    def test_typo_uses_levenshtein(self, matcher):
        score = matcher.similarity("project", "protect")
        assert score == pytest.approx(1 - 1 / 7)
        assert matcher.classify("project", "protect") is MatchKind.TYPO

    def test_generic_similar(self, matcher):
        assert matcher.classify("meeting", "meetup/weekly") is MatchKind.SIMILAR

    def test_symmetric(self, matcher):
        assert matcher.similarity("journal", "jornal") == matcher.similarity("jornal", "journal")

    def test_bounds(self, matcher):
        assert 0.0 <= matcher.similarity("abc", "xyz") <= 1.0
        assert matcher.similarity("abc", "xyz") == 0.0

    def test_invalid_threshold(self):
        with pytest.raises(ValueError):
            SimilarityMatcher(threshold=1.5)


class TestFindSimilar:
    """Ranking of candidate pools."""

    def test_ranking(self, matcher):
        """projects (plural) ranks above protect (typo) above area."""
        matches = matcher.find_similar("project", ["projects", "protect", "area"], threshold=0.0)
        assert [m.candidate for m in matches] == ["projects", "protect", "area"]
        assert matches[0].kind is MatchKind.PLURAL_SINGULAR

    def test_default_threshold_filters(self, matcher):
        matches = matcher.find_similar("project", ["projects", "protect", "area"])
        assert [m.candidate for m in matches] == ["projects", "protect"]

    def test_query_and_duplicates_skipped(self, matcher):
        matches = matcher.find_similar("todo", ["todo", "#todos", "todos", "TODOS"])
        assert [m.candidate for m in matches] == ["todos"]

    def test_best_match_none(self, matcher):
        assert matcher.best_match("alpha", ["zzz"]) is None

    def test_to_dict(self, matcher):
        match = matcher.best_match("tag", ["tags"])
        assert match.to_dict() == {"candidate": "tags", "score": 0.9, "kind": "plural-singular"}


class TestSimilarPairs:
    """Vault-wide duplicate detection."""

    def test_pairs_sorted_by_score(self, matcher):
        pairs = matcher.similar_pairs(["idea", "ideas", "meeting", "meetings", "x"])
        assert [(a, b) for a, b, _, _ in pairs] == [("idea", "ideas"), ("meeting", "meetings")]

    def test_case_duplicates_collapse(self, matcher):
        assert matcher.similar_pairs(["Todo", "todo"]) == []
