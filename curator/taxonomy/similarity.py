#!/usr/bin/env python3
"""
similarity.py
-------------
Tag-to-tag similarity scoring for duplicate detection.

Scores are heuristic and ordered so that the most "obviously the same tag"
relationships win over raw edit distance:

    exact            1.0
    plural-singular  0.9   (one tag is the other plus "s" or "es")
    substring        0.85  (one tag contains the other)
    otherwise        1 - normalized Levenshtein distance

Tags are cleaned and lower-cased before comparison, so "#Project" and
"project" are an exact match.

Usage:
    from curator.taxonomy.similarity import SimilarityMatcher

    matcher = SimilarityMatcher()
    matcher.find_similar("project", ["projects", "protect", "area"])
    # [SimilarMatch('projects', 0.9, 'plural-singular'),
    #  SimilarMatch('protect', 0.857..., 'typo')]
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass
from enum import Enum
from itertools import combinations
from typing import Any, Dict, Iterable, List, Optional, Tuple

# --- Third party imports ---
from rapidfuzz.distance import Levenshtein

# --- Local imports ---
from curator.taxonomy.normalizer import clean


EXACT_SCORE = 1.0
PLURAL_SCORE = 0.9
SUBSTRING_SCORE = 0.85
TYPO_MAX_LENGTH_DIFF = 2


class MatchKind(str, Enum):
    """Relationship between two similar tags."""

    EXACT = "exact"
    PLURAL_SINGULAR = "plural-singular"
    SUBSTRING = "substring"
    TYPO = "typo"
    SIMILAR = "similar"

    @classmethod
    def choices(cls) -> List[str]:
        return [kind.value for kind in cls]


@dataclass(frozen=True)
class SimilarMatch:
    """A candidate tag ranked against a query."""

    candidate: str
    score: float
    kind: MatchKind

    def to_dict(self) -> Dict[str, Any]:
        return {
            "candidate": self.candidate,
            "score": round(self.score, 4),
            "kind": self.kind.value,
        }


def _is_plural_of(longer: str, shorter: str) -> bool:
    return longer in (shorter + "s", shorter + "es")


class SimilarityMatcher:
    """
    Compute and classify tag similarity.

    Stateless; one instance can be shared freely.

    Attributes:
        threshold: Default minimum score for ``find_similar``
    """

    def __init__(self, threshold: float = 0.7) -> None:
        if not 0.0 <= threshold <= 1.0:
            raise ValueError(f"threshold must be within [0, 1], got {threshold}")
        self.threshold = threshold

    @staticmethod
    def _prepare(tag: Any) -> str:
        return clean(tag).lower()

    def _relate(self, a: str, b: str) -> Tuple[float, MatchKind]:
        """Score and classify two prepared tags with one set of rules."""
        if a == b:
            return EXACT_SCORE, MatchKind.EXACT

        if _is_plural_of(a, b) or _is_plural_of(b, a):
            return PLURAL_SCORE, MatchKind.PLURAL_SINGULAR

        if a and b and (a in b or b in a):
            return SUBSTRING_SCORE, MatchKind.SUBSTRING

        score = 1.0 - Levenshtein.normalized_distance(a, b)
        if abs(len(a) - len(b)) <= TYPO_MAX_LENGTH_DIFF:
            return score, MatchKind.TYPO
        return score, MatchKind.SIMILAR

    def similarity(self, a: Any, b: Any) -> float:
        """
        Similarity score in [0, 1].

        Args:
            a: First tag (raw or cleaned)
            b: Second tag

        Returns:
            1.0 for identical tags down to 0.0 for nothing in common

        Examples:
            >>> SimilarityMatcher().similarity("tag", "tags")
            0.9
        """
        return self._relate(self._prepare(a), self._prepare(b))[0]

    def classify(self, a: Any, b: Any) -> MatchKind:
        """Relationship between two tags, consistent with ``similarity``."""
        return self._relate(self._prepare(a), self._prepare(b))[1]

    def find_similar(
        self,
        tag: Any,
        pool: Iterable[Any],
        threshold: Optional[float] = None,
    ) -> List[SimilarMatch]:
        """
        Rank pool members by similarity to ``tag``.

        Args:
            tag: Query tag
            pool: Candidate tags; duplicates (after cleaning) are ranked once
                and the query itself is skipped
            threshold: Minimum score (default: ``self.threshold``)

        Returns:
            Matches sorted by descending score, ties broken alphabetically
        """
        minimum = self.threshold if threshold is None else threshold
        query = self._prepare(tag)

        seen = set()
        matches: List[SimilarMatch] = []
        for raw in pool:
            candidate = clean(raw)
            key = candidate.lower()
            if not candidate or key == query or key in seen:
                continue
            seen.add(key)

            score, kind = self._relate(query, key)
            if score >= minimum:
                matches.append(SimilarMatch(candidate, score, kind))

        matches.sort(key=lambda m: (-m.score, m.candidate))
        return matches

    def best_match(
        self,
        tag: Any,
        pool: Iterable[Any],
        threshold: Optional[float] = None,
    ) -> Optional[SimilarMatch]:
        """Highest-ranked match from ``find_similar``, or None."""
        matches = self.find_similar(tag, pool, threshold)
        return matches[0] if matches else None

    def similar_pairs(
        self,
        tags: Iterable[Any],
        threshold: Optional[float] = None,
    ) -> List[Tuple[str, str, float, MatchKind]]:
        """
        All pairs of distinct tags scoring at least ``threshold``.

        Used for vault-wide duplicate detection. Pairs are returned with
        the tags in input order, sorted by descending score.
        """
        minimum = self.threshold if threshold is None else threshold

        unique: List[str] = []
        seen = set()
        for raw in tags:
            candidate = clean(raw)
            if candidate and candidate.lower() not in seen:
                seen.add(candidate.lower())
                unique.append(candidate)

        pairs = []
        for a, b in combinations(unique, 2):
            score, kind = self._relate(a.lower(), b.lower())
            if score >= minimum:
                pairs.append((a, b, score, kind))

        pairs.sort(key=lambda p: (-p[2], p[0], p[1]))
        return pairs
