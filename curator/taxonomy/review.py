#!/usr/bin/env python3
"""
review.py
---------
Tag review for note content before it is written.

Given note content and the tags a caller proposes, the reviewer gathers
every tag the note would carry (proposed, already present in the
content, and auto-tag suggestions) and checks each one that the vault
does not already use:

    similar-exists        high    near-duplicate of a tag already in use
    taxonomy-violation    medium  rejected by the schema, a close defined
                                  tag exists
    convention-violation  medium  uppercase, underscores or spaces
    hierarchy-suggestion  low     a defined tag places it in the hierarchy
    new-tag               info    a new tag (with the schema reason when
                                  the schema rejects it and nothing close
                                  is defined)
    auto-tags-added       info    tags added by auto-tagging

A review is ``valid`` when every warning is informational. Review never
blocks writing the content; it only qualifies the tags.

Usage:
    reviewer = TagReviewer(taxonomy, known_tags=index.tags)
    result = reviewer.review(content, ["Project_Alpha"])
    print(result.to_dict())
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

# --- Local imports ---
from curator.core.exceptions import TaxonomyViolation
from curator.core.logging_manager import CuratorLogger, safe_logger
from curator.taxonomy.autotagger import AutoTagger
from curator.taxonomy.definition import TaxonomyDefinition
from curator.taxonomy.normalizer import check_conventions, clean, clean_list, split_segments
from curator.taxonomy.similarity import SimilarityMatcher
from curator.taxonomy.validator import TagValidator
from curator.utils.md import FrontmatterError
from curator.vault.tags import extract_frontmatter_tags, extract_inline_tags


CONTENT_SUGGESTION_MIN_LENGTH = 50
CONTENT_SUGGESTION_LIMIT = 5


class Severity(str, Enum):
    """Warning severity; only INFO keeps a review valid."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFO = "info"

    @classmethod
    def choices(cls) -> List[str]:
        return [s.value for s in cls]


@dataclass
class ReviewWarning:
    """One finding about a reviewed tag."""

    type: str
    message: str
    severity: Severity
    suggestion: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "type": self.type,
            "message": self.message,
            "severity": self.severity.value,
        }
        if self.suggestion is not None:
            data["suggestion"] = self.suggestion
        return data


@dataclass
class ReviewResult:
    """
    Outcome of a review.

    Attributes:
        tags: Recommended tags, marker-free, in review order
        warnings: Findings for new tags
        suggestions: Alternative tags and content-based hints
        auto_tags_added: Tags contributed by auto-tagging
    """

    tags: List[str] = field(default_factory=list)
    warnings: List[ReviewWarning] = field(default_factory=list)
    suggestions: List[Dict[str, Any]] = field(default_factory=list)
    auto_tags_added: List[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return all(w.severity is Severity.INFO for w in self.warnings)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "tags": list(self.tags),
            "warnings": [w.to_dict() for w in self.warnings],
            "suggestions": list(self.suggestions),
            "autoTagsAdded": list(self.auto_tags_added),
        }


class TagReviewer:
    """
    Review proposed tags against the vault and the taxonomy.

    Attributes:
        taxonomy: Taxonomy handle
        known_tags: Tags already used in the vault
        suggestion_threshold: Score above which a near match is reported
    """

    def __init__(
        self,
        taxonomy: TaxonomyDefinition,
        known_tags: Iterable[str] = (),
        matcher: Optional[SimilarityMatcher] = None,
        auto_tagger: Optional[AutoTagger] = None,
        suggestion_threshold: float = 0.85,
        logger: Optional[CuratorLogger] = None,
    ) -> None:
        self.taxonomy = taxonomy
        self.known_tags = list(dict.fromkeys(clean_list(known_tags)))
        self.matcher = matcher or SimilarityMatcher()
        self.auto_tagger = auto_tagger or AutoTagger(taxonomy, logger=logger)
        self.validator = TagValidator(taxonomy, logger=logger)
        self.suggestion_threshold = suggestion_threshold
        self.logger = logger

    def review(self, content: str, proposed_tags: Iterable[Any] = ()) -> ReviewResult:
        """
        Review the tags a note would carry.

        Args:
            content: Full note text (frontmatter included)
            proposed_tags: Tags the caller intends to apply

        Returns:
            ReviewResult; ``to_dict()`` gives the tool contract shape
        """
        content = content or ""
        log = safe_logger(self.logger)

        content_tags = extract_inline_tags(content)
        try:
            content_tags = extract_frontmatter_tags(content) + content_tags
        except FrontmatterError as e:
            log.log_warning("Ignoring unparsable frontmatter in review", {"error": str(e)})

        proposed = list(dict.fromkeys(clean_list(proposed_tags) + content_tags))
        auto = self.auto_tagger.suggest_detailed(content, proposed)
        auto_tags = [s.tag for s in auto]

        result = ReviewResult()
        combined = proposed + [t for t in auto_tags if t not in proposed]
        if not combined:
            return result

        result.auto_tags_added = [t for t in auto_tags if t not in proposed]
        known = set(self.known_tags)

        for tag in combined:
            recommended = self._review_tag(tag, known, result)
            if recommended not in result.tags:
                result.tags.append(recommended)

        if result.auto_tags_added:
            result.warnings.append(ReviewWarning(
                type="auto-tags-added",
                message=(
                    "Auto-tagged based on vault taxonomy: "
                    + ", ".join(result.auto_tags_added)
                ),
                severity=Severity.INFO,
            ))

        extra = self._content_suggestions(content, result.tags)
        if extra:
            result.suggestions.append({
                "type": "content-based",
                "message": "Additional tags suggested based on content analysis",
                "tags": extra,
            })

        log.log_debug("Tag review", {
            "tags": result.tags,
            "valid": result.valid,
            "warnings": [w.type for w in result.warnings],
        })
        return result

    def _review_tag(self, tag: str, known: set, result: ReviewResult) -> str:
        """Append findings for one tag and return the tag to recommend."""
        if tag in known:
            return tag

        best = self.matcher.best_match(tag, self.known_tags, self.suggestion_threshold)
        if best is not None and best.score > self.suggestion_threshold:
            result.warnings.append(ReviewWarning(
                type="similar-exists",
                message=(
                    f'New tag "#{tag}" is very similar to existing '
                    f'"#{best.candidate}" ({round(best.score * 100)}% match)'
                ),
                suggestion=f'Use "#{best.candidate}" instead',
                severity=Severity.HIGH,
            ))
            result.suggestions.append({
                "tag": best.candidate,
                "reason": f"{best.kind.value} match",
                "similarity": round(best.score, 4),
            })
            return best.candidate

        try:
            self.validator.validate(tag)
        except TaxonomyViolation as e:
            closest = self.taxonomy.closest_tag(
                tag, self.matcher, self.suggestion_threshold
            )
            if closest is not None and closest.score > self.suggestion_threshold:
                result.warnings.append(ReviewWarning(
                    type="taxonomy-violation",
                    message=e.reason,
                    suggestion=closest.candidate,
                    severity=Severity.MEDIUM,
                ))
                result.suggestions.append({
                    "tag": closest.candidate,
                    "reason": "Matches vault taxonomy",
                    "source": "taxonomy",
                })
                return closest.candidate

            result.warnings.append(ReviewWarning(
                type="new-tag",
                message=f'Creating new tag "#{tag}" ({e.reason})',
                severity=Severity.INFO,
            ))
            return tag

        issues = check_conventions(tag)
        if issues:
            first = issues[0]
            result.warnings.append(ReviewWarning(
                type="convention-violation",
                message=f'Tag "{tag}" violates naming conventions: {first.issue}',
                suggestion=first.suggestion,
                severity=Severity.MEDIUM,
            ))
            return first.suggestion

        placement = self._hierarchy_placement(tag)
        if placement is not None:
            result.warnings.append(ReviewWarning(
                type="hierarchy-suggestion",
                message=f'New tag "#{tag}" might fit better in existing hierarchy',
                suggestion=placement,
                severity=Severity.LOW,
            ))
            result.suggestions.append({
                "tag": placement,
                "reason": "Better hierarchy placement",
                "source": "taxonomy",
            })
            return tag

        result.warnings.append(ReviewWarning(
            type="new-tag",
            message=f'Creating new tag "#{tag}"',
            severity=Severity.INFO,
        ))
        return tag

    def _hierarchy_placement(self, tag: str) -> Optional[str]:
        """A defined nested tag whose last segment is ``tag``."""
        if "/" in tag:
            return None
        lowered = tag.lower()
        for defined in self.taxonomy.defined_tag_names():
            segments = split_segments(defined)
            if len(segments) > 1 and segments[-1].lower() == lowered:
                return defined
        return None

    def _content_suggestions(self, content: str, current: List[str]) -> List[str]:
        """Known vault tags whose name appears as a word in long content."""
        if len(content) <= CONTENT_SUGGESTION_MIN_LENGTH:
            return []

        lowered = content.lower()
        taken = set(current)
        found: List[str] = []
        for tag in self.known_tags:
            if tag in taken:
                continue
            name = split_segments(clean(tag))[-1].lower()
            if len(name) < 3:
                continue
            if re.search(r"(?<![\w-])" + re.escape(name) + r"(?![\w-])", lowered):
                found.append(tag)
            if len(found) >= CONTENT_SUGGESTION_LIMIT:
                break
        return found
