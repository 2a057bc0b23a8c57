#!/usr/bin/env python3
"""
validator.py
------------
Schema validation of hierarchical tags.

A tag is walked segment by segment against the taxonomy tree:

    status/draft      declared path -> depth bounds checked
    status/custom     undeclared child -> parent must allow custom children
    mytopic/a/b       undeclared root -> allowCustomRootTags + defaultMaxDepth

Depth is measured from the defining node, the nearest node on the matched
path that declares ``depth``. Once a walk leaves the declared tree through
a node that allows custom children, the remaining segments form a free
subtree and are only checked against that node's maximum depth.

Usage:
    from curator.taxonomy.validator import TagValidator

    validator = TagValidator(taxonomy)
    validator.validate("status/draft")          # ok
    validator.validate("status/custom")         # raises TaxonomyViolation
    valid, invalid = validator.filter_valid(["status/draft", "status/x"])
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from typing import Any, Iterable, List, Optional, Tuple

# --- Local imports ---
from curator.core.exceptions import AggregateTagError, TaxonomyViolation
from curator.core.logging_manager import CuratorLogger, safe_logger
from curator.taxonomy.definition import TaxonomyDefinition
from curator.taxonomy.models import DepthBounds, TaxonomyNode
from curator.taxonomy.normalizer import SEPARATOR, clean, clean_list, split_segments


class TagValidator:
    """
    Validate tags against a TaxonomyDefinition.

    The validator holds no state of its own beyond the taxonomy handle,
    so validation can run concurrently with other validations.
    """

    def __init__(
        self,
        taxonomy: TaxonomyDefinition,
        logger: Optional[CuratorLogger] = None,
    ) -> None:
        self.taxonomy = taxonomy
        self.logger = logger

    def validate(self, tag: Any) -> None:
        """
        Validate a single tag.

        Args:
            tag: Raw or cleaned tag

        Raises:
            TaxonomyViolation: With the reason the tag is rejected
        """
        cleaned = clean(tag)
        try:
            self._check(cleaned)
        except TaxonomyViolation as e:
            safe_logger(self.logger).log_debug(
                "Tag rejected", {"tag": cleaned, "reason": e.reason}
            )
            raise

    def _check(self, tag: str) -> None:
        if not tag:
            raise TaxonomyViolation(tag, "tag is empty")

        segments = split_segments(tag)
        if any(not segment.strip() for segment in segments):
            raise TaxonomyViolation(tag, f"tag '{tag}' contains an empty segment")

        settings = self.taxonomy.settings
        last = len(segments) - 1

        level = self.taxonomy.roots
        matched: Optional[TaxonomyNode] = None
        matched_index = -1
        bounds: Optional[DepthBounds] = None
        bounds_index = 0

        for i, segment in enumerate(segments):
            node = level.get(segment)

            if node is not None:
                matched, matched_index = node, i
                if node.depth is not None:
                    bounds, bounds_index = node.depth, i
                if i == last:
                    self._check_bounds(tag, bounds, last - bounds_index)
                    return
                level = node.children
                continue

            if i == 0:
                if not settings.allow_custom_root_tags:
                    raise TaxonomyViolation(
                        tag, f"root tag '{segment}' not defined in taxonomy"
                    )
                if last > 0 and not settings.default_allow_custom_children:
                    raise TaxonomyViolation(
                        tag, f"custom children not allowed under '{segment}'"
                    )
                # Depth counts segments below the root, as for declared nodes.
                if last > settings.default_max_depth:
                    raise TaxonomyViolation(
                        tag,
                        f"tag '{tag}' exceeds maximum depth of "
                        f"{settings.default_max_depth}",
                    )
                return

            # Leaving the declared tree below `matched`.
            ancestor = SEPARATOR.join(segments[: matched_index + 1])
            if not matched.allow_custom_children:
                raise TaxonomyViolation(
                    tag, f"custom children not allowed under '{ancestor}'"
                )
            if bounds is not None and bounds.max is not None:
                if last - bounds_index > bounds.max:
                    raise TaxonomyViolation(
                        tag, f"tag '{tag}' exceeds maximum depth of {bounds.max}"
                    )
            return

    @staticmethod
    def _check_bounds(tag: str, bounds: Optional[DepthBounds], depth: int) -> None:
        if bounds is None:
            return
        if depth < bounds.min:
            raise TaxonomyViolation(
                tag,
                f"tag '{tag}' requires at least {bounds.min} level(s) of children",
            )
        if bounds.max is not None and depth > bounds.max:
            raise TaxonomyViolation(
                tag, f"tag '{tag}' exceeds maximum depth of {bounds.max}"
            )

    def is_valid(self, tag: Any) -> bool:
        """Boolean form of ``validate``."""
        try:
            self.validate(tag)
        except TaxonomyViolation:
            return False
        return True

    def validate_batch(self, tags: Iterable[Any]) -> None:
        """
        Validate every tag, collecting all failures.

        Raises:
            AggregateTagError: Listing every (tag, reason) that failed
        """
        _, invalid = self.filter_valid(tags)
        if invalid:
            raise AggregateTagError(invalid)

    def filter_valid(
        self, tags: Iterable[Any]
    ) -> Tuple[List[str], List[Tuple[str, str]]]:
        """
        Split tags into valid ones and (tag, reason) failures.

        Tags are cleaned first; order is kept.
        """
        valid: List[str] = []
        invalid: List[Tuple[str, str]] = []
        for raw in tags:
            tag = clean(raw)
            try:
                self.validate(tag)
            except TaxonomyViolation as e:
                invalid.append((tag, e.reason))
            else:
                valid.append(tag)
        return valid, invalid

    def clean_and_validate(self, raws: Iterable[Any]) -> List[str]:
        """
        Clean a raw tag list, drop empties and duplicates, and validate.

        Returns:
            The cleaned, de-duplicated tags

        Raises:
            AggregateTagError: If any cleaned tag is invalid
        """
        unique = list(dict.fromkeys(clean_list(raws)))
        self.validate_batch(unique)
        return unique
