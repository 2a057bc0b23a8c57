#!/usr/bin/env python3
"""
normalizer.py
-------------
Tag string cleaning and naming-convention checks.

A tag's canonical form is a ``/``-separated sequence of segments with no
leading ``#`` marker and no surrounding whitespace. Case is preserved;
only ``normalize_tag`` lower-cases.

Cleaning Rules:
    - Non-string input cleans to ""
    - Surrounding whitespace is removed
    - The leading marker is removed (repeated markers too, so that
      ``clean(clean(x)) == clean(x)`` holds for every string)

Usage:
    from curator.taxonomy.normalizer import clean, clean_list

    clean("  #project/alpha ")        # "project/alpha"
    clean_list(["#a", "", None, "b"])  # ["a", "b"]
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import re
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional


MARKER = "#"
SEPARATOR = "/"


def clean(raw: Any) -> str:
    """
    Clean a raw tag string.

    Args:
        raw: Candidate tag (any type)

    Returns:
        Cleaned tag, or "" for non-string / blank input

    Examples:
        >>> clean("#todo")
        'todo'
        >>> clean("  status/draft  ")
        'status/draft'
        >>> clean(None)
        ''
    """
    if not isinstance(raw, str):
        return ""
    tag = raw.strip()
    while tag.startswith(MARKER):
        tag = tag[len(MARKER):].lstrip()
    return tag


def clean_list(raws: Optional[Iterable[Any]]) -> List[str]:
    """
    Clean every tag, dropping empties. Order is kept; duplicates are kept.

    Args:
        raws: Iterable of raw tags (None is treated as empty)

    Returns:
        List of cleaned, non-empty tags
    """
    if raws is None or isinstance(raws, str):
        return []
    cleaned = (clean(raw) for raw in raws)
    return [tag for tag in cleaned if tag]


def split_segments(tag: str) -> List[str]:
    """Split a cleaned tag into its ``/`` segments."""
    return tag.split(SEPARATOR)


def parent_tag(tag: str) -> Optional[str]:
    """Return the parent path of a hierarchical tag, or None for a root."""
    parts = split_segments(tag)
    if len(parts) <= 1:
        return None
    return SEPARATOR.join(parts[:-1])


def normalize_tag(raw: Any) -> str:
    """
    Clean a tag and force the vault's frontmatter conventions.

    Spaces become hyphens and the result is lower-cased. Used when
    tags are written to a note's frontmatter.

    Examples:
        >>> normalize_tag("#Project Alpha")
        'project-alpha'
    """
    return re.sub(r"\s+", "-", clean(raw)).lower()


# ----- Naming conventions -----

@dataclass
class ConventionIssue:
    """A naming-convention problem with a suggested fix."""

    issue: str
    suggestion: str


def check_conventions(tag: str) -> List[ConventionIssue]:
    """
    Check a cleaned tag against the vault naming conventions.

    Conventions: lower-case, hyphens rather than underscores, no spaces.

    Returns:
        One ConventionIssue per violated rule, in that order
    """
    issues: List[ConventionIssue] = []

    if tag != tag.lower():
        issues.append(ConventionIssue("Contains uppercase letters", tag.lower()))

    if "_" in tag:
        issues.append(ConventionIssue(
            "Uses underscores instead of hyphens", tag.replace("_", "-")
        ))

    if re.search(r"\s", tag):
        issues.append(ConventionIssue("Contains spaces", re.sub(r"\s+", "-", tag)))

    return issues
