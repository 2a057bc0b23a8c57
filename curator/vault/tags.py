#!/usr/bin/env python3
"""
tags.py
-------
Tag extraction, vault-wide tag analysis and per-note tag edits.

Functions:
    extract_inline_tags: ``#tag`` tokens of a note body
    extract_frontmatter_tags: cleaned values of the frontmatter tag field
    find_documents_with_tag: notes using a tag (either place)
    update_note_tags: add/remove/replace a note's frontmatter tags

Classes:
    TagIndex: per-tag counts and files, hierarchy, co-occurrence,
        similar pairs and clean-up recommendations

Usage:
    from curator.vault.tags import TagIndex

    index = TagIndex.build(vault)
    for stat in index.stats()[:10]:
        print(stat.tag, stat.count)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import re
from collections import Counter
from dataclasses import dataclass, field
from itertools import combinations
from typing import Any, Dict, Iterable, List, Optional, Tuple

# --- Local imports ---
from curator.core.exceptions import DocumentError
from curator.core.logging_manager import CuratorLogger, safe_logger
from curator.taxonomy.normalizer import (
    clean,
    clean_list,
    normalize_tag,
    parent_tag,
    split_segments,
)
from curator.taxonomy.similarity import SimilarityMatcher
from curator.utils.md import coerce_tag_value, parse_frontmatter, split_frontmatter
from curator.vault.documents import DocumentSet
from curator.vault.rename import build_tag_pattern


_INLINE_TAG_RE = re.compile(r"(?<![\w#&/])#([\w\-/]+)")

DEEP_HIERARCHY_LEVEL = 2
RECOMMENDATION_SAMPLE = 10


# ==================== Extraction ====================

def extract_inline_tags(text: str) -> List[str]:
    """
    Inline ``#tag`` tokens of a note, frontmatter excluded.

    Purely numeric tokens (``#42``) are issue references, not tags.

    Returns:
        Unique tags in order of first appearance, without the marker

    Examples:
        >>> extract_inline_tags("---\\ntags: [a]\\n---\\nSee #todo and #project/x")
        ['todo', 'project/x']
    """
    _, body = split_frontmatter(text)
    found: Dict[str, None] = {}
    for match in _INLINE_TAG_RE.finditer(body):
        tag = match.group(1).rstrip("/")
        if tag and not tag.isdigit():
            found.setdefault(tag, None)
    return list(found)


def extract_frontmatter_tags(text: str, tag_field: str = "tags") -> List[str]:
    """
    Cleaned tags from a note's frontmatter field.

    Raises:
        FrontmatterError: If the block is not valid YAML
    """
    data, _ = parse_frontmatter(text)
    if data is None:
        return []
    value = coerce_tag_value(data.get(tag_field))
    if isinstance(value, str):
        return clean_list([value])
    return clean_list(value)


def find_documents_with_tag(tag: str, documents: DocumentSet) -> List[Dict[str, Any]]:
    """
    Notes that use ``tag`` in frontmatter or inline.

    Inline matching shares the rename boundary rules, so ``proj`` does not
    find notes that only mention ``#project``.

    Returns:
        ``[{path, frontmatter: bool, inline: int}]`` in listing order
    """
    target = clean(tag)
    pattern = build_tag_pattern(target)
    hits: List[Dict[str, Any]] = []

    for path in documents.list_documents():
        text = documents.read_text(path)
        _, body = split_frontmatter(text)
        inline = len(pattern.findall(body))

        value = documents.read_structured_tags(path)
        values = [value] if isinstance(value, str) else (value or [])
        in_frontmatter = target in clean_list(values)

        if inline or in_frontmatter:
            hits.append({"path": path, "frontmatter": in_frontmatter, "inline": inline})
    return hits


def update_note_tags(
    documents: DocumentSet,
    path: str,
    add: Iterable[str] = (),
    remove: Iterable[str] = (),
    replace: Optional[Iterable[str]] = None,
) -> List[str]:
    """
    Edit a note's frontmatter tags.

    Tags are normalized (marker stripped, spaces to hyphens, lower-case).
    ``replace`` overrides the current list before ``add``/``remove`` apply.
    The note's modification stamp is refreshed when the list changes.

    Returns:
        The resulting tag list
    """
    current = documents.read_structured_tags(path)
    if replace is not None:
        tags = [normalize_tag(t) for t in replace]
    else:
        values = [current] if isinstance(current, str) else (current or [])
        tags = [normalize_tag(t) for t in values]

    for tag in (normalize_tag(t) for t in add):
        if tag and tag not in tags:
            tags.append(tag)

    dropped = {normalize_tag(t) for t in remove}
    tags = list(dict.fromkeys(t for t in tags if t and t not in dropped))

    before = current if isinstance(current, list) else ([current] if current else [])
    if tags != before:
        documents.write_structured_tags(path, tags)
        documents.stamp_modified(path)
    return tags


# ==================== Analysis ====================

@dataclass
class TagStat:
    """Usage of one tag across the vault."""

    tag: str
    count: int = 0
    files: List[str] = field(default_factory=list)

    @property
    def level(self) -> int:
        return len(split_segments(self.tag)) - 1

    @property
    def parent(self) -> Optional[str]:
        return parent_tag(self.tag)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tag": self.tag,
            "count": self.count,
            "files": list(self.files),
            "isRoot": self.parent is None,
            "level": self.level,
            "parent": self.parent,
        }


@dataclass
class TagIndex:
    """
    Tag usage across a document set.

    A note counts once per tag no matter how often it repeats the tag.
    Notes that cannot be read are listed in ``errors`` and skipped.
    """

    files_scanned: int = 0
    tag_stats: Dict[str, TagStat] = field(default_factory=dict)
    co_occurrence: Counter = field(default_factory=Counter)
    errors: List[Tuple[str, str]] = field(default_factory=list)

    @classmethod
    def build(
        cls,
        documents: DocumentSet,
        logger: Optional[CuratorLogger] = None,
    ) -> "TagIndex":
        """Scan every document once."""
        log = safe_logger(logger)
        index = cls()

        for path in documents.list_documents():
            try:
                text = documents.read_text(path)
                value = documents.read_structured_tags(path)
            except DocumentError as e:
                log.log_warning("Skipping unreadable note", {"path": path, "error": str(e)})
                index.errors.append((path, str(e)))
                continue

            values = [value] if isinstance(value, str) else (value or [])
            tags = list(dict.fromkeys(clean_list(values) + extract_inline_tags(text)))
            index.add(path, tags)

        log.log_operation("tag_index_built", {
            "files": index.files_scanned,
            "tags": len(index.tag_stats),
            "errors": len(index.errors),
        })
        return index

    def add(self, path: str, tags: List[str]) -> None:
        """Record one document's (unique) tags."""
        self.files_scanned += 1
        for tag in tags:
            stat = self.tag_stats.setdefault(tag, TagStat(tag))
            stat.count += 1
            stat.files.append(path)
        for a, b in combinations(sorted(tags), 2):
            self.co_occurrence[(a, b)] += 1

    @property
    def tags(self) -> List[str]:
        return list(self.tag_stats)

    def stats(self) -> List[TagStat]:
        """Per-tag usage, most used first."""
        return sorted(self.tag_stats.values(), key=lambda s: (-s.count, s.tag))

    def hierarchy(self) -> Dict[str, Any]:
        """
        Nested ``{segment: {name, path, count, children}}`` tree.

        ``count`` is the direct usage of that exact path (0 for
        intermediate segments that are never used on their own).
        """
        tree: Dict[str, Any] = {}
        for tag in sorted(self.tag_stats):
            level = tree
            parts = split_segments(tag)
            for i, part in enumerate(parts):
                path = "/".join(parts[: i + 1])
                entry = level.setdefault(part, {
                    "name": part,
                    "path": path,
                    "count": 0,
                    "children": {},
                })
                if i == len(parts) - 1:
                    entry["count"] = self.tag_stats[tag].count
                level = entry["children"]
        return tree

    def top_co_occurrences(self, limit: int = 20) -> List[Dict[str, Any]]:
        pairs = sorted(self.co_occurrence.items(), key=lambda kv: (-kv[1], kv[0]))
        return [{"tag1": a, "tag2": b, "count": n} for (a, b), n in pairs[:limit]]

    def similar_pairs(
        self,
        matcher: Optional[SimilarityMatcher] = None,
        threshold: Optional[float] = None,
    ) -> List[Dict[str, Any]]:
        """Pairs of used tags that look like duplicates of each other."""
        matcher = matcher or SimilarityMatcher()
        return [
            {"tag1": a, "tag2": b, "similarity": round(score, 4), "type": kind.value}
            for a, b, score, kind in matcher.similar_pairs(self.tags, threshold)
        ]

    def recommendations(
        self,
        matcher: Optional[SimilarityMatcher] = None,
        threshold: Optional[float] = None,
    ) -> List[Dict[str, Any]]:
        """
        Clean-up hints.

        - unused-tags: tags used by a single note
        - similar-tags: likely duplicates
        - deep-hierarchy: tags nested more than two levels
        """
        recommendations: List[Dict[str, Any]] = []

        single_use = [s.tag for s in self.stats() if s.count == 1]
        if single_use:
            recommendations.append({
                "type": "unused-tags",
                "message": f"Found {len(single_use)} tags used only once",
                "tags": single_use[:RECOMMENDATION_SAMPLE],
                "action": "Consider removing or consolidating these tags",
            })

        pairs = self.similar_pairs(matcher, threshold)
        if pairs:
            recommendations.append({
                "type": "similar-tags",
                "message": f"Found {len(pairs)} similar tag pairs",
                "pairs": pairs[:5],
                "action": "Consider consolidating similar tags",
            })

        deep = [
            {"tag": s.tag, "level": s.level}
            for s in self.stats() if s.level > DEEP_HIERARCHY_LEVEL
        ]
        if deep:
            recommendations.append({
                "type": "deep-hierarchy",
                "message": (
                    f"Found {len(deep)} tags with deep hierarchy "
                    f"(>{DEEP_HIERARCHY_LEVEL} levels)"
                ),
                "tags": deep[:5],
                "action": "Consider simplifying tag hierarchy",
            })

        return recommendations

    def to_dict(
        self,
        matcher: Optional[SimilarityMatcher] = None,
        threshold: Optional[float] = None,
    ) -> Dict[str, Any]:
        return {
            "totalTags": len(self.tag_stats),
            "totalFiles": self.files_scanned,
            "stats": [s.to_dict() for s in self.stats()],
            "hierarchy": self.hierarchy(),
            "coOccurrence": self.top_co_occurrences(),
            "similarTags": self.similar_pairs(matcher, threshold),
            "recommendations": self.recommendations(matcher, threshold),
            "errors": [{"path": p, "error": e} for p, e in self.errors],
        }
