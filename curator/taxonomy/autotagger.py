#!/usr/bin/env python3
"""
autotagger.py
-------------
Rule- and taxonomy-driven tag suggestions for note content.

Two independent sources feed the suggestions:

1. Auto-tag rules from the taxonomy settings: keyword triggers evaluated
   against the lower-cased content (``contains``/``any``: one keyword,
   ``all``: every keyword).
2. Hierarchy fit: for every taxonomy node whose segment or description
   vocabulary appears in the content, up to three of its children whose
   segment or description words also appear are proposed.

Suggestions never include tags the note already carries, and the
suggester performs no I/O.

Usage:
    from curator.taxonomy.autotagger import AutoTagger

    tagger = AutoTagger(taxonomy)
    tagger.suggest("Weekly meeting notes", existing={"project/alpha"})
    # {"type/meeting-notes"}
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Set

# --- Local imports ---
from curator.core.logging_manager import CuratorLogger, safe_logger
from curator.taxonomy.definition import TaxonomyDefinition
from curator.taxonomy.models import TaxonomyNode
from curator.taxonomy.normalizer import clean, clean_list

MAX_CHILDREN_PER_NODE = 3
MIN_WORD_LENGTH = 4

_WORD_RE = re.compile(r"[a-z0-9]+")


def _vocabulary(text: str) -> Set[str]:
    """Lower-cased description words long enough to be meaningful."""
    return {w for w in _WORD_RE.findall(text.lower()) if len(w) >= MIN_WORD_LENGTH}


@dataclass(frozen=True)
class TagSuggestion:
    """
    A proposed tag with its provenance.

    Attributes:
        tag: Proposed tag
        source: "auto-tag-rule" or "hierarchy-fit"
        reason: Short explanation for display
        score: Relevance (1.0 for rule matches)
    """

    tag: str
    source: str
    reason: str
    score: float = 1.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tag": self.tag,
            "source": self.source,
            "reason": self.reason,
            "score": round(self.score, 3),
        }


class AutoTagger:
    """
    Suggest tags for content from a TaxonomyDefinition.

    Attributes:
        taxonomy: Taxonomy handle
        use_rules: Apply keyword rules (also requires the schema's
            autoTagging.enabled)
        use_hierarchy: Apply hierarchy-fit suggestions
    """

    def __init__(
        self,
        taxonomy: TaxonomyDefinition,
        use_rules: bool = True,
        use_hierarchy: bool = True,
        logger: Optional[CuratorLogger] = None,
    ) -> None:
        self.taxonomy = taxonomy
        self.use_rules = use_rules
        self.use_hierarchy = use_hierarchy
        self.logger = logger

    def suggest(self, content: str, existing: Optional[Iterable[Any]] = None) -> Set[str]:
        """
        Tags to propose for ``content``.

        Args:
            content: Note text
            existing: Tags already applied (raw or cleaned)

        Returns:
            Set of cleaned tags not already in ``existing``
        """
        return {s.tag for s in self.suggest_detailed(content, existing)}

    def suggest_detailed(
        self, content: str, existing: Optional[Iterable[Any]] = None
    ) -> List[TagSuggestion]:
        """
        Suggestions with their source, rule matches first.

        Each tag appears once; a tag found by both sources is reported as
        a rule match.
        """
        lowered = (content or "").lower()
        skip = set(clean_list(existing or []))
        found: Dict[str, TagSuggestion] = {}

        if self.use_rules and self.taxonomy.settings.auto_tagging_enabled:
            for rule in self.taxonomy.settings.auto_tag_rules:
                if not rule.matches(lowered):
                    continue
                keywords = ", ".join(sorted(rule.keywords))
                for tag in rule.tags:
                    if tag in skip or tag in found:
                        continue
                    found[tag] = TagSuggestion(
                        tag=tag,
                        source="auto-tag-rule",
                        reason=f"content matches {rule.kind.value} [{keywords}]",
                    )

        if self.use_hierarchy:
            for suggestion in self._hierarchy_fit(lowered):
                if suggestion.tag in skip or suggestion.tag in found:
                    continue
                found[suggestion.tag] = suggestion

        result = list(found.values())
        safe_logger(self.logger).log_debug(
            "Auto-tag suggestions", {"count": len(result), "tags": list(found)}
        )
        return result

    def _hierarchy_fit(self, lowered: str) -> List[TagSuggestion]:
        if not lowered:
            return []

        content_words = set(_WORD_RE.findall(lowered))
        defined = set(self.taxonomy.defined_tag_names())
        suggestions: List[TagSuggestion] = []

        for path, node in self.taxonomy.iter_nodes():
            if not node.children or not self._node_fits(node, lowered, content_words):
                continue

            scored = []
            for segment, child in node.children.items():
                child_tag = f"{path}/{segment}"
                if child_tag not in defined:
                    continue
                score = self._child_score(child, lowered, content_words)
                if score > 0:
                    scored.append((score, child_tag))

            scored.sort(key=lambda item: (-item[0], item[1]))
            for score, child_tag in scored[:MAX_CHILDREN_PER_NODE]:
                suggestions.append(TagSuggestion(
                    tag=child_tag,
                    source="hierarchy-fit",
                    reason=f"content fits the '{path}' branch",
                    score=score,
                ))
        return suggestions

    @staticmethod
    def _node_fits(node: TaxonomyNode, lowered: str, content_words: Set[str]) -> bool:
        if node.segment.lower() in lowered:
            return True
        return bool(_vocabulary(node.description) & content_words)

    @staticmethod
    def _child_score(child: TaxonomyNode, lowered: str, content_words: Set[str]) -> float:
        score = 0.0
        segment = clean(child.segment).lower()
        if segment and (segment in lowered or segment.replace("-", " ") in lowered):
            score += 1.0
        words = _vocabulary(child.description)
        if words:
            score += len(words & content_words) / len(words)
        return score
