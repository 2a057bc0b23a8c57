#!/usr/bin/env python3
"""
models.py
---------
Value types for the hierarchical tag taxonomy.

Types:
    - DepthBounds: min/max additional segments allowed beneath a node
    - TaxonomyNode: one segment of the schema tree
    - TriggerKind: how an auto-tag rule's keywords are matched
    - AutoTagRule: keyword trigger -> tags to propose
    - TaxonomySettings: schema-wide settings and rules
    - TagInfo: one entry of the flattened "all valid tags" listing

These are plain dataclasses; parsing the JSON/YAML schema into them is
done by curator.taxonomy.definition.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Tuple


@dataclass(frozen=True)
class DepthBounds:
    """
    Depth constraints of a taxonomy node.

    Depth is counted in segments below the node that declares the
    bounds: the node itself is depth 0, its children depth 1.

    Attributes:
        min: Minimum depth a complete tag must reach
        max: Maximum depth allowed, or None for unbounded
    """

    min: int = 0
    max: Optional[int] = None

    def __post_init__(self) -> None:
        if self.min < 0:
            raise ValueError(f"depth.min must be >= 0, got {self.min}")
        if self.max is not None and self.max < self.min:
            raise ValueError(
                f"depth.min ({self.min}) is greater than depth.max ({self.max})"
            )

    def allows(self, depth: int) -> bool:
        """Return True when ``depth`` lies within the bounds."""
        if depth < self.min:
            return False
        return self.max is None or depth <= self.max

    def to_dict(self) -> Dict[str, Optional[int]]:
        return {"min": self.min, "max": self.max}


@dataclass
class TaxonomyNode:
    """
    A single segment of the taxonomy tree.

    Attributes:
        segment: Segment name (e.g. "draft" in "status/draft")
        description: Human description, also used for auto-tagging
        allow_custom_children: Whether undeclared child segments are legal
        depth: Declared depth bounds, or None when the node declares none
        children: Declared child nodes keyed by segment
        apply_to_new_projects: Tag is added to newly scaffolded projects
    """

    segment: str
    description: str = ""
    allow_custom_children: bool = True
    depth: Optional[DepthBounds] = None
    children: Dict[str, "TaxonomyNode"] = field(default_factory=dict)
    apply_to_new_projects: bool = False

    @property
    def bounds(self) -> DepthBounds:
        """Declared bounds, or the unbounded default."""
        return self.depth if self.depth is not None else DepthBounds()

    @property
    def has_children(self) -> bool:
        return bool(self.children)


class TriggerKind(str, Enum):
    """
    Keyword matching mode of an auto-tag rule.

    - CONTAINS: any keyword present
    - ALL: every keyword present
    - ANY: any keyword present (same test as CONTAINS)
    """

    CONTAINS = "contains"
    ALL = "all"
    ANY = "any"

    @classmethod
    def choices(cls) -> List[str]:
        """Get all canonical trigger kinds."""
        return [kind.value for kind in cls]

    @classmethod
    def from_schema(cls, raw: Any) -> "TriggerKind":
        """
        Resolve a schema ``trigger.type`` value.

        Accepts the canonical names plus the ``and``/``or`` aliases.

        Raises:
            ValueError: For unknown trigger types
        """
        value = str(raw).strip().lower()
        aliases = {"and": cls.ALL, "or": cls.ANY}
        if value in aliases:
            return aliases[value]
        return cls(value)


@dataclass(frozen=True)
class AutoTagRule:
    """
    Keyword trigger proposing tags.

    Attributes:
        kind: How keywords are matched
        keywords: Lower-cased keywords
        tags: Cleaned tags proposed when the trigger matches
    """

    kind: TriggerKind
    keywords: FrozenSet[str]
    tags: Tuple[str, ...]

    def matches(self, content_lower: str) -> bool:
        """
        Evaluate the trigger against already lower-cased content.

        A rule without keywords never matches.
        """
        if not self.keywords:
            return False
        if self.kind is TriggerKind.ALL:
            return all(keyword in content_lower for keyword in self.keywords)
        if self.kind in (TriggerKind.CONTAINS, TriggerKind.ANY):
            return any(keyword in content_lower for keyword in self.keywords)
        raise ValueError(f"Unhandled trigger kind: {self.kind}")


@dataclass
class TaxonomySettings:
    """
    Schema-wide settings.

    Attributes:
        allow_custom_root_tags: Whether undeclared root segments are legal
        default_max_depth: Depth limit for custom root tags
        default_allow_custom_children: Fallback for nodes that omit the flag
        auto_tagging_enabled: Whether auto_tag_rules are applied
        auto_tag_rules: Keyword rules in schema order
    """

    allow_custom_root_tags: bool = True
    default_max_depth: int = 5
    default_allow_custom_children: bool = True
    auto_tagging_enabled: bool = True
    auto_tag_rules: List[AutoTagRule] = field(default_factory=list)


@dataclass(frozen=True)
class TagInfo:
    """
    A tag that can be used as-is, as listed by ``all_defined_tags``.

    Attributes:
        tag: Full tag path
        description: Node description
        depth: Effective depth bounds of the node
        has_children: Whether the node declares children
        allow_custom_children: Whether undeclared children are legal
    """

    tag: str
    description: str
    depth: DepthBounds
    has_children: bool
    allow_custom_children: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tag": self.tag,
            "description": self.description,
            "depth": self.depth.to_dict(),
            "hasDefinedChildren": self.has_children,
            "allowCustomChildren": self.allow_custom_children,
        }
