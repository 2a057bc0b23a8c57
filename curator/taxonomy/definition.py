#!/usr/bin/env python3
"""
definition.py
-------------
Loading and querying the hierarchical tag taxonomy.

The taxonomy is a tree of segments (``type/``, ``status/draft`` ...) plus
schema-wide settings and auto-tag rules, normally stored as JSON:

    {
      "tags": {
        "status": {
          "description": "Status or state",
          "allowCustomChildren": false,
          "depth": {"min": 0, "max": 1},
          "children": {"draft": {"description": "Work in progress"}}
        }
      },
      "settings": {
        "allowCustomRootTags": true,
        "defaultMaxDepth": 5,
        "defaultAllowCustomChildren": true,
        "autoTagging": {
          "enabled": true,
          "rules": [
            {"trigger": {"type": "contains", "keywords": ["meeting"]},
             "tags": ["type/meeting-notes"]}
          ]
        }
      }
    }

A YAML file of the same shape, an in-memory mapping or a JSON string are
accepted too. When the schema is missing or malformed the built-in
permissive default (``type/``, ``status/``, ``project/``, ``area/``) is
used instead and the reason is recorded in ``warnings``; loading never
raises.

Key Features:
    - Explicit handle: callers own the instance and pass it to the
      validator and auto-tagger; there is no module-level singleton
    - Memoized ``all_defined_tags`` flattening, cleared by ``reload``
    - Lock-guarded load/reload so readers never see a half-built tree

Usage:
    from curator.taxonomy.definition import TaxonomyDefinition

    taxonomy = TaxonomyDefinition(Path("config/tag-taxonomy.json"))
    if taxonomy.warnings:
        print("Running on the default taxonomy:", taxonomy.warnings)
    for info in taxonomy.all_defined_tags():
        print(info.tag, "-", info.description)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import copy
import json
import threading
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

# --- Third party imports ---
import yaml

# --- Local imports ---
from curator.core.exceptions import TaxonomyLoadError
from curator.core.logging_manager import CuratorLogger, safe_logger
from curator.taxonomy.models import (
    AutoTagRule,
    DepthBounds,
    TagInfo,
    TaxonomyNode,
    TaxonomySettings,
    TriggerKind,
)
from curator.taxonomy.normalizer import SEPARATOR, clean, clean_list
from curator.taxonomy.similarity import SimilarMatch, SimilarityMatcher


TaxonomySource = Union[None, str, Path, Mapping[str, Any]]


DEFAULT_SCHEMA: Dict[str, Any] = {
    "tags": {
        "type": {
            "description": "Document or note types",
            "allowCustomChildren": True,
            "children": {
                "note": {"description": "Regular note"},
                "moc": {"description": "Map of Content"},
                "index": {"description": "Index or overview"},
                "journal": {"description": "Journal or log entry"},
                "reference": {"description": "Reference material"},
                "meeting-notes": {"description": "Meeting notes"},
            },
        },
        "status": {
            "description": "Status or state",
            "allowCustomChildren": False,
            "children": {
                "draft": {"description": "Work in progress"},
                "review": {"description": "Needs review"},
                "complete": {"description": "Completed"},
                "archived": {"description": "Archived"},
            },
        },
        "project": {
            "description": "Project-related tags",
            "allowCustomChildren": True,
            "children": {},
        },
        "area": {
            "description": "Areas of responsibility",
            "allowCustomChildren": True,
            "children": {},
        },
    },
    "settings": {
        "allowCustomRootTags": True,
        "defaultMaxDepth": 5,
        "defaultAllowCustomChildren": True,
        "autoTagging": {
            "enabled": True,
            "rules": [
                {"trigger": {"type": "contains", "keywords": ["index"]},
                 "tags": ["type/index"]},
                {"trigger": {"type": "contains", "keywords": ["moc", "map of content"]},
                 "tags": ["type/moc"]},
                {"trigger": {"type": "contains", "keywords": ["daily note", "journal"]},
                 "tags": ["type/journal"]},
                {"trigger": {"type": "contains", "keywords": ["meeting", "notes"]},
                 "tags": ["type/meeting-notes"]},
            ],
        },
    },
}


# ==================== Schema parsing ====================

def _expect_bool(value: Any, where: str, default: bool) -> bool:
    if value is None:
        return default
    if not isinstance(value, bool):
        raise TaxonomyLoadError(f"{where} must be true or false, got {value!r}")
    return value


def _expect_int(value: Any, where: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TaxonomyLoadError(f"{where} must be an integer, got {value!r}")
    return value


def _parse_depth(raw: Any, where: str) -> Optional[DepthBounds]:
    if raw is None:
        return None
    if not isinstance(raw, Mapping):
        raise TaxonomyLoadError(f"{where}.depth must be an object")

    minimum = _expect_int(raw.get("min", 0), f"{where}.depth.min")
    maximum = raw.get("max")
    if maximum is not None:
        maximum = _expect_int(maximum, f"{where}.depth.max")

    try:
        return DepthBounds(min=minimum, max=maximum)
    except ValueError as e:
        raise TaxonomyLoadError(f"{where}.depth: {e}") from e


def _parse_rules(
    raw: Any, warnings: List[str]
) -> List[AutoTagRule]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise TaxonomyLoadError("settings.autoTagging.rules must be a list")

    rules: List[AutoTagRule] = []
    for i, raw_rule in enumerate(raw):
        where = f"settings.autoTagging.rules[{i}]"
        if not isinstance(raw_rule, Mapping):
            raise TaxonomyLoadError(f"{where} must be an object")

        trigger = raw_rule.get("trigger") or {}
        if not isinstance(trigger, Mapping):
            raise TaxonomyLoadError(f"{where}.trigger must be an object")

        try:
            kind = TriggerKind.from_schema(trigger.get("type", "contains"))
        except ValueError:
            warnings.append(
                f"{where}: unknown trigger type {trigger.get('type')!r}, rule skipped"
            )
            continue

        keywords = trigger.get("keywords") or []
        if isinstance(keywords, str):
            keywords = [keywords]
        if not isinstance(keywords, list) or not all(isinstance(k, str) for k in keywords):
            raise TaxonomyLoadError(f"{where}.trigger.keywords must be a list of strings")

        tags = raw_rule.get("tags") or []
        if isinstance(tags, str):
            tags = [tags]
        if not isinstance(tags, list):
            raise TaxonomyLoadError(f"{where}.tags must be a list of strings")

        rules.append(AutoTagRule(
            kind=kind,
            keywords=frozenset(k.strip().lower() for k in keywords if k.strip()),
            tags=tuple(clean_list(tags)),
        ))
    return rules


def _parse_settings(raw: Any, warnings: List[str]) -> TaxonomySettings:
    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        raise TaxonomyLoadError("settings must be an object")

    defaults = TaxonomySettings()
    max_depth = raw.get("defaultMaxDepth", defaults.default_max_depth)
    max_depth = _expect_int(max_depth, "settings.defaultMaxDepth")
    if max_depth < 0:
        raise TaxonomyLoadError("settings.defaultMaxDepth must be >= 0")

    auto = raw.get("autoTagging") or {}
    if not isinstance(auto, Mapping):
        raise TaxonomyLoadError("settings.autoTagging must be an object")

    return TaxonomySettings(
        allow_custom_root_tags=_expect_bool(
            raw.get("allowCustomRootTags"),
            "settings.allowCustomRootTags",
            defaults.allow_custom_root_tags,
        ),
        default_max_depth=max_depth,
        default_allow_custom_children=_expect_bool(
            raw.get("defaultAllowCustomChildren"),
            "settings.defaultAllowCustomChildren",
            defaults.default_allow_custom_children,
        ),
        auto_tagging_enabled=_expect_bool(
            auto.get("enabled"), "settings.autoTagging.enabled", True
        ),
        auto_tag_rules=_parse_rules(auto.get("rules"), warnings),
    )


def _parse_node(
    segment: Any, raw: Any, settings: TaxonomySettings, where: str
) -> TaxonomyNode:
    if not isinstance(segment, str) or not segment.strip():
        raise TaxonomyLoadError(f"{where}: segment names must be non-empty strings")
    if SEPARATOR in segment:
        raise TaxonomyLoadError(f"{where}: segment {segment!r} contains '{SEPARATOR}'")
    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        raise TaxonomyLoadError(f"{where} must be an object")

    description = raw.get("description") or ""
    if not isinstance(description, str):
        raise TaxonomyLoadError(f"{where}.description must be a string")

    raw_children = raw.get("children") or {}
    if not isinstance(raw_children, Mapping):
        raise TaxonomyLoadError(f"{where}.children must be an object")

    children = {
        str(key): _parse_node(key, value, settings, f"{where}.children.{key}")
        for key, value in raw_children.items()
    }

    return TaxonomyNode(
        segment=segment,
        description=description,
        allow_custom_children=_expect_bool(
            raw.get("allowCustomChildren"),
            f"{where}.allowCustomChildren",
            settings.default_allow_custom_children,
        ),
        depth=_parse_depth(raw.get("depth"), where),
        children=children,
        apply_to_new_projects=_expect_bool(
            raw.get("applyToNewProjects"), f"{where}.applyToNewProjects", False
        ),
    )


def parse_schema(
    raw: Any,
) -> Tuple[Dict[str, TaxonomyNode], TaxonomySettings, List[str]]:
    """
    Parse a schema mapping into nodes and settings.

    Args:
        raw: Decoded JSON/YAML document

    Returns:
        Tuple of (root nodes, settings, non-fatal warnings)

    Raises:
        TaxonomyLoadError: For any structural problem
    """
    if not isinstance(raw, Mapping):
        raise TaxonomyLoadError("Taxonomy schema must be an object")

    warnings: List[str] = []
    settings = _parse_settings(raw.get("settings"), warnings)

    raw_tags = raw.get("tags") or {}
    if not isinstance(raw_tags, Mapping):
        raise TaxonomyLoadError("tags must be an object")

    roots = {
        str(key): _parse_node(key, value, settings, f"tags.{key}")
        for key, value in raw_tags.items()
    }
    return roots, settings, warnings


def read_schema_source(source: Union[str, Path]) -> Any:
    """
    Decode a schema from a file path or a JSON string.

    ``.yaml``/``.yml`` files are read with PyYAML, everything else as JSON.

    Raises:
        TaxonomyLoadError: If the file is missing or cannot be decoded
    """
    if isinstance(source, str) and source.lstrip().startswith("{"):
        try:
            return json.loads(source)
        except json.JSONDecodeError as e:
            raise TaxonomyLoadError(f"Invalid taxonomy JSON: {e}") from e

    path = Path(source).expanduser()
    if not path.exists():
        raise TaxonomyLoadError(f"Taxonomy file not found: {path}")

    try:
        text = path.read_text(encoding="utf-8")
        if path.suffix.lower() in (".yaml", ".yml"):
            return yaml.safe_load(text)
        return json.loads(text)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise TaxonomyLoadError(f"Cannot read taxonomy {path}: {e}") from e


# ==================== Taxonomy handle ====================

class TaxonomyDefinition:
    """
    Loaded taxonomy tree with memoized queries.

    Attributes:
        roots: Root nodes keyed by segment
        settings: Schema-wide settings
        warnings: Reasons the last load degraded to the default schema
            (or skipped rules); empty when the schema loaded cleanly
        using_default: True when the built-in schema is active
    """

    def __init__(
        self,
        source: TaxonomySource = None,
        logger: Optional[CuratorLogger] = None,
    ) -> None:
        """
        Load the taxonomy.

        Args:
            source: Schema path (.json/.yaml), JSON string, decoded mapping,
                or None for the built-in default
            logger: Optional logger
        """
        self._source = source
        self.logger = logger
        self._lock = threading.RLock()
        self._defined_tags: Optional[List[TagInfo]] = None
        self.roots: Dict[str, TaxonomyNode] = {}
        self.settings = TaxonomySettings()
        self.warnings: List[str] = []
        self.using_default = True
        self.load(source)

    # ---- Loading ----

    def load(self, source: TaxonomySource = None) -> List[str]:
        """
        Parse a schema, falling back to the default on any failure.

        Args:
            source: See ``__init__``

        Returns:
            The warnings recorded for this load
        """
        log = safe_logger(self.logger)
        warnings: List[str] = []

        if source is None:
            raw: Any = copy.deepcopy(DEFAULT_SCHEMA)
            using_default = True
            log.log_info("No taxonomy supplied, using built-in default")
        else:
            using_default = False
            try:
                raw = source if isinstance(source, Mapping) else read_schema_source(source)
                roots, settings, warnings = parse_schema(raw)
            except TaxonomyLoadError as e:
                warnings = [f"{e}; using built-in default taxonomy"]
                log.log_warning("Taxonomy load failed, falling back", {"error": str(e)})
                raw = copy.deepcopy(DEFAULT_SCHEMA)
                using_default = True

        if using_default:
            roots, settings, default_warnings = parse_schema(raw)
            warnings.extend(default_warnings)

        with self._lock:
            self._source = source
            self.roots = roots
            self.settings = settings
            self.warnings = warnings
            self.using_default = using_default
            self._defined_tags = None

        log.log_operation("load_taxonomy", {
            "source": source if not isinstance(source, Mapping) else "<mapping>",
            "roots": sorted(roots),
            "rules": len(settings.auto_tag_rules),
            "default": using_default,
            "warnings": warnings,
        })
        return warnings

    def reload(self) -> List[str]:
        """Clear the memoized listing and re-read the original source."""
        with self._lock:
            self._defined_tags = None
            return self.load(self._source)

    # ---- Queries ----

    def node(self, path: Union[str, Sequence[str]]) -> Optional[TaxonomyNode]:
        """
        Walk the tree along ``path``.

        Args:
            path: Tag string ("status/draft") or list of segments

        Returns:
            The node at the path, or None if any segment is undeclared
        """
        segments = path.split(SEPARATOR) if isinstance(path, str) else list(path)
        if not segments:
            return None

        with self._lock:
            level = self.roots
            current: Optional[TaxonomyNode] = None
            for segment in segments:
                current = level.get(segment)
                if current is None:
                    return None
                level = current.children
            return current

    def all_defined_tags(self) -> List[TagInfo]:
        """
        Flatten the tree into the tags usable as-is.

        A node is listed when its depth below the nearest node declaring
        bounds (itself or an ancestor) is at least that node's ``min``;
        descent stops once that depth reaches ``max``.

        Returns:
            TagInfo list in schema order (memoized until ``reload``)
        """
        with self._lock:
            if self._defined_tags is None:
                tags: List[TagInfo] = []
                self._flatten(self.roots, "", 0, None, 0, tags)
                self._defined_tags = tags
            return list(self._defined_tags)

    def _flatten(
        self,
        level: Dict[str, TaxonomyNode],
        prefix: str,
        depth: int,
        bounds: Optional[DepthBounds],
        bounds_depth: int,
        out: List[TagInfo],
    ) -> None:
        for segment, node in level.items():
            tag = f"{prefix}{SEPARATOR}{segment}" if prefix else segment

            node_bounds, node_bounds_depth = bounds, bounds_depth
            if node.depth is not None:
                node_bounds, node_bounds_depth = node.depth, depth
            relative = depth - node_bounds_depth

            if node_bounds is None or node_bounds.allows(relative):
                out.append(TagInfo(
                    tag=tag,
                    description=node.description,
                    depth=node.bounds,
                    has_children=node.has_children,
                    allow_custom_children=node.allow_custom_children,
                ))

            can_descend = (
                node_bounds is None
                or node_bounds.max is None
                or relative < node_bounds.max
            )
            if node.children and can_descend:
                self._flatten(
                    node.children, tag, depth + 1,
                    node_bounds, node_bounds_depth, out,
                )

    def defined_tag_names(self) -> List[str]:
        """Names from ``all_defined_tags``."""
        return [info.tag for info in self.all_defined_tags()]

    def get_tag_info(self, tag: str) -> Optional[TagInfo]:
        """
        Describe a declared tag path.

        Unlike ``all_defined_tags`` this answers for any declared node,
        including ones that need children to be valid.
        """
        cleaned = clean(tag)
        node = self.node(cleaned) if cleaned else None
        if node is None:
            return None
        return TagInfo(
            tag=cleaned,
            description=node.description,
            depth=node.bounds,
            has_children=node.has_children,
            allow_custom_children=node.allow_custom_children,
        )

    def complete(self, partial: str, limit: int = 10) -> List[TagInfo]:
        """
        Defined tags containing ``partial`` (case-insensitive).

        Prefix matches sort first, then alphabetical.
        """
        needle = clean(partial).lower()
        matches = [
            info for info in self.all_defined_tags()
            if needle in info.tag.lower()
        ]
        matches.sort(key=lambda i: (not i.tag.lower().startswith(needle), i.tag))
        return matches[:limit]

    def closest_tag(
        self,
        raw: str,
        matcher: Optional[SimilarityMatcher] = None,
        threshold: Optional[float] = None,
    ) -> Optional[SimilarMatch]:
        """
        Nearest defined tag to ``raw``, for "did you mean" hints.

        Args:
            raw: Tag as typed by the user
            matcher: Matcher to score with (default threshold 0.7)
            threshold: Minimum score override

        Returns:
            Best SimilarMatch, or None when nothing scores high enough
        """
        matcher = matcher or SimilarityMatcher()
        return matcher.best_match(raw, self.defined_tag_names(), threshold)

    def tags_for_new_project(self) -> List[str]:
        """Declared tags flagged ``applyToNewProjects``, in schema order."""
        found: List[str] = []

        def walk(level: Dict[str, TaxonomyNode], prefix: str) -> None:
            for segment, node in level.items():
                tag = f"{prefix}{SEPARATOR}{segment}" if prefix else segment
                if node.apply_to_new_projects:
                    found.append(tag)
                walk(node.children, tag)

        with self._lock:
            walk(self.roots, "")
        return found

    def iter_nodes(self) -> List[Tuple[str, TaxonomyNode]]:
        """Every declared node with its full path, depth-first."""
        nodes: List[Tuple[str, TaxonomyNode]] = []

        def walk(level: Dict[str, TaxonomyNode], prefix: str) -> None:
            for segment, node in level.items():
                tag = f"{prefix}{SEPARATOR}{segment}" if prefix else segment
                nodes.append((tag, node))
                walk(node.children, tag)

        with self._lock:
            walk(self.roots, "")
        return nodes
