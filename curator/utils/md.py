#!/usr/bin/env python3
"""
md.py
-------------------
Markdown frontmatter utilities for the vault curator.

Provides functions for separating a note into its YAML frontmatter block
and its body, and for round-tripping the frontmatter with ruamel.yaml so
that hand-written formatting, quoting and comments survive an edit.

The body is always returned exactly as it appears in the file. Callers
that rewrite only the frontmatter (or only the body) can rebuild the
note without disturbing the other part.

Intended for use by MarkdownVault, tag extraction and the rename engine.
"""
from __future__ import annotations

# --- Standard library imports ---
import io
import re
from typing import Any, Optional, Tuple

# --- Third party imports ---
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap
from ruamel.yaml.error import YAMLError

# --- Local imports ---
from curator.core.exceptions import CuratorError


_FRONTMATTER_RE = re.compile(
    r"\A---[ \t]*\r?\n(?P<yaml>.*?)^---[ \t]*(?:\r?\n|\Z)",
    re.DOTALL | re.MULTILINE,
)


class FrontmatterError(CuratorError):
    """The frontmatter block exists but is not a YAML mapping."""

    pass


def round_trip_yaml() -> YAML:
    """Return a ruamel.yaml instance configured for format-preserving edits."""
    y = YAML()
    y.preserve_quotes = True
    y.width = 4096
    y.indent(mapping=2, sequence=4, offset=2)
    return y


# ----- Splitting -----
def split_frontmatter(content: str) -> Tuple[Optional[str], str]:
    """
    Split a note into YAML frontmatter text and body.

    Expected format:
        ---
        yaml: content
        ---
        Body content here...

    Args:
        content: Full markdown file content

    Returns:
        Tuple of (frontmatter_text, body)
        - frontmatter_text: YAML between the delimiters, or None when the
          note has no frontmatter block
        - body: Everything after the closing delimiter, unmodified

    Examples:
        >>> split_frontmatter("---\\ntags: [a]\\n---\\nBody #a\\n")
        ('tags: [a]\\n', 'Body #a\\n')
        >>> split_frontmatter("No block here")
        (None, 'No block here')
    """
    match = _FRONTMATTER_RE.match(content)
    if match is None:
        return None, content
    return match.group("yaml"), content[match.end():]


def frontmatter_head(content: str) -> str:
    """
    Return the raw frontmatter block including both delimiters.

    Returns an empty string when the note has no frontmatter, so that
    ``frontmatter_head(c) + split_frontmatter(c)[1] == c`` always holds.
    """
    match = _FRONTMATTER_RE.match(content)
    return match.group(0) if match else ""


# ----- Parsing -----
def parse_frontmatter(content: str) -> Tuple[Optional[CommentedMap], str]:
    """
    Parse the frontmatter of a note with ruamel.yaml round-trip loading.

    Args:
        content: Full markdown file content

    Returns:
        Tuple of (data, body). ``data`` is None when the note has no
        frontmatter block; an empty block yields an empty mapping.

    Raises:
        FrontmatterError: If the block is invalid YAML or not a mapping
    """
    yaml_text, body = split_frontmatter(content)
    if yaml_text is None:
        return None, body

    try:
        data = round_trip_yaml().load(io.StringIO(yaml_text))
    except YAMLError as e:
        raise FrontmatterError(f"Invalid YAML frontmatter: {e}") from e

    if data is None:
        return CommentedMap(), body
    if not isinstance(data, dict):
        raise FrontmatterError(
            f"Frontmatter must be a mapping, got {type(data).__name__}"
        )
    return data, body


def render_frontmatter(data: Any, body: str) -> str:
    """
    Rebuild a note from frontmatter data and an untouched body.

    Args:
        data: Mapping to serialise (CommentedMap keeps original layout)
        body: Body text, appended verbatim

    Returns:
        ``---\\n<yaml>---\\n<body>``
    """
    stream = io.StringIO()
    if data:
        round_trip_yaml().dump(data, stream)
    return f"---\n{stream.getvalue()}---\n{body}"


def coerce_tag_value(value: Any) -> Any:
    """
    Normalise a frontmatter ``tags`` value into plain Python types.

    ruamel returns CommentedSeq/ScalarString objects; callers of the
    DocumentSet contract expect ``list[str]``, ``str`` or None.
    """
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return [str(item) if item is not None else None for item in value]
    return str(value)
