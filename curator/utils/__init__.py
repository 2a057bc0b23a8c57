"""
Utilities package for the vault curator.

- md: frontmatter splitting, parsing and rendering (ruamel.yaml round-trip)
- fs: markdown discovery with ignore patterns

Import commonly-used utilities directly from this package:
    from curator.utils import split_frontmatter, find_markdown_files
"""

from .md import (
    FrontmatterError,
    frontmatter_head,
    parse_frontmatter,
    render_frontmatter,
    split_frontmatter,
)
from .fs import find_markdown_files, is_ignored

__all__ = [
    "FrontmatterError",
    "frontmatter_head",
    "parse_frontmatter",
    "render_frontmatter",
    "split_frontmatter",
    "find_markdown_files",
    "is_ignored",
]
