#!/usr/bin/env python3
"""
fs.py
-------------------
Filesystem utilities for vault discovery.

Functions:
    find_markdown_files: Discover notes under a vault, honouring ignore patterns
    is_ignored: Check a vault-relative path against glob patterns

Usage:
    from curator.utils.fs import find_markdown_files

    notes = find_markdown_files(Path("~/Notes").expanduser(), [".obsidian/**"])
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from fnmatch import fnmatch
from pathlib import Path
from typing import Iterable, List


def is_ignored(relative_path: str, patterns: Iterable[str]) -> bool:
    """
    Return True when a vault-relative POSIX path matches any ignore pattern.

    Patterns use fnmatch semantics, where ``*`` also crosses ``/``, so
    ``.obsidian/**`` excludes everything below ``.obsidian``.
    """
    return any(fnmatch(relative_path, pattern) for pattern in patterns)


def find_markdown_files(
    directory: Path,
    ignore_patterns: Iterable[str] = (),
    pattern: str = "**/*.md",
) -> List[str]:
    """
    Find markdown files under a directory.

    Args:
        directory: Vault root
        ignore_patterns: Glob patterns relative to the vault root
        pattern: Discovery glob (default: every ``.md`` file)

    Returns:
        Sorted vault-relative POSIX paths; empty if the directory is missing
    """
    if not directory.exists():
        return []

    patterns = list(ignore_patterns)
    found = []
    for path in directory.glob(pattern):
        if not path.is_file():
            continue
        relative = path.relative_to(directory).as_posix()
        if is_ignored(relative, patterns):
            continue
        found.append(relative)
    return sorted(found)
