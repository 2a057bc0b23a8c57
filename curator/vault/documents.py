#!/usr/bin/env python3
"""
documents.py
------------
Document-set contract and its markdown-vault implementation.

The taxonomy and rename engines never touch the filesystem directly.
They talk to a ``DocumentSet``: something that can list documents, hand
out their text, accept new text, and read/write the structured ``tags``
field of a document's metadata block.

Implementations:
    - FrontmatterDocuments: base class implementing the structured-tag
      and timestamp operations on top of raw ``read_text``/``write_text``
    - MarkdownVault: notes on disk under a vault root

Format preservation:
    Structured writes round-trip the YAML frontmatter through ruamel.yaml
    (quotes, comments and key order survive) and re-attach the body
    byte-for-byte.

Usage:
    from curator.vault.documents import MarkdownVault

    vault = MarkdownVault(Path("~/Notes").expanduser())
    for path in vault.list_documents():
        print(path, vault.read_structured_tags(path))
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional, Protocol, Union, runtime_checkable

# --- Third party imports ---
from ruamel.yaml.comments import CommentedMap

# --- Local imports ---
from curator.core.exceptions import DocumentError
from curator.core.logging_manager import CuratorLogger, safe_logger
from curator.core.paths import DEFAULT_IGNORE_PATTERNS
from curator.utils.fs import find_markdown_files
from curator.utils.md import (
    FrontmatterError,
    coerce_tag_value,
    parse_frontmatter,
    render_frontmatter,
    split_frontmatter,
)


TagValue = Union[List[str], str, None]


@runtime_checkable
class DocumentSet(Protocol):
    """Collection of text documents with a structured tag field."""

    def list_documents(self) -> List[str]:
        ...

    def read_text(self, path: str) -> str:
        ...

    def write_text(self, path: str, text: str) -> None:
        ...

    def read_structured_tags(self, path: str) -> TagValue:
        ...

    def write_structured_tags(self, path: str, value: TagValue) -> None:
        ...

    def has_metadata(self, path: str) -> bool:
        ...

    def stamp_modified(self, path: str, when: Optional[datetime] = None) -> bool:
        ...


class FrontmatterDocuments:
    """
    Structured-tag operations for documents with YAML frontmatter.

    Subclasses provide ``list_documents``, ``read_text`` and
    ``write_text``; everything else is derived from the note text.

    Attributes:
        tag_field: Frontmatter key holding the tag list
        modified_field: Frontmatter key stamped after a rewrite
    """

    def __init__(
        self,
        tag_field: str = "tags",
        modified_field: str = "modified",
        logger: Optional[CuratorLogger] = None,
    ) -> None:
        self.tag_field = tag_field
        self.modified_field = modified_field
        self.logger = logger

    # ---- Raw access (subclass responsibility) ----

    def list_documents(self) -> List[str]:
        raise NotImplementedError

    def read_text(self, path: str) -> str:
        raise NotImplementedError

    def write_text(self, path: str, text: str) -> None:
        raise NotImplementedError

    # ---- Frontmatter ----

    def _parse(self, path: str):
        try:
            return parse_frontmatter(self.read_text(path))
        except FrontmatterError as e:
            raise DocumentError(path, str(e)) from e

    def read_structured_tags(self, path: str) -> TagValue:
        """
        Current value of the tag field.

        Returns:
            list[str], str, or None when the note has no frontmatter or
            no tag field

        Raises:
            DocumentError: If the note cannot be read or parsed
        """
        data, _ = self._parse(path)
        if data is None:
            return None
        return coerce_tag_value(data.get(self.tag_field))

    def write_structured_tags(self, path: str, value: TagValue) -> None:
        """
        Replace the tag field, keeping the rest of the note intact.

        An existing YAML sequence is updated in place so that its flow or
        block style is kept. Items whose value is unchanged stay the
        original YAML nodes, keeping their quoting and type. ``None``
        removes the field. A note without frontmatter gains a new block.
        """
        data, body = self._parse(path)
        if data is None:
            data = CommentedMap()

        current = data.get(self.tag_field)
        if value is None:
            data.pop(self.tag_field, None)
        elif isinstance(current, list) and isinstance(value, list):
            for i, item in enumerate(value[: len(current)]):
                if coerce_tag_value(current[i]) != item:
                    current[i] = item
            while len(current) > len(value):
                current.pop()
            for item in value[len(current):]:
                current.append(item)
        else:
            data[self.tag_field] = value

        self.write_text(path, render_frontmatter(data, body))

    def has_metadata(self, path: str) -> bool:
        """Whether the note carries a frontmatter block."""
        yaml_text, _ = split_frontmatter(self.read_text(path))
        return yaml_text is not None

    def stamp_modified(self, path: str, when: Optional[datetime] = None) -> bool:
        """
        Set the modification timestamp field.

        Notes without frontmatter are left untouched.

        Returns:
            True if the note was stamped
        """
        data, body = self._parse(path)
        if data is None:
            return False

        stamp = (when or datetime.now()).isoformat(timespec="seconds")
        data[self.modified_field] = stamp
        self.write_text(path, render_frontmatter(data, body))
        safe_logger(self.logger).log_debug(
            "Stamped modification time", {"path": path, "stamp": stamp}
        )
        return True


class MarkdownVault(FrontmatterDocuments):
    """
    Markdown notes under a vault root.

    Paths handed out and accepted are vault-relative POSIX strings.
    Every I/O failure is raised as DocumentError naming the note.

    Attributes:
        root: Vault root directory
        ignore_patterns: Globs excluded from ``list_documents``
    """

    def __init__(
        self,
        root: Path,
        ignore_patterns: Iterable[str] = DEFAULT_IGNORE_PATTERNS,
        tag_field: str = "tags",
        modified_field: str = "modified",
        logger: Optional[CuratorLogger] = None,
    ) -> None:
        super().__init__(tag_field, modified_field, logger)
        self.root = Path(root).expanduser()
        self.ignore_patterns = list(ignore_patterns)

    def _resolve(self, path: str) -> Path:
        full = (self.root / path).resolve()
        try:
            full.relative_to(self.root.resolve())
        except ValueError:
            raise DocumentError(path, "path escapes the vault root") from None
        return full

    def list_documents(self) -> List[str]:
        return find_markdown_files(self.root, self.ignore_patterns)

    def read_text(self, path: str) -> str:
        try:
            with open(self._resolve(path), encoding="utf-8", newline="") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise DocumentError(path, f"cannot read: {e}") from e

    def write_text(self, path: str, text: str) -> None:
        target = self._resolve(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with open(target, "w", encoding="utf-8", newline="") as f:
                f.write(text)
        except OSError as e:
            raise DocumentError(path, f"cannot write: {e}") from e

