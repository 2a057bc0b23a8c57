#!/usr/bin/env python3
"""
rename.py
---------
Vault-wide tag rename propagation.

Renames a tag everywhere it is used: in each note's structured ``tags``
field and in inline ``#tag`` occurrences of the note body. The inline
pass matches the whole tag string followed by a boundary, so renaming
``proj`` leaves ``#project`` and ``#proj/sub`` alone, and renaming
``project/old`` leaves ``#project/oldx`` and ``#other/old`` alone.

Key Features:
    - Preview by default: every change is computed and reported, nothing
      is written
    - Sequential, one document at a time; each document is read, rewritten
      and persisted before the next is visited
    - Partial success: a note that cannot be read or written is recorded
      in ``RenameReport.errors`` and the run continues
    - Body text other than the matched tags is preserved byte-for-byte;
      frontmatter is round-tripped with ruamel.yaml

Usage:
    from curator.vault.documents import MarkdownVault
    from curator.vault.rename import RenamePropagator, RenameRequest

    propagator = RenamePropagator(MarkdownVault(vault_root))
    report = propagator.rename_tag(RenameRequest("todo", "task"))
    print(report.summary())

    # Apply changes
    report = propagator.rename_tag(RenameRequest("todo", "task", preview=False))
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Pattern, Tuple

# --- Local imports ---
from curator.core.exceptions import (
    DocumentError,
    InvalidRenameError,
    PartialWriteError,
    RenameAbortedError,
)
from curator.core.logging_manager import CuratorLogger, safe_logger
from curator.taxonomy.normalizer import MARKER, clean
from curator.taxonomy.similarity import SimilarityMatcher
from curator.utils.md import frontmatter_head
from curator.vault.documents import DocumentSet, TagValue


# ==================== Tag pattern ====================

def build_tag_pattern(tag: str) -> Pattern[str]:
    """
    Compile the inline pattern for a tag.

    The marker and the escaped tag must be followed by something that
    cannot continue a tag: not a word character, ``-`` or ``/``. The
    boundary applies to the whole (possibly multi-segment) tag.

    Args:
        tag: Raw or cleaned tag

    Returns:
        Compiled pattern matching ``#<tag>`` as a complete token

    Examples:
        >>> bool(build_tag_pattern("proj").search("see #proj."))
        True
        >>> bool(build_tag_pattern("proj").search("see #project"))
        False
    """
    return re.compile(re.escape(MARKER + clean(tag)) + r"(?![\w/-])")


# ==================== Data Classes ====================

@dataclass
class RenameRequest:
    """
    Input of a rename.

    Attributes:
        old_tag: Tag to replace
        new_tag: Replacement tag
        preview: Compute changes without writing
        include_inline: Rewrite ``#tag`` occurrences in note bodies
        include_frontmatter: Rewrite the structured tag field
    """

    old_tag: str
    new_tag: str
    preview: bool = True
    include_inline: bool = True
    include_frontmatter: bool = True

    def validated(self) -> "RenameRequest":
        """
        Return a copy with cleaned tags.

        Raises:
            InvalidRenameError: For empty tags, equal tags, or a new tag
                containing whitespace
        """
        old_tag, new_tag = clean(self.old_tag), clean(self.new_tag)
        if not old_tag or not new_tag:
            raise InvalidRenameError("Both old and new tags are required")
        if old_tag == new_tag:
            raise InvalidRenameError(f"Old and new tags are the same: '{old_tag}'")
        if re.search(r"\s", new_tag):
            raise InvalidRenameError(
                f"Invalid tag name '{new_tag}': whitespace is not allowed"
            )
        return RenameRequest(
            old_tag=old_tag,
            new_tag=new_tag,
            preview=self.preview,
            include_inline=self.include_inline,
            include_frontmatter=self.include_frontmatter,
        )


@dataclass
class DocumentChange:
    """Change counts for one document."""

    path: str
    frontmatter_changes: int = 0
    inline_changes: int = 0

    @property
    def modified(self) -> bool:
        return self.frontmatter_changes > 0 or self.inline_changes > 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "frontmatterChanges": self.frontmatter_changes,
            "inlineChanges": self.inline_changes,
        }


@dataclass
class RenameReport:
    """
    Result of a rename.

    Attributes:
        old_tag: Cleaned old tag
        new_tag: Cleaned new tag
        preview: Whether the run was a preview
        files_scanned: Documents visited
        changes: One entry per modified document, in visit order; a document
            whose writes stopped part way lists only what landed
        errors: (path, message) for documents that failed
        warnings: Non-fatal notes (e.g. the new tag resembles an existing one)
    """

    old_tag: str
    new_tag: str
    preview: bool
    files_scanned: int = 0
    changes: List[DocumentChange] = field(default_factory=list)
    errors: List[Tuple[str, str]] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def files_modified(self) -> int:
        return len(self.changes)

    @property
    def success(self) -> bool:
        return not self.errors

    @property
    def frontmatter_changes(self) -> int:
        return sum(c.frontmatter_changes for c in self.changes)

    @property
    def inline_changes(self) -> int:
        return sum(c.inline_changes for c in self.changes)

    def to_dict(self) -> Dict[str, Any]:
        """Tool-contract representation."""
        return {
            "oldTag": self.old_tag,
            "newTag": self.new_tag,
            "filesChanged": self.files_modified,
            "filesScanned": self.files_scanned,
            "changes": [c.to_dict() for c in self.changes],
            "preview": self.preview,
            "success": self.success,
            "errors": [{"path": p, "error": e} for p, e in self.errors],
            "warnings": list(self.warnings),
        }

    def summary(self) -> str:
        """
        Generate human-readable summary of the rename report.

        Returns:
            Formatted multi-line string
        """
        mode = "Preview" if self.preview else "Renamed"
        lines = [f'{mode}: "#{self.old_tag}" → "#{self.new_tag}"', ""]

        for change in self.changes:
            parts = []
            if change.frontmatter_changes:
                parts.append(f"{change.frontmatter_changes} frontmatter")
            if change.inline_changes:
                parts.append(f"{change.inline_changes} inline")
            lines.append(f"  ✎ {change.path} — {', '.join(parts)}")

        for path, error in self.errors:
            lines.append(f"  ✕ {path} — {error}")

        for warning in self.warnings:
            lines.append(f"  ! {warning}")

        if self.changes or self.errors or self.warnings:
            lines.append("")

        if not self.changes:
            lines.append(f"No changes needed ({self.files_scanned} file(s) scanned).")
        else:
            verb = "would change" if self.preview else "changed"
            lines.append(
                f"Total: {self.files_modified} of {self.files_scanned} file(s) {verb}."
            )
        return "\n".join(lines)


# ==================== Propagator ====================

def _replace_structured(value: TagValue, old_tag: str, new_tag: str) -> Tuple[TagValue, int]:
    """Replace exact matches of ``old_tag`` in a tag list or scalar."""
    if isinstance(value, list):
        count = 0
        replaced: List[Any] = []
        for item in value:
            if isinstance(item, str) and clean(item) == old_tag:
                replaced.append(new_tag)
                count += 1
            else:
                replaced.append(item)
        return replaced, count

    if isinstance(value, str) and clean(value) == old_tag:
        return new_tag, 1

    return value, 0


class RenamePropagator:
    """
    Rename tags across a DocumentSet.

    Attributes:
        documents: Collaborator providing document access
        matcher: Used to warn when the new tag resembles another tag
    """

    def __init__(
        self,
        documents: DocumentSet,
        matcher: Optional[SimilarityMatcher] = None,
        logger: Optional[CuratorLogger] = None,
    ) -> None:
        self.documents = documents
        self.matcher = matcher
        self.logger = logger

    def rename_tag(
        self,
        request: RenameRequest,
        known_tags: Optional[Iterable[str]] = None,
    ) -> RenameReport:
        """
        Rename one tag across every document.

        Args:
            request: Old/new tags and mode flags
            known_tags: Tags already used in the vault; when given together
                with a matcher, near-duplicates of the new tag are reported
                as warnings

        Returns:
            RenameReport covering every document visited

        Raises:
            InvalidRenameError: Before any document is read
            RenameAbortedError: If an unexpected failure stops the scan;
                carries the last processed document and the pending ones
        """
        request = request.validated()
        log = safe_logger(self.logger)

        report = RenameReport(request.old_tag, request.new_tag, request.preview)
        if self.matcher is not None and known_tags is not None:
            pool = [t for t in known_tags if clean(t) != request.old_tag]
            match = self.matcher.best_match(request.new_tag, pool, 0.85)
            if match is not None:
                report.warnings.append(
                    f"'{request.new_tag}' is very similar to existing "
                    f"'{match.candidate}' ({match.kind.value})"
                )

        paths = self.documents.list_documents()
        pattern = build_tag_pattern(request.old_tag)
        replacement = MARKER + request.new_tag

        log.log_operation("rename_tag_start", {
            "old_tag": request.old_tag,
            "new_tag": request.new_tag,
            "preview": request.preview,
            "documents": len(paths),
        })

        last_processed: Optional[str] = None
        for index, path in enumerate(paths):
            try:
                change = self._process(path, request, pattern, replacement)
            except (DocumentError, OSError) as e:
                log.log_error(e, {"operation": "rename_tag", "path": path})
                report.errors.append((path, str(e)))
                if isinstance(e, PartialWriteError):
                    report.changes.append(e.applied)
            except Exception as e:
                log.log_error(e, {"operation": "rename_tag", "path": path})
                raise RenameAbortedError(
                    f"Rename stopped at {path}: {e}",
                    last_processed=last_processed,
                    pending=paths[index:],
                ) from e
            else:
                if change.modified:
                    report.changes.append(change)
                    log.log_debug("Document updated" if not request.preview
                                  else "Document would change", change.to_dict())
            report.files_scanned += 1
            last_processed = path

        log.log_operation("rename_tag_complete", {
            "old_tag": request.old_tag,
            "new_tag": request.new_tag,
            "preview": request.preview,
            "files_scanned": report.files_scanned,
            "files_modified": report.files_modified,
            "errors": len(report.errors),
        })
        return report

    def _process(
        self,
        path: str,
        request: RenameRequest,
        pattern: Pattern[str],
        replacement: str,
    ) -> DocumentChange:
        change = DocumentChange(path)
        new_text: Optional[str] = None
        new_value: TagValue = None

        if request.include_inline:
            text = self.documents.read_text(path)
            head = frontmatter_head(text)
            body, count = pattern.subn(lambda _: replacement, text[len(head):])
            if count:
                change.inline_changes = count
                new_text = head + body

        if request.include_frontmatter:
            value = self.documents.read_structured_tags(path)
            new_value, count = _replace_structured(
                value, request.old_tag, request.new_tag
            )
            change.frontmatter_changes = count

        if request.preview or not change.modified:
            return change

        applied = DocumentChange(path)
        try:
            if new_text is not None:
                self.documents.write_text(path, new_text)
                applied.inline_changes = change.inline_changes
            if change.frontmatter_changes:
                self.documents.write_structured_tags(path, new_value)
                applied.frontmatter_changes = change.frontmatter_changes
            if self.documents.has_metadata(path):
                self.documents.stamp_modified(path, datetime.now())
        except (DocumentError, OSError) as e:
            if not applied.modified:
                raise
            raise PartialWriteError(
                path, f"write interrupted after partial update ({e})", applied
            ) from e
        return change

    def rename_tags(
        self,
        pairs: Iterable[Tuple[str, str]],
        preview: bool = True,
        include_inline: bool = True,
        include_frontmatter: bool = True,
    ) -> List[Dict[str, Any]]:
        """
        Run ``rename_tag`` for several (old, new) pairs in order.

        Invalid pairs are reported and skipped; later pairs still run.

        Returns:
            One dict per pair: ``{oldTag, newTag, success, report|error}``
        """
        results: List[Dict[str, Any]] = []
        for old_tag, new_tag in pairs:
            request = RenameRequest(
                old_tag, new_tag, preview, include_inline, include_frontmatter
            )
            try:
                report = self.rename_tag(request)
            except InvalidRenameError as e:
                results.append({
                    "oldTag": old_tag,
                    "newTag": new_tag,
                    "success": False,
                    "error": str(e),
                })
                continue
            results.append({
                "oldTag": report.old_tag,
                "newTag": report.new_tag,
                "success": report.success,
                "report": report.to_dict(),
            })
        return results
