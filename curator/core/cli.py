#!/usr/bin/env python3
"""
cli.py
------
Shared CLI helpers and statistics for curator commands.

Functions:
    setup_logger: Initialize a CuratorLogger for CLI operations

Classes:
    OperationStats: Base class for command statistics
    RenameStats: Counters for a rename run (scanned, modified, changes)

Usage:
    from curator.core.cli import setup_logger, RenameStats

    logger = setup_logger(log_dir, "rename")
    stats = RenameStats.from_report(report)
    click.echo(stats.summary())
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from pathlib import Path
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, Optional

# --- Local imports ---
from curator.core.logging_manager import CuratorLogger

if TYPE_CHECKING:
    from curator.vault.rename import RenameReport


def setup_logger(log_dir: Path, component_name: str) -> CuratorLogger:
    """
    Setup logging for CLI operations.

    Logs go to ``<log_dir>/operations/<component_name>.log``.

    Args:
        log_dir: Base log directory (typically from paths.LOG_DIR)
        component_name: Component identifier (e.g., 'taxonomy', 'rename')

    Returns:
        Configured CuratorLogger instance
    """
    operations_log_dir = Path(log_dir) / "operations"
    operations_log_dir.mkdir(parents=True, exist_ok=True)
    return CuratorLogger(operations_log_dir, component_name=component_name)


@dataclass
class OperationStats:
    """
    Base class for CLI operation statistics.

    Attributes:
        files_processed: Number of documents processed
        errors: Number of errors encountered
        start_time: Operation start timestamp
    """
    files_processed: int = 0
    errors: int = 0
    start_time: datetime = field(default_factory=datetime.now)
    _duration_cached: Optional[float] = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.files_processed < 0:
            raise ValueError(f"files_processed must be non-negative, got {self.files_processed}")
        if self.errors < 0:
            raise ValueError(f"errors must be non-negative, got {self.errors}")

    def duration(self) -> float:
        """Seconds elapsed since start_time (cached after the first call)."""
        if self._duration_cached is None:
            self._duration_cached = (datetime.now() - self.start_time).total_seconds()
        return self._duration_cached

    def summary(self) -> str:
        return (
            f"{self.files_processed} files processed, "
            f"{self.errors} errors, "
            f"{self.duration():.2f}s"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "files_processed": self.files_processed,
            "errors": self.errors,
            "duration": self.duration(),
        }


@dataclass
class RenameStats(OperationStats):
    """
    Statistics for a tag rename run.

    Attributes:
        files_modified: Documents with at least one change
        frontmatter_changes: Total structured tag replacements
        inline_changes: Total inline hashtag replacements
        preview: Whether the run was a dry run
    """
    files_modified: int = 0
    frontmatter_changes: int = 0
    inline_changes: int = 0
    preview: bool = True

    @classmethod
    def from_report(
        cls, report: "RenameReport", start_time: Optional[datetime] = None
    ) -> "RenameStats":
        """Build statistics from a finished RenameReport."""
        return cls(
            files_processed=report.files_scanned,
            errors=len(report.errors),
            start_time=start_time or datetime.now(),
            files_modified=report.files_modified,
            frontmatter_changes=sum(c.frontmatter_changes for c in report.changes),
            inline_changes=sum(c.inline_changes for c in report.changes),
            preview=report.preview,
        )

    def summary(self) -> str:
        verb = "would change" if self.preview else "changed"
        return (
            f"{self.files_processed} files scanned, "
            f"{self.files_modified} {verb} "
            f"({self.frontmatter_changes} frontmatter, "
            f"{self.inline_changes} inline), "
            f"{self.errors} errors, "
            f"{self.duration():.2f}s"
        )

    def to_dict(self) -> Dict[str, Any]:
        d = super().to_dict()
        d.update({
            "files_modified": self.files_modified,
            "frontmatter_changes": self.frontmatter_changes,
            "inline_changes": self.inline_changes,
            "preview": self.preview,
        })
        return d
