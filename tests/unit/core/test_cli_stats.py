"""
Tests for CLI statistics helpers.

Tests OperationStats validation and RenameStats built from a rename report.
"""
from datetime import datetime, timedelta

import pytest

from curator.core.cli import OperationStats, RenameStats, setup_logger
from curator.vault.rename import DocumentChange, RenameReport


@pytest.fixture
def report():
    return RenameReport(
        old_tag="todo",
        new_tag="task",
        preview=False,
        files_scanned=4,
        changes=[
            DocumentChange("a.md", frontmatter_changes=1),
            DocumentChange("b.md", inline_changes=3),
        ],
        errors=[("c.md", "c.md: cannot write")],
    )


class TestOperationStats:
    """Tests for OperationStats."""

    def test_negative_counts_rejected(self):
        with pytest.raises(ValueError):
            OperationStats(files_processed=-1)
        with pytest.raises(ValueError):
            OperationStats(errors=-1)

    def test_duration_cached(self):
        stats = OperationStats(start_time=datetime.now() - timedelta(seconds=2))
        first = stats.duration()
        assert first >= 2
        assert stats.duration() == first


class TestRenameStats:
    """Tests for RenameStats.from_report()."""

    def test_counts(self, report):
        stats = RenameStats.from_report(report)
        assert stats.files_processed == 4
        assert stats.files_modified == 2
        assert stats.frontmatter_changes == 1
        assert stats.inline_changes == 3
        assert stats.errors == 1
        assert stats.preview is False

    def test_summary(self, report):
        summary = RenameStats.from_report(report).summary()
        assert summary.startswith("4 files scanned, 2 changed (1 frontmatter, 3 inline), 1 errors")

    def test_preview_summary(self, report):
        report.preview = True
        assert "2 would change" in RenameStats.from_report(report).summary()

    def test_to_dict(self, report):
        data = RenameStats.from_report(report).to_dict()
        assert data["files_modified"] == 2
        assert data["preview"] is False
        assert "duration" in data


class TestSetupLogger:
    """Tests for setup_logger()."""

    def test_logs_under_operations(self, tmp_path):
        logger = setup_logger(tmp_path, "test_setup")
        try:
            logger.log_operation("startup")
            assert (tmp_path / "operations" / "test_setup.log").exists()
        finally:
            logger.close()
