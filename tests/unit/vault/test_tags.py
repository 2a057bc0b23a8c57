#!/usr/bin/env python3
"""
test_tags.py
------------
Tests for tag extraction, vault analysis and per-note tag edits.

Usage:
    python -m pytest tests/unit/vault/test_tags.py -v
"""
# --- Annotations ---
from __future__ import annotations

# --- Third-party imports ---
import pytest

# --- Local imports ---
from curator.utils.md import FrontmatterError
from curator.vault.tags import (
    TagIndex,
    extract_frontmatter_tags,
    extract_inline_tags,
    find_documents_with_tag,
    update_note_tags,
)


class TestExtractInlineTags:
    """Tests for extract_inline_tags()."""

    def test_body_tags_in_order(self):
        text = "---\ntags: [fm]\n---\nSee #todo, #project/x and #todo again\n"
        assert extract_inline_tags(text) == ["todo", "project/x"]

    def test_frontmatter_ignored(self):
        assert extract_inline_tags("---\nnote: '#hidden'\n---\nbody\n") == []

    @pytest.mark.parametrize("text", [
        "issue #42",
        "a#b",
        "&#39; entity",
        "https://example.com/page#section",
        "# Heading",
        "##double",
    ])
    def test_not_tags(self, text):
        assert extract_inline_tags(text) == []

    def test_trailing_separator_stripped(self):
        assert extract_inline_tags("see #area/ later") == ["area"]

    def test_hyphen_and_unicode(self):
        assert extract_inline_tags("#meeting-notes #café") == ["meeting-notes", "café"]


class TestExtractFrontmatterTags:
    """Tests for extract_frontmatter_tags()."""

    def test_list(self):
        assert extract_frontmatter_tags("---\ntags: ['#a', b, '']\n---\n") == ["a", "b"]

    def test_scalar(self):
        assert extract_frontmatter_tags("---\ntags: single\n---\n") == ["single"]

    def test_no_frontmatter(self):
        assert extract_frontmatter_tags("just text #a") == []

    def test_other_field(self):
        text = "---\nkeywords: [x]\n---\n"
        assert extract_frontmatter_tags(text, tag_field="keywords") == ["x"]

    def test_invalid_yaml(self):
        with pytest.raises(FrontmatterError):
            extract_frontmatter_tags("---\nkey: [unclosed\n---\n")


class TestFindDocumentsWithTag:
    """Tests for find_documents_with_tag()."""

    def test_both_locations(self, vault):
        hits = find_documents_with_tag("#todo", vault)
        assert hits == [
            {"path": "inbox/todo-list.md", "frontmatter": True, "inline": 1},
            {"path": "plain.md", "frontmatter": False, "inline": 1},
        ]

    def test_prefix_does_not_match(self, vault):
        assert find_documents_with_tag("proj", vault) == []


class TestUpdateNoteTags:
    """Tests for update_note_tags()."""

    def test_add_and_remove(self, vault, vault_dir):
        tags = update_note_tags(
            vault, "projects/alpha.md", add=["#Review Later"], remove=["status/draft"]
        )
        assert tags == ["project/alpha", "review-later"]
        assert vault.read_structured_tags("projects/alpha.md") == tags
        assert "modified:" in (vault_dir / "projects/alpha.md").read_text(encoding="utf-8")

    def test_replace(self, vault):
        tags = update_note_tags(vault, "inbox/todo-list.md", replace=["x", "X", "y"], add=["z"])
        assert tags == ["x", "y", "z"]

    def test_unchanged_note_not_written(self, vault, vault_dir):
        path = vault_dir / "projects/alpha.md"
        before = path.read_text(encoding="utf-8")
        update_note_tags(vault, "projects/alpha.md", add=["project/alpha"])
        assert path.read_text(encoding="utf-8") == before

    def test_note_without_frontmatter_gains_block(self, vault, vault_dir):
        update_note_tags(vault, "plain.md", add=["idea"])
        text = (vault_dir / "plain.md").read_text(encoding="utf-8")
        assert text.startswith("---\n")
        assert text.endswith("No frontmatter here, only #todo inline.\n")
        assert vault.read_structured_tags("plain.md") == ["idea"]


class TestTagIndex:
    """Tests for vault-wide analysis."""

    @pytest.fixture
    def index(self, vault):
        return TagIndex.build(vault)

    def test_counts_once_per_note(self, index):
        assert index.files_scanned == 3
        assert index.tag_stats["todo"].count == 2
        assert index.tag_stats["todo"].files == ["inbox/todo-list.md", "plain.md"]
        assert index.tag_stats["project/alpha"].count == 2

    def test_stats_order(self, index):
        assert [s.tag for s in index.stats()[:2]] == ["project/alpha", "todo"]

    def test_ignored_folders_skipped(self, index):
        assert all(".obsidian" not in f for s in index.stats() for f in s.files)

    def test_hierarchy(self, index):
        tree = index.hierarchy()
        assert tree["todo"]["count"] == 2
        assert tree["todo"]["children"]["later"]["path"] == "todo/later"
        assert tree["project"]["count"] == 0
        assert tree["project"]["children"]["alpha"]["count"] == 2

    def test_stat_dict(self, index):
        data = index.tag_stats["todo/later"].to_dict()
        assert data["level"] == 1
        assert data["parent"] == "todo"
        assert data["isRoot"] is False

    def test_co_occurrence(self, index):
        pairs = index.top_co_occurrences()
        assert {"tag1": "project/alpha", "tag2": "todo", "count": 1} in pairs

    def test_similar_pairs(self, index):
        pairs = {(p["tag1"], p["tag2"]) for p in index.similar_pairs()}
        assert ("todo", "todos") in pairs
        assert ("project/alpha", "project/alpha-old") in pairs

    def test_recommendations(self, index):
        kinds = [r["type"] for r in index.recommendations()]
        assert kinds == ["unused-tags", "similar-tags"]

    def test_deep_hierarchy_recommendation(self):
        index = TagIndex()
        index.add("a.md", ["a/b/c/d"])
        index.add("b.md", ["a/b/c/d"])
        assert [r["type"] for r in index.recommendations()] == ["deep-hierarchy"]

    def test_unreadable_note_recorded(self, memory_docs):
        docs = memory_docs({"bad.md": "---\nkey: [unclosed\n---\n", "ok.md": "#a\n"})
        index = TagIndex.build(docs)
        assert index.files_scanned == 1
        assert [p for p, _ in index.errors] == ["bad.md"]
        assert index.to_dict()["errors"][0]["path"] == "bad.md"

    def test_to_dict_keys(self, index):
        assert set(index.to_dict()) == {
            "totalTags", "totalFiles", "stats", "hierarchy",
            "coOccurrence", "similarTags", "recommendations", "errors",
        }
