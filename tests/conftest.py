"""
conftest.py
-----------
Shared pytest fixtures for vault curator tests.

Provides fixtures for:
- Taxonomy schemas (scenario schemas and the built-in default)
- An in-memory DocumentSet that counts writes
- Temporary on-disk vaults with sample notes
"""
from __future__ import annotations

from pathlib import Path
from textwrap import dedent
from typing import Dict, List

import pytest

from curator.core.exceptions import DocumentError
from curator.taxonomy.definition import TaxonomyDefinition
from curator.vault.documents import FrontmatterDocuments, MarkdownVault


# ----- In-memory documents -----

class MemoryDocuments(FrontmatterDocuments):
    """
    DocumentSet backed by a dict, recording every write.

    ``fail_writes`` and ``fail_reads`` hold paths whose writes/reads raise
    DocumentError, to exercise partial-failure handling.
    """

    def __init__(self, notes: Dict[str, str]) -> None:
        super().__init__()
        self.notes = dict(notes)
        self.writes: List[str] = []
        self.fail_writes: set = set()
        self.fail_reads: set = set()

    def list_documents(self) -> List[str]:
        return sorted(self.notes)

    def read_text(self, path: str) -> str:
        if path in self.fail_reads:
            raise DocumentError(path, "cannot read: simulated failure")
        return self.notes[path]

    def write_text(self, path: str, text: str) -> None:
        if path in self.fail_writes:
            raise DocumentError(path, "cannot write: simulated failure")
        self.writes.append(path)
        self.notes[path] = text

    def write_count(self, path: str) -> int:
        return self.writes.count(path)


@pytest.fixture
def memory_docs():
    """Factory for MemoryDocuments from {path: text}."""
    def _make(notes: Dict[str, str]) -> MemoryDocuments:
        return MemoryDocuments({k: dedent(v) for k, v in notes.items()})
    return _make


# ----- Taxonomy fixtures -----

@pytest.fixture
def scenario_schema():
    """Schema with a closed ``status`` branch and a ``depth.min=1`` area."""
    return {
        "tags": {
            "status": {
                "description": "Status or state",
                "allowCustomChildren": False,
                "children": {
                    "draft": {"description": "Work in progress"},
                    "review": {"description": "Needs review"},
                    "complete": {"description": "Completed"},
                },
            },
            "area": {
                "description": "Areas of responsibility",
                "allowCustomChildren": True,
                "depth": {"min": 1, "max": 2},
            },
            "type": {
                "description": "Document or note types",
                "children": {
                    "meeting-notes": {"description": "Meeting notes"},
                    "journal": {"description": "Journal or log entry"},
                },
            },
        },
        "settings": {
            "allowCustomRootTags": False,
            "defaultMaxDepth": 3,
            "autoTagging": {
                "enabled": True,
                "rules": [
                    {
                        "trigger": {"type": "all", "keywords": ["meeting", "agenda"]},
                        "tags": ["type/meeting-notes"],
                    },
                ],
            },
        },
    }


@pytest.fixture
def taxonomy(scenario_schema):
    """TaxonomyDefinition over the scenario schema."""
    return TaxonomyDefinition(scenario_schema)


@pytest.fixture
def default_taxonomy():
    """TaxonomyDefinition using the built-in default schema."""
    return TaxonomyDefinition()


# ----- On-disk vault -----

def write_note(root: Path, relative: str, content: str) -> Path:
    """Write a dedented note, creating parent directories."""
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dedent(content), encoding="utf-8")
    return path


@pytest.fixture
def vault_dir(tmp_path):
    """A small vault with frontmatter and inline tags."""
    root = tmp_path / "vault"
    root.mkdir()

    write_note(root, "inbox/todo-list.md", """\
        ---
        title: Todo list
        tags: [todo, urgent]
        ---
        Things to do #todo and #project/alpha.
        Not a match: #todos, #todo/later.
        """)
    write_note(root, "projects/alpha.md", """\
        ---
        title: "Alpha"
        tags:
          - project/alpha
          - status/draft
        ---
        # Alpha

        Kickoff notes. See #project/alpha-old for history.
        """)
    write_note(root, "plain.md", "No frontmatter here, only #todo inline.\n")
    write_note(root, ".obsidian/workspace.md", "#todo in app config\n")
    return root


@pytest.fixture
def vault(vault_dir):
    """MarkdownVault over ``vault_dir``."""
    return MarkdownVault(vault_dir)
