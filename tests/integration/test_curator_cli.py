#!/usr/bin/env python3
"""
test_curator_cli.py
-------------------
Integration tests for the ``curator`` CLI commands.

Tests CLI invocation via Click's CliRunner for the taxonomy and tags
subcommands against a temporary vault and schema file.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import json

# --- Third-party imports ---
import pytest
from click.testing import CliRunner

# --- Local imports ---
from curator.cli import cli


@pytest.fixture
def runner():
    """Create Click test runner."""
    return CliRunner()


@pytest.fixture
def taxonomy_file(tmp_path, scenario_schema):
    """Scenario schema written to a JSON file."""
    path = tmp_path / "tag-taxonomy.json"
    path.write_text(json.dumps(scenario_schema), encoding="utf-8")
    return path


@pytest.fixture
def base_args(tmp_path, vault_dir, taxonomy_file):
    """Group options isolating the CLI from the project config and logs."""
    return [
        "--config", str(tmp_path / "no-config.yaml"),
        "--vault", str(vault_dir),
        "--taxonomy", str(taxonomy_file),
        "--log-dir", str(tmp_path / "logs"),
    ]


class TestTaxonomyCLI:
    """Tests for ``curator taxonomy``."""

    def test_list_json(self, runner, base_args):
        """Listing reports only tags that validate."""
        result = runner.invoke(cli, base_args + ["taxonomy", "list", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        tags = [t["tag"] for t in data["tags"]]
        assert "status/draft" in tags
        assert "area" not in tags
        assert data["warnings"] == []

    def test_list_text(self, runner, base_args):
        result = runner.invoke(cli, base_args + ["taxonomy", "list"])
        assert result.exit_code == 0
        assert "status — Status or state  [closed]" in result.output

    def test_missing_schema_falls_back(self, runner, tmp_path, vault_dir):
        """A missing schema file warns and uses the default taxonomy."""
        result = runner.invoke(cli, [
            "--config", str(tmp_path / "no-config.yaml"),
            "--vault", str(vault_dir),
            "--taxonomy", str(tmp_path / "missing.json"),
            "--log-dir", str(tmp_path / "logs"),
            "taxonomy", "list",
        ])
        assert result.exit_code == 0
        assert "using built-in default taxonomy" in result.output
        assert "built-in default" in result.output

    def test_info(self, runner, base_args):
        result = runner.invoke(cli, base_args + ["taxonomy", "info", "#status"])
        assert result.exit_code == 0
        assert json.loads(result.output)["allowCustomChildren"] is False

    def test_info_unknown_suggests(self, runner, base_args):
        result = runner.invoke(cli, base_args + ["taxonomy", "info", "status/drafts"])
        assert result.exit_code == 1
        assert "did you mean 'status/draft'" in result.output


class TestTagsValidateCLI:
    """Tests for ``curator tags validate``."""

    def test_all_valid(self, runner, base_args):
        result = runner.invoke(cli, base_args + ["tags", "validate", "status/draft", "area/home"])
        assert result.exit_code == 0
        assert "✓ status/draft" in result.output

    def test_invalid_tag(self, runner, base_args):
        result = runner.invoke(cli, base_args + ["tags", "validate", "status/custom", "area"])
        assert result.exit_code == 1
        assert "custom children not allowed under 'status'" in result.output
        assert "requires at least 1 level(s) of children" in result.output
        assert "2 invalid tag(s)" in result.output


class TestTagsRenameCLI:
    """Tests for ``curator tags rename``."""

    def test_preview_writes_nothing(self, runner, base_args, vault_dir):
        """Without --apply the vault is untouched."""
        before = {p: p.read_text(encoding="utf-8") for p in vault_dir.rglob("*.md")}

        result = runner.invoke(cli, base_args + ["tags", "rename", "todo", "task"])

        assert result.exit_code == 0
        assert 'Preview: "#todo" → "#task"' in result.output
        assert "Run again with --apply" in result.output
        assert {p: p.read_text(encoding="utf-8") for p in vault_dir.rglob("*.md")} == before

    def test_apply(self, runner, base_args, vault_dir):
        result = runner.invoke(cli, base_args + ["tags", "rename", "#todo", "task", "--apply"])
        assert result.exit_code == 0, result.output

        todo_list = (vault_dir / "inbox/todo-list.md").read_text(encoding="utf-8")
        assert "tags: [task, urgent]" in todo_list
        assert "Things to do #task and #project/alpha." in todo_list
        assert "Not a match: #todos, #todo/later." in todo_list

        plain = (vault_dir / "plain.md").read_text(encoding="utf-8")
        assert plain == "No frontmatter here, only #task inline.\n"

        ignored = (vault_dir / ".obsidian/workspace.md").read_text(encoding="utf-8")
        assert ignored == "#todo in app config\n"

    def test_json_report(self, runner, base_args):
        result = runner.invoke(cli, base_args + ["tags", "rename", "todo", "task", "--json"])
        assert result.exit_code == 0
        report = json.loads(result.output)
        assert report["filesChanged"] == 2
        assert report["filesScanned"] == 3
        assert report["preview"] is True
        assert report["success"] is True

    def test_inline_only(self, runner, base_args):
        result = runner.invoke(
            cli, base_args + ["tags", "rename", "todo", "task", "--no-frontmatter", "--json"]
        )
        changes = json.loads(result.output)["changes"]
        assert all(c["frontmatterChanges"] == 0 for c in changes)

    def test_same_tags_rejected(self, runner, base_args):
        result = runner.invoke(cli, base_args + ["tags", "rename", "todo", "#todo"])
        assert result.exit_code == 1
        assert "InvalidRenameError" in result.output

    def test_missing_vault(self, runner, tmp_path, taxonomy_file):
        result = runner.invoke(cli, [
            "--config", str(tmp_path / "no-config.yaml"),
            "--vault", str(tmp_path / "absent"),
            "--taxonomy", str(taxonomy_file),
            "--log-dir", str(tmp_path / "logs"),
            "tags", "rename", "todo", "task",
        ])
        assert result.exit_code == 1
        assert "Vault not found" in result.output


class TestTagsQueryCLI:
    """Tests for ``curator tags`` find, similar, analyze and suggest."""

    def test_find(self, runner, base_args):
        result = runner.invoke(cli, base_args + ["tags", "find", "todo"])
        assert result.exit_code == 0
        assert "inbox/todo-list.md  (frontmatter, 1 inline)" in result.output
        assert "plain.md  (1 inline)" in result.output
        assert "projects/alpha.md" not in result.output

    def test_find_none(self, runner, base_args):
        result = runner.invoke(cli, base_args + ["tags", "find", "nothing"])
        assert "No notes use 'nothing'" in result.output

    def test_similar(self, runner, base_args):
        result = runner.invoke(cli, base_args + ["tags", "similar", "todo", "--json"])
        assert result.exit_code == 0
        candidates = [m["candidate"] for m in json.loads(result.output)]
        assert candidates[0] == "todos"
        assert "todo" not in candidates

    def test_analyze_json(self, runner, base_args):
        result = runner.invoke(cli, base_args + ["tags", "analyze", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["totalFiles"] == 3
        assert data["errors"] == []

    def test_analyze_text(self, runner, base_args):
        result = runner.invoke(cli, base_args + ["tags", "analyze", "--top", "2"])
        assert result.exit_code == 0
        assert "2  project/alpha" in result.output
        assert "Recommendations:" in result.output

    def test_suggest(self, runner, base_args):
        """A near-duplicate of a vault tag is flagged."""
        result = runner.invoke(
            cli, base_args + ["tags", "suggest", "inbox/todo-list.md", "-t", "Project_Alpha"]
        )
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["valid"] is False
        assert "project/alpha" in data["tags"]
        assert "similar-exists" in [w["type"] for w in data["warnings"]]

    def test_suggest_missing_note(self, runner, base_args):
        result = runner.invoke(cli, base_args + ["tags", "suggest", "nope.md"])
        assert result.exit_code == 1
        assert "DocumentError" in result.output


class TestConfigCLI:
    """Configuration errors stop the CLI before any command runs."""

    def test_bad_config(self, runner, tmp_path, vault_dir):
        config = tmp_path / "bad.yaml"
        config.write_text("similarity_threshold: high\n", encoding="utf-8")
        result = runner.invoke(cli, [
            "--config", str(config),
            "--log-dir", str(tmp_path / "logs"),
            "tags", "find", "todo",
        ])
        assert result.exit_code == 1
        assert "ConfigError" in result.output
