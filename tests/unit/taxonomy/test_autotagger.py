#!/usr/bin/env python3
"""
test_autotagger.py
------------------
Tests for rule-based and hierarchy-fit tag suggestions.

Usage:
    python -m pytest tests/unit/taxonomy/test_autotagger.py -v
"""
# --- Annotations ---
from __future__ import annotations

# --- Third-party imports ---
import pytest

# --- Local imports ---
from curator.taxonomy.autotagger import AutoTagger
from curator.taxonomy.definition import TaxonomyDefinition
from curator.taxonomy.models import AutoTagRule, TriggerKind


class TestRules:
    """Keyword trigger rules."""

    def test_all_trigger_matches(self, taxonomy):
        tagger = AutoTagger(taxonomy)
        assert tagger.suggest("Meeting AGENDA for Monday") == {"type/meeting-notes"}

    def test_all_trigger_needs_every_keyword(self, taxonomy):
        tagger = AutoTagger(taxonomy, use_hierarchy=False)
        assert tagger.suggest("Meeting with Sam") == set()

    def test_contains_trigger(self, default_taxonomy):
        tagger = AutoTagger(default_taxonomy)
        assert "type/index" in tagger.suggest("This page is the index of my projects")

    def test_existing_tags_skipped(self, taxonomy):
        tagger = AutoTagger(taxonomy)
        assert tagger.suggest("meeting agenda", existing={"#type/meeting-notes"}) == set()

    def test_rules_disabled_by_flag(self, taxonomy):
        tagger = AutoTagger(taxonomy, use_rules=False, use_hierarchy=False)
        assert tagger.suggest("meeting agenda") == set()

    def test_rules_disabled_by_schema(self, scenario_schema):
        scenario_schema["settings"]["autoTagging"]["enabled"] = False
        tagger = AutoTagger(TaxonomyDefinition(scenario_schema), use_hierarchy=False)
        assert tagger.suggest("meeting agenda") == set()

    def test_rule_source_reported(self, taxonomy):
        suggestions = AutoTagger(taxonomy).suggest_detailed("meeting agenda")
        assert suggestions[0].source == "auto-tag-rule"
        assert suggestions[0].to_dict()["tag"] == "type/meeting-notes"

    @pytest.mark.parametrize("kind,content,expected", [
        (TriggerKind.CONTAINS, "only alpha", True),
        (TriggerKind.ANY, "only beta", True),
        (TriggerKind.ALL, "alpha and beta", True),
        (TriggerKind.ALL, "only alpha", False),
        (TriggerKind.CONTAINS, "gamma", False),
    ])
    def test_trigger_kinds(self, kind, content, expected):
        rule = AutoTagRule(kind, frozenset({"alpha", "beta"}), ("x",))
        assert rule.matches(content) is expected

    def test_rule_without_keywords_never_matches(self):
        assert not AutoTagRule(TriggerKind.ALL, frozenset(), ("x",)).matches("anything")


class TestHierarchyFit:
    """Suggestions from taxonomy descriptions."""

    def test_child_proposed_when_branch_fits(self, taxonomy):
        tagger = AutoTagger(taxonomy, use_rules=False)
        suggestions = tagger.suggest_detailed("A journal entry note about the day")
        assert [s.tag for s in suggestions] == ["type/journal"]
        assert suggestions[0].source == "hierarchy-fit"

    def test_at_most_three_children(self):
        tax = TaxonomyDefinition({"tags": {"topic": {
            "description": "Topics",
            "children": {
                f"lang{i}": {"description": "python code"} for i in range(5)
            },
        }}})
        tags = AutoTagger(tax, use_rules=False).suggest("topics about python")
        assert tags == {"topic/lang0", "topic/lang1", "topic/lang2"}

    def test_unrelated_content(self, taxonomy):
        assert AutoTagger(taxonomy, use_rules=False).suggest("groceries") == set()

    def test_empty_content(self, taxonomy):
        assert AutoTagger(taxonomy).suggest("") == set()

    def test_deterministic(self, default_taxonomy):
        tagger = AutoTagger(default_taxonomy)
        content = "Daily note: journal of the meeting notes and a map of content"
        assert tagger.suggest(content) == tagger.suggest(content)
