# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Unit tests for the rule registry, base classes and text helpers."""

from __future__ import annotations

import re

import pytest

import skscan.scanner.pipeline  # noqa: F401
from skscan.core.config import Settings
from skscan.core.constants import Category, Severity
from skscan.detectors.rule_engine.base_rule import BaseRule, LinePatternRule, ProsePatternRule
from skscan.detectors.rule_engine.helpers import (
    fenced_lines,
    iter_lines,
    line_and_column,
    normalize_text,
    shannon_entropy,
    truncate,
)
from skscan.detectors.rule_engine.registry import RuleRegistry
from skscan.models.skill import SkillFile

ZWSP = chr(0x200B)


class TodoRule(LinePatternRule):
    rule_id = "test-todo"
    title = "TODO marker"
    severity = Severity.LOW
    category = Category.DANGEROUS_CODE
    description = "TODO marker found"
    PATTERNS = [re.compile(r"TODO"), re.compile(r"FIXME")]


class SecretWordRule(ProsePatternRule):
    rule_id = "test-secret-word"
    title = "Secret word"
    severity = Severity.HIGH
    category = Category.PROMPT_OVERRIDE
    description = "Secret word found"
    PATTERNS = [re.compile(r"open\s*sesame", re.IGNORECASE)]


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class TestRegistry:
    def test_rule_ids_are_unique_and_sorted(self):
        ids = RuleRegistry.rule_ids()
        assert ids == sorted(set(ids))

    def test_every_category_has_rules(self):
        for category in Category:
            assert RuleRegistry.get_by_category(category), category

    def test_rule_ids_are_prefixed_by_category(self):
        for rule_cls in RuleRegistry.get_all():
            assert rule_cls.rule_id.startswith(f"{rule_cls.category}-")

    def test_every_rule_has_metadata(self):
        for rule_cls in RuleRegistry.get_all():
            assert rule_cls.title and rule_cls.description
            assert isinstance(rule_cls.severity, Severity)

    def test_duplicate_id_is_rejected(self):
        existing = RuleRegistry.get_all()[0]

        class Impostor(TodoRule):
            rule_id = existing.rule_id

        with pytest.raises(ValueError, match="Duplicate rule id"):
            RuleRegistry.register(Impostor)
        assert RuleRegistry.get_by_id(existing.rule_id) is existing

    def test_get_enabled_filters_by_category(self):
        rules = RuleRegistry.get_enabled((Category.SECRETS,), Settings())
        assert rules
        assert {r.category for r in rules} == {Category.SECRETS}

    def test_unknown_id(self):
        assert RuleRegistry.get_by_id("no-such-rule") is None


# ---------------------------------------------------------------------------
# Base classes
# ---------------------------------------------------------------------------


class TestBaseRule:
    def test_base_rule_is_abstract(self):
        with pytest.raises(TypeError):
            BaseRule()  # type: ignore[abstract]

    def test_line_pattern_rule_reports_first_match_per_line(self):
        rule = TodoRule(Settings())
        file = SkillFile(path="a.py", content="ok\nTODO and FIXME\nFIXME\n")
        findings = rule.check(file)
        assert [(f.line, f.column) for f in findings] == [(2, 1), (3, 1)]
        assert findings[0].message == "TODO marker found"
        assert findings[0].blocking is False

    def test_snippet_is_truncated(self):
        rule = TodoRule(Settings(snippet_max_length=20))
        findings = rule.check(SkillFile(path="a.py", content="TODO " + "x" * 100))
        assert findings[0].snippet.endswith("...")
        assert len(findings[0].snippet) == 23

    def test_finding_severity_override(self):
        rule = TodoRule(Settings())
        finding = rule.finding(SkillFile(path="a.py", content=""), 1, "x", severity=Severity.CRITICAL)
        assert finding.severity == Severity.CRITICAL
        assert finding.rule_id == "test-todo"

    def test_evaluate_honours_extensions(self):
        class PyOnly(TodoRule):
            extensions = frozenset({".py"})

        files = [SkillFile(path="a.py", content="TODO"), SkillFile(path="b.md", content="TODO")]
        assert [f.file for f in PyOnly(Settings()).evaluate(files)] == ["a.py"]


class TestProsePatternRule:
    def test_matches_through_zero_width(self):
        rule = SecretWordRule(Settings())
        findings = rule.check(SkillFile(path="a.md", content=f"say op{ZWSP}en sesame"))
        assert len(findings) == 1
        assert findings[0].column == 5

    def test_cross_line_match_reported_once_at_first_line(self):
        rule = SecretWordRule(Settings())
        findings = rule.check(SkillFile(path="a.md", content="one\nsay open\nsesame please\n"))
        assert [(f.line, f.column) for f in findings] == [(2, 5)]
        assert findings[0].snippet == "say open"

    def test_same_line_match_not_duplicated_by_cross_line_pass(self):
        rule = SecretWordRule(Settings())
        findings = rule.check(SkillFile(path="a.md", content="open sesame\nopen sesame\n"))
        assert [f.line for f in findings] == [1, 2]

    def test_cross_line_disabled(self):
        class SameLineOnly(SecretWordRule):
            cross_line = False

        findings = SameLineOnly(Settings()).check(SkillFile(path="a.md", content="open\nsesame"))
        assert findings == []


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestHelpers:
    def test_iter_lines_is_one_based_and_strips_cr(self):
        assert list(iter_lines("a\r\nb\n")) == [(1, "a"), (2, "b"), (3, "")]

    def test_iter_lines_ignores_unicode_line_separators(self):
        assert len(list(iter_lines(f"a{chr(0x2028)}b"))) == 1

    def test_truncate(self):
        assert truncate("  short  ") == "short"
        assert truncate("abcdef", 3) == "abc..."

    def test_line_and_column(self):
        content = "ab\ncde\nf"
        assert line_and_column(content, 0) == (1, 1)
        assert line_and_column(content, 4) == (2, 2)
        assert line_and_column(content, 7) == (3, 1)

    def test_shannon_entropy(self):
        assert shannon_entropy("") == 0.0
        assert shannon_entropy("aaaa") == 0.0
        assert shannon_entropy("abcd") == pytest.approx(2.0)

    def test_normalize_text_maps_offsets(self):
        text, offsets = normalize_text(f"a{ZWSP}b   c")
        assert text == "ab c"
        assert offsets == [0, 2, 3, 6]

    def test_fenced_lines(self):
        content = "text\n```python\ncode\n```\nmore\n~~~\nx\n"
        assert fenced_lines(content) == {2, 3, 4, 6, 7, 8}
