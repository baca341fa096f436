# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Abstract base classes for detection rules."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator

from skscan.core.config import Settings, get_settings
from skscan.core.constants import Category, Severity
from skscan.detectors.rule_engine.helpers import (
    iter_lines,
    line_and_column,
    line_text,
    normalize_text,
    truncate,
)
from skscan.models.finding import Finding
from skscan.models.skill import SkillFile


class BaseRule(ABC):
    """All detection rules must inherit from this class.

    A rule is a pure function of one file: it must not keep state between
    calls and must return findings in ascending line order.
    """

    rule_id: str
    title: str
    severity: Severity
    category: Category
    description: str
    enabled: bool = True
    # File extensions this rule inspects; None means every file
    extensions: frozenset[str] | None = None

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()

    def applies_to(self, file: SkillFile) -> bool:
        return self.extensions is None or file.extension in self.extensions

    @abstractmethod
    def check(self, file: SkillFile) -> list[Finding]:
        """Run the rule against a single file. Return findings."""
        ...

    def evaluate(self, files: Iterable[SkillFile]) -> list[Finding]:
        findings: list[Finding] = []
        for file in files:
            if self.applies_to(file):
                findings.extend(self.check(file))
        return findings

    def finding(
        self,
        file: SkillFile,
        line: int,
        message: str | None = None,
        *,
        snippet: str = "",
        column: int | None = None,
        severity: Severity | None = None,
    ) -> Finding:
        return Finding(
            rule_id=self.rule_id,
            severity=severity or self.severity,
            category=self.category,
            file=file.path,
            line=line,
            column=column,
            message=message or self.title,
            snippet=truncate(snippet, self.settings.snippet_max_length),
        )


class LinePatternRule(BaseRule):
    """Rule that reports the first matching pattern on each line."""

    PATTERNS: list[re.Pattern[str]] = []

    def match_line(self, line: str) -> re.Match[str] | None:
        for pattern in self.PATTERNS:
            match = pattern.search(line)
            if match:
                return match
        return None

    def check(self, file: SkillFile) -> list[Finding]:
        findings = []
        for line_num, line in iter_lines(file.content):
            match = self.match_line(line)
            if match:
                findings.append(self.finding(
                    file,
                    line_num,
                    self.description,
                    snippet=line,
                    column=match.start() + 1,
                ))
        return findings


class ProsePatternRule(BaseRule):
    """Rule over normalized prose.

    Each line is matched after format characters are dropped and whitespace
    is collapsed, so ``ig\\u200bnore`` reads as ``ignore``. When ``cross_line``
    is set, a second pass over the whole normalized document catches phrases
    broken across line breaks and reports them at their first line.
    """

    PATTERNS: list[re.Pattern[str]] = []
    cross_line = True

    def search(self, text: str) -> re.Match[str] | None:
        for pattern in self.PATTERNS:
            match = pattern.search(text)
            if match:
                return match
        return None

    def check(self, file: SkillFile) -> list[Finding]:
        by_line: dict[int, Finding] = {}
        for line_num, line in iter_lines(file.content):
            text, offsets = normalize_text(line)
            match = self.search(text)
            if match:
                by_line[line_num] = self.finding(
                    file,
                    line_num,
                    self.description,
                    snippet=line,
                    column=offsets[match.start()] + 1,
                )

        if self.cross_line:
            for line_num, column in self._spanning_matches(file.content):
                if line_num not in by_line:
                    by_line[line_num] = self.finding(
                        file,
                        line_num,
                        self.description,
                        snippet=line_text(file.content, line_num),
                        column=column,
                    )
        return [by_line[n] for n in sorted(by_line)]

    def _spanning_matches(self, content: str) -> Iterator[tuple[int, int]]:
        if "\n" not in content:
            return
        text, offsets = normalize_text(content)
        for pattern in self.PATTERNS:
            for match in pattern.finditer(text):
                start = offsets[match.start()]
                end = offsets[match.end() - 1]
                if "\n" in content[start:end]:
                    yield line_and_column(content, start)
