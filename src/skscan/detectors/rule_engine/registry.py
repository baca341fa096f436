# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Rule registration and discovery."""

from __future__ import annotations

from typing import TypeVar

from skscan.core.config import Settings
from skscan.core.constants import Category
from skscan.detectors.rule_engine.base_rule import BaseRule

T = TypeVar("T", bound=BaseRule)


class RuleRegistry:
    """Central registry for all detection rules.

    Populated once at import time by the ``@rule`` decorator and only read
    afterwards, so concurrent scans share it safely.
    """

    _rules: dict[str, type[BaseRule]] = {}

    @classmethod
    def register(cls, rule_class: type[T]) -> type[T]:
        existing = cls._rules.get(rule_class.rule_id)
        if existing is not None and existing is not rule_class:
            msg = f"Duplicate rule id {rule_class.rule_id!r}"
            raise ValueError(msg)
        cls._rules[rule_class.rule_id] = rule_class
        return rule_class

    @classmethod
    def get_all(cls) -> list[type[BaseRule]]:
        return sorted(cls._rules.values(), key=lambda r: r.rule_id)

    @classmethod
    def get_by_id(cls, rule_id: str) -> type[BaseRule] | None:
        return cls._rules.get(rule_id)

    @classmethod
    def get_by_category(cls, category: Category) -> list[type[BaseRule]]:
        return [r for r in cls.get_all() if r.category == category]

    @classmethod
    def get_enabled(
        cls,
        categories: tuple[Category, ...] | None = None,
        settings: Settings | None = None,
    ) -> list[BaseRule]:
        return [
            r(settings)
            for r in cls.get_all()
            if r.enabled and (categories is None or r.category in categories)
        ]

    @classmethod
    def rule_ids(cls) -> list[str]:
        return sorted(cls._rules)


def rule(cls: type[T]) -> type[T]:
    """Decorator to register a rule class."""
    return RuleRegistry.register(cls)
