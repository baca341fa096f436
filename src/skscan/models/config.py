# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Per-scan configuration model."""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field, field_validator

from skscan.core.constants import RuleAction
from skscan.core.exceptions import ConfigurationError


class ScanConfig(BaseModel):
    """Rule overrides and ignore globs supplied once per scan."""

    model_config = ConfigDict(frozen=True)

    rules: dict[str, RuleAction] = Field(default_factory=dict)
    ignore: tuple[str, ...] = ()

    @field_validator("ignore", mode="before")
    @classmethod
    def _parse_ignore(cls, v: object) -> object:
        if v is None:
            return ()
        if isinstance(v, str):
            return tuple(p.strip() for p in v.split(",") if p.strip())
        return v

    @field_validator("rules", mode="before")
    @classmethod
    def _parse_rules(cls, v: object) -> object:
        if v is None:
            return {}
        if isinstance(v, dict):
            return {str(k): _normalize_action(a) for k, a in v.items()}
        return v

    def action_for(self, rule_id: str) -> RuleAction | None:
        return self.rules.get(rule_id)

    def validate_rule_ids(self, known: Iterable[str]) -> None:
        """Raise ConfigurationError if an override names an unregistered rule."""
        known_ids = set(known)
        unknown = sorted(rid for rid in self.rules if rid not in known_ids)
        if unknown:
            raise ConfigurationError(
                f"Unknown rule id(s) in configuration: {', '.join(unknown)}"
            )


def _normalize_action(value: object) -> object:
    # YAML 1.1 reads bare off/on as booleans
    if value is False:
        return RuleAction.OFF
    if value is True:
        return RuleAction.ERROR
    if isinstance(value, str):
        return value.strip().lower()
    return value
