# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Finding model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from skscan.core.constants import Category, Severity


class Finding(BaseModel):
    """A single detection instance produced by one rule on one file."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    rule_id: str = Field(description="Stable rule identifier, e.g. secrets-aws-key")
    severity: Severity
    category: Category
    file: str
    line: int = Field(ge=1)
    column: int | None = Field(default=None, ge=1)
    message: str
    snippet: str = ""
    blocking: bool = Field(
        default=False,
        description="Effective bucket after configuration overrides",
    )

    def sort_key(self) -> tuple[str, int, str, int, str]:
        return (self.file, self.line, self.rule_id, self.column or 0, self.message)
