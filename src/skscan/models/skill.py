# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Skill package file model."""

from __future__ import annotations

from pathlib import PurePosixPath

from pydantic import BaseModel, ConfigDict


class SkillFile(BaseModel):
    """One file of a skill package, as presented to the rules."""

    model_config = ConfigDict(frozen=True)

    path: str
    content: str

    @property
    def extension(self) -> str:
        return PurePosixPath(self.path.replace("\\", "/")).suffix.lower()

    @property
    def size(self) -> int:
        return len(self.content)
