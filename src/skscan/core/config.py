# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Engine configuration via environment variables and .env files."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SKSCAN_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
    )

    # Rule dispatch
    parallel: bool = True
    max_workers: int = Field(default=4, ge=1)
    rule_timeout: float = Field(default=5.0, gt=0)  # seconds per (rule, file)
    max_file_size: int = Field(default=524_288, ge=1)  # characters

    # Detectors
    hidden_decode_depth: int = Field(default=2, ge=0, le=8)
    snippet_max_length: int = Field(default=200, ge=16)

    # CI integration
    warn_exit_code: int = 0

    # Logging
    log_level: str = "WARNING"
    log_format: str = "text"

    @field_validator("log_format", mode="before")
    @classmethod
    def _parse_log_format(cls, v: object) -> str:
        if isinstance(v, str) and v.strip().lower() in {"json", "text"}:
            return v.strip().lower()
        return "text"


def get_settings() -> Settings:
    return Settings()
