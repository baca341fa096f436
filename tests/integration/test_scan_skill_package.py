# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""End-to-end scans of on-disk skill packages with the threaded dispatcher."""

from __future__ import annotations

import pytest

from skscan import scan_path
from skscan.core.config import Settings
from skscan.core.constants import Category, ScanStatus, Severity

pytestmark = pytest.mark.integration


@pytest.fixture
def threaded() -> Settings:
    return Settings(parallel=True, max_workers=2, rule_timeout=5.0)


def test_full_package(skill_dir, threaded):
    result = scan_path(skill_dir, settings=threaded)

    assert result.status == ScanStatus.FAIL
    assert result.categories.get(Category.SECRETS) == ScanStatus.FAIL
    assert result.categories.get(Category.DANGEROUS_CODE) == ScanStatus.FAIL
    assert result.categories.get(Category.PROMPT_OVERRIDE) == ScanStatus.FAIL

    by_rule = {f.rule_id: f for f in result.findings}
    assert by_rule["secrets-aws-key"].file == "config.env"
    assert by_rule["dangerous-code-curl-pipe"].file == "scripts/install.sh"
    assert by_rule["dangerous-code-curl-pipe"].line == 2
    assert by_rule["prompt-override-ignore-instructions"].line == 4
    assert by_rule["secrets-aws-key"].severity == Severity.CRITICAL

    assert list(result.findings) == sorted(result.findings, key=lambda f: f.sort_key())
    assert result.summary.total == len(result.findings)


def test_threaded_matches_inline(skill_dir, threaded, settings):
    assert scan_path(skill_dir, settings=threaded).findings == scan_path(skill_dir, settings=settings).findings


def test_gitignore_and_skip_dirs(skill_dir, threaded):
    (skill_dir / ".gitignore").write_text("config.env\n", encoding="utf-8")
    (skill_dir / "node_modules").mkdir()
    (skill_dir / "node_modules" / "evil.js").write_text("eval(payload)\n", encoding="utf-8")

    result = scan_path(skill_dir, settings=threaded)

    files = {f.file for f in result.findings}
    assert "config.env" not in files
    assert not any(path.startswith("node_modules") for path in files)
    assert result.scanned_files == 2


def test_config_file_turns_category_off(skill_dir, threaded):
    (skill_dir / "skscan.yaml").write_text(
        "rules:\n"
        "  secrets-aws-key: 'off'\n"
        "  dangerous-code-curl-pipe: warn\n"
        "  dangerous-code-network-call: 'off'\n"
        "ignore:\n"
        "  - SKILL.md\n",
        encoding="utf-8",
    )
    result = scan_path(skill_dir, settings=threaded)

    assert result.categories.get(Category.SECRETS) == ScanStatus.PASS
    assert result.categories.get(Category.PROMPT_OVERRIDE) == ScanStatus.PASS
    curl = [f for f in result.findings if f.rule_id == "dangerous-code-curl-pipe"]
    assert curl and not curl[0].blocking
    assert curl[0].severity == Severity.CRITICAL
