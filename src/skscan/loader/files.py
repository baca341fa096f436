# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Discover the scannable files of a skill package on disk."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from skscan.core.constants import (
    CONFIG_EXTENSIONS,
    MARKUP_EXTENSIONS,
    PROSE_EXTENSIONS,
    SCRIPT_EXTENSIONS,
)
from skscan.core.exceptions import LoadError
from skscan.models.skill import SkillFile
from skscan.scanner.corpus import is_ignored

logger = logging.getLogger("skscan.loader.files")

SCAN_EXTENSIONS: frozenset[str] = (
    PROSE_EXTENSIONS | SCRIPT_EXTENSIONS | MARKUP_EXTENSIONS | CONFIG_EXTENSIONS
)

SKIP_DIRS: frozenset[str] = frozenset({
    "node_modules", ".git", "dist", "__pycache__", ".venv", "venv",
})


def load_gitignore(root: Path) -> list[str]:
    """Return the non-comment, non-negated lines of ``root/.gitignore``."""
    path = root / ".gitignore"
    if not path.is_file():
        return []
    patterns = []
    for raw in path.read_text(encoding="utf-8", errors="replace").splitlines():
        line = raw.strip()
        # Negations are not supported; a re-included file stays excluded
        if line and not line.startswith(("#", "!")):
            patterns.append(line)
    return patterns


def read_skill_file(path: Path, display_path: str) -> SkillFile:
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise LoadError(f"Cannot read {path}: {exc}") from exc
    return SkillFile(path=display_path, content=data.decode("utf-8", errors="replace"))


def discover_files(target: str | Path, ignore: Iterable[str] = ()) -> list[SkillFile]:
    """Load every scannable file under ``target``.

    A single file is returned as-is under its base name. For a directory,
    dot-entries and well-known build directories are skipped, only scannable
    extensions are kept, and both ``.gitignore`` lines and ``ignore`` globs
    are honoured. Paths are root-relative with ``/`` separators and the
    result is sorted by path.

    Raises:
        LoadError: ``target`` does not exist or a file cannot be read.
    """
    root = Path(target)
    if root.is_file():
        return [read_skill_file(root, root.name)]
    if not root.is_dir():
        raise LoadError(f"Target not found: {target}")

    patterns = [*load_gitignore(root), *ignore]
    files: list[SkillFile] = []
    for dirpath, dirnames, filenames in os.walk(root):
        current = Path(dirpath)
        rel_dir = current.relative_to(root).as_posix()
        prefix = "" if rel_dir == "." else rel_dir + "/"

        dirnames[:] = sorted(
            d for d in dirnames
            if not d.startswith(".")
            and d not in SKIP_DIRS
            and not is_ignored(prefix + d + "/", patterns)
        )
        for name in sorted(filenames):
            if name.startswith("."):
                continue
            if Path(name).suffix.lower() not in SCAN_EXTENSIONS:
                continue
            rel_path = prefix + name
            if is_ignored(rel_path, patterns):
                continue
            files.append(read_skill_file(current / name, rel_path))

    files.sort(key=lambda f: f.path)
    logger.debug("Discovered %d files under %s", len(files), root)
    return files
