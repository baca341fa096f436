# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Ignore-glob filtering of the file corpus."""

from __future__ import annotations

import re
from collections.abc import Iterable
from functools import lru_cache

from skscan.models.skill import SkillFile


def normalize_path(path: str) -> str:
    """Root-relative, forward-slash form used for every glob comparison."""
    normalized = path.replace("\\", "/")
    while normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized.lstrip("/")


@lru_cache(maxsize=256)
def _compile(pattern: str) -> re.Pattern[str]:
    glob = normalize_path(pattern.strip())
    if glob.endswith("/"):
        glob += "**"

    out: list[str] = []
    i = 0
    while i < len(glob):
        ch = glob[i]
        if glob.startswith("**/", i):
            out.append("(?:.*/)?")
            i += 3
        elif glob.startswith("**", i):
            out.append(".*")
            i += 2
        elif ch == "*":
            out.append("[^/]*")
            i += 1
        elif ch == "?":
            out.append("[^/]")
            i += 1
        elif ch == "[":
            end = glob.find("]", i + 1)
            if end == -1:
                out.append(re.escape(ch))
                i += 1
            else:
                body = glob[i + 1 : end].replace("\\", "\\\\")
                if body.startswith("!"):
                    body = "^" + body[1:]
                out.append(f"[{body}]")
                i = end + 1
        else:
            out.append(re.escape(ch))
            i += 1
    return re.compile("".join(out))


def matches_glob(path: str, pattern: str) -> bool:
    """Return True if ``path`` is matched by the ignore glob ``pattern``.

    ``**`` spans directories, ``*`` and ``?`` stay within one segment, a
    trailing ``/`` selects everything beneath a directory, and a pattern with
    no ``/`` is also tried against the base name and each directory name.
    """
    if not pattern.strip():
        return False
    normalized = normalize_path(path)
    regex = _compile(pattern)
    if regex.fullmatch(normalized):
        return True
    if "/" in pattern.strip().rstrip("/").replace("\\", "/"):
        return False
    segments = normalized.split("/")
    if regex.fullmatch(segments[-1]):
        return True
    # Bare directory names exclude the whole subtree
    return any(regex.fullmatch(segment) for segment in segments[:-1])


def is_ignored(path: str, ignore: Iterable[str]) -> bool:
    return any(matches_glob(path, pattern) for pattern in ignore)


def filter_corpus(files: Iterable[SkillFile], ignore: Iterable[str]) -> list[SkillFile]:
    """Drop files matched by any ignore glob, preserving input order."""
    patterns = [p for p in ignore if p.strip()]
    if not patterns:
        return list(files)
    return [f for f in files if not is_ignored(f.path, patterns)]
