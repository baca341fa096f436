# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Text utilities shared by the detection rules."""

from __future__ import annotations

import math
import re
import unicodedata
from collections import Counter
from collections.abc import Iterator

_WHITESPACE = re.compile(r"\s+")
_FENCE = re.compile(r"^\s*(```|~~~)")


def iter_lines(content: str) -> Iterator[tuple[int, str]]:
    """Yield ``(line_number, line)`` pairs, 1-based.

    Splits on ``\\n`` only: ``str.splitlines`` also breaks on U+2028 and
    friends, which would shift line numbers for exactly the characters the
    hidden-instruction rules look for.
    """
    for index, line in enumerate(content.split("\n"), 1):
        yield index, line.removesuffix("\r")


def truncate(text: str, max_len: int = 200) -> str:
    stripped = text.strip()
    return stripped[:max_len] + "..." if len(stripped) > max_len else stripped


def line_and_column(content: str, offset: int) -> tuple[int, int]:
    """Convert a character offset into a 1-based ``(line, column)``."""
    line = content.count("\n", 0, offset) + 1
    line_start = content.rfind("\n", 0, offset) + 1
    return line, offset - line_start + 1


def line_text(content: str, line: int) -> str:
    lines = content.split("\n")
    return lines[line - 1].removesuffix("\r") if 0 < line <= len(lines) else ""


def shannon_entropy(value: str) -> float:
    if not value:
        return 0.0
    length = len(value)
    return -sum(
        (count / length) * math.log2(count / length)
        for count in Counter(value).values()
    )


def mask_secret(value: str) -> str:
    """Keep the first four characters of a secret for triage, hide the rest."""
    return value[:4] + "****"


def fenced_lines(content: str) -> set[int]:
    """Line numbers inside fenced code blocks, fence lines included."""
    inside: set[int] = set()
    fence: str | None = None
    for line_num, line in iter_lines(content):
        match = _FENCE.match(line)
        if fence is None:
            if match:
                fence = match.group(1)
                inside.add(line_num)
        else:
            inside.add(line_num)
            if match and match.group(1) == fence:
                fence = None
    return inside


def is_format_char(ch: str) -> bool:
    """Unicode category Cf: zero-width, bidi and tag characters."""
    return unicodedata.category(ch) == "Cf"


def normalize_text(text: str) -> tuple[str, list[int]]:
    """Drop format characters and collapse whitespace runs to one space.

    Returns the normalized text plus, for every normalized character, its
    offset in the original text so matches can be mapped back.
    """
    chars: list[str] = []
    offsets: list[int] = []
    in_space = False
    for index, ch in enumerate(text):
        if is_format_char(ch):
            continue
        if ch.isspace():
            if in_space:
                continue
            in_space = True
            chars.append(" ")
        else:
            in_space = False
            chars.append(ch)
        offsets.append(index)
    return "".join(chars), offsets


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text)
