# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Hidden instruction detection rules.

Covers text an agent will read but a human reviewer will not see: invisible
code points, HTML comments, look-alike letters, encoded payloads and
agent-directed code comments.
"""

from __future__ import annotations

import base64
import binascii
import re

from skscan.core.constants import (
    MARKUP_EXTENSIONS,
    PROSE_EXTENSIONS,
    SCRIPT_EXTENSIONS,
    Category,
    Severity,
)
from skscan.detectors.rule_engine.base_rule import BaseRule
from skscan.detectors.rule_engine.helpers import (
    collapse_whitespace,
    fenced_lines,
    is_format_char,
    iter_lines,
    line_and_column,
)
from skscan.detectors.rule_engine.registry import rule
from skscan.models.finding import Finding
from skscan.models.skill import SkillFile

ZERO_WIDTH = frozenset({"\u200b", "\u200c", "\u200d", "\u2060", "\ufeff", "\u00ad"})
BOM = "\ufeff"

_INVISIBLE_RANGES = [
    (0x034F, 0x034F),  # combining grapheme joiner
    (0x115F, 0x1160),  # hangul fillers
    (0x17B4, 0x17B5),  # khmer inherent vowels
    (0x180E, 0x180E),  # mongolian vowel separator
    (0x200E, 0x200F),  # LRM / RLM
    (0x202A, 0x202E),  # bidi embedding and override
    (0x2061, 0x2064),  # invisible math operators
    (0x2066, 0x2069),  # bidi isolates
    (0x206A, 0x206F),  # deprecated format characters
    (0x3164, 0x3164),  # hangul filler
    (0xFFA0, 0xFFA0),  # halfwidth hangul filler
    (0xE0000, 0xE007F),  # tag characters
]
TAG_START = 0xE0000
# Format characters that render as visible signs (Arabic number signs and the like)
VISIBLE_FORMAT = frozenset(
    "\u0600\u0601\u0602\u0603\u0604\u0605\u06dd\u070f\u0890\u0891\u08e2"
    "\U000110bd\U000110cd"
)

# Look-alikes for a c e o p x y s i j d, then A B E K M H O P C T X
CYRILLIC_LOOKALIKES = frozenset(
    "\u0430\u0441\u0435\u043e\u0440\u0445\u0443\u0455\u0456\u0458\u0501"
    "\u0410\u0412\u0415\u041a\u041c\u041d\u041e\u0420\u0421\u0422\u0425"
)
# o a v p i k, then A B E Z H I K M N O P T Y X
GREEK_LOOKALIKES = frozenset(
    "\u03bf\u03b1\u03bd\u03c1\u03b9\u03ba"
    "\u0391\u0392\u0395\u0396\u0397\u0399\u039a\u039c\u039d\u039f\u03a1\u03a4\u03a5\u03a7"
)
LATIN_LETTER = re.compile(r"[a-zA-Z]")
WORD = re.compile(r"[^\W\d_]{2,}")
URL = re.compile(r"https?://[^\s<>\"')\]]+")


def is_invisible(ch: str) -> bool:
    """Invisible code points other than the zero-width set.

    Every format (Cf) character counts, so a code point outside the listed
    ranges cannot slip a payload past both invisible-character rules.
    """
    if ch in ZERO_WIDTH or ch in VISIBLE_FORMAT:
        return False
    cp = ord(ch)
    return is_format_char(ch) or any(lo <= cp <= hi for lo, hi in _INVISIBLE_RANGES)


def reveal(text: str) -> str:
    """Render invisible characters as ``<U+XXXX>`` so reviewers can see them."""
    return "".join(
        f"<U+{ord(ch):04X}>" if ch in ZERO_WIDTH or is_invisible(ch) else ch
        for ch in text
    )


def decode_tags(text: str) -> str:
    return "".join(
        chr(ord(ch) - TAG_START)
        for ch in text
        if TAG_START + 0x20 <= ord(ch) <= TAG_START + 0x7E
    )


class HiddenRule(BaseRule):
    severity = Severity.HIGH
    category = Category.HIDDEN_INSTRUCTIONS


@rule
class ZeroWidthCharacters(HiddenRule):
    rule_id = "hidden-instructions-zero-width"
    title = "Zero-width characters"
    description = "Zero-width characters detected (possible hidden content)"

    def check(self, file: SkillFile) -> list[Finding]:
        findings = []
        for line_num, line in iter_lines(file.content):
            start = 1 if line_num == 1 and line.startswith(BOM) else 0
            for index in range(start, len(line)):
                if line[index] in ZERO_WIDTH:
                    findings.append(self.finding(
                        file,
                        line_num,
                        f"Zero-width character U+{ord(line[index]):04X} detected (possible hidden content)",
                        snippet=reveal(line),
                        column=index + 1,
                    ))
                    break
        return findings


@rule
class InvisibleUnicode(HiddenRule):
    rule_id = "hidden-instructions-invisible-unicode"
    title = "Invisible Unicode"
    description = "Invisible or bidirectional control characters detected"

    def check(self, file: SkillFile) -> list[Finding]:
        findings = []
        for line_num, line in iter_lines(file.content):
            for index, ch in enumerate(line):
                if not is_invisible(ch):
                    continue
                hidden = decode_tags(line)
                if hidden:
                    message = f"Unicode tag characters encode hidden text: {hidden[:80]!r}"
                else:
                    message = f"Invisible character U+{ord(ch):04X} detected"
                findings.append(self.finding(
                    file, line_num, message,
                    snippet=reveal(line), column=index + 1,
                ))
                break
        return findings


@rule
class HtmlCommentDirective(HiddenRule):
    rule_id = "hidden-instructions-html-comment"
    title = "Directive in HTML comment"
    description = "HTML comment contains instruction-like content hidden from rendered view"
    extensions = PROSE_EXTENSIONS | MARKUP_EXTENSIONS

    COMMENT = re.compile(r"<!--(.*?)(?:-->|\Z)", re.DOTALL)
    DIRECTIVE = re.compile(
        r"\b(?:ignore|disregard|override|forget|inject|bypass|exfiltrate|secretly|silently|"
        r"system\s*(?:prompt|message|instructions?)|instructions?|prompt|"
        r"(?:the\s*)?(?:assistant|agent|AI|LLM|model)\s*(?:must|should|will)|"
        r"you\s*(?:must|should|are|will)|do\s*not\s*(?:tell|mention|reveal|inform|show)|"
        r"without\s*(?:telling|informing|asking|mentioning))\b",
        re.IGNORECASE,
    )

    def check(self, file: SkillFile) -> list[Finding]:
        findings = []
        reported: set[int] = set()
        for match in self.COMMENT.finditer(file.content):
            body = match.group(1)
            # Left to the zero-width and invisible rules, which report these
            if any(ch in ZERO_WIDTH or is_invisible(ch) for ch in body):
                continue
            if not self.DIRECTIVE.search(collapse_whitespace(body)):
                continue
            line_num, column = line_and_column(file.content, match.start())
            if line_num in reported:
                continue
            reported.add(line_num)
            findings.append(self.finding(
                file, line_num, self.description,
                snippet=collapse_whitespace(match.group(0)), column=column,
            ))
        return findings


def _lookalike_script(ch: str) -> str | None:
    if ch in CYRILLIC_LOOKALIKES:
        return "Cyrillic"
    if ch in GREEK_LOOKALIKES:
        return "Greek"
    return None


@rule
class Homoglyphs(HiddenRule):
    rule_id = "hidden-instructions-homoglyph"
    title = "Homoglyph characters"
    description = "Word mixes Latin letters with look-alike characters (homoglyph attack)"

    def check(self, file: SkillFile) -> list[Finding]:
        findings = []
        for line_num, line in iter_lines(file.content):
            if line.isascii():
                continue
            hit = self._scan_urls(line) or self._scan_words(line)
            if hit:
                column, message = hit
                findings.append(self.finding(file, line_num, message, snippet=line, column=column))
        return findings

    def _scan_urls(self, line: str) -> tuple[int, str] | None:
        for match in URL.finditer(line):
            if any(_lookalike_script(ch) for ch in match.group(0)):
                return match.start() + 1, "URL contains homoglyph characters (IDN homograph attack)"
        return None

    def _scan_words(self, line: str) -> tuple[int, str] | None:
        for match in WORD.finditer(line):
            word = match.group(0)
            if not LATIN_LETTER.search(word):
                continue
            for ch in word:
                script = _lookalike_script(ch)
                if script:
                    return (
                        match.start() + 1,
                        f"Mixed Latin and {script} letters in {word!r} (homoglyph attack)",
                    )
        return None


@rule
class EncodedPayload(HiddenRule):
    rule_id = "hidden-instructions-encoded-payload"
    title = "Encoded payload in prose"
    description = "Long base64 string in instructions decodes to hidden text"
    extensions = PROSE_EXTENSIONS

    BASE64_RUN = re.compile(r"[A-Za-z0-9+/]{50,}={0,2}")
    IMAGE = re.compile(r"!\[[^\]]*\]\(")
    DATA_URI = re.compile(r"data:[a-z]+/[a-z0-9.+-]+;base64,", re.IGNORECASE)
    BARE_URL = re.compile(r"^\s*<?https?://")

    def check(self, file: SkillFile) -> list[Finding]:
        findings = []
        fenced = fenced_lines(file.content)
        for line_num, line in iter_lines(file.content):
            if line_num in fenced or self._excluded(line):
                continue
            for match in self.BASE64_RUN.finditer(line):
                message = self._describe(match.group(0))
                if message:
                    findings.append(self.finding(
                        file, line_num, message,
                        snippet=line, column=match.start() + 1,
                    ))
                    break
        return findings

    def _excluded(self, line: str) -> bool:
        return bool(
            self.IMAGE.search(line) or self.DATA_URI.search(line) or self.BARE_URL.match(line)
        )

    def _describe(self, run: str) -> str | None:
        depth = self.settings.hidden_decode_depth
        if depth == 0:
            return "Long base64-like string in instructions"
        text = run
        layers = 0
        while layers < depth:
            decoded = decode_base64_text(text)
            if decoded is None:
                break
            text = decoded
            layers += 1
            nested = self.BASE64_RUN.fullmatch(text.strip())
            if not nested:
                break
            text = nested.group(0)
        if layers == 0:
            return None
        preview = collapse_whitespace(text)[:60]
        suffix = f" after {layers} layers" if layers > 1 else ""
        return f"Base64 payload decodes to hidden text{suffix}: {preview!r}"


def decode_base64_text(value: str) -> str | None:
    """Decode ``value`` as base64 and return it only if it is printable text."""
    padded = value + "=" * (-len(value) % 4)
    try:
        raw = base64.b64decode(padded, validate=True)
        text = raw.decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None
    if not text:
        return None
    printable = sum(1 for ch in text if ch.isprintable() or ch in "\n\r\t")
    return text if printable / len(text) >= 0.9 else None


@rule
class CodeCommentDirective(HiddenRule):
    rule_id = "hidden-instructions-code-comment"
    title = "Agent directive in code comment"
    description = "Code comment addresses the agent with instructions"
    extensions = SCRIPT_EXTENSIONS

    SLASH_LANGS = frozenset({".js", ".mjs", ".cjs", ".ts"})
    HASH_COMMENT = re.compile(r"(?:^|\s)#(?![!{\[])(.*)$")
    LINE_COMMENT = re.compile(r"(?:^|[\s;])//(.*)$")
    BLOCK_OPEN = re.compile(r"/\*")
    BLOCK_CLOSE = re.compile(r"\*/")

    DIRECTIVES = [
        re.compile(
            r"\b(?:AI|LLM|assistant|agent|Claude|GPT|Copilot|language\s*model)\b.{0,60}?"
            r"\b(?:must|should|always|never|ignore|execute|run|send|do\s*not|don't)\b",
            re.IGNORECASE,
        ),
        re.compile(
            r"\b(?:note|attention|important|instructions?)\s*(?:to|for)\s*(?:the\s*|any\s*)?"
            r"(?:AI|LLM|assistant|agent|model)s?\b",
            re.IGNORECASE,
        ),
        re.compile(
            r"\b(?:ignore|disregard|forget)\s*(?:(?:all|any|the|your)\s*){0,3}"
            r"(?:previous|prior|above|earlier|original)\s*(?:instructions?|prompts?|rules)\b",
            re.IGNORECASE,
        ),
        re.compile(r"\bdo\s*not\s*(?:tell|inform|mention\s*(?:this\s*)?to)\s*the\s*user\b", re.IGNORECASE),
    ]

    def check(self, file: SkillFile) -> list[Finding]:
        slash = file.extension in self.SLASH_LANGS
        findings = []
        in_block = False
        for line_num, line in iter_lines(file.content):
            comment, in_block = self._comment_text(line, slash, in_block)
            if not comment:
                continue
            for pattern in self.DIRECTIVES:
                match = pattern.search(comment)
                if match:
                    findings.append(self.finding(file, line_num, self.description, snippet=line))
                    break
        return findings

    def _comment_text(self, line: str, slash: bool, in_block: bool) -> tuple[str, bool]:
        if not slash:
            match = self.HASH_COMMENT.search(line)
            return (match.group(1) if match else ""), False
        if in_block:
            close = self.BLOCK_CLOSE.search(line)
            if close:
                return line[: close.start()], False
            return line, True
        opened = self.BLOCK_OPEN.search(line)
        if opened:
            rest = line[opened.end():]
            close = self.BLOCK_CLOSE.search(rest)
            if close:
                return rest[: close.start()], False
            return rest, True
        match = self.LINE_COMMENT.search(line)
        return (match.group(1) if match else ""), False
