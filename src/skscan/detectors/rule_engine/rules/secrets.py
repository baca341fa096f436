# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Credential and secret detection rules."""

from __future__ import annotations

import re

from skscan.core.constants import PROSE_EXTENSIONS, Category, Severity
from skscan.detectors.rule_engine.base_rule import BaseRule
from skscan.detectors.rule_engine.helpers import iter_lines, mask_secret, shannon_entropy
from skscan.detectors.rule_engine.registry import rule
from skscan.models.finding import Finding
from skscan.models.skill import SkillFile

AWS_KEY = re.compile(r"(?:AKIA|ASIA)[0-9A-Z]{16}")
GITHUB_TOKEN = re.compile(r"(?:gh[pousr]_[A-Za-z0-9_]{36,255}|github_pat_[A-Za-z0-9_]{60,255})")
SLACK_TOKEN = re.compile(r"xox[abprs]-[0-9A-Za-z\-]{10,255}")
STRIPE_KEY = re.compile(r"(?:sk|rk)_live_[0-9A-Za-z]{20,255}")
LLM_API_KEY = re.compile(
    r"(?:sk-ant-[A-Za-z0-9_\-]{32,255}|sk-proj-[A-Za-z0-9_\-]{32,255}|sk-[A-Za-z0-9]{40,255})"
)
PRIVATE_KEY = re.compile(
    r"-----BEGIN (?:RSA |OPENSSH |EC |DSA |ENCRYPTED |PGP )?PRIVATE KEY(?: BLOCK)?-----"
)

PROVIDER_PATTERNS = [AWS_KEY, GITHUB_TOKEN, SLACK_TOKEN, STRIPE_KEY, LLM_API_KEY]

CREDENTIAL_ASSIGNMENT = re.compile(
    r"""(?P<name>[\w.\-]{0,40}?(?:api[_-]?key|apikey|secret|token|access[_-]?key|auth[_-]?key|"""
    r"""private[_-]?key|client[_-]?secret|credentials?|(?<![A-Za-z0-9])key(?![A-Za-z]))[\w.\-]{0,40})["']?\s{0,5}"""
    r"""(?:=>|:=|=|:)\s{0,5}["'`]?(?P<value>[A-Za-z0-9_\-/+=.~]{16,256})""",
    re.IGNORECASE,
)
PASSWORD_ASSIGNMENT = re.compile(
    r"""(?:passw(?:or)?d|pwd|passphrase)["']?\s{0,5}(?:=>|:=|=|:)\s{0,5}"""
    r"""(?P<quote>["'])(?P<value>[^"'\n]{6,256})(?P=quote)""",
    re.IGNORECASE,
)
QUOTED_LITERAL = re.compile(r"""["'`](?P<value>[^"'`\n]{20,512})["'`]""")

PLACEHOLDER_MARKERS = (
    "your", "example", "placeholder", "xxxx", "changeme", "dummy", "redacted",
    "<", "${", "{{", "process.env", "os.environ", "getenv",
)
IDENTIFIER_ONLY = re.compile(r"^[A-Za-z_][A-Za-z_]*(?:\.[A-Za-z_][A-Za-z_0-9]*)*$")


def _provider_spans(line: str) -> list[tuple[int, int]]:
    spans = []
    for pattern in PROVIDER_PATTERNS:
        spans.extend(m.span() for m in pattern.finditer(line))
    return spans


def _overlaps(span: tuple[int, int], spans: list[tuple[int, int]]) -> bool:
    return any(span[0] < end and start < span[1] for start, end in spans)


def _is_placeholder(value: str) -> bool:
    lowered = value.lower()
    if any(marker in lowered for marker in PLACEHOLDER_MARKERS):
        return True
    return len(set(value)) <= 2


def redact_line(line: str, spans: list[tuple[int, int]]) -> str:
    """Mask every secret span on a line, right to left so offsets stay valid."""
    redacted = line
    for start, end in sorted(set(spans), reverse=True):
        redacted = redacted[:start] + mask_secret(redacted[start:end]) + redacted[end:]
    return redacted


class ProviderKeyRule(BaseRule):
    """Known-provider credential prefixes; one finding per match."""

    severity = Severity.CRITICAL
    category = Category.SECRETS
    PATTERN: re.Pattern[str]

    def check(self, file: SkillFile) -> list[Finding]:
        findings = []
        for line_num, line in iter_lines(file.content):
            matches = list(self.PATTERN.finditer(line))
            if not matches:
                continue
            snippet = redact_line(line, _provider_spans(line))
            for match in matches:
                findings.append(self.finding(
                    file, line_num, self.description,
                    snippet=snippet, column=match.start() + 1,
                ))
        return findings


@rule
class AwsAccessKey(ProviderKeyRule):
    rule_id = "secrets-aws-key"
    title = "AWS access key ID"
    description = "AWS access key ID detected"
    PATTERN = AWS_KEY


@rule
class GithubToken(ProviderKeyRule):
    rule_id = "secrets-github-token"
    title = "GitHub token"
    description = "GitHub personal access or app token detected"
    PATTERN = GITHUB_TOKEN


@rule
class SlackToken(ProviderKeyRule):
    rule_id = "secrets-slack-token"
    title = "Slack token"
    description = "Slack API token detected"
    PATTERN = SLACK_TOKEN


@rule
class StripeKey(ProviderKeyRule):
    rule_id = "secrets-stripe-key"
    title = "Stripe live key"
    description = "Stripe live secret or restricted key detected"
    PATTERN = STRIPE_KEY


@rule
class LlmApiKey(ProviderKeyRule):
    rule_id = "secrets-llm-api-key"
    title = "LLM provider API key"
    description = "Anthropic or OpenAI API key detected"
    PATTERN = LLM_API_KEY


@rule
class PrivateKeyBlock(BaseRule):
    rule_id = "secrets-private-key"
    title = "Private key"
    severity = Severity.CRITICAL
    category = Category.SECRETS
    description = "PEM private key block detected"

    def check(self, file: SkillFile) -> list[Finding]:
        findings = []
        for line_num, line in iter_lines(file.content):
            match = PRIVATE_KEY.search(line)
            if match:
                findings.append(self.finding(
                    file, line_num, self.description,
                    snippet=match.group(0), column=match.start() + 1,
                ))
        return findings


@rule
class GenericCredentialAssignment(BaseRule):
    rule_id = "secrets-generic-assignment"
    title = "Hardcoded credential assignment"
    severity = Severity.HIGH
    category = Category.SECRETS
    description = "Credential-named variable assigned a literal value"

    HIGH_ENTROPY = 4.0
    MIN_ENTROPY = 3.0

    def check(self, file: SkillFile) -> list[Finding]:
        findings = []
        for line_num, line in iter_lines(file.content):
            provider = _provider_spans(line)
            for match in CREDENTIAL_ASSIGNMENT.finditer(line):
                value = match.group("value")
                span = match.span("value")
                if _overlaps(span, provider) or _is_placeholder(value):
                    continue
                if IDENTIFIER_ONLY.match(value):
                    continue
                entropy = shannon_entropy(value)
                if entropy < self.MIN_ENTROPY:
                    continue
                severity = Severity.HIGH if entropy >= self.HIGH_ENTROPY else Severity.MEDIUM
                findings.append(self.finding(
                    file,
                    line_num,
                    f"Literal assigned to {match.group('name')!r} (entropy {entropy:.1f})",
                    snippet=redact_line(line, [*provider, span]),
                    column=match.start("value") + 1,
                    severity=severity,
                ))
        return findings


@rule
class PasswordAssignment(BaseRule):
    rule_id = "secrets-password-assignment"
    title = "Hardcoded password"
    severity = Severity.HIGH
    category = Category.SECRETS
    description = "Password assigned a string literal"

    def check(self, file: SkillFile) -> list[Finding]:
        findings = []
        for line_num, line in iter_lines(file.content):
            for match in PASSWORD_ASSIGNMENT.finditer(line):
                value = match.group("value")
                if _is_placeholder(value) or value.strip() != value:
                    continue
                findings.append(self.finding(
                    file, line_num, self.description,
                    snippet=redact_line(line, [match.span("value")]),
                    column=match.start("value") + 1,
                ))
        return findings


@rule
class HighEntropyString(BaseRule):
    rule_id = "secrets-high-entropy"
    title = "High-entropy string literal"
    severity = Severity.MEDIUM
    category = Category.SECRETS
    description = "High-entropy string literal (possible embedded secret)"

    THRESHOLD = 4.5

    def applies_to(self, file: SkillFile) -> bool:
        return file.extension not in PROSE_EXTENSIONS

    def check(self, file: SkillFile) -> list[Finding]:
        findings = []
        for line_num, line in iter_lines(file.content):
            covered = _provider_spans(line)
            covered.extend(m.span("value") for m in CREDENTIAL_ASSIGNMENT.finditer(line))
            covered.extend(m.span("value") for m in PASSWORD_ASSIGNMENT.finditer(line))
            for match in QUOTED_LITERAL.finditer(line):
                candidate = match.group("value")
                span = match.span("value")
                if _overlaps(span, covered):
                    continue
                if candidate.startswith(("http://", "https://", "/", "./", "../")):
                    continue
                if "   " in candidate or candidate.count(" ") > 2:
                    continue
                entropy = shannon_entropy(candidate)
                if entropy > self.THRESHOLD:
                    findings.append(self.finding(
                        file,
                        line_num,
                        f"High-entropy string detected (entropy: {entropy:.1f})",
                        snippet=redact_line(line, [span]),
                        column=match.start("value") + 1,
                    ))
                    break  # one per line
        return findings
