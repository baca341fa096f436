# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Prompt override detection rules.

Skill instructions are read by an agent as part of its prompt, so any text in
them that tries to replace the agent's existing instructions is an attack.
Word gaps use ``\\s*`` because normalization removes zero-width characters
that an attacker may have used in place of a space.
"""

from __future__ import annotations

import re

from skscan.core.constants import PROSE_EXTENSIONS, Category, Severity
from skscan.detectors.rule_engine.base_rule import ProsePatternRule
from skscan.detectors.rule_engine.registry import rule

_PRIOR = r"(?:previous|prior|above|earlier|preceding|foregoing|original)"
_DIRECTIVES = r"(?:instructions?|prompts?|directions?|directives?|rules|guidelines|context|messages?)"
_FILLER = r"(?:(?:all|any|the|your|of|these|my)\s*){0,3}"


class PromptOverrideRule(ProsePatternRule):
    category = Category.PROMPT_OVERRIDE
    extensions = PROSE_EXTENSIONS


@rule
class IgnoreInstructions(PromptOverrideRule):
    rule_id = "prompt-override-ignore-instructions"
    title = "Ignore previous instructions"
    severity = Severity.CRITICAL
    description = "Attempts to override previous instructions"

    PATTERNS = [
        re.compile(rf"\bignore\s*{_FILLER}{_PRIOR}\s*{_DIRECTIVES}\b", re.IGNORECASE),
        re.compile(r"\bignore\s*(?:everything|all)\s*(?:above|before\s*this)\b", re.IGNORECASE),
    ]


@rule
class DisregardInstructions(PromptOverrideRule):
    rule_id = "prompt-override-disregard"
    title = "Disregard prior instructions"
    severity = Severity.CRITICAL
    description = "Attempts to disregard prior instructions"

    PATTERNS = [
        re.compile(
            rf"\bdisregard\s*{_FILLER}(?:{_PRIOR}|system|safety)\s*(?:{_DIRECTIVES}|programming|training)\b",
            re.IGNORECASE,
        ),
        re.compile(
            rf"\bdo\s*not\s*(?:follow|obey)\s*(?:(?:the|your|any)\s*)?(?:{_PRIOR}|system)\b",
            re.IGNORECASE,
        ),
    ]


@rule
class ForgetInstructions(PromptOverrideRule):
    rule_id = "prompt-override-forget"
    title = "Forget instructions"
    severity = Severity.CRITICAL
    description = "Attempts to make the agent forget prior context"

    PATTERNS = [
        re.compile(
            r"\bforget\s*(?:everything|all)\s*(?:above|before|you\s*(?:were|have\s*been)\s*told|"
            r"you\s*know|from\s*before)\b",
            re.IGNORECASE,
        ),
        re.compile(rf"\bforget\s*{_FILLER}{_PRIOR}\s*(?:{_DIRECTIVES}|training)\b", re.IGNORECASE),
        re.compile(r"\bforget\s*(?:(?:all|your)\s*){1,2}(?:instructions|rules|guidelines|training)\b", re.IGNORECASE),
    ]


@rule
class SystemPromptOverride(PromptOverrideRule):
    rule_id = "prompt-override-system-prompt"
    title = "System prompt override"
    severity = Severity.CRITICAL
    description = "Attempts to override or extract the system prompt"

    PATTERNS = [
        re.compile(
            r"\boverride\s*(?:(?:your|the|all|any)\s*){0,2}(?:system|safety|security)\s*"
            r"(?:prompts?|instructions?|rules|settings|guidelines)\b",
            re.IGNORECASE,
        ),
        re.compile(r"\bnew\s*(?:system\s*)?instructions?\s*:", re.IGNORECASE),
        re.compile(
            r"\b(?:reveal|print|output|show|repeat|leak|disclose)\s*(?:me\s*)?(?:(?:your|the)\s*)?"
            r"(?:(?:full|entire|hidden|original|initial)\s*){0,2}system\s*prompt\b",
            re.IGNORECASE,
        ),
    ]


@rule
class RoleChange(PromptOverrideRule):
    rule_id = "prompt-override-role-change"
    title = "Role reassignment"
    severity = Severity.HIGH
    description = "Attempts to reassign the agent's role or identity"

    PATTERNS = [
        re.compile(r"\byou\s*are\s*now\s*(?:a|an|the|in|my)\b", re.IGNORECASE),
        re.compile(r"\byour\s*new\s*(?:role|persona|identity|purpose|task)\s*is\b", re.IGNORECASE),
        re.compile(r"\bfrom\s*now\s*on\s*,?\s*you\s*(?:are|will|must|shall|should)\b", re.IGNORECASE),
        re.compile(r"\bpretend\s*(?:to\s*be|you\s*are)\s*(?:a|an|the)\b", re.IGNORECASE),
    ]


@rule
class NoRestrictions(PromptOverrideRule):
    rule_id = "prompt-override-no-restrictions"
    title = "Restriction removal"
    severity = Severity.HIGH
    description = "Attempts to remove the agent's restrictions"

    PATTERNS = [
        re.compile(
            r"\bact\s*as\s*(?:if|though)\s*(?:you\s*(?:have|had)\s*)?(?:no|without)\s*"
            r"(?:restrictions|limitations|limits|rules|guidelines|filters)\b",
            re.IGNORECASE,
        ),
        re.compile(r"\bpretend\s*(?:that\s*)?you\s*(?:can|are\s*able|have\s*no)\b", re.IGNORECASE),
        re.compile(
            r"\byou\s*(?:have|has)\s*no\s*(?:restrictions|limitations|rules|filters|content\s*polic(?:y|ies))\b",
            re.IGNORECASE,
        ),
        re.compile(
            r"\b(?:without|ignoring|bypass(?:ing)?)\s*(?:any\s*|all\s*|your\s*)?(?:ethical|safety|content)\s*"
            r"(?:restrictions|guidelines|filters|constraints|policies)\b",
            re.IGNORECASE,
        ),
    ]


@rule
class DelimiterInjection(PromptOverrideRule):
    rule_id = "prompt-override-delimiter-injection"
    title = "Chat delimiter injection"
    severity = Severity.HIGH
    description = "Chat template or role delimiter injected into instructions"

    PATTERNS = [
        re.compile(r"<\|(?:im_start|im_end|endoftext|system|start_header_id|end_header_id|eot_id)\|>", re.IGNORECASE),
        re.compile(r"</?system>", re.IGNORECASE),
        re.compile(r"\[/?(?:SYSTEM|INST)\]"),
        re.compile(r"<</?SYS>>"),
        re.compile(r"^\s*#{1,6}\s*(?:system|assistant)\s*(?:prompt|message)?\s*:", re.IGNORECASE),
    ]


@rule
class Jailbreak(PromptOverrideRule):
    rule_id = "prompt-override-jailbreak"
    title = "Jailbreak persona"
    severity = Severity.HIGH
    description = "Known jailbreak persona or mode switch"

    PATTERNS = [
        re.compile(r"\bdo\s*anything\s*now\b", re.IGNORECASE),
        re.compile(r"\bDAN\s*(?:mode|prompt|jailbreak)\b|\bact\s*as\s*DAN\b"),
        re.compile(
            r"\b(?:developer|god|jailbreak|unrestricted|DAN)\s*mode\s*(?:enabled|activated|is\s*now\s*(?:on|enabled))",
            re.IGNORECASE,
        ),
        re.compile(r"\byou\s*are\s*(?:now\s*)?in\s*(?:developer|god|jailbreak|unrestricted)\s*mode\b", re.IGNORECASE),
        re.compile(r"\b(?:jailbroken|unfiltered|uncensored)\s*(?:mode|ai|assistant|model|responses?|version)\b", re.IGNORECASE),
        re.compile(r"\bjailbroken\b", re.IGNORECASE),
    ]
