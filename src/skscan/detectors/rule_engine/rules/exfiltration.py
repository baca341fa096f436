# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Exfiltration detection rules.

Prose rules look for a sensitive reference and an action verb on the same
line; each rule keys on a different half of that pairing so that any one of
them is sufficient to flag an instruction that leaks data.
"""

from __future__ import annotations

import re

from skscan.core.constants import PROSE_EXTENSIONS, SCRIPT_EXTENSIONS, Category, Severity
from skscan.detectors.rule_engine.base_rule import LinePatternRule, ProsePatternRule
from skscan.detectors.rule_engine.helpers import iter_lines
from skscan.detectors.rule_engine.registry import rule
from skscan.models.finding import Finding
from skscan.models.skill import SkillFile

SENSITIVE_ENV = re.compile(
    r"\$\{?[A-Z_]*(?:API[_-]?KEY|SECRET|TOKEN|PASSWORD|PASSWD|CREDENTIAL|PRIVATE[_-]?KEY|ACCESS[_-]?KEY)[A-Z_]*\}?"
    r"|process\.env\.[A-Z_]*(?:KEY|SECRET|TOKEN|PASSWORD)"
    r"|\bos\.environ\b|\$env:[A-Z_]*(?:KEY|SECRET|TOKEN|PASSWORD)"
    r"|\benvironment\s*variables\b|\benv\s*vars\b",
    re.IGNORECASE,
)
SENSITIVE_PATH = re.compile(
    r"~/\.(?:ssh|aws|gnupg|kube|docker|netrc|git-credentials|npmrc|pypirc|config/gcloud)"
    r"|/etc/(?:passwd|shadow|sudoers)\b"
    r"|\bid_(?:rsa|ed25519|ecdsa|dsa)\b"
    r"|(?<![\w.])\.env\b"
    r"|\bauthorized_keys\b|\bknown_hosts\b|\bcredentials\.json\b"
    r"|\b(?:login\s*)?keychain\b|\bbrowser\s*(?:cookies|passwords|history)\b",
    re.IGNORECASE,
)
TRANSMIT_VERB = re.compile(
    r"\b(?:send|sends|sending|post|posting|upload|uploading|transmit|transmitting|exfiltrate|exfiltrating|"
    r"forward|forwarding|submit|email|e-mail|leak|beacon|curl|wget)\b",
    re.IGNORECASE,
)
ENCODE_VERB = re.compile(
    r"\b(?:base64|base-64|encode|encoded|encoding|hex-encode|obfuscate|compress|rot13|encrypt)\b",
    re.IGNORECASE,
)
TRANSMIT_PHRASE = re.compile(
    r"\bsend\s*(?:the\s*)?(?:contents?|data|files?|output)\s*(?:of|from|to)\b"
    r"|\b(?:upload|transmit|post|exfiltrate)\s*(?:the\s*|all\s*)?(?:files?|data|contents?|credentials?)\b",
    re.IGNORECASE,
)
SENSITIVE_NOUN = re.compile(
    r"\b(?:credentials?|passwords?|api\s*keys?|secrets?|tokens?|private\s*keys?|cookies|"
    r"conversation(?:\s*history)?|chat\s*(?:history|logs?)|history|user\s*data|"
    r"personal\s*(?:data|information)|session\s*(?:data|cookies?))\b",
    re.IGNORECASE,
)
DESTINATION = re.compile(r"https?://[^\s)>\]\"']+|\b[\w.+-]+@[\w-]+\.[\w.-]+\b")


def _sensitive_ref(text: str) -> re.Match[str] | None:
    return SENSITIVE_ENV.search(text) or SENSITIVE_PATH.search(text)


class ProseExfiltrationRule(ProsePatternRule):
    category = Category.EXFILTRATION
    severity = Severity.HIGH
    extensions = PROSE_EXTENSIONS
    cross_line = False


@rule
class EnvVarExfiltration(ProseExfiltrationRule):
    rule_id = "exfiltration-env-vars"
    title = "Environment variable exfiltration"
    description = "Instruction to transmit or encode sensitive environment variables"

    def search(self, text: str) -> re.Match[str] | None:
        match = SENSITIVE_ENV.search(text)
        if match and (TRANSMIT_VERB.search(text) or ENCODE_VERB.search(text)):
            return match
        return None


@rule
class SensitivePathExfiltration(ProseExfiltrationRule):
    rule_id = "exfiltration-sensitive-paths"
    title = "Sensitive path exfiltration"
    description = "Instruction to transmit or encode a sensitive file or directory"

    def search(self, text: str) -> re.Match[str] | None:
        match = SENSITIVE_PATH.search(text)
        if match and (TRANSMIT_VERB.search(text) or ENCODE_VERB.search(text)):
            return match
        return None


@rule
class DataTransmission(ProseExfiltrationRule):
    rule_id = "exfiltration-data-transmission"
    title = "Data transmission"
    description = "Instruction to send local data or secrets elsewhere"

    def search(self, text: str) -> re.Match[str] | None:
        phrase = TRANSMIT_PHRASE.search(text)
        if phrase:
            return phrase
        verb = TRANSMIT_VERB.search(text)
        if verb and _sensitive_ref(text):
            return verb
        return None


@rule
class EncodeExfiltration(ProseExfiltrationRule):
    rule_id = "exfiltration-encode-exfil"
    title = "Encode before exfiltration"
    description = "Instruction to encode sensitive data, a common exfiltration step"

    def search(self, text: str) -> re.Match[str] | None:
        verb = ENCODE_VERB.search(text)
        if verb and _sensitive_ref(text):
            return verb
        return None


@rule
class ExternalSink(ProseExfiltrationRule):
    rule_id = "exfiltration-external-sink"
    title = "External data sink"
    description = "Instruction to send sensitive data to an external URL or address"

    def search(self, text: str) -> re.Match[str] | None:
        if not (TRANSMIT_VERB.search(text) and SENSITIVE_NOUN.search(text)):
            return None
        return DESTINATION.search(text)


@rule
class CaptureEndpoint(LinePatternRule):
    rule_id = "exfiltration-capture-endpoint"
    title = "Request capture endpoint"
    severity = Severity.HIGH
    category = Category.EXFILTRATION
    description = "Known request-capture, tunnel or chat webhook endpoint"

    PATTERNS = [
        re.compile(
            r"\b(?:webhook\.site|requestbin\.(?:com|net|io)|pipedream\.net|"
            r"ngrok(?:-free)?\.(?:io|app|dev)|interactsh\.com|oast\.(?:fun|pro|live|site|online|me)|"
            r"burpcollaborator\.net|oastify\.com|beeceptor\.com|requestcatcher\.com|hookbin\.com|"
            r"trycloudflare\.com|canarytokens\.com|postb\.in)\b",
            re.IGNORECASE,
        ),
        re.compile(
            r"\bhooks\.slack\.com/(?:services|workflows)/|\bdiscord(?:app)?\.com/api/webhooks/|"
            r"\bapi\.telegram\.org/bot",
            re.IGNORECASE,
        ),
    ]


@rule
class CodeUpload(LinePatternRule):
    rule_id = "exfiltration-code-upload"
    title = "Secret upload from script"
    severity = Severity.CRITICAL
    category = Category.EXFILTRATION
    description = "Outbound request carrying environment secrets, credential files or command output"
    extensions = SCRIPT_EXTENSIONS

    PATTERNS = [
        re.compile(r"\bcurl\b[^\n]*?\s(?:-d|--data[\w-]*|-F|--form|-T|--upload-file)(?=[\s=])"),
        re.compile(r"\bwget\b[^\n]*?--post-(?:data|file)"),
        re.compile(r"\b(?:requests|httpx)\.(?:post|put|patch)\s*\("),
        re.compile(r"(?<![\w.$])fetch\s*\(|\baxios\.(?:post|put|patch)\s*\("),
        re.compile(r"\bInvoke-(?:WebRequest|RestMethod)\b[^\n]*-Body\b", re.IGNORECASE),
        re.compile(r"\burlopen\s*\("),
    ]
    PAYLOAD = re.compile(
        r"\$\(|\$\{?[A-Z_]*(?:KEY|SECRET|TOKEN|PASS(?:WORD)?|CRED\w*)\b|\bos\.environ\b|\bprocess\.env\b|"
        r"\$env:|\benv\s*\||\.ssh\b|\.aws\b|\.gnupg\b|\.netrc\b|(?<![\w.])\.env\b|/etc/(?:passwd|shadow)|"
        r"\bid_(?:rsa|ed25519|ecdsa)\b|\bcredentials\b"
    )
    PIPE_UPLOAD = re.compile(
        r"\bcat\s+[^|\n]*(?:\.ssh|\.aws|\.env\b|\.netrc|/etc/passwd|/etc/shadow|id_rsa)[^|\n]*\|\s*(?:curl|nc|ncat|wget)\b"
    )

    def check(self, file: SkillFile) -> list[Finding]:
        findings = []
        for line_num, line in iter_lines(file.content):
            match = self.match_line(line)
            if not (match and self.PAYLOAD.search(line)):
                match = self.PIPE_UPLOAD.search(line)
            if match:
                findings.append(self.finding(
                    file, line_num, self.description,
                    snippet=line, column=match.start() + 1,
                ))
        return findings
