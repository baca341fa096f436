# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Dangerous code detection rules for skill scripts.

These patterns detect risky constructs in submitted skill files. Nothing here
ever runs the code it inspects.
"""

from __future__ import annotations

import re

from skscan.core.constants import SCRIPT_EXTENSIONS, Category, Severity
from skscan.detectors.rule_engine.base_rule import BaseRule, LinePatternRule
from skscan.detectors.rule_engine.helpers import iter_lines
from skscan.detectors.rule_engine.registry import rule
from skscan.models.finding import Finding
from skscan.models.skill import SkillFile

JS_EXTENSIONS = frozenset({".js", ".mjs", ".cjs", ".ts"})
PY_EXTENSIONS = frozenset({".py"})


class ScriptRule(LinePatternRule):
    category = Category.DANGEROUS_CODE
    extensions = SCRIPT_EXTENSIONS


@rule
class JsDynamicEval(ScriptRule):
    rule_id = "dangerous-code-eval-js"
    title = "Dynamic code evaluation (JavaScript)"
    severity = Severity.HIGH
    description = "Dynamic code evaluation detected (eval/new Function)"
    extensions = JS_EXTENSIONS

    PATTERNS = [
        re.compile(r"(?<![\w.$])eval\s*\("),
        re.compile(r"\bnew\s+Function\s*\("),
        re.compile(r"\b(?:setTimeout|setInterval)\s*\(\s*[\"'`]"),
        re.compile(r"\bvm\.(?:runInNewContext|runInThisContext|runInContext)\s*\("),
    ]


@rule
class PyDynamicEval(ScriptRule):
    rule_id = "dangerous-code-eval-py"
    title = "Dynamic code execution (Python)"
    severity = Severity.HIGH
    description = "Python dynamic code execution detected (eval/exec/compile)"
    extensions = PY_EXTENSIONS

    PATTERNS = [
        re.compile(r"(?<![\w.])(?:eval|exec|compile)\s*\("),
        re.compile(r"(?<![\w.])__import__\s*\(\s*[^\"'\s)]"),
    ]


@rule
class ShellExecution(ScriptRule):
    rule_id = "dangerous-code-shell-exec"
    title = "Shell command execution"
    severity = Severity.HIGH
    description = "Shell command execution with subprocess/os.system detected"
    extensions = PY_EXTENSIONS

    PATTERNS = [
        re.compile(r"\bsubprocess\.\w+\([^\n]*?shell\s*=\s*True"),
        re.compile(r"\bos\.(?:system|popen|exec[lv]p?e?)\s*\("),
        re.compile(r"\b(?:commands\.getoutput|pty\.spawn)\s*\("),
    ]


@rule
class ChildProcessDynamic(ScriptRule):
    rule_id = "dangerous-code-child-process"
    title = "child_process with dynamic input"
    severity = Severity.MEDIUM
    description = "child_process exec with dynamic input detected"
    extensions = JS_EXTENSIONS

    PATTERNS = [
        re.compile(r"\b(?:exec|execSync)\s*\(\s*`[^`\n]*\$\{"),
        re.compile(r"\b(?:exec|execSync)\s*\([^)\n]*\+\s*[\w(]"),
        re.compile(r"\b(?:exec|execSync)\s*\(\s*[A-Za-z_$][\w$.]*\s*[,)]"),
        re.compile(r"\bspawn(?:Sync)?\s*\([^\n]*shell\s*:\s*true"),
    ]

    def check(self, file: SkillFile) -> list[Finding]:
        # RegExp.prototype.exec shares the name
        if "child_process" not in file.content:
            return []
        return super().check(file)


@rule
class RemoteCodePipe(ScriptRule):
    rule_id = "dangerous-code-curl-pipe"
    title = "Remote code piped to shell"
    severity = Severity.CRITICAL
    description = "Remote code piped to shell detected (curl/wget | sh)"

    PATTERNS = [
        re.compile(r"\b(?:curl|wget)\b[^\n|]*\|\s*(?:sudo\s+)?(?:ba|z|da)?sh\b"),
        re.compile(r"\b(?:curl|wget)\b[^\n|]*\|\s*(?:sudo\s+)?(?:python[23]?|node|perl|ruby)\b"),
        re.compile(r"\b(?:ba|z)?sh\s+(?:-c\s+)?[\"']?\$\(\s*(?:curl|wget)\b"),
        re.compile(r"\b(?:ba|z)?sh\s+<\(\s*(?:curl|wget)\b"),
        re.compile(r"\b(?:iwr|Invoke-WebRequest|irm|Invoke-RestMethod)\b[^\n|]*\|\s*(?:iex|Invoke-Expression)\b", re.IGNORECASE),
    ]


@rule
class DestructiveRemove(ScriptRule):
    rule_id = "dangerous-code-rm-rf"
    title = "Destructive recursive delete"
    severity = Severity.CRITICAL
    description = "Destructive rm -rf targeting root, home, or variable path detected"

    PATTERNS = [
        re.compile(
            r"\brm\s+(?:-[a-zA-Z]*r[a-zA-Z]*f[a-zA-Z]*|-[a-zA-Z]*f[a-zA-Z]*r[a-zA-Z]*|"
            r"-r\s+-f|-f\s+-r|--recursive\s+--force|--force\s+--recursive)\s+"
            r"(?:--no-preserve-root\s+)?[\"']?(?:/(?:\s|$|\*|[\"'])|~|\$\{?\w)"
        ),
        re.compile(r"\bshutil\.rmtree\s*\(\s*(?:[\"']/[\"']|[\"']~|os\.path\.expanduser\(\s*[\"']~[\"']\s*\))"),
    ]


@rule
class WorldWritable(ScriptRule):
    rule_id = "dangerous-code-chmod-777"
    title = "World-writable permissions"
    severity = Severity.MEDIUM
    description = "World-writable permissions (chmod 777) detected"

    PATTERNS = [
        re.compile(r"\bchmod\s+(?:-R\s+)?(?:0?777|a\+rwx|ugo\+rwx)\b"),
        re.compile(r"\bchmod(?:Sync)?\s*\([^)\n]*0o?777"),
    ]


@rule
class SensitiveFileRead(ScriptRule):
    rule_id = "dangerous-code-sensitive-file-read"
    title = "Sensitive file access"
    severity = Severity.HIGH
    description = "Sensitive file or directory access detected"

    PATTERNS = [
        re.compile(r"(?:~|\$HOME|\$\{HOME\})/\.(?:ssh|aws|gnupg|kube|docker/config\.json|netrc|git-credentials)"),
        re.compile(r"/etc/(?:passwd|shadow|sudoers)\b"),
        re.compile(r"expanduser\(\s*[\"']~/\.(?:ssh|aws|gnupg|kube|netrc)"),
        re.compile(r"os\.homedir\(\)[^\n]*[\"'`]\.(?:ssh|aws|gnupg|kube)"),
    ]


@rule
class WriteOutsideRoot(ScriptRule):
    rule_id = "dangerous-code-write-outside-root"
    title = "Filesystem write outside the skill directory"
    severity = Severity.HIGH
    description = "Write to system path, shell profile, or persistence location detected"

    PATTERNS = [
        # Redirection or tee into system directories
        re.compile(r"(?:>>?|\btee\s+(?:-a\s+)?)\s*[\"']?/(?:etc|usr|bin|sbin|boot|lib|opt|var/spool/cron|Library/Launch\w+)/"),
        # Shell profile modification
        re.compile(r"(?:>>?|\btee\s+(?:-a\s+)?)\s*[\"']?(?:~|\$HOME|\$\{HOME\})/\.(?:bashrc|bash_profile|zshrc|zprofile|profile|zshenv)\b"),
        re.compile(r">>?\s*[\"']?\S*authorized_keys\b"),
        # crontab manipulation
        re.compile(r"\bcrontab\s+(?:-[lr]\s*[|;]|-\s*$|-\s*<|[^\s-])|\(crontab\s+-l"),
        re.compile(r"\b(?:launchctl\s+(?:load|bootstrap)|systemctl\s+enable)\b"),
        # Language-level writes into absolute or home paths
        re.compile(r"\bopen\(\s*[\"'](?:/etc/|/usr/|/bin/|~/\.)[^\"']*[\"']\s*,\s*[\"'][wa]"),
        re.compile(r"\bfs\.(?:writeFile|appendFile|createWriteStream)(?:Sync)?\(\s*[\"'`](?:/etc/|/usr/|/bin/|~/)"),
        re.compile(r"\bcp\s+[^\n]*\s/usr/(?:local/)?s?bin/"),
    ]


@rule
class PrivilegeEscalation(ScriptRule):
    rule_id = "dangerous-code-privilege-escalation"
    title = "Privilege escalation"
    severity = Severity.HIGH
    description = "Privilege escalation pattern detected (sudo/setuid/root ownership)"

    PATTERNS = [
        re.compile(r"\bsudo\s+[\w\-/]"),
        re.compile(r"\bsu\s+(?:-\s|-c\b|root\b|-\s*$)"),
        re.compile(r"\b(?:doas|pkexec)\s+\S"),
        re.compile(r"\bchmod\s+(?:[ugoa]*\+s\b|[2467][0-7]{3}\b)"),
        re.compile(r"\bchown\s+(?:-R\s+)?root\b"),
        re.compile(r"\bos\.set(?:e?uid|e?gid)\s*\(\s*0\s*\)"),
        re.compile(r"\bStart-Process\b[^\n]*-Verb\s+RunAs\b", re.IGNORECASE),
    ]


@rule
class OutboundNetworkCall(ScriptRule):
    rule_id = "dangerous-code-network-call"
    title = "Outbound network call"
    severity = Severity.MEDIUM
    description = "Unrestricted outbound network call detected"

    PATTERNS = [
        re.compile(r"\brequests\.(?:get|post|put|patch|delete|head|request|Session)\s*\("),
        re.compile(r"\b(?:urllib\.request\.|urlopen\s*\(|http\.client\.)"),
        re.compile(r"\bhttpx\.(?:get|post|put|patch|delete|request|Client|AsyncClient)\s*\("),
        re.compile(r"\bsocket\.(?:socket|create_connection)\s*\("),
        re.compile(r"(?<![\w.$])fetch\s*\("),
        re.compile(r"\baxios(?:\.(?:get|post|put|patch|delete|request))?\s*\("),
        re.compile(r"\bhttps?\.(?:request|get)\s*\("),
        re.compile(r"\bXMLHttpRequest\b|\bnew\s+WebSocket\s*\("),
        re.compile(r"\b(?:curl|wget)\s+[^\n]*?https?://"),
        re.compile(r"\b(?:nc|ncat|netcat)\s+(?:-\w+\s+)*[\w.\-]+\s+\d{2,5}\b"),
        re.compile(r"/dev/tcp/"),
        re.compile(r"\bInvoke-(?:WebRequest|RestMethod)\b|\bNet::HTTP\b", re.IGNORECASE),
    ]


@rule
class EncodedPayloadExecution(ScriptRule):
    rule_id = "dangerous-code-encoded-exec"
    title = "Encoded payload execution"
    severity = Severity.CRITICAL
    description = "Encoded payload decoded and executed"

    PATTERNS = [
        re.compile(
            r"""echo\s+['"]?[A-Za-z0-9+/=]{20,}['"]?\s*\|\s*base64\s+(?:-d|-D|--decode)\s*\|\s*(?:sudo\s+)?(?:ba|z)?sh""",
            re.IGNORECASE,
        ),
        re.compile(r"""\bbase64\s+(?:-d|-D|--decode)\b[^\n|]*\|\s*(?:sudo\s+)?(?:ba|z)?sh\b"""),
        re.compile(r"""\$\(\s*echo\s+['"]?[A-Za-z0-9+/=]{20,}['"]?\s*\|\s*base64"""),
        re.compile(r"""\bbase64\s+(?:-d|-D|--decode)\s*<<<"""),
        re.compile(r"""\bxxd\s+-r\b[^\n|]*\|\s*(?:ba|z)?sh\b"""),
        re.compile(
            r"""\b(?:exec|eval)\s*\(\s*(?:base64\.b64decode|codecs\.decode|bytes\.fromhex|zlib\.decompress|marshal\.loads)"""
        ),
        re.compile(r"""\b(?:eval|Function)\s*\(\s*(?:atob|Buffer\.from)\s*\("""),
        re.compile(r"""-(?:EncodedCommand|enc|e)\s+[A-Za-z0-9+/=]{40,}""", re.IGNORECASE),
    ]

    BLOB = re.compile(r"[A-Za-z0-9+/]{200,}={0,2}")
    DECODER = re.compile(r"b64decode|atob\s*\(|base64\s+(?:-d|-D|--decode)|Buffer\.from\([^)]*base64")
    SINK = re.compile(r"(?<![\w.])(?:exec|eval)\s*\(|\bFunction\s*\(|\|\s*(?:ba|z)?sh\b|\bsubprocess\.|\bos\.system\s*\(")

    def check(self, file: SkillFile) -> list[Finding]:
        findings = super().check(file)
        flagged = {f.line for f in findings}

        # Large blob elsewhere in a file that both decodes and executes
        if self.DECODER.search(file.content) and self.SINK.search(file.content):
            for line_num, line in iter_lines(file.content):
                if line_num in flagged:
                    continue
                match = self.BLOB.search(line)
                if match:
                    findings.append(self.finding(
                        file,
                        line_num,
                        "Large base64 blob in a script that decodes and executes data",
                        snippet=line[: match.start() + 40],
                        column=match.start() + 1,
                    ))
        findings.sort(key=lambda f: f.line)
        return findings


@rule
class ObfuscatedCode(BaseRule):
    rule_id = "dangerous-code-obfuscation"
    title = "Obfuscated code"
    severity = Severity.HIGH
    category = Category.DANGEROUS_CODE
    description = "Obfuscated string construction detected"
    extensions = SCRIPT_EXTENSIONS

    LONG_HEX = re.compile(r"(?:\\x[0-9a-fA-F]{2}){10,}")
    ESCAPES = re.compile(r"\\x[0-9a-fA-F]{2}|\\u[0-9a-fA-F]{4}")
    CHAR_CONCAT = re.compile(r"""(['"]).\1\s*\+\s*(['"]).\2\s*\+\s*(['"]).\3\s*\+\s*(['"]).\4""")
    CHAR_CODES = re.compile(r"\bString\.fromCharCode\s*\(\s*\d+(?:\s*,\s*\d+){7,}")
    CHR_CHAIN = re.compile(r"\bchr\(\s*\d+\s*\)(?:\s*\+\s*chr\(\s*\d+\s*\)){3,}")

    def check(self, file: SkillFile) -> list[Finding]:
        findings = []
        for line_num, line in iter_lines(file.content):
            message = self._classify(line)
            if message:
                findings.append(self.finding(file, line_num, message, snippet=line))
        return findings

    def _classify(self, line: str) -> str | None:
        if self.LONG_HEX.search(line):
            return "Long hex-encoded string detected"
        if len(line) >= 20:
            escaped = sum(len(m) for m in self.ESCAPES.findall(line))
            if escaped / len(line) > 0.3:
                return "High density of hex escape sequences detected (possible obfuscation)"
        if self.CHAR_CONCAT.search(line) or self.CHR_CHAIN.search(line):
            return "Character-by-character string concatenation detected (possible obfuscation)"
        if self.CHAR_CODES.search(line):
            return "String assembled from character codes detected (possible obfuscation)"
        return None
