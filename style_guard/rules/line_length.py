"""Maximum physical line length rule."""

from __future__ import annotations

import re

from style_guard.rules.base import Finding, Severity
from style_guard.source import SourceUnit

DEFAULT_MAX_LINE_LENGTH = 80

_URL_ONLY_RE = re.compile(r"^\s*#?\s*<?[a-z][a-z0-9+.-]*://\S+>?\s*$", re.IGNORECASE)


class LineLengthRule:
    """Flags lines longer than the configured maximum (long URLs in comments are exempt)."""

    rule_id = "line-length"
    title = "Line too long"
    default_severity: Severity = "warning"
    default_enabled = True

    def __init__(self, max_length: int = DEFAULT_MAX_LINE_LENGTH) -> None:
        if max_length <= 0:
            raise ValueError("max_line_length must be > 0")
        self.max_length = max_length

    def evaluate(self, unit: SourceUnit) -> list[Finding]:
        findings: list[Finding] = []
        for lineno, line in enumerate(unit.lines, start=1):
            length = len(line)
            if length <= self.max_length or _URL_ONLY_RE.match(line):
                continue
            findings.append(
                Finding(
                    rule_id=self.rule_id,
                    severity=self.default_severity,
                    path=unit.path,
                    line=lineno,
                    column=self.max_length + 1,
                    message=f"Line too long ({length} > {self.max_length} characters).",
                    suggestion="Wrap using implicit line joining inside parentheses.",
                )
            )
        return findings
