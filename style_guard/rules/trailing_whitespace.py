"""Trailing whitespace rule."""

from __future__ import annotations

from style_guard.rules.base import Finding, Severity
from style_guard.source import SourceUnit


class TrailingWhitespaceRule:
    """Flags spaces or tabs at the end of a line."""

    rule_id = "trailing-whitespace"
    title = "Trailing whitespace"
    default_severity: Severity = "info"
    default_enabled = True

    def evaluate(self, unit: SourceUnit) -> list[Finding]:
        findings: list[Finding] = []
        for lineno, line in enumerate(unit.lines, start=1):
            stripped = line.rstrip(" \t")
            if stripped == line:
                continue
            findings.append(
                Finding(
                    rule_id=self.rule_id,
                    severity=self.default_severity,
                    path=unit.path,
                    line=lineno,
                    column=len(stripped) + 1,
                    message="Trailing whitespace.",
                    suggestion="Remove whitespace at the end of the line.",
                )
            )
        return findings
