"""Import statement rules."""

from __future__ import annotations

from style_guard.rules.base import Finding, Severity
from style_guard.source import SourceUnit


class WildcardImportRule:
    """Flags ``from module import *``."""

    rule_id = "wildcard-import"
    title = "Wildcard import"
    default_severity: Severity = "warning"
    default_enabled = True

    def evaluate(self, unit: SourceUnit) -> list[Finding]:
        findings: list[Finding] = []
        for span in unit.syntax.imports:
            if not span.is_from or "*" not in span.names:
                continue
            findings.append(
                Finding(
                    rule_id=self.rule_id,
                    severity=self.default_severity,
                    path=unit.path,
                    line=span.line,
                    column=span.column,
                    message=f"Wildcard import from '{span.module}'.",
                    suggestion="Import the module or the specific names you use.",
                )
            )
        return findings


class MultipleImportsRule:
    """Flags ``import a, b`` statements; one module per import line."""

    rule_id = "multiple-imports"
    title = "Multiple imports on one line"
    default_severity: Severity = "info"
    default_enabled = True

    def evaluate(self, unit: SourceUnit) -> list[Finding]:
        findings: list[Finding] = []
        for span in unit.syntax.imports:
            if span.is_from or len(span.names) < 2:
                continue
            findings.append(
                Finding(
                    rule_id=self.rule_id,
                    severity=self.default_severity,
                    path=unit.path,
                    line=span.line,
                    column=span.column,
                    message=f"Multiple modules imported in one statement: {', '.join(span.names)}.",
                    suggestion="Put each import on its own line.",
                )
            )
        return findings
