"""Bare ``except:`` rule."""

from __future__ import annotations

import ast

from style_guard.rules.base import Finding, Severity
from style_guard.source import SourceUnit


class BareExceptRule:
    """Flags exception handlers that catch everything without naming a type."""

    rule_id = "bare-except"
    title = "Bare except"
    default_severity: Severity = "error"
    default_enabled = True

    def evaluate(self, unit: SourceUnit) -> list[Finding]:
        findings: list[Finding] = []
        for node in ast.walk(unit.syntax.tree):
            if not isinstance(node, ast.ExceptHandler) or node.type is not None:
                continue
            findings.append(
                Finding(
                    rule_id=self.rule_id,
                    severity=self.default_severity,
                    path=unit.path,
                    line=node.lineno,
                    column=node.col_offset + 1,
                    message="Bare except clause catches every exception.",
                    suggestion="Catch specific exception types and log context.",
                )
            )
        return findings
