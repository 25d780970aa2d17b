"""Docstring presence rule."""

from __future__ import annotations

from style_guard.rules.base import Finding, Severity
from style_guard.source import SourceUnit

_KIND_LABELS = {
    "function": "function",
    "async_function": "function",
    "class": "class",
}


class MissingDocstringRule:
    """Requires docstrings on modules and on public top-level functions and classes."""

    rule_id = "missing-docstring"
    title = "Missing docstring"
    default_severity: Severity = "warning"
    default_enabled = True

    def evaluate(self, unit: SourceUnit) -> list[Finding]:
        findings: list[Finding] = []
        if unit.text.strip() and not unit.syntax.has_module_docstring:
            findings.append(
                Finding(
                    rule_id=self.rule_id,
                    severity=self.default_severity,
                    path=unit.path,
                    line=1,
                    message="Module has no docstring.",
                    suggestion="Start the file with a docstring describing its contents.",
                )
            )

        for definition in unit.syntax.top_level_definitions():
            if not definition.is_public or definition.has_docstring:
                continue
            label = _KIND_LABELS[definition.kind]
            findings.append(
                Finding(
                    rule_id=self.rule_id,
                    severity=self.default_severity,
                    path=unit.path,
                    line=definition.line,
                    column=definition.column,
                    message=f"Public {label} '{definition.name}' has no docstring.",
                    suggestion=f"Add a docstring summarizing what '{definition.name}' does.",
                )
            )
        return findings
