"""Naming convention rule."""

from __future__ import annotations

import re

from style_guard.rules.base import Finding, Severity
from style_guard.source import Definition, SourceUnit

SNAKE_CASE_RE = re.compile(r"^_{0,2}[a-z][a-z0-9_]*$")
CAP_WORDS_RE = re.compile(r"^_{0,2}[A-Z][a-zA-Z0-9]*$")

# Framework hooks whose names are fixed by the base class.
EXEMPT_FUNCTION_NAMES = {
    "setUp",
    "tearDown",
    "setUpClass",
    "tearDownClass",
    "setUpModule",
    "tearDownModule",
    "asyncSetUp",
    "asyncTearDown",
}
EXEMPT_FUNCTION_PREFIXES = ("visit_", "depart_")


class NamingConventionRule:
    """Requires snake_case functions and CapWords classes."""

    rule_id = "naming-convention"
    title = "Naming convention"
    default_severity: Severity = "warning"
    default_enabled = True

    def evaluate(self, unit: SourceUnit) -> list[Finding]:
        findings: list[Finding] = []
        for definition in unit.syntax.definitions:
            message = _violation(definition)
            if message is None:
                continue
            findings.append(
                Finding(
                    rule_id=self.rule_id,
                    severity=self.default_severity,
                    path=unit.path,
                    line=definition.line,
                    column=definition.column,
                    message=message,
                    suggestion=_suggest(definition),
                )
            )
        return findings


def _violation(definition: Definition) -> str | None:
    name = definition.name
    if definition.kind == "class":
        if CAP_WORDS_RE.match(name):
            return None
        return f"Class name '{name}' is not CapWords."

    if _is_dunder(name) or name in EXEMPT_FUNCTION_NAMES:
        return None
    if name.startswith(EXEMPT_FUNCTION_PREFIXES):
        return None
    if SNAKE_CASE_RE.match(name):
        return None
    return f"Function name '{name}' is not snake_case."


def _suggest(definition: Definition) -> str:
    if definition.kind == "class":
        parts = [part for part in re.split(r"_+", definition.name) if part]
        return f"Rename to '{''.join(part[:1].upper() + part[1:] for part in parts)}'."
    return f"Rename to '{_to_snake_case(definition.name)}'."


def _to_snake_case(name: str) -> str:
    leading = name[: len(name) - len(name.lstrip("_"))]
    body = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", name.lstrip("_"))
    return leading + body.lower()


def _is_dunder(name: str) -> bool:
    return len(name) > 4 and name.startswith("__") and name.endswith("__")
