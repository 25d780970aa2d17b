"""Base rule protocol and finding model."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Protocol

from style_guard.source import SourceUnit

Severity = Literal["info", "warning", "error"]

SEVERITIES: tuple[Severity, ...] = ("info", "warning", "error")


@dataclass(frozen=True, slots=True)
class Finding:
    """A single conformance violation emitted by a rule.

    Equality (and hashing) covers ``rule_id``, ``path``, ``line`` and
    ``message`` only; two findings that differ just in severity, column or
    suggestion are duplicates.
    """

    rule_id: str
    path: str
    line: int
    message: str
    severity: Severity = field(default="warning", compare=False)
    column: int | None = field(default=None, compare=False)
    suggestion: str | None = field(default=None, compare=False)

    def sort_key(self) -> tuple[str, int, bool, int, str, str]:
        """Deterministic report ordering; findings without a column go last."""
        return (
            self.path,
            self.line,
            self.column is None,
            self.column or 0,
            self.rule_id,
            self.message,
        )


class Rule(Protocol):
    """Protocol for stateless conformance rules."""

    rule_id: str
    title: str
    default_severity: Severity
    default_enabled: bool

    def evaluate(self, unit: SourceUnit) -> list[Finding]:
        """Inspect one source unit and return findings."""


def validate_severity(value: object, field_name: str = "severity") -> Severity:
    """Coerce a user-provided severity string, raising ``ValueError`` if invalid."""
    lowered = str(value).lower()
    for severity in SEVERITIES:
        if severity == lowered:
            return severity
    choices = ", ".join(SEVERITIES)
    raise ValueError(f"{field_name} must be one of: {choices}")
