"""Mutable default argument rule."""

from __future__ import annotations

from style_guard.rules.base import Finding, Severity
from style_guard.source import DefaultValue, SourceUnit

MUTABLE_NODE_TYPES = {"List", "Dict", "Set", "ListComp", "DictComp", "SetComp"}
MUTABLE_CALLS = {"list", "dict", "set", "bytearray", "defaultdict", "OrderedDict", "deque"}


class MutableDefaultArgumentRule:
    """Flags list, dict and set defaults that are shared between calls."""

    rule_id = "mutable-default-argument"
    title = "Mutable default argument"
    default_severity: Severity = "error"
    default_enabled = True

    def evaluate(self, unit: SourceUnit) -> list[Finding]:
        findings: list[Finding] = []
        for definition in unit.syntax.definitions:
            for default in definition.defaults:
                if not _is_mutable(default):
                    continue
                findings.append(
                    Finding(
                        rule_id=self.rule_id,
                        severity=self.default_severity,
                        path=unit.path,
                        line=default.line,
                        column=default.column,
                        message=(
                            f"Mutable default argument in '{definition.name}': {default.text}."
                        ),
                        suggestion="Default to None and create the object inside the function.",
                    )
                )
        return findings


def _is_mutable(default: DefaultValue) -> bool:
    if default.node_type in MUTABLE_NODE_TYPES:
        return True
    return default.node_type == "Call" and default.call_name in MUTABLE_CALLS
