"""TODO comment format rule."""

from __future__ import annotations

import re

from style_guard.rules.base import Finding, Severity
from style_guard.source import SourceUnit

TODO_RE = re.compile(r"#\s*(?P<tag>TODO|FIXME)\b(?P<rest>.*)$")
OWNED_RE = re.compile(r"^\((?P<owner>[^)\s][^)]*)\):\s*\S")


class TodoFormatRule:
    """Requires ``TODO(owner): description`` so deferred work has a contact."""

    rule_id = "todo-format"
    title = "TODO comment format"
    default_severity: Severity = "info"
    default_enabled = True

    def evaluate(self, unit: SourceUnit) -> list[Finding]:
        findings: list[Finding] = []
        for comment in unit.syntax.comments:
            match = TODO_RE.search(comment.text)
            if match is None:
                continue
            if OWNED_RE.match(match.group("rest")):
                continue
            tag = match.group("tag")
            findings.append(
                Finding(
                    rule_id=self.rule_id,
                    severity=self.default_severity,
                    path=unit.path,
                    line=comment.line,
                    column=comment.column,
                    message=f"{tag} comment is missing an owner or description.",
                    suggestion=f"Use the form '# {tag}(owner): what needs to happen'.",
                )
            )
        return findings
