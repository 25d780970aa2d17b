"""Output rendering and exit status."""

from __future__ import annotations

import json
from collections import Counter
from collections.abc import Sequence
from typing import Any, Literal

import click

from style_guard import __version__
from style_guard.rules.base import SEVERITIES, Finding, validate_severity

OutputFormat = Literal["text", "structured"]

OUTPUT_FORMATS: tuple[OutputFormat, ...] = ("text", "structured")
SCHEMA_VERSION = 1

EXIT_OK = 0
EXIT_FINDINGS = 1

_SEVERITY_COLORS = {"info": "cyan", "warning": "yellow", "error": "red"}


def render(findings: Sequence[Finding], format: str = "text", *, color: bool = False) -> str:
    """Render findings as ``text`` or ``structured`` (JSON) output."""
    if format == "text":
        return render_text(findings, color=color)
    if format == "structured":
        return render_structured(findings)
    choices = ", ".join(OUTPUT_FORMATS)
    raise ValueError(f"format must be one of: {choices}")


def render_text(findings: Sequence[Finding], *, color: bool = False) -> str:
    """One ``path:line:col: [severity] message (rule-id)`` line per finding."""
    lines: list[str] = []
    for finding in findings:
        location = f"{finding.path}:{finding.line}"
        if finding.column is not None:
            location += f":{finding.column}"
        severity = f"[{finding.severity}]"
        if color:
            severity = click.style(severity, fg=_SEVERITY_COLORS[finding.severity], bold=True)
        lines.append(f"{location}: {severity} {finding.message} ({finding.rule_id})")
    return "\n".join(lines)


def render_structured(findings: Sequence[Finding]) -> str:
    """Render stable JSON output for CI and automation."""
    return json.dumps(build_structured_payload(findings), sort_keys=True)


def build_structured_payload(findings: Sequence[Finding]) -> dict[str, Any]:
    return {
        "schema_version": SCHEMA_VERSION,
        "findings": [_serialize_finding(item) for item in findings],
        "meta": {"tool": "style-guard", "version": __version__},
    }


def parse_structured(text: str) -> list[Finding]:
    """Read findings back from ``render_structured`` output."""
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid structured report: {exc}") from exc
    if not isinstance(payload, dict) or not isinstance(payload.get("findings"), list):
        raise ValueError("Invalid structured report: missing findings list")
    version = payload.get("schema_version")
    if version != SCHEMA_VERSION:
        raise ValueError(f"Unsupported structured report schema_version: {version!r}")
    return [_deserialize_finding(item) for item in payload["findings"]]


def exit_status(findings: Sequence[Finding]) -> int:
    """Return a non-zero status when any finding has error severity."""
    if any(finding.severity == "error" for finding in findings):
        return EXIT_FINDINGS
    return EXIT_OK


def render_summary(findings: Sequence[Finding], *, files_checked: int | None = None) -> str:
    counts = Counter(finding.severity for finding in findings)
    if not findings:
        summary = "No findings."
    else:
        parts = [f"{counts[severity]} {severity}" for severity in reversed(SEVERITIES)]
        summary = f"{len(findings)} finding(s): {', '.join(parts)}."
    if files_checked is not None:
        summary += f" Checked {files_checked} file(s)."
    return summary


def _serialize_finding(finding: Finding) -> dict[str, Any]:
    return {
        "rule_id": finding.rule_id,
        "severity": finding.severity,
        "path": finding.path,
        "line": finding.line,
        "column": finding.column,
        "message": finding.message,
        "suggestion": finding.suggestion,
    }


def _deserialize_finding(item: Any) -> Finding:
    if not isinstance(item, dict):
        raise ValueError("Invalid structured report: finding must be an object")
    try:
        rule_id = item["rule_id"]
        path = item["path"]
        line = item["line"]
        message = item["message"]
    except KeyError as exc:
        raise ValueError(f"Invalid structured report: finding missing {exc.args[0]!r}") from exc
    column = item.get("column")
    suggestion = item.get("suggestion")
    if not isinstance(rule_id, str) or not isinstance(path, str) or not isinstance(message, str):
        raise ValueError("Invalid structured report: rule_id, path and message must be strings")
    if isinstance(line, bool) or not isinstance(line, int):
        raise ValueError("Invalid structured report: line must be an integer")
    if column is not None and (isinstance(column, bool) or not isinstance(column, int)):
        raise ValueError("Invalid structured report: column must be an integer or null")
    if suggestion is not None and not isinstance(suggestion, str):
        raise ValueError("Invalid structured report: suggestion must be a string or null")
    return Finding(
        rule_id=rule_id,
        severity=validate_severity(item.get("severity"), "finding.severity"),
        path=path,
        line=line,
        column=column,
        message=message,
        suggestion=suggestion,
    )
