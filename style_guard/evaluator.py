"""Evaluation orchestration: rule isolation, suppression, ordering."""

from __future__ import annotations

import threading
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from pathlib import Path

from loguru import logger

from style_guard.errors import InputError
from style_guard.rules import RuleRegistry
from style_guard.rules.base import Finding, Rule
from style_guard.source import SourceUnit, load_source_unit
from style_guard.suppression import SuppressionSet, extract_suppressions

INTERNAL_FAULT_PREFIX = "internal-fault:"
INPUT_ERROR_RULE_ID = "input-error"


def evaluate(
    source_units: Iterable[SourceUnit],
    registry: RuleRegistry,
    *,
    jobs: int = 1,
    cancel: threading.Event | None = None,
) -> list[Finding]:
    """Run every enabled rule over every source unit and return ordered findings.

    Units are independent; with ``jobs > 1`` they are evaluated on a thread
    pool. Each unit's findings are collected locally and merged in input
    order before the final sort, so the result does not depend on
    scheduling. ``cancel`` is checked before each unit starts.
    """
    if jobs < 1:
        raise ValueError("jobs must be >= 1")
    units = list(source_units)
    rules = registry.active_rules()
    logger.debug(
        "Evaluating {} source unit(s) with {} active rule(s)", len(units), len(rules)
    )

    per_unit = _run_units(units, rules, registry, jobs=jobs, cancel=cancel)
    skipped = sum(1 for item in per_unit if item is None)
    if skipped:
        logger.warning("Evaluation cancelled; {} source unit(s) not evaluated", skipped)

    collected: list[Finding] = []
    for findings in per_unit:
        if findings is not None:
            collected.extend(findings)
    return order_findings(collected)


def evaluate_paths(
    paths: Iterable[Path | str],
    registry: RuleRegistry,
    *,
    jobs: int = 1,
    cancel: threading.Event | None = None,
) -> list[Finding]:
    """Load files and evaluate them; unreadable or unparseable files become findings."""
    units: list[SourceUnit] = []
    input_findings: list[Finding] = []
    for path in paths:
        try:
            units.append(load_source_unit(path))
        except InputError as exc:
            logger.debug("Input error for {}: {}", exc.path, exc.reason)
            input_findings.append(input_error_finding(exc))
    findings = evaluate(units, registry, jobs=jobs, cancel=cancel)
    return order_findings([*findings, *input_findings])


def evaluate_unit(unit: SourceUnit, rules: Sequence[Rule], registry: RuleRegistry) -> list[Finding]:
    """Evaluate one unit: run rules, drop suppressed findings, stamp severities."""
    suppressions = extract_suppressions(unit)
    kept: list[Finding] = []
    for rule in rules:
        kept.extend(_apply_directives(_run_rule(rule, unit), rule, suppressions, registry))
    return kept


def order_findings(findings: Iterable[Finding]) -> list[Finding]:
    """Sort findings deterministically and drop duplicates, keeping the first."""
    ordered: list[Finding] = []
    seen: set[Finding] = set()
    for finding in sorted(findings, key=Finding.sort_key):
        if finding in seen:
            continue
        seen.add(finding)
        ordered.append(finding)
    return ordered


def input_error_finding(exc: InputError) -> Finding:
    return Finding(
        rule_id=INPUT_ERROR_RULE_ID,
        severity="error",
        path=exc.path,
        line=exc.line if exc.line and exc.line > 0 else 1,
        message=f"Cannot check file: {exc.reason}",
    )


def fault_rule_id(rule_id: str) -> str:
    return f"{INTERNAL_FAULT_PREFIX}{rule_id}"


def _run_units(
    units: list[SourceUnit],
    rules: list[Rule],
    registry: RuleRegistry,
    *,
    jobs: int,
    cancel: threading.Event | None,
) -> list[list[Finding] | None]:
    def work(unit: SourceUnit) -> list[Finding] | None:
        if cancel is not None and cancel.is_set():
            return None
        return evaluate_unit(unit, rules, registry)

    if jobs == 1 or len(units) <= 1:
        return [work(unit) for unit in units]

    with ThreadPoolExecutor(max_workers=jobs, thread_name_prefix="style-guard") as pool:
        return list(pool.map(work, units))


def _run_rule(rule: Rule, unit: SourceUnit) -> list[Finding]:
    try:
        findings = list(rule.evaluate(unit))
        for item in findings:
            if not isinstance(item, Finding):
                raise TypeError(f"rule returned {type(item).__name__}, expected Finding")
        return findings
    except Exception as exc:
        logger.opt(exception=exc).warning(
            "Rule {} failed on {}: {}", rule.rule_id, unit.path, exc
        )
        return [
            Finding(
                rule_id=fault_rule_id(rule.rule_id),
                severity="error",
                path=unit.path,
                line=1,
                message=f"Rule '{rule.rule_id}' failed: {exc.__class__.__name__}: {exc}",
            )
        ]


def _apply_directives(
    findings: list[Finding],
    rule: Rule,
    suppressions: SuppressionSet,
    registry: RuleRegistry,
) -> list[Finding]:
    fault_id = fault_rule_id(rule.rule_id)
    kept: list[Finding] = []
    for finding in findings:
        if suppressions.suppresses(finding.rule_id, finding.line, origin_rule_id=rule.rule_id):
            continue
        if finding.rule_id != fault_id:
            finding = replace(finding, severity=registry.severity_for(rule.rule_id))
        kept.append(finding)
    return kept
