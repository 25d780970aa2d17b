"""Rules package and rule registry."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass

from style_guard.errors import ConfigurationError, DuplicateRuleError, UnknownRuleError
from style_guard.rules.bare_except import BareExceptRule
from style_guard.rules.base import Finding, Rule, Severity, validate_severity
from style_guard.rules.docstrings import MissingDocstringRule
from style_guard.rules.imports import MultipleImportsRule, WildcardImportRule
from style_guard.rules.line_length import DEFAULT_MAX_LINE_LENGTH, LineLengthRule
from style_guard.rules.mutable_defaults import MutableDefaultArgumentRule
from style_guard.rules.naming import NamingConventionRule
from style_guard.rules.todo_format import TodoFormatRule
from style_guard.rules.trailing_whitespace import TrailingWhitespaceRule

__all__ = [
    "Finding",
    "Rule",
    "RuleInfo",
    "RuleOverride",
    "RuleRegistry",
    "Severity",
    "builtin_rule_ids",
    "default_registry",
    "list_rule_info",
]


@dataclass(frozen=True, slots=True)
class RuleOverride:
    """Per-rule enable flag and severity override; ``None`` keeps the rule default."""

    enabled: bool | None = None
    severity: Severity | None = None

    @classmethod
    def from_mapping(cls, rule_id: str, value: Mapping[str, object]) -> RuleOverride:
        unknown_keys = sorted(set(value) - {"enabled", "severity"})
        if unknown_keys:
            raise ConfigurationError(
                f"rules.{rule_id} has unknown keys: {', '.join(unknown_keys)}"
            )
        enabled = value.get("enabled")
        if enabled is not None and not isinstance(enabled, bool):
            raise ConfigurationError(f"rules.{rule_id}.enabled must be a boolean")
        raw_severity = value.get("severity")
        severity: Severity | None = None
        if raw_severity is not None:
            try:
                severity = validate_severity(raw_severity, f"rules.{rule_id}.severity")
            except ValueError as exc:
                raise ConfigurationError(str(exc)) from exc
        return cls(enabled=enabled, severity=severity)

    def merged(self, other: RuleOverride) -> RuleOverride:
        return RuleOverride(
            enabled=other.enabled if other.enabled is not None else self.enabled,
            severity=other.severity if other.severity is not None else self.severity,
        )

    def to_dict(self) -> dict[str, object]:
        return {"enabled": self.enabled, "severity": self.severity}


@dataclass(frozen=True, slots=True)
class RuleInfo:
    """Rule metadata for listing."""

    rule_id: str
    title: str
    description: str
    default_severity: Severity
    default_enabled: bool
    enabled: bool
    severity: Severity


class RuleRegistry:
    """Identifier-keyed rule set with enable/severity overrides.

    The registry is built and configured up front and treated as read-only
    while an evaluation runs.
    """

    def __init__(self, rules: Iterable[Rule] = ()) -> None:
        self._rules: dict[str, Rule] = {}
        self._overrides: dict[str, RuleOverride] = {}
        for rule in rules:
            self.register(rule)

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def register(self, rule: Rule) -> None:
        if rule.rule_id in self._rules:
            raise DuplicateRuleError(rule.rule_id)
        self._rules[rule.rule_id] = rule

    def configure(self, overrides: Mapping[str, RuleOverride | Mapping[str, object]]) -> None:
        """Apply overrides. Nothing is applied if any identifier is unknown."""
        unknown = [rule_id for rule_id in overrides if rule_id not in self._rules]
        if unknown:
            raise UnknownRuleError(unknown)

        parsed: dict[str, RuleOverride] = {}
        for rule_id, value in overrides.items():
            if isinstance(value, RuleOverride):
                parsed[rule_id] = value
            elif isinstance(value, Mapping):
                parsed[rule_id] = RuleOverride.from_mapping(rule_id, value)
            else:
                raise ConfigurationError(f"rules.{rule_id} must be a table/object")

        for rule_id, override in parsed.items():
            current = self._overrides.get(rule_id, RuleOverride())
            self._overrides[rule_id] = current.merged(override)

    def get(self, rule_id: str) -> Rule:
        try:
            return self._rules[rule_id]
        except KeyError:
            raise UnknownRuleError([rule_id]) from None

    def rules(self) -> list[Rule]:
        """All registered rules ordered by identifier."""
        return [self._rules[rule_id] for rule_id in sorted(self._rules)]

    def active_rules(self) -> list[Rule]:
        """Enabled rules ordered by identifier."""
        return [rule for rule in self.rules() if self.is_enabled(rule.rule_id)]

    def is_enabled(self, rule_id: str) -> bool:
        rule = self.get(rule_id)
        override = self._overrides.get(rule_id)
        if override is not None and override.enabled is not None:
            return override.enabled
        return rule.default_enabled

    def severity_for(self, rule_id: str) -> Severity:
        rule = self.get(rule_id)
        override = self._overrides.get(rule_id)
        if override is not None and override.severity is not None:
            return override.severity
        return rule.default_severity

    def overrides(self) -> dict[str, RuleOverride]:
        return dict(sorted(self._overrides.items()))


@dataclass(frozen=True, slots=True)
class _RuleSpec:
    rule_id: str
    factory: Callable[[], Rule]


def default_registry(
    *,
    max_line_length: int = DEFAULT_MAX_LINE_LENGTH,
    overrides: Mapping[str, RuleOverride | Mapping[str, object]] | None = None,
) -> RuleRegistry:
    """Build the built-in rule set, optionally applying overrides."""
    registry = RuleRegistry(spec.factory() for spec in _builtin_rule_specs(max_line_length))
    if overrides:
        registry.configure(overrides)
    return registry


def list_rule_info(registry: RuleRegistry) -> list[RuleInfo]:
    """Return metadata for every registered rule."""
    info: list[RuleInfo] = []
    for rule in registry.rules():
        info.append(
            RuleInfo(
                rule_id=rule.rule_id,
                title=rule.title,
                description=(rule.__class__.__doc__ or "").strip(),
                default_severity=rule.default_severity,
                default_enabled=rule.default_enabled,
                enabled=registry.is_enabled(rule.rule_id),
                severity=registry.severity_for(rule.rule_id),
            )
        )
    return info


def _builtin_rule_specs(max_line_length: int) -> list[_RuleSpec]:
    return [
        _RuleSpec("bare-except", BareExceptRule),
        _RuleSpec("line-length", lambda: LineLengthRule(max_line_length)),
        _RuleSpec("missing-docstring", MissingDocstringRule),
        _RuleSpec("multiple-imports", MultipleImportsRule),
        _RuleSpec("mutable-default-argument", MutableDefaultArgumentRule),
        _RuleSpec("naming-convention", NamingConventionRule),
        _RuleSpec("todo-format", TodoFormatRule),
        _RuleSpec("trailing-whitespace", TrailingWhitespaceRule),
        _RuleSpec("wildcard-import", WildcardImportRule),
    ]


def builtin_rule_ids() -> list[str]:
    """Identifiers of the built-in rules in registry order."""
    return [spec.rule_id for spec in _builtin_rule_specs(DEFAULT_MAX_LINE_LENGTH)]
