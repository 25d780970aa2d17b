"""Exception hierarchy for style-guard."""

from __future__ import annotations


class StyleGuardError(Exception):
    """Base class for all style-guard errors."""


class ConfigurationError(StyleGuardError, ValueError):
    """Invalid registry or rule configuration; fatal before evaluation."""


class DuplicateRuleError(ConfigurationError):
    """A rule identifier was registered twice."""

    def __init__(self, rule_id: str) -> None:
        super().__init__(f"Duplicate rule id: {rule_id}")
        self.rule_id = rule_id


class UnknownRuleError(ConfigurationError):
    """Overrides referenced rule identifiers that are not registered."""

    def __init__(self, rule_ids: list[str]) -> None:
        joined = ", ".join(sorted(rule_ids))
        super().__init__(f"Unknown rule ids: {joined}")
        self.rule_ids = sorted(rule_ids)


class InputError(StyleGuardError):
    """A source file could not be read or parsed."""

    def __init__(self, path: str, reason: str, *, line: int | None = None) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason
        self.line = line
