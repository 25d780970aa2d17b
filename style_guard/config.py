"""Configuration loading for style-guard."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from style_guard.rules import RuleOverride, builtin_rule_ids
from style_guard.rules.line_length import DEFAULT_MAX_LINE_LENGTH

CONFIG_FILENAMES = (".style-guard.toml", "style-guard.toml")
PYPROJECT_FILENAME = "pyproject.toml"
PYPROJECT_TOOL_KEYS = ("style_guard", "style-guard")

DEFAULT_INCLUDE = ["**/*.py"]
DEFAULT_EXCLUDE = [
    ".git/**",
    ".venv/**",
    "venv/**",
    "build/**",
    "dist/**",
    "**/__pycache__/**",
]


@dataclass(slots=True)
class AppConfig:
    """Runtime configuration values resolved from project files."""

    format: str = "text"
    max_line_length: int = DEFAULT_MAX_LINE_LENGTH
    jobs: int = 1
    include: list[str] = field(default_factory=lambda: list(DEFAULT_INCLUDE))
    exclude: list[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE))
    rules: dict[str, RuleOverride] = field(default_factory=dict)
    source: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "format": self.format,
            "max_line_length": self.max_line_length,
            "jobs": self.jobs,
            "include": list(self.include),
            "exclude": list(self.exclude),
            "rules": {rule_id: item.to_dict() for rule_id, item in sorted(self.rules.items())},
            "source": self.source,
        }


def load_app_config(root: Path, config_path: Path | None = None) -> AppConfig:
    """Load config from explicit path or project-local files with precedence."""
    root = root.resolve()
    if config_path is not None:
        resolved = config_path if config_path.is_absolute() else (root / config_path)
        if not resolved.exists():
            raise ValueError(f"Config file does not exist: {resolved}")
        mapping = _extract_config_mapping(_load_toml(resolved), source_path=resolved)
        return _from_mapping(mapping, source=str(resolved))

    for filename in CONFIG_FILENAMES:
        resolved = root / filename
        if resolved.exists():
            mapping = _extract_config_mapping(_load_toml(resolved), source_path=resolved)
            return _from_mapping(mapping, source=str(resolved))

    pyproject_path = root / PYPROJECT_FILENAME
    if pyproject_path.exists():
        mapping = _extract_config_mapping(_load_toml(pyproject_path), source_path=pyproject_path)
        if mapping:
            return _from_mapping(mapping, source=str(pyproject_path))

    return AppConfig()


def default_config_template() -> str:
    """Return a starter config template."""
    lines = [
        'format = "text"',
        f"max_line_length = {DEFAULT_MAX_LINE_LENGTH}",
        "jobs = 1",
        'include = ["**/*.py"]',
        'exclude = [".git/**", ".venv/**", "build/**", "dist/**", "**/__pycache__/**"]',
        "",
        "# Per-rule overrides: enabled = true|false, severity = info|warning|error",
    ]
    for rule_id in builtin_rule_ids():
        lines.extend(["", f'[rules."{rule_id}"]', "enabled = true"])
    lines.extend(
        [
            "",
            "# Example severity override:",
            '# [rules."line-length"]',
            '# severity = "error"',
            "",
        ]
    )
    return "\n".join(lines)


def _load_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as file_obj:
            loaded = tomllib.load(file_obj)
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"Invalid TOML in {path}: {exc}") from exc
    if not isinstance(loaded, dict):
        return {}
    return loaded


def _extract_config_mapping(loaded: dict[str, Any], *, source_path: Path) -> dict[str, Any]:
    if source_path.name == PYPROJECT_FILENAME:
        section = _find_pyproject_tool_section(loaded)
        return section if section is not None else {}

    tool_section = _find_pyproject_tool_section(loaded)
    if tool_section is not None:
        return tool_section
    return loaded


def _find_pyproject_tool_section(loaded: dict[str, Any]) -> dict[str, Any] | None:
    tool = loaded.get("tool")
    if not isinstance(tool, dict):
        return None
    for key in PYPROJECT_TOOL_KEYS:
        section = tool.get(key)
        if isinstance(section, dict):
            return section
    return None


def _from_mapping(mapping: dict[str, Any], *, source: str) -> AppConfig:
    rules_mapping = _as_table(mapping.get("rules"), "rules")

    max_line_length = _as_int(
        mapping.get("max_line_length", DEFAULT_MAX_LINE_LENGTH), "max_line_length"
    )
    if max_line_length <= 0:
        raise ValueError("max_line_length must be > 0")
    jobs = _as_int(mapping.get("jobs", 1), "jobs")
    if jobs <= 0:
        raise ValueError("jobs must be > 0")

    include = _as_str_list(mapping.get("include"), "include")
    exclude = _as_str_list(mapping.get("exclude"), "exclude")
    return AppConfig(
        format=_as_choice(mapping.get("format", "text"), {"text", "structured"}, "format"),
        max_line_length=max_line_length,
        jobs=jobs,
        include=include if "include" in mapping else list(DEFAULT_INCLUDE),
        exclude=exclude if "exclude" in mapping else list(DEFAULT_EXCLUDE),
        rules=_parse_rule_overrides(rules_mapping),
        source=source,
    )


def _parse_rule_overrides(value: dict[str, Any]) -> dict[str, RuleOverride]:
    parsed: dict[str, RuleOverride] = {}
    for rule_id, raw in value.items():
        parsed[rule_id] = RuleOverride.from_mapping(rule_id, _as_table(raw, f"rules.{rule_id}"))
    return parsed


def _as_table(value: Any, field_name: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"{field_name} must be a table/object")
    return value


def _as_str_list(value: Any, field_name: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"{field_name} must be a list of strings")
    items: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ValueError(f"{field_name} must be a list of strings")
        items.append(item)
    return items


def _as_choice(raw: Any, allowed: set[str], field_name: str) -> str:
    value = str(raw).lower()
    if value not in allowed:
        choices = ", ".join(sorted(allowed))
        raise ValueError(f"{field_name} must be one of: {choices}")
    return value


def _as_int(raw: Any, field_name: str) -> int:
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise ValueError(f"{field_name} must be an integer")
    return raw
