"""CLI entrypoint for style-guard."""

from __future__ import annotations

import fnmatch
import json
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger

from style_guard import __version__
from style_guard.config import AppConfig, default_config_template, load_app_config
from style_guard.evaluator import evaluate_paths
from style_guard.logging import configure_logging
from style_guard.output import exit_status, render, render_summary
from style_guard.rules import RuleOverride, RuleRegistry, default_registry, list_rule_info

app = typer.Typer(
    name="style-guard",
    no_args_is_help=True,
    help="Check Python sources against style-guide conformance rules.",
)


def version_callback(value: bool) -> None:
    """Print version and exit when --version is provided."""
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option("--version", help="Show version and exit.", callback=version_callback),
    ] = False,
) -> None:
    """Root command callback."""
    _ = version


@app.command("check")
def check_command(
    paths: Annotated[
        list[Path] | None, typer.Argument(help="Files or directories to check.")
    ] = None,
    root: Annotated[Path, typer.Option(help="Project root used for config lookup.")] = Path("."),
    format: Annotated[
        str | None, typer.Option(help="Output format: text|structured.", show_default="text")
    ] = None,
    jobs: Annotated[int | None, typer.Option(help="Number of files checked in parallel.")] = None,
    max_line_length: Annotated[
        int | None, typer.Option("--max-line-length", help="Maximum allowed line length.")
    ] = None,
    select: Annotated[
        list[str] | None, typer.Option(help="Only run these rule ids (repeatable).")
    ] = None,
    ignore: Annotated[
        list[str] | None, typer.Option(help="Disable these rule ids (repeatable).")
    ] = None,
    include: Annotated[list[str] | None, typer.Option(help="Include glob pattern.")] = None,
    exclude: Annotated[list[str] | None, typer.Option(help="Exclude glob pattern.")] = None,
    color: Annotated[bool, typer.Option("--color/--no-color", help="Colorize text output.")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to config TOML file."),
    ] = None,
) -> None:
    """Check files and report style findings."""
    configure_logging("DEBUG" if verbose else "WARNING")
    app_config = _load_config_or_raise(root, config_file)
    output_format = (format or app_config.format).lower()
    if output_format not in {"text", "structured"}:
        raise typer.BadParameter("format must be one of: text, structured", param_hint="--format")

    resolved_jobs = jobs if jobs is not None else app_config.jobs
    if resolved_jobs < 1:
        raise typer.BadParameter("jobs must be >= 1", param_hint="--jobs")
    if max_line_length is not None:
        if max_line_length < 1:
            raise typer.BadParameter("must be >= 1", param_hint="--max-line-length")
        app_config.max_line_length = max_line_length

    registry = _build_registry_or_raise(app_config, select=select, ignore=ignore)
    files = collect_source_paths(
        paths or [Path(".")],
        includes=include if include is not None else app_config.include,
        excludes=exclude if exclude is not None else app_config.exclude,
    )
    logger.debug("Checking {} file(s)", len(files))

    findings = evaluate_paths(files, registry, jobs=resolved_jobs)
    rendered = render(findings, output_format, color=color)
    if rendered:
        typer.echo(rendered)
    if output_format == "text":
        typer.echo(render_summary(findings, files_checked=len(files)), err=True)

    raise typer.Exit(code=exit_status(findings))


@app.command("rules")
def rules_command(
    root: Annotated[Path, typer.Option(help="Project root used for config lookup.")] = Path("."),
    format: Annotated[str, typer.Option(help="Output format: human|json.")] = "human",
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to config TOML file."),
    ] = None,
) -> None:
    """List available rules with their resolved state."""
    output_format = format.lower()
    if output_format not in {"human", "json"}:
        raise typer.BadParameter("format must be one of: human, json", param_hint="--format")

    app_config = _load_config_or_raise(root, config_file)
    registry = _build_registry_or_raise(app_config)
    rule_info = list_rule_info(registry)

    if output_format == "json":
        payload = {
            "rules": [
                {
                    "rule_id": item.rule_id,
                    "title": item.title,
                    "description": item.description,
                    "default_severity": item.default_severity,
                    "default_enabled": item.default_enabled,
                    "severity": item.severity,
                    "enabled": item.enabled,
                }
                for item in rule_info
            ],
            "meta": {"config_source": app_config.source},
        }
        typer.echo(json.dumps(payload, sort_keys=True))
        return

    lines = ["Available rules:"]
    for item in rule_info:
        status = "enabled" if item.enabled else "disabled"
        lines.append(f"- {item.rule_id} [{status}, {item.severity}] - {item.description}")
    typer.echo("\n".join(lines))


@app.command("config")
def config_command(
    root: Annotated[Path, typer.Option(help="Project root used for config lookup.")] = Path("."),
    format: Annotated[str, typer.Option(help="Output format: human|json.")] = "human",
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to config TOML file."),
    ] = None,
) -> None:
    """Show resolved configuration."""
    output_format = format.lower()
    if output_format not in {"human", "json"}:
        raise typer.BadParameter("format must be one of: human, json", param_hint="--format")

    app_config = _load_config_or_raise(root, config_file)
    registry = _build_registry_or_raise(app_config)
    payload = app_config.to_dict()
    payload["active_rule_ids"] = [rule.rule_id for rule in registry.active_rules()]

    if output_format == "json":
        typer.echo(json.dumps(payload, sort_keys=True))
        return

    lines = [
        "Resolved configuration:",
        f"- source: {payload['source'] or 'defaults'}",
        f"- format: {payload['format']}",
        f"- max_line_length: {payload['max_line_length']}",
        f"- jobs: {payload['jobs']}",
        f"- include: {payload['include']}",
        f"- exclude: {payload['exclude']}",
        f"- rules: {payload['rules']}",
        f"- active_rule_ids: {payload['active_rule_ids']}",
    ]
    typer.echo("\n".join(lines))


@app.command("config-init")
def config_init_command(
    out: Annotated[Path, typer.Option(help="Output path for starter config TOML.")] = Path(
        ".style-guard.toml"
    ),
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite if file already exists."),
    ] = False,
) -> None:
    """Create a starter project config file."""
    out_path = out.resolve()
    if out_path.exists() and not force:
        raise typer.BadParameter(
            f"Refusing to overwrite existing file: {out_path}. Use --force to overwrite."
        )
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(default_config_template(), encoding="utf-8")
    typer.echo(f"Wrote starter config: {out_path}")


@app.command("config-validate")
def config_validate_command(
    root: Annotated[Path, typer.Option(help="Project root used for config lookup.")] = Path("."),
    config_file: Annotated[
        Path,
        typer.Option("--config", help="Path to config TOML file to validate."),
    ] = Path(".style-guard.toml"),
    format: Annotated[str, typer.Option(help="Output format: human|json.")] = "human",
) -> None:
    """Validate a config file and report active rules."""
    output_format = format.lower()
    if output_format not in {"human", "json"}:
        raise typer.BadParameter("format must be one of: human, json", param_hint="--format")

    app_config = _load_config_or_raise(root, config_file)
    registry = _build_registry_or_raise(app_config)
    payload = {
        "ok": True,
        "source": app_config.source,
        "active_rule_ids": [rule.rule_id for rule in registry.active_rules()],
    }
    if output_format == "json":
        typer.echo(json.dumps(payload, sort_keys=True))
        return
    typer.echo(
        "\n".join(
            [
                "Config is valid.",
                f"- source: {payload['source']}",
                f"- active_rule_ids: {payload['active_rule_ids']}",
            ]
        )
    )


def main() -> None:
    """Console script entrypoint."""
    app()


def collect_source_paths(
    paths: list[Path], *, includes: list[str], excludes: list[str]
) -> list[Path]:
    """Expand directories into sorted Python files; explicit file paths are kept as given."""
    collected: list[Path] = []
    seen: set[Path] = set()
    for path in paths:
        if not path.is_dir():
            candidates = [path]
        else:
            candidates = [
                candidate
                for candidate in sorted(path.rglob("*.py"))
                if candidate.is_file()
                and _is_selected(
                    candidate.relative_to(path).as_posix(),
                    includes=includes,
                    excludes=excludes,
                )
            ]
        for candidate in candidates:
            if candidate in seen:
                continue
            seen.add(candidate)
            collected.append(candidate)
    return collected


def _is_selected(relative: str, *, includes: list[str], excludes: list[str]) -> bool:
    if includes and not any(_matches(relative, pattern) for pattern in includes):
        return False
    if excludes and any(_matches(relative, pattern) for pattern in excludes):
        return False
    return True


def _matches(path: str, pattern: str) -> bool:
    if fnmatch.fnmatch(path, pattern):
        return True
    return pattern.startswith("**/") and fnmatch.fnmatch(path, pattern[3:])


def _load_config_or_raise(root: Path, config_file: Path | None = None) -> AppConfig:
    try:
        return load_app_config(root, config_path=config_file)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="config") from exc


def _build_registry_or_raise(
    app_config: AppConfig,
    *,
    select: list[str] | None = None,
    ignore: list[str] | None = None,
) -> RuleRegistry:
    try:
        registry = default_registry(
            max_line_length=app_config.max_line_length,
            overrides=app_config.rules,
        )
        if select:
            registry.configure({rule_id: RuleOverride(enabled=True) for rule_id in select})
            registry.configure(
                {
                    rule.rule_id: RuleOverride(enabled=False)
                    for rule in registry.rules()
                    if rule.rule_id not in select
                }
            )
        if ignore:
            registry.configure({rule_id: RuleOverride(enabled=False) for rule_id in ignore})
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="config.rules") from exc
    return registry
