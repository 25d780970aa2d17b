"""CLI smoke tests."""

from typer.testing import CliRunner

from style_guard import __version__
from style_guard.cli import app

runner = CliRunner()


def test_root_help_works() -> None:
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "Check Python sources" in result.stdout
    assert "check" in result.stdout
    assert "config-init" in result.stdout
    assert "config-validate" in result.stdout


def test_check_help_works() -> None:
    result = runner.invoke(app, ["check", "--help"])
    assert result.exit_code == 0
    assert "--format" in result.stdout
    assert "--select" in result.stdout


def test_version_option() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.stdout.strip() == __version__
