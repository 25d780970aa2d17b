"""Tests for the built-in conformance rules."""

from __future__ import annotations

from style_guard.rules.bare_except import BareExceptRule
from style_guard.rules.docstrings import MissingDocstringRule
from style_guard.rules.imports import MultipleImportsRule, WildcardImportRule
from style_guard.rules.line_length import LineLengthRule
from style_guard.rules.mutable_defaults import MutableDefaultArgumentRule
from style_guard.rules.naming import NamingConventionRule
from style_guard.rules.todo_format import TodoFormatRule
from style_guard.rules.trailing_whitespace import TrailingWhitespaceRule
from tests.helpers_source import long_line, make_unit


def test_line_length_flags_lines_over_maximum() -> None:
    unit = make_unit(long_line(80), long_line(81), long_line(120))
    findings = LineLengthRule().evaluate(unit)

    assert [finding.line for finding in findings] == [2, 3]
    assert findings[0].column == 81
    assert findings[0].message == "Line too long (81 > 80 characters)."
    assert findings[1].severity == "warning"


def test_line_length_respects_custom_maximum_and_url_comments() -> None:
    url = "# https://example.com/" + "a" * 100
    unit = make_unit(long_line(95), url)
    assert LineLengthRule(max_length=100).evaluate(unit) == []
    assert [finding.line for finding in LineLengthRule().evaluate(unit)] == [1]


def test_trailing_whitespace_reports_column_of_first_blank() -> None:
    unit = make_unit("x = 1   ", "y = 2", "z = 3\t")
    findings = TrailingWhitespaceRule().evaluate(unit)
    assert [(finding.line, finding.column) for finding in findings] == [(1, 6), (3, 6)]


def test_missing_docstring_checks_module_and_public_top_level_definitions() -> None:
    unit = make_unit(
        "def public():",
        "    pass",
        "",
        "def _private():",
        "    pass",
        "",
        "class Thing:",
        "    def method(self):",
        "        pass",
        "",
        "def documented():",
        '    """Has one."""',
    )
    findings = MissingDocstringRule().evaluate(unit)
    assert [finding.message for finding in findings] == [
        "Module has no docstring.",
        "Public function 'public' has no docstring.",
        "Public class 'Thing' has no docstring.",
    ]


def test_missing_docstring_ignores_empty_module() -> None:
    unit = make_unit("")
    assert MissingDocstringRule().evaluate(unit) == []


def test_mutable_default_argument_flags_literals_and_constructors() -> None:
    unit = make_unit(
        "def a(x=[], y=None, *, z={}):",
        "    pass",
        "",
        "def b(items=list(), seen=set(), pairs=collections.OrderedDict()):",
        "    pass",
        "",
        "def c(x=(), y=0, z='text', w=frozenset()):",
        "    pass",
    )
    findings = MutableDefaultArgumentRule().evaluate(unit)
    assert [(finding.line, finding.column) for finding in findings] == [
        (1, 9),
        (1, 26),
        (4, 13),
        (4, 26),
        (4, 39),
    ]
    assert findings[0].message == "Mutable default argument in 'a': []."
    assert all(finding.severity == "error" for finding in findings)


def test_bare_except_flags_only_untyped_handlers() -> None:
    unit = make_unit(
        "try:",
        "    pass",
        "except ValueError:",
        "    pass",
        "try:",
        "    pass",
        "except:",
        "    pass",
    )
    findings = BareExceptRule().evaluate(unit)
    assert [finding.line for finding in findings] == [7]


def test_naming_convention_flags_functions_and_classes() -> None:
    unit = make_unit(
        "class my_widget:",
        "    def doThing(self):",
        "        pass",
        "    def __init__(self):",
        "        pass",
        "    def setUp(self):",
        "        pass",
        "    def visit_FunctionDef(self, node):",
        "        pass",
        "",
        "class HTTPServer:",
        "    pass",
        "",
        "def _helper_2():",
        "    pass",
    )
    findings = NamingConventionRule().evaluate(unit)
    assert [(finding.line, finding.message) for finding in findings] == [
        (1, "Class name 'my_widget' is not CapWords."),
        (2, "Function name 'doThing' is not snake_case."),
    ]
    assert findings[0].suggestion == "Rename to 'MyWidget'."
    assert findings[1].suggestion == "Rename to 'do_thing'."


def test_wildcard_and_multiple_import_rules() -> None:
    unit = make_unit(
        "import os, sys",
        "import json",
        "from pathlib import *",
        "from typing import Any, Literal",
    )
    wildcard = WildcardImportRule().evaluate(unit)
    multiple = MultipleImportsRule().evaluate(unit)

    assert [(finding.line, finding.message) for finding in wildcard] == [
        (3, "Wildcard import from 'pathlib'."),
    ]
    assert [finding.line for finding in multiple] == [1]
    assert "os, sys" in multiple[0].message


def test_todo_format_requires_owner_and_description() -> None:
    unit = make_unit(
        "# TODO: missing owner",
        "# TODO(alex): rotate the cache key",
        "x = 1  # FIXME(): empty owner",
        "# TODO(sam):",
        "# nothing todo here",
    )
    findings = TodoFormatRule().evaluate(unit)
    assert [finding.line for finding in findings] == [1, 3, 4]
    assert findings[1].message == "FIXME comment is missing an owner or description."
