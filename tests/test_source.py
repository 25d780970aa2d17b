"""Tests for the source unit adapter over ast/tokenize."""

from __future__ import annotations

from pathlib import Path

import pytest

from style_guard.errors import InputError
from style_guard.source import build_source_unit, load_source_unit
from tests.helpers_source import make_unit


def test_syntax_view_exposes_definitions_imports_and_comments() -> None:
    unit = make_unit(
        '"""Module doc."""',
        "import os, sys",
        "from .pkg import thing as alias",
        "",
        "",
        "class Widget:",
        '    """Widget doc."""',
        "",
        "    def render(self, items=[]):  # trailing note",
        "        return items",
        "",
        "",
        "# standalone comment",
        "async def fetch():",
        "    pass",
    )
    syntax = unit.syntax

    assert syntax.has_module_docstring is True
    assert [(item.name, item.kind, item.depth) for item in syntax.definitions] == [
        ("Widget", "class", 0),
        ("render", "function", 1),
        ("fetch", "async_function", 0),
    ]
    render = syntax.definitions[1]
    assert render.parent == "Widget"
    assert render.line == 9
    assert render.end_line == 10
    assert len(render.defaults) == 1
    assert [item.name for item in syntax.top_level_definitions()] == ["Widget", "fetch"]

    assert [(item.module, item.names, item.is_from) for item in syntax.imports] == [
        (None, ("os", "sys"), False),
        (".pkg", ("thing",), True),
    ]

    assert [(item.line, item.standalone) for item in syntax.comments] == [(9, False), (13, True)]
    assert syntax.comments[1].text == "# standalone comment"


def test_lines_split_physical_lines() -> None:
    unit = build_source_unit("a.py", "x = 1\ny = 2\n")
    assert unit.lines == ("x = 1", "y = 2")
    assert unit.path == "a.py"


def test_syntax_error_raises_input_error_with_line() -> None:
    with pytest.raises(InputError) as excinfo:
        build_source_unit("broken.py", "x = 1\ndef broken(:\n")
    assert excinfo.value.path == "broken.py"
    assert excinfo.value.line == 2
    assert "syntax error" in excinfo.value.reason


def test_load_source_unit_reads_utf8_with_bom(tmp_path: Path) -> None:
    path = tmp_path / "bom.py"
    path.write_bytes(b'\xef\xbb\xbf"""Doc."""\n')
    unit = load_source_unit(path)
    assert unit.syntax.has_module_docstring is True
    assert unit.path == path.as_posix()


def test_load_source_unit_missing_file_raises_input_error(tmp_path: Path) -> None:
    with pytest.raises(InputError) as excinfo:
        load_source_unit(tmp_path / "missing.py")
    assert "cannot read file" in excinfo.value.reason


def test_load_source_unit_rejects_invalid_utf8(tmp_path: Path) -> None:
    path = tmp_path / "latin.py"
    path.write_bytes(b"name = '\xe9'\n")
    with pytest.raises(InputError) as excinfo:
        load_source_unit(path)
    assert "UTF-8" in excinfo.value.reason


def test_lines_only_break_on_python_line_terminators() -> None:
    unit = build_source_unit("a.py", 'x = 1\r\n\x0c\ny = " "\rz = 3\n')
    assert unit.lines == ("x = 1", "\x0c", 'y = " "', "z = 3")

    paged = build_source_unit("b.py", "\x0c\nVALUE = 1  # note\n")
    comment = paged.syntax.comments[0]
    assert comment.line == 2
    assert paged.lines[comment.line - 1] == "VALUE = 1  # note"


def test_long_expression_raises_input_error() -> None:
    text = "X = " + " + ".join(["1"] * 10000) + "\n"
    with pytest.raises(InputError) as excinfo:
        build_source_unit("deep.py", text)
    assert excinfo.value.reason == "source too complex to parse"


def test_deeply_nested_definitions_are_collected() -> None:
    lines = []
    for depth in range(60):
        lines.append("    " * depth + f"def level_{depth}():")
    lines.append("    " * 60 + "pass")
    definitions = make_unit(*lines).syntax.definitions
    assert len(definitions) == 60
    assert definitions[-1].depth == 59
    assert definitions[-1].parent == "level_58"


def test_default_values_are_exposed_as_plain_data() -> None:
    unit = make_unit("def build(items=[], *, factory=collections.OrderedDict(), size=3):", "    pass")
    defaults = unit.syntax.definitions[0].defaults
    assert [(item.node_type, item.call_name, item.text) for item in defaults] == [
        ("List", None, "[]"),
        ("Call", "OrderedDict", "collections.OrderedDict()"),
        ("Constant", None, "3"),
    ]
    assert (defaults[0].line, defaults[0].column) == (1, 17)
