"""Source units and the syntax view built from the standard parser."""

from __future__ import annotations

import ast
import io
import tokenize
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from style_guard.errors import InputError

DefinitionKind = Literal["function", "async_function", "class"]

TOO_COMPLEX_REASON = "source too complex to parse"


@dataclass(frozen=True, slots=True)
class DefaultValue:
    """A default argument expression, reduced to plain data."""

    line: int
    column: int
    text: str
    node_type: str
    call_name: str | None = None


@dataclass(frozen=True, slots=True)
class Definition:
    """A function or class definition span."""

    name: str
    kind: DefinitionKind
    line: int
    end_line: int
    column: int
    depth: int
    parent: str | None
    has_docstring: bool
    defaults: tuple[DefaultValue, ...] = ()

    @property
    def is_public(self) -> bool:
        return not self.name.startswith("_")


@dataclass(frozen=True, slots=True)
class ImportSpan:
    """An ``import`` or ``from ... import`` statement."""

    module: str | None
    names: tuple[str, ...]
    line: int
    column: int
    is_from: bool


@dataclass(frozen=True, slots=True)
class CommentSpan:
    """A ``#`` comment token. ``standalone`` is true when nothing precedes it."""

    line: int
    column: int
    text: str
    standalone: bool


@dataclass(frozen=True, slots=True)
class SyntaxView:
    """Queryable structure of one parsed module.

    ``tree`` is shared by every rule that runs on the unit, possibly from
    several threads. Rules read it and must never modify its nodes; the
    other fields are plain immutable data.
    """

    tree: ast.Module
    definitions: tuple[Definition, ...]
    imports: tuple[ImportSpan, ...]
    comments: tuple[CommentSpan, ...]
    has_module_docstring: bool

    def top_level_definitions(self) -> list[Definition]:
        return [item for item in self.definitions if item.depth == 0]


@dataclass(frozen=True, slots=True)
class SourceUnit:
    """One input file: its path, raw text and syntax view.

    ``lines`` holds the physical lines as the tokenizer counts them: only
    ``\\n``, ``\\r\\n`` and ``\\r`` end a line, so form feeds and other
    Unicode separators stay inside their line.
    """

    path: str
    text: str
    syntax: SyntaxView
    lines: tuple[str, ...] = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "lines", split_physical_lines(self.text))


def split_physical_lines(text: str) -> tuple[str, ...]:
    """Split ``text`` on Python line terminators, dropping the terminators."""
    return tuple(line.rstrip("\n") for line in io.StringIO(text, newline=None))


def load_source_unit(path: Path | str) -> SourceUnit:
    """Read a file from disk and build its source unit."""
    file_path = Path(path)
    display = file_path.as_posix()
    try:
        raw = file_path.read_bytes()
    except OSError as exc:
        raise InputError(display, f"cannot read file ({exc.strerror or exc})") from exc
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise InputError(display, f"not valid UTF-8 ({exc.reason})") from exc
    return build_source_unit(display, text)


def build_source_unit(path: str, text: str) -> SourceUnit:
    """Parse source text into a source unit, raising ``InputError`` on bad syntax."""
    return SourceUnit(path=path, text=text, syntax=parse_syntax(path, text))


def parse_syntax(path: str, text: str) -> SyntaxView:
    """Build the syntax view for ``text`` using ``ast`` and ``tokenize``."""
    try:
        tree = ast.parse(text, filename=path)
    except SyntaxError as exc:
        raise InputError(path, f"syntax error: {exc.msg}", line=exc.lineno) from exc
    except ValueError as exc:
        raise InputError(path, f"cannot parse source: {exc}") from exc
    except (RecursionError, MemoryError) as exc:
        raise InputError(path, TOO_COMPLEX_REASON) from exc

    try:
        definitions = tuple(_collect_definitions(tree))
    except RecursionError as exc:
        # ast.unparse of a default value recurses on its nesting depth.
        raise InputError(path, TOO_COMPLEX_REASON) from exc

    return SyntaxView(
        tree=tree,
        definitions=definitions,
        imports=tuple(_collect_imports(tree)),
        comments=tuple(_collect_comments(path, text)),
        has_module_docstring=ast.get_docstring(tree) is not None,
    )


def _collect_definitions(tree: ast.Module) -> list[Definition]:
    found: list[Definition] = []
    stack: list[tuple[ast.AST, int, str | None]] = [(tree, 0, None)]
    while stack:
        node, depth, parent = stack.pop()
        for child in ast.iter_child_nodes(node):
            if isinstance(child, (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)):
                found.append(_definition(child, depth, parent))
                stack.append((child, depth + 1, child.name))
            else:
                stack.append((child, depth, parent))
    found.sort(key=lambda item: (item.line, item.column))
    return found


def _definition(
    node: ast.FunctionDef | ast.AsyncFunctionDef | ast.ClassDef,
    depth: int,
    parent: str | None,
) -> Definition:
    if isinstance(node, ast.ClassDef):
        kind: DefinitionKind = "class"
        defaults: tuple[DefaultValue, ...] = ()
    else:
        kind = "async_function" if isinstance(node, ast.AsyncFunctionDef) else "function"
        kw_defaults = [item for item in node.args.kw_defaults if item is not None]
        defaults = tuple(_default_value(item) for item in (*node.args.defaults, *kw_defaults))
    return Definition(
        name=node.name,
        kind=kind,
        line=node.lineno,
        end_line=node.end_lineno or node.lineno,
        column=node.col_offset + 1,
        depth=depth,
        parent=parent,
        has_docstring=ast.get_docstring(node) is not None,
        defaults=defaults,
    )


def _default_value(node: ast.expr) -> DefaultValue:
    call_name: str | None = None
    if isinstance(node, ast.Call):
        if isinstance(node.func, ast.Name):
            call_name = node.func.id
        elif isinstance(node.func, ast.Attribute):
            call_name = node.func.attr
    return DefaultValue(
        line=node.lineno,
        column=node.col_offset + 1,
        text=ast.unparse(node),
        node_type=type(node).__name__,
        call_name=call_name,
    )


def _collect_imports(tree: ast.Module) -> list[ImportSpan]:
    spans: list[ImportSpan] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            spans.append(
                ImportSpan(
                    module=None,
                    names=tuple(alias.name for alias in node.names),
                    line=node.lineno,
                    column=node.col_offset + 1,
                    is_from=False,
                )
            )
        elif isinstance(node, ast.ImportFrom):
            module = "." * node.level + (node.module or "")
            spans.append(
                ImportSpan(
                    module=module,
                    names=tuple(alias.name for alias in node.names),
                    line=node.lineno,
                    column=node.col_offset + 1,
                    is_from=True,
                )
            )
    spans.sort(key=lambda item: (item.line, item.column))
    return spans


def _collect_comments(path: str, text: str) -> list[CommentSpan]:
    comments: list[CommentSpan] = []
    try:
        for token in tokenize.generate_tokens(io.StringIO(text).readline):
            if token.type != tokenize.COMMENT:
                continue
            row, col = token.start
            comments.append(
                CommentSpan(
                    line=row,
                    column=col + 1,
                    text=token.string,
                    standalone=not token.line[:col].strip(),
                )
            )
    except (tokenize.TokenError, SyntaxError) as exc:
        raise InputError(path, f"cannot tokenize source: {exc}") from exc
    return comments
