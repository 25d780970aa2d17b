"""In-source suppression markers.

Two comment forms are recognized::

    x = compute()  # style-guard: ignore
    x = compute()  # style-guard: ignore[line-length, bare-except]
    # style-guard: ignore-file
    # style-guard: ignore-file[missing-docstring]

An empty rule list suppresses every rule. ``ignore-file`` markers only count
when the comment stands on its own line.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

from style_guard.source import CommentSpan, SourceUnit

MARKER_RE = re.compile(
    r"#\s*style-guard:\s*(?P<kind>ignore-file|ignore)\b\s*(?:\[(?P<rules>[^\]]*)\])?",
    re.IGNORECASE,
)


@dataclass(frozen=True, slots=True)
class SuppressionDirective:
    """A parsed suppression marker; ``line`` is ``None`` for whole-file markers."""

    line: int | None
    rule_ids: tuple[str, ...] = ()

    @property
    def is_file_wide(self) -> bool:
        return self.line is None

    def covers(self, rule_id: str) -> bool:
        return not self.rule_ids or rule_id in self.rule_ids


class SuppressionSet:
    """Directive lookup used by the evaluator when filtering findings."""

    def __init__(self, directives: Iterable[SuppressionDirective]) -> None:
        self.directives = tuple(directives)
        self._file_wide = [item for item in self.directives if item.is_file_wide]
        self._by_line: dict[int, list[SuppressionDirective]] = {}
        for item in self.directives:
            if item.line is not None:
                self._by_line.setdefault(item.line, []).append(item)

    def __len__(self) -> int:
        return len(self.directives)

    def suppresses(self, rule_id: str, line: int, *, origin_rule_id: str | None = None) -> bool:
        """Return True when a directive covers ``rule_id`` (or its origin) at ``line``."""
        candidates = [rule_id] if origin_rule_id is None else [rule_id, origin_rule_id]
        for directive in (*self._file_wide, *self._by_line.get(line, ())):
            if any(directive.covers(candidate) for candidate in candidates):
                return True
        return False


def extract_suppressions(unit: SourceUnit) -> SuppressionSet:
    """Parse all suppression markers from a source unit's comments."""
    return SuppressionSet(parse_directives(unit.syntax.comments))


def parse_directives(comments: Iterable[CommentSpan]) -> list[SuppressionDirective]:
    directives: list[SuppressionDirective] = []
    for comment in comments:
        match = MARKER_RE.search(comment.text)
        if match is None:
            continue
        rule_ids = _parse_rule_list(match.group("rules"))
        if match.group("kind").lower() == "ignore-file":
            if comment.standalone:
                directives.append(SuppressionDirective(line=None, rule_ids=rule_ids))
            continue
        directives.append(SuppressionDirective(line=comment.line, rule_ids=rule_ids))
    return directives


def _parse_rule_list(raw: str | None) -> tuple[str, ...]:
    if not raw:
        return ()
    items = [item.strip() for item in raw.split(",")]
    return tuple(item for item in items if item)
