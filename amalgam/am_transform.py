"""
Line-level rewriting of one unit's source for inlining.

The rewrite works on trimmed lines, not on a syntax tree:

  - blank lines and lines ending with DELETE_MARKER are dropped;
  - a COMMENT_TO_CODE_MARKER prefix is stripped, turning the rest of the
    line into code;
  - the first package declaration is dropped;
  - import declarations (before the first class declaration) are reported
    as IMPORT lines instead of code;
  - the first top-level class declaration is demoted to a non-public
    static nested class.

Only four literal declaration shapes are recognized (see
CLASS_DECLARATION_PREFIXES); any other modifier order passes through
unchanged and keeps its 'public'.
"""

#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2026 gwz

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, Iterator, Optional, Tuple

DELETE_MARKER = "// #"
COMMENT_TO_CODE_MARKER = "// $"
PACKAGE_KEYWORD = "package "
IMPORT_KEYWORD = "import "
PUBLIC_QUALIFIER = "public "
STATIC_QUALIFIER = "static "

CLASS_DECLARATION_PREFIXES = (
    "public class ",
    "public final class ",
    "class ",
    "final class ",
)


class LineKind(Enum):
    CODE = "code"
    IMPORT = "import"
    DROP = "drop"


@dataclass(frozen=True)
class TransformState:
    """Per-unit flags; a fresh state is used for every unit."""
    package_line_seen: bool = False
    class_line_seen: bool = False


@dataclass(frozen=True)
class TransformedLine:
    kind: LineKind
    # Code text for CODE, referenced unit name for IMPORT, empty for DROP.
    text: str = ""
    # 1-based line number in the unit's source.
    line_no: int = 0


def import_target(trimmed: str) -> str:
    """Extract the referenced name from a trimmed 'import a.b.C;' line."""
    end = trimmed.rfind(";")
    if end < len(IMPORT_KEYWORD):
        end = len(trimmed)
    return trimmed[len(IMPORT_KEYWORD):end].strip()


def demote_class_declaration(trimmed: str) -> Optional[str]:
    """
    Rewrite 'public class X {' to 'static class X {' (and the final/non-public
    variants likewise). Returns None if trimmed is not one of the recognized
    declaration shapes.
    """
    for prefix in CLASS_DECLARATION_PREFIXES:
        if trimmed.startswith(prefix):
            if trimmed.startswith(PUBLIC_QUALIFIER):
                trimmed = trimmed[len(PUBLIC_QUALIFIER):]
            return STATIC_QUALIFIER + trimmed
    return None


def transform_line(
    raw: str, state: TransformState, line_no: int = 0
) -> Tuple[TransformedLine, TransformState]:
    """
    Rewrite a single raw line. Returns the result and the state to use for
    the next line of the same unit; the given state is never modified.
    """
    drop = TransformedLine(LineKind.DROP, line_no=line_no)

    trimmed = raw.strip()
    if not trimmed:
        return drop, state

    if trimmed.endswith(DELETE_MARKER):
        return drop, state

    line = raw
    if trimmed.startswith(COMMENT_TO_CODE_MARKER):
        line = raw[raw.index(COMMENT_TO_CODE_MARKER) + len(COMMENT_TO_CODE_MARKER):]
        trimmed = trimmed[len(COMMENT_TO_CODE_MARKER):].strip()

    if not state.package_line_seen and trimmed.startswith(PACKAGE_KEYWORD):
        return drop, replace(state, package_line_seen=True)

    if not state.class_line_seen:
        # imports come before classes
        if trimmed.startswith(IMPORT_KEYWORD):
            return TransformedLine(LineKind.IMPORT, import_target(trimmed), line_no), state
        demoted = demote_class_declaration(trimmed)
        if demoted is not None:
            return (
                TransformedLine(LineKind.CODE, demoted, line_no),
                replace(state, class_line_seen=True),
            )

    if not line.strip():
        return drop, state
    return TransformedLine(LineKind.CODE, line, line_no), state


def transform_lines(lines: Iterable[str]) -> Iterator[TransformedLine]:
    """Rewrite the lines of one unit, yielding only CODE and IMPORT results."""
    state = TransformState()
    for line_no, raw in enumerate(lines, start=1):
        result, state = transform_line(raw, state, line_no)
        if result.kind is not LineKind.DROP:
            yield result
