#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2026 gwz

from typing import Callable, List

from am_units import UnitRef

BEGIN_MARKER = "// begin of inlined version of class "
END_MARKER = "// end of inlined version of class "


class EmissionSink:
    """
    Two append-only output channels: inlined code lines and imported unit
    names. Lines are delivered one at a time, in generation order.
    """

    def emit_code(self, line: str) -> None:
        raise NotImplementedError

    def emit_import(self, name: str) -> None:
        raise NotImplementedError

    def begin_unit(self, unit: UnitRef) -> None:
        self.emit_code("")
        self.emit_code(BEGIN_MARKER + unit.name)
        self.emit_code("")

    def end_unit(self, unit: UnitRef) -> None:
        self.emit_code("")
        self.emit_code(END_MARKER + unit.name)
        self.emit_code("")


class CallbackSink(EmissionSink):
    """Forward each line to a consumer callable."""

    def __init__(
        self,
        import_consumer: Callable[[str], None],
        inline_consumer: Callable[[str], None],
    ):
        self.import_consumer = import_consumer
        self.inline_consumer = inline_consumer

    def emit_code(self, line: str) -> None:
        self.inline_consumer(line)

    def emit_import(self, name: str) -> None:
        self.import_consumer(name)


class ListSink(EmissionSink):
    """Collect both channels in memory."""

    def __init__(self):
        self.code: List[str] = []
        self.imports: List[str] = []

    def emit_code(self, line: str) -> None:
        self.code.append(line)

    def emit_import(self, name: str) -> None:
        self.imports.append(name)


def render_amalgamation(sink: ListSink) -> str:
    """
    Format collected output as a single source text: one 'import X;' line
    per imported unit, a blank line, then the inlined code.
    """
    lines = [f"import {name};" for name in sink.imports]
    if lines:
        lines.append("")
    lines.extend(sink.code)
    return "\n".join(lines) + "\n"
