#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2026 gwz

from am_sink import CallbackSink, ListSink, render_amalgamation
from am_units import UnitRef


def test_marker_text_is_exact():
    sink = ListSink()

    sink.begin_unit(UnitRef("a.b.Foo"))
    sink.emit_code("static class Foo { }")
    sink.end_unit(UnitRef("a.b.Foo"))

    assert sink.code == [
        "",
        "// begin of inlined version of class a.b.Foo",
        "",
        "static class Foo { }",
        "",
        "// end of inlined version of class a.b.Foo",
        "",
    ]
    assert sink.imports == []


def test_callback_sink_routes_channels():
    imports, inlines = [], []
    sink = CallbackSink(imports.append, inlines.append)

    sink.emit_import("java.util.List")
    sink.emit_code("int x;")

    assert imports == ["java.util.List"]
    assert inlines == ["int x;"]


def test_render_amalgamation():
    sink = ListSink()
    sink.emit_code("class Main { }")
    sink.emit_import("java.util.List")
    sink.emit_import("java.util.Map")

    assert render_amalgamation(sink) == (
        "import java.util.List;\n"
        "import java.util.Map;\n"
        "\n"
        "class Main { }\n"
    )


def test_render_without_imports():
    sink = ListSink()
    sink.emit_code("class Main { }")

    assert render_amalgamation(sink) == "class Main { }\n"
