#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2026 gwz

import textwrap

import pytest

import amc


def _patch_handlers(monkeypatch):
    calls = []

    def _mk_handler(name):
        def _handler(args):
            calls.append((name, args))
            return 0

        return _handler

    monkeypatch.setattr(amc, "cmd_inline", _mk_handler("inline"))
    monkeypatch.setattr(amc, "cmd_closure", _mk_handler("closure"))
    monkeypatch.setattr(amc, "cmd_archive", _mk_handler("archive"))
    monkeypatch.setattr(amc, "cmd_shuffle", _mk_handler("shuffle"))
    return calls


def _run_main(argv):
    with pytest.raises(SystemExit) as exc:
        amc.main(argv)
    return exc.value.code


def _write_unit(root, unit_name, source):
    path = root.joinpath(*unit_name.split(".")).with_suffix(".java")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(source).lstrip("\n"), encoding="utf-8")
    return path


@pytest.fixture
def project(tmp_path):
    src = tmp_path / "src"
    _write_unit(
        src,
        "app.Main",
        """
        package app;
        import java.util.List;
        import app.Util;
        public class Main {
          List<Util> items;
        }
        """,
    )
    _write_unit(
        src,
        "app.Util",
        """
        package app;
        final class Util {
          // $ static final boolean INLINED = true;
        }
        """,
    )
    extern = tmp_path / "jdk.txt"
    extern.write_text("java.util.List\n", encoding="utf-8")
    return tmp_path


def test_inline_command_dispatch(monkeypatch):
    calls = _patch_handlers(monkeypatch)

    rc = _run_main(["-S", "src", "inline", "-i", "java.util.List", "--import", "x.Y", "app.Main", "app.Other"])

    assert rc == 0
    name, args = calls[0]
    assert name == "inline"
    assert args.imports == ["java.util.List", "x.Y"]
    assert args.inlines == ["app.Main", "app.Other"]
    assert args.source_root == ["src"]


def test_closure_alias_dispatch(monkeypatch):
    calls = _patch_handlers(monkeypatch)

    rc = _run_main(["deps", "app.Main"])

    assert rc == 0
    assert calls[0][0] == "closure"


def test_inline_writes_amalgamation(project, capsys):
    rc = _run_main([
        "-S", str(project / "src"),
        "-E", str(project / "jdk.txt"),
        "inline", "app.Main",
    ])

    assert rc == 0
    out = capsys.readouterr().out
    assert out.splitlines() == [
        "import java.util.List;",
        "",
        "",
        "// begin of inlined version of class app.Main",
        "",
        "static class Main {",
        "  List<Util> items;",
        "}",
        "",
        "// end of inlined version of class app.Main",
        "",
        "",
        "// begin of inlined version of class app.Util",
        "",
        "static final class Util {",
        " static final boolean INLINED = true;",
        "}",
        "",
        "// end of inlined version of class app.Util",
        "",
    ]


def test_inline_to_output_file(project):
    out_file = project / "Merged.java"

    rc = _run_main([
        "-S", str(project / "src"),
        "-E", str(project / "jdk.txt"),
        "inline", "-o", str(out_file), "app.Main",
    ])

    assert rc == 0
    assert out_file.read_text(encoding="utf-8").startswith("import java.util.List;\n")


def test_closure_lists_units(project, capsys):
    rc = _run_main([
        "-S", str(project / "src"),
        "-E", str(project / "jdk.txt"),
        "closure", "app.Main",
    ])

    assert rc == 0
    assert capsys.readouterr().out.splitlines() == [
        "inline app.Main",
        "inline app.Util",
        "import java.util.List",
    ]


def test_unresolvable_import_fails_without_output(project, capsys):
    # java.util.List is unknown without the extern list
    rc = _run_main(["-S", str(project / "src"), "inline", "app.Main"])

    assert rc == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "[RES-0010]" in captured.err
    assert "java.util.List" in captured.err


def test_missing_extern_list(project, capsys):
    rc = _run_main(["-E", str(project / "missing.txt"), "closure", "app.Main"])

    assert rc == 1
    assert "[CLI-0020]" in capsys.readouterr().err


def test_source_path_from_environment(project, monkeypatch, capsys):
    monkeypatch.setenv("AMALGAM_SOURCE_PATH", str(project / "src"))

    rc = _run_main(["-E", str(project / "jdk.txt"), "closure", "app.Util"])

    assert rc == 0
    assert capsys.readouterr().out.splitlines() == ["inline app.Util"]


def test_verbosity_levels():
    ns = amc.argparse.Namespace(verbosity=3, log=True)
    ctx = amc.build_context(ns)

    assert ctx.log_level == amc.LogLevel.DEBUG
    assert ctx.log_rich_format
    assert amc.build_context(amc.argparse.Namespace(verbosity=1)).log_level == amc.LogLevel.INFO
    assert amc.build_context(amc.argparse.Namespace()).log_level == amc.LogLevel.ERROR


def test_shuffle_command(capsys):
    rc = _run_main(["shuffle", "5", "5", "--seed", "1"])

    assert rc == 0
    values = [int(v) for v in capsys.readouterr().out.split()]
    assert sorted(values) == [0, 1, 2, 3, 4]


def test_shuffle_command_negative_count(capsys):
    rc = _run_main(["shuffle", "5", "-2"])

    assert rc == 1
    assert "[SHF-0010]" in capsys.readouterr().err
