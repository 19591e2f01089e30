#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2026 gwz

from __future__ import annotations

import sys
from pathlib import Path
from textwrap import dedent

import pytest

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from am_closure import ClosureResolver
from am_paths import SourceSearchPaths


@pytest.fixture
def temp_project(tmp_path: Path) -> Path:
    return tmp_path


@pytest.fixture
def write_java_file(temp_project: Path):
    def _write(unit_name: str, content: str) -> Path:
        parts = unit_name.split(".")
        file_path = temp_project.joinpath(*parts).with_suffix(".java")
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(dedent(content).lstrip("\n"), encoding="utf-8")
        return file_path

    return _write


@pytest.fixture
def write_java_file_to():
    """Write a Java source below a specific root directory.

    Usage for tests that need several source roots:
        def test_something(write_java_file_to, tmp_path):
            lib_root = tmp_path / "lib"
            write_java_file_to(lib_root, "lib.Util", '''
                package lib;
                public class Util { }
            ''')
    """

    def _write(root: Path, unit_name: str, content: str) -> Path:
        parts = unit_name.split(".")
        file_path = root.joinpath(*parts).with_suffix(".java")
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(dedent(content).lstrip("\n"), encoding="utf-8")
        return file_path

    return _write


@pytest.fixture
def write_class_file():
    """Create an (empty) compiled class file for a binary name below root."""

    def _write(root: Path, binary_name: str) -> Path:
        parts = binary_name.split(".")
        file_path = root.joinpath(*parts[:-1], parts[-1] + ".class")
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_bytes(b"\xca\xfe\xba\xbe")
        return file_path

    return _write


@pytest.fixture
def search_paths(temp_project: Path) -> SourceSearchPaths:
    paths = SourceSearchPaths()
    paths.add_source_root(temp_project)
    paths.add_extern_names(["java.util.HashMap", "java.util.List", "java.util.Map.Entry"])
    return paths


@pytest.fixture
def amalgamate(search_paths: SourceSearchPaths):
    """Run a closure computation over the temp project.

    Usage:
        def test_something(write_java_file, amalgamate):
            write_java_file("app.Main", "...")
            sink, result = amalgamate(imports=[], inlines=["app.Main"])
    """

    def _run(imports=(), inlines=()):
        resolver = ClosureResolver(search_paths=search_paths)
        return resolver.resolve(imports, inlines)

    return _run


def has_error_code(error: BaseException, code: str) -> bool:
    """Check if an exception message carries the given diagnostic code."""
    if not code.startswith("["):
        code = f"[{code}]"
    return code in str(error)
