#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2026 gwz

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Set

from am_units import UnitRef

SOURCE_SUFFIX = ".java"
CLASS_SUFFIX = ".class"


@dataclass
class SourceSearchPaths:
    """
    Search configuration for compilation units.

    - source_roots: directories holding 'a/b/C.java' sources (units that can be inlined)
    - class_roots: directories holding compiled 'a/b/C.class' / 'a/b/C$D.class'
      files (units that exist, but have no source to inline)
    - extern_names: canonical names of units known to be available externally
      (e.g. the platform library)

    Resolution rule: source_roots are searched first, in order.
    """
    source_roots: List[Path] = field(default_factory=list)
    class_roots: List[Path] = field(default_factory=list)
    extern_names: Set[str] = field(default_factory=set)

    def add_source_root(self, root: str | Path) -> None:
        self.source_roots.append(Path(root))

    def add_class_root(self, root: str | Path) -> None:
        self.class_roots.append(Path(root))

    def add_extern_names(self, names: Iterable[str]) -> None:
        for name in names:
            self.extern_names.add(UnitRef.of(name).name)

    def load_extern_list(self, path: str | Path) -> int:
        """
        Read one unit name per line from path; blank lines and '#' comments
        are skipped. Returns the number of names read.

        Raises OSError if the file cannot be read.
        """
        names = []
        for line in Path(path).read_text(encoding="utf-8").splitlines():
            line = line.split("#", 1)[0].strip()
            if line:
                names.append(line)
        self.add_extern_names(names)
        return len(names)

    def source_relpath(self, unit_name: str) -> Path:
        """
        Convert a dotted top-level unit name like 'a.b.Foo' to 'a/b/Foo.java'.
        """
        return Path(*unit_name.split(".")).with_suffix(SOURCE_SUFFIX)

    def class_relpath(self, binary_name: str) -> Path:
        """
        Convert a binary name like 'a.b.Foo$Bar' to 'a/b/Foo$Bar.class'.
        """
        parts = binary_name.split(".")
        return Path(*parts[:-1], parts[-1] + CLASS_SUFFIX)

    def find_source(self, unit_name: str) -> Optional[Path]:
        """Find the first existing source file for unit_name, or None."""
        rel = self.source_relpath(unit_name)
        for root in self.source_roots:
            candidate = root / rel
            if candidate.is_file():
                return candidate
        return None

    def find_class(self, binary_name: str) -> Optional[Path]:
        """Find the first existing class file for binary_name, or None."""
        rel = self.class_relpath(binary_name)
        for root in self.class_roots:
            candidate = root / rel
            if candidate.is_file():
                return candidate
        return None
