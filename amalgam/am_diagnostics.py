#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2026 gwz

import os
from dataclasses import dataclass
from typing import Optional

from am_errors import AmalgamError


DIAGNOSTIC_CODE_FAMILIES = {
    "RES": [
        "RES-0010",  # import not resolvable absolutely nor namespace-relative
    ],
    "SRC": [
        "SRC-0010",  # unit to inline has no source
        "SRC-0020",  # I/O error while reading a source
        "SRC-0030",  # source is not valid UTF-8
    ],
    "SHF": [
        "SHF-0010",  # negative batch count
    ],
    "ARC": [
        "ARC-0010",  # tar could not be started
        "ARC-0020",  # tar exited with an error
    ],
    "CLI": [
        "CLI-0010",  # cannot write the output file
        "CLI-0020",  # cannot read an extern list
    ],
}


@dataclass
class Diagnostic:
    kind: str  # "error" or "warning"
    message: str
    unit_name: Optional[str] = None  # referencing unit
    filename: Optional[str] = None  # source path, if the unit came from disk
    line: Optional[int] = None

    def format(self) -> str:
        loc = ""
        if self.filename is not None:
            loc += f"{os.path.abspath(str(self.filename))}"
            if self.line is not None:
                loc += f":{self.line}"
            if self.unit_name is not None:
                loc += f"({self.unit_name})"
        elif self.unit_name is not None:
            loc += self.unit_name
            if self.line is not None:
                loc += f":{self.line}"
        if loc:
            loc += ": "
        return f"{loc}{self.kind}: {self.message}"


def diag_from_error(error: AmalgamError, kind: str = "error") -> Diagnostic:
    return Diagnostic(
        kind=kind,
        message=str(error),
        unit_name=error.unit_name,
        filename=error.filename,
        line=error.line,
    )
