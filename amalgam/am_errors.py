#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2026 gwz

from __future__ import annotations

from typing import Optional


class AmalgamError(Exception):
    """
    Fatal condition of an amalgamation run.

    The message always starts with a bracketed diagnostic code, e.g.
    ``[RES-0010] Could not find unit 'Foo'``. There is no partial success:
    whatever a sink already received must be discarded by the caller.
    """

    code = "AMG-9999"

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        unit_name: Optional[str] = None,
        filename: Optional[str] = None,
        line: Optional[int] = None,
    ):
        if code is not None:
            self.code = code
        if not message.startswith("["):
            message = f"[{self.code}] {message}"
        super().__init__(message)
        self.message = message
        self.unit_name = unit_name
        self.filename = filename
        self.line = line


class ResolutionFailure(AmalgamError):
    """Raised when an import names a unit that no strategy can resolve."""
    code = "RES-0010"


class SourceReadFailure(AmalgamError):
    """Raised when the source of a unit to inline cannot be read."""
    code = "SRC-0020"


class InvalidArgument(ValueError):
    """Raised by the shuffle utility for a negative batch count."""

    code = "SHF-0010"

    def __init__(self, count: int):
        super().__init__(f"[{self.code}] Illegal count: {count}")
        self.count = count
