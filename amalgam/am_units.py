#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2026 gwz

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

NESTED_SEPARATOR = "$"


@dataclass(frozen=True, order=True)
class UnitRef:
    """
    A compilation unit, identified by its canonical dotted name
    (e.g. 'java.util.Map.Entry'). Equality, hashing and ordering only
    look at the name.
    """
    name: str

    @staticmethod
    def of(value: Union[str, "UnitRef"]) -> "UnitRef":
        """Build a UnitRef, canonicalizing binary nested names ('Map$Entry')."""
        if isinstance(value, UnitRef):
            return value
        return UnitRef(value.strip().replace(NESTED_SEPARATOR, "."))

    @property
    def namespace(self) -> str:
        """Everything before the last dot; empty for the default namespace."""
        i = self.name.rfind(".")
        return self.name[:i] if i > 0 else ""

    @property
    def simple_name(self) -> str:
        return self.name[self.name.rfind(".") + 1:]

    @property
    def variable_name(self) -> str:
        """The simple name with a lower-case first character ('HashMap' -> 'hashMap')."""
        s = self.simple_name
        return s[:1].lower() + s[1:]

    def __str__(self) -> str:
        return self.name
