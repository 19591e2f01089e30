#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2026 gwz

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from am_context import AmalgamContext
from am_errors import ResolutionFailure
from am_locator import SourceUnitLocator
from am_logger import log_debug
from am_units import UnitRef


class ClassificationKind(Enum):
    INLINE = "inline"
    IMPORT = "import"


@dataclass(frozen=True)
class Classification:
    kind: ClassificationKind
    unit: UnitRef


class DependencyClassifier:
    """
    Decide whether a name found on an import line should be inlined (its
    source is available) or imported (it only exists externally).
    """

    def __init__(self, locator: SourceUnitLocator, context: AmalgamContext | None = None):
        self.locator = locator
        self.context = context or locator.context

    def classify(
        self,
        name: str,
        referrer: UnitRef,
        *,
        filename: Optional[str] = None,
        line: Optional[int] = None,
    ) -> Classification:
        """
        Resolve name as written, then relative to the referrer's namespace.

        Raises ResolutionFailure if neither lookup finds the unit.
        """
        resolution = self.locator.locate(name)
        if not resolution.found and referrer.namespace:
            resolution = self.locator.locate(f"{referrer.namespace}.{name}")
        if not resolution.found:
            raise ResolutionFailure(
                f"Could not find unit '{name}' imported by '{referrer}'",
                unit_name=referrer.name,
                filename=filename,
                line=line,
            )

        kind = ClassificationKind.INLINE if resolution.inlinable else ClassificationKind.IMPORT
        log_debug(self.context, f"'{referrer}' imports '{resolution.unit}': {kind.value}")
        return Classification(kind=kind, unit=resolution.unit)
