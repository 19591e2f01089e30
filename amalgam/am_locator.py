#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2026 gwz

from __future__ import annotations

import io
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Mapping, Optional, Sequence, TextIO

from am_context import AmalgamContext
from am_errors import SourceReadFailure
from am_logger import log_debug
from am_paths import SourceSearchPaths
from am_units import NESTED_SEPARATOR, UnitRef


class ResolutionKind(Enum):
    INLINABLE = "inlinable"  # unit exists and its source text is available
    EXTERNAL = "external"  # unit exists, but only as an external reference
    UNRESOLVED = "unresolved"


@dataclass(frozen=True)
class Resolution:
    kind: ResolutionKind
    unit: Optional[UnitRef] = None
    # Where the unit was found (a file path or a backend label), for messages.
    origin: Optional[str] = None
    strategy: Optional["ResolutionStrategy"] = field(default=None, compare=False, repr=False)

    @property
    def found(self) -> bool:
        return self.kind is not ResolutionKind.UNRESOLVED

    @property
    def inlinable(self) -> bool:
        return self.kind is ResolutionKind.INLINABLE


UNRESOLVED = Resolution(ResolutionKind.UNRESOLVED)


def nested_candidates(name: str) -> Iterator[str]:
    """
    Yield the binary names a dotted name may denote: the name itself, then
    the name with trailing segments reinterpreted as nested types.

        'a.b.C.D' -> 'a.b.C.D', 'a.b.C$D', 'a.b$C$D', 'a$b$C$D'
    """
    use_name = name
    while True:
        yield use_name
        i = use_name.rfind(".")
        if i <= 0:
            return
        use_name = use_name[:i] + NESTED_SEPARATOR + use_name[i + 1:]


def _split_nested(binary_name: str) -> tuple[str, bool]:
    """Return (outermost top-level name, whether binary_name is nested)."""
    outer, sep, _ = binary_name.partition(NESTED_SEPARATOR)
    return outer, bool(sep)


class ResolutionStrategy:
    """
    One way of answering "does this unit exist, and can it be inlined?".

    Strategies are chained by SourceUnitLocator; the first one that does not
    answer UNRESOLVED wins.
    """

    label = "strategy"

    def resolve(self, binary_name: str) -> Resolution:
        raise NotImplementedError

    def open_text(self, unit: UnitRef) -> TextIO:
        """Open the source text of a unit this strategy reported as INLINABLE."""
        raise NotImplementedError(f"{self.label} strategy does not provide sources")

    def _inlinable(self, binary_name: str, origin: str) -> Resolution:
        return Resolution(ResolutionKind.INLINABLE, UnitRef.of(binary_name), origin, self)

    def _external(self, binary_name: str, origin: str) -> Resolution:
        return Resolution(ResolutionKind.EXTERNAL, UnitRef.of(binary_name), origin, self)


class SourceRootStrategy(ResolutionStrategy):
    """
    Resolve units against '.java' files under the source roots.

    A nested type ('a.b.C$D') has no source file of its own: it resolves as
    EXTERNAL when its outermost type has a source file.
    """

    label = "source"

    def __init__(self, search_paths: SourceSearchPaths):
        self.search_paths = search_paths

    def resolve(self, binary_name: str) -> Resolution:
        outer, nested = _split_nested(binary_name)
        path = self.search_paths.find_source(outer)
        if path is None:
            return UNRESOLVED
        if nested:
            return self._external(binary_name, str(path))
        return self._inlinable(binary_name, str(path))

    def open_text(self, unit: UnitRef) -> TextIO:
        path = self.search_paths.find_source(unit.name)
        if path is None:
            raise FileNotFoundError(f"Source of '{unit}' not found in source roots")
        # utf-8-sig: tolerate a leading BOM
        return path.open("r", encoding="utf-8-sig")


class MemorySourceStrategy(ResolutionStrategy):
    """Resolve units against an in-memory mapping of canonical name -> source text."""

    label = "memory"

    def __init__(self, sources: Mapping[str, str]):
        self.sources: Dict[str, str] = {UnitRef.of(k).name: v for k, v in sources.items()}

    def resolve(self, binary_name: str) -> Resolution:
        outer, nested = _split_nested(binary_name)
        if outer not in self.sources:
            return UNRESOLVED
        origin = f"<memory:{outer}>"
        if nested:
            return self._external(binary_name, origin)
        return self._inlinable(binary_name, origin)

    def open_text(self, unit: UnitRef) -> TextIO:
        if unit.name not in self.sources:
            raise FileNotFoundError(f"No in-memory source for '{unit}'")
        return io.StringIO(self.sources[unit.name])


class ClassRootStrategy(ResolutionStrategy):
    """Resolve units that exist as compiled '.class' files under the class roots."""

    label = "class"

    def __init__(self, search_paths: SourceSearchPaths):
        self.search_paths = search_paths

    def resolve(self, binary_name: str) -> Resolution:
        path = self.search_paths.find_class(binary_name)
        if path is None:
            return UNRESOLVED
        return self._external(binary_name, str(path))


class CatalogStrategy(ResolutionStrategy):
    """Resolve units listed by canonical name in a catalog of external units."""

    label = "catalog"

    def __init__(self, names):
        self.names = names

    def resolve(self, binary_name: str) -> Resolution:
        unit = UnitRef.of(binary_name)
        if unit.name not in self.names:
            return UNRESOLVED
        return self._external(binary_name, "<catalog>")


class SourceUnitLocator:
    """
    Resolve qualified names to units by trying an ordered chain of strategies.

    locate() never raises for a missing unit: UNRESOLVED is an ordinary answer.
    """

    def __init__(
        self,
        strategies: Sequence[ResolutionStrategy],
        context: AmalgamContext | None = None,
    ):
        self.strategies: List[ResolutionStrategy] = list(strategies)
        self.context = context or AmalgamContext.default()

    @staticmethod
    def from_search_paths(
        search_paths: SourceSearchPaths,
        sources: Mapping[str, str] | None = None,
        context: AmalgamContext | None = None,
    ) -> "SourceUnitLocator":
        """
        Build the default chain: in-memory sources (if any), source roots,
        class roots, then the extern-name catalog.
        """
        strategies: List[ResolutionStrategy] = []
        if sources:
            strategies.append(MemorySourceStrategy(sources))
        strategies.append(SourceRootStrategy(search_paths))
        strategies.append(ClassRootStrategy(search_paths))
        strategies.append(CatalogStrategy(search_paths.extern_names))
        return SourceUnitLocator(strategies, context=context)

    def locate(self, name: str) -> Resolution:
        name = name.strip()
        if not name or not all(name.split(".")):
            return UNRESOLVED
        for candidate in nested_candidates(name):
            for strategy in self.strategies:
                resolution = strategy.resolve(candidate)
                if resolution.found:
                    log_debug(
                        self.context,
                        f"Located '{name}' as {resolution.kind.value} unit "
                        f"'{resolution.unit}' ({strategy.label}: {resolution.origin})",
                    )
                    return resolution
        return UNRESOLVED

    @contextmanager
    def open_source(self, unit: UnitRef) -> Iterator[Iterator[str]]:
        """
        Open the source of a unit to inline, yielding its lines without line
        terminators. The underlying stream is closed when the block exits,
        whether normally or by an exception.

        Raises SourceReadFailure if the unit has no source or it cannot be read.
        """
        resolution = self.locate(unit.name)
        if not resolution.inlinable:
            raise SourceReadFailure(
                f"No source available for unit '{unit}'",
                code="SRC-0010",
                unit_name=unit.name,
            )
        try:
            stream = resolution.strategy.open_text(resolution.unit)
        except OSError as e:
            raise SourceReadFailure(
                f"Cannot read source of unit '{unit}': {e}",
                unit_name=unit.name,
                filename=resolution.origin,
            ) from e
        with stream:
            yield _read_lines(stream, unit, resolution.origin)


def _read_lines(stream: TextIO, unit: UnitRef, origin: Optional[str]) -> Iterator[str]:
    try:
        for raw in stream:
            yield raw.rstrip("\r\n")
    except UnicodeDecodeError as e:
        raise SourceReadFailure(
            f"Source of unit '{unit}' is not valid UTF-8: {e}",
            code="SRC-0030",
            unit_name=unit.name,
            filename=origin,
        ) from e
    except OSError as e:
        raise SourceReadFailure(
            f"Cannot read source of unit '{unit}': {e}",
            unit_name=unit.name,
            filename=origin,
        ) from e
