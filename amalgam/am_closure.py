#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2026 gwz

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Set, Tuple, Union

from am_classifier import ClassificationKind, DependencyClassifier
from am_context import AmalgamContext
from am_locator import SourceUnitLocator
from am_logger import log_debug, log_info, log_stage
from am_paths import SourceSearchPaths
from am_sink import EmissionSink, ListSink
from am_transform import LineKind, transform_lines
from am_units import UnitRef

UnitLike = Union[str, UnitRef]


@dataclass
class ClosureResult:
    """
    Outcome of one closure computation.

    - inlined: units in the order their bodies were emitted
    - imports: final import names, sorted, never naming an inlined unit
    - rounds: number of breadth-first rounds that inlined at least one unit
    """
    inlined: List[UnitRef] = field(default_factory=list)
    imports: List[str] = field(default_factory=list)
    rounds: int = 0

    def __contains__(self, unit: UnitLike) -> bool:
        return UnitRef.of(unit) in self.inlined


class ClosureResolver:
    """
    Inline a set of units and, breadth-first, every unit they import whose
    source is available; collect everything else as imports.

    Entry points:
      - run(imports, inlines, sink): stream code and imports into a sink.
      - resolve(imports, inlines): same, collecting into a ListSink.

    A resolver holds no state between runs.
    """

    def __init__(
        self,
        locator: SourceUnitLocator | None = None,
        search_paths: SourceSearchPaths | None = None,
        sources: Mapping[str, str] | None = None,
        context: AmalgamContext | None = None,
    ):
        self.context = context or AmalgamContext.default()
        if locator is None:
            locator = SourceUnitLocator.from_search_paths(
                search_paths or SourceSearchPaths(), sources=sources, context=self.context
            )
        self.locator = locator
        self.classifier = DependencyClassifier(locator, context=self.context)

    # --- Public API ---

    def run(
        self,
        imports: Iterable[UnitLike],
        inlines: Iterable[UnitLike],
        sink: EmissionSink,
    ) -> ClosureResult:
        """
        Emit the transformed body of every unit in the inline closure to
        sink's code channel, then the sorted import names to its import
        channel.

        Raises ResolutionFailure or SourceReadFailure on the first fatal
        condition; sink output produced so far is then incomplete.
        """
        # Insertion-ordered: output must not depend on hash order.
        need_to_import: Dict[UnitRef, None] = dict.fromkeys(UnitRef.of(u) for u in imports)
        processed: Set[UnitRef] = set()
        result = ClosureResult()

        frontier: List[UnitRef] = [UnitRef.of(u) for u in inlines]
        while frontier:
            log_stage(self.context, f"Inlining round {result.rounds + 1} ({len(frontier)} unit(s))")
            next_frontier: Dict[UnitRef, None] = {}
            inlined_this_round = 0

            for unit in frontier:
                if unit in processed:
                    continue
                processed.add(unit)
                result.inlined.append(unit)
                inlined_this_round += 1
                self._inline_unit(unit, sink, processed, next_frontier, need_to_import)

            if inlined_this_round:
                result.rounds += 1
            frontier = list(next_frontier)

        result.imports = sorted(u.name for u in need_to_import if u not in processed)
        for name in result.imports:
            sink.emit_import(name)

        log_info(
            self.context,
            f"Inlined {len(result.inlined)} unit(s) in {result.rounds} round(s), "
            f"{len(result.imports)} import(s)",
        )
        return result

    def resolve(
        self, imports: Iterable[UnitLike], inlines: Iterable[UnitLike]
    ) -> Tuple[ListSink, ClosureResult]:
        """Run into a fresh ListSink; returns (sink, result)."""
        sink = ListSink()
        result = self.run(imports, inlines, sink)
        return sink, result

    # --- Internal helpers ---

    def _inline_unit(
        self,
        unit: UnitRef,
        sink: EmissionSink,
        processed: Set[UnitRef],
        next_frontier: Dict[UnitRef, None],
        need_to_import: Dict[UnitRef, None],
    ) -> None:
        log_debug(self.context, f"Inlining unit '{unit}'")
        sink.begin_unit(unit)

        with self.locator.open_source(unit) as lines:
            for line in transform_lines(lines):
                if line.kind is LineKind.CODE:
                    sink.emit_code(line.text)
                    continue

                classification = self.classifier.classify(line.text, unit, line=line.line_no)
                dep = classification.unit
                if classification.kind is ClassificationKind.INLINE:
                    if dep not in processed and dep not in next_frontier:
                        next_frontier[dep] = None
                else:
                    need_to_import.setdefault(dep, None)

        sink.end_unit(unit)
