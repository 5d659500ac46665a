"""
Timeline Reconstructor
======================

Turns the sparse Gantt entries of a completed scheduling run into dense,
unit-tick rows that share one time axis.

For every entry (one row each):
    [0, start)        idle cells       idle-<t>
    [start, end)      executing cells  exec-<t>   (process id on the first one)
    [end, max_time)   idle cells       idle-after-<t>

Each cell is 1/max_time of the row width.

Input is expected sorted by start_time and is NOT re-sorted. Out-of-order or
overlapping entries are reported as diagnostics; the rows are still built.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Sequence, Tuple

from ..contracts.base import Diagnostic, DiagnosticCode
from ..contracts.snapshot import TimelineEntry
from ..observability import log_diagnostic

logger = logging.getLogger(__name__)


class CellKind(Enum):
    IDLE = "idle"
    EXECUTING = "executing"


@dataclass(frozen=True)
class TimelineCell:
    cell_id: str
    tick: int
    kind: CellKind
    width: float
    label: str = ""


@dataclass(frozen=True)
class TimelineRow:
    """One Gantt entry expanded to unit cells."""
    row_id: str
    process_id: int
    process_label: str
    start_time: int
    end_time: int
    cells: Tuple[TimelineCell, ...]

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time

    @property
    def executing_cells(self) -> Tuple[TimelineCell, ...]:
        return tuple(c for c in self.cells if c.kind == CellKind.EXECUTING)


@dataclass(frozen=True)
class TimelineModel:
    rows: Tuple[TimelineRow, ...] = field(default_factory=tuple)
    max_time: int = 0
    diagnostics: Tuple[Diagnostic, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return not self.rows

    def rows_for(self, process_id: int) -> Tuple[TimelineRow, ...]:
        """All rows of one process, in input order (several under preemptive scheduling)."""
        return tuple(r for r in self.rows if r.process_id == process_id)


class TimelineReconstructor:
    """Pure entries -> TimelineModel transformation."""

    def reconstruct(self, entries: Sequence[TimelineEntry]) -> TimelineModel:
        if not entries:
            return TimelineModel()

        diagnostics = self._check_order(entries)
        for diagnostic in diagnostics:
            log_diagnostic(logger, diagnostic)

        # Equals the last entry's end for well-ordered input.
        max_time = max(entry.end_time for entry in entries)

        rows = tuple(
            self._build_row(index, entry, max_time)
            for index, entry in enumerate(entries)
        )
        return TimelineModel(rows=rows, max_time=max(max_time, 0), diagnostics=tuple(diagnostics))

    @staticmethod
    def _check_order(entries: Sequence[TimelineEntry]) -> List[Diagnostic]:
        diagnostics: List[Diagnostic] = []
        for index in range(1, len(entries)):
            previous, current = entries[index - 1], entries[index]
            if current.start_time < previous.start_time:
                diagnostics.append(Diagnostic.warning(
                    DiagnosticCode.OUT_OF_ORDER_ENTRY,
                    "gantt entry starts before its predecessor",
                    index=index,
                    process_id=current.process_id,
                ))
            elif current.start_time < previous.end_time:
                diagnostics.append(Diagnostic.warning(
                    DiagnosticCode.OVERLAPPING_ENTRY,
                    "gantt entry overlaps its predecessor",
                    index=index,
                    process_id=current.process_id,
                ))
        return diagnostics

    @staticmethod
    def _build_row(index: int, entry: TimelineEntry, max_time: int) -> TimelineRow:
        if max_time <= 0:
            cells: Tuple[TimelineCell, ...] = (
                TimelineCell(
                    cell_id="exec-0",
                    tick=0,
                    kind=CellKind.EXECUTING,
                    width=1.0,
                    label=str(entry.process_id),
                ),
            )
        else:
            width = 1.0 / max_time
            row_cells: List[TimelineCell] = []
            for t in range(0, entry.start_time):
                row_cells.append(TimelineCell(f"idle-{t}", t, CellKind.IDLE, width))
            for t in range(entry.start_time, entry.end_time):
                label = str(entry.process_id) if t == entry.start_time else ""
                row_cells.append(TimelineCell(f"exec-{t}", t, CellKind.EXECUTING, width, label))
            for t in range(entry.end_time, max_time):
                row_cells.append(TimelineCell(f"idle-after-{t}", t, CellKind.IDLE, width))
            cells = tuple(row_cells)

        return TimelineRow(
            row_id=f"row-{index}",
            process_id=entry.process_id,
            process_label=entry.label,
            start_time=entry.start_time,
            end_time=entry.end_time,
            cells=cells,
        )


def reconstruct_timeline(entries: Sequence[TimelineEntry]) -> TimelineModel:
    """Expand Gantt entries into per-row unit cells (pure)."""
    return TimelineReconstructor().reconstruct(entries)
