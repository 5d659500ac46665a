"""
Timeline Visualization Contracts

Responsibility:
Renderable Gantt chart: TimelineModel (cells) -> TimelineView (coloured, positioned rows).

DETERMINISTIC:
Same schedule = identical view. Cell offsets are pre-calculated here.
"""

from dataclasses import dataclass
from typing import Tuple

from ..contracts.base import AvailabilityState


# Row colours cycle by process id
ROW_PALETTE: Tuple[str, ...] = (
    "blue-500", "green-500", "orange-500", "purple-500", "pink-500", "cyan-500",
)
IDLE_TOKEN = "gray-200"
IDLE_GLYPH = "✕"


@dataclass(frozen=True)
class RenderedCell:
    """A unit cell ready for rendering."""
    cell_id: str
    start_x: float          # Normalized 0-1
    width: float            # Normalized 0-1
    color_token: str
    label: str
    is_idle: bool

    def to_dict(self) -> dict:
        return {
            'id': self.cell_id,
            'startX': self.start_x,
            'width': self.width,
            'color': self.color_token,
            'label': self.label,
            'idle': self.is_idle,
        }


@dataclass(frozen=True)
class RenderedRow:
    row_id: str
    process_id: int
    title: str
    caption: str            # "0 → 3 (3 units)"
    color_token: str
    cells: Tuple[RenderedCell, ...]

    def to_dict(self) -> dict:
        return {
            'id': self.row_id,
            'processId': self.process_id,
            'title': self.title,
            'caption': self.caption,
            'color': self.color_token,
            'cells': [c.to_dict() for c in self.cells],
        }


@dataclass(frozen=True)
class TimeAxis:
    """Shared tick axis: (normalized position, label) per tick boundary."""
    ticks: Tuple[Tuple[float, str], ...]
    label: str

    def to_dict(self) -> dict:
        return {
            'ticks': [{'position': p, 'label': l} for p, l in self.ticks],
            'label': self.label,
        }


@dataclass(frozen=True)
class TimelineView:
    """Fully calculated Gantt chart."""
    view_id: str
    rows: Tuple[RenderedRow, ...]
    axis: TimeAxis
    max_time: int
    availability: AvailabilityState

    def to_dict(self) -> dict:
        return {
            'viewId': self.view_id,
            'rows': [r.to_dict() for r in self.rows],
            'axis': self.axis.to_dict(),
            'maxTime': self.max_time,
            'availability': self.availability.value,
        }
