"""
Layout Engine

Responsibility:
Assign deterministic 2-D positions to graph nodes and attach the visual
styling that carries meaning (edge kind, deadlock emphasis).

RAG row layout:
    processes on y = process_row_y, resources on y = resource_row_y,
    k-th node of a row at x = rag_start_x + k * rag_spacing.

WFG circular layout:
    node k of n at angle k * 2π/n - π/2 (node 0 at the top, clockwise on screen)
    on a circle of fixed centre and radius.

Positions are a pure function of the node's index: no force simulation,
no overlap avoidance. Layout never fails; empty input yields an empty view
marked MISSING so the page shows its placeholder.
"""

from __future__ import annotations
import math
from typing import Optional, Sequence, Tuple

from ..config import LayoutConfig
from ..contracts.base import AvailabilityState
from ..core.graph_builder import GraphModel, ModelEdge, ModelNode, NodeKind, RelationKind
from ..core.timeline import CellKind, TimelineModel
from .graph import (
    DEADLOCK_BORDER, HOLD_STYLE, PROCESS_BORDER, PROCESS_FILL, REQUEST_STYLE,
    RESOURCE_BORDER, RESOURCE_FILL, WAIT_FOR_STYLE,
    EdgeStyle, GraphEdge, GraphNode, NetworkGraphView, PositionedNode,
)
from .timeline import (
    IDLE_GLYPH, IDLE_TOKEN, ROW_PALETTE,
    RenderedCell, RenderedRow, TimeAxis, TimelineView,
)

_DEFAULT_CONFIG = LayoutConfig()

_EDGE_STYLES = {
    RelationKind.HOLD: HOLD_STYLE,
    RelationKind.REQUEST: REQUEST_STYLE,
    RelationKind.WAIT_FOR: WAIT_FOR_STYLE,
}


# =============================================================================
# POSITIONING
# =============================================================================

def layout_rag(
    nodes: Sequence[ModelNode],
    config: Optional[LayoutConfig] = None
) -> Tuple[PositionedNode, ...]:
    """Row layout. Each row is indexed on its own; output keeps input order."""
    config = config or _DEFAULT_CONFIG
    process_index = 0
    resource_index = 0
    positioned = []
    for node in nodes:
        if node.kind == NodeKind.PROCESS:
            x = config.rag_start_x + process_index * config.rag_spacing
            y = config.process_row_y
            process_index += 1
        else:
            x = config.rag_start_x + resource_index * config.rag_spacing
            y = config.resource_row_y
            resource_index += 1
        positioned.append(PositionedNode(node=node, x=x, y=y))
    return tuple(positioned)


def layout_wfg(
    nodes: Sequence[ModelNode],
    config: Optional[LayoutConfig] = None
) -> Tuple[PositionedNode, ...]:
    """Circular layout around (wfg_center_x, wfg_center_y)."""
    config = config or _DEFAULT_CONFIG
    count = len(nodes)
    if count == 0:
        return ()
    step = (2 * math.pi) / count
    positioned = []
    for k, node in enumerate(nodes):
        angle = k * step - math.pi / 2
        positioned.append(PositionedNode(
            node=node,
            x=config.wfg_center_x + config.wfg_radius * math.cos(angle),
            y=config.wfg_center_y + config.wfg_radius * math.sin(angle),
        ))
    return tuple(positioned)


# =============================================================================
# RENDERING
# =============================================================================

class LayoutEngine:
    """Turns built models into renderable views."""

    def __init__(self, config: Optional[LayoutConfig] = None):
        self._config = config or _DEFAULT_CONFIG

    @property
    def config(self) -> LayoutConfig:
        return self._config

    def render_rag(self, model: GraphModel) -> NetworkGraphView:
        positioned = layout_rag(model.rag_nodes, self._config)
        return self._view("rag", positioned, model.rag_edges, model.has_deadlock)

    def render_wfg(self, model: GraphModel) -> NetworkGraphView:
        positioned = layout_wfg(model.wfg_nodes, self._config)
        return self._view("wfg", positioned, model.wfg_edges, model.has_deadlock)

    def render_timeline(self, model: TimelineModel) -> TimelineView:
        if model.is_empty:
            return TimelineView(
                view_id="gantt",
                rows=(),
                axis=TimeAxis(ticks=(), label="time"),
                max_time=0,
                availability=AvailabilityState.MISSING,
            )

        rows = []
        for row in model.rows:
            color = ROW_PALETTE[row.process_id % len(ROW_PALETTE)]
            cells = tuple(
                RenderedCell(
                    cell_id=cell.cell_id,
                    start_x=cell.tick / model.max_time if model.max_time > 0 else 0.0,
                    width=cell.width,
                    color_token=IDLE_TOKEN if cell.kind == CellKind.IDLE else color,
                    label=IDLE_GLYPH if cell.kind == CellKind.IDLE else cell.label,
                    is_idle=cell.kind == CellKind.IDLE,
                )
                for cell in row.cells
            )
            rows.append(RenderedRow(
                row_id=row.row_id,
                process_id=row.process_id,
                title=row.process_label,
                caption=f"{row.start_time} → {row.end_time} ({row.duration} units)",
                color_token=color,
                cells=cells,
            ))

        if model.max_time > 0:
            ticks = tuple((t / model.max_time, str(t)) for t in range(model.max_time + 1))
        else:
            ticks = ((0.0, "0"),)
        return TimelineView(
            view_id="gantt",
            rows=tuple(rows),
            axis=TimeAxis(ticks=ticks, label="time"),
            max_time=model.max_time,
            availability=AvailabilityState.PRESENT,
        )

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _view(
        self,
        view_id: str,
        positioned: Tuple[PositionedNode, ...],
        edges: Tuple[ModelEdge, ...],
        has_deadlock: bool,
    ) -> NetworkGraphView:
        nodes = tuple(self._node(p) for p in positioned)
        rendered_edges = tuple(self._edge(e) for e in edges)
        availability = AvailabilityState.PRESENT if nodes else AvailabilityState.MISSING
        return NetworkGraphView(
            view_id=view_id,
            nodes=nodes,
            edges=rendered_edges,
            has_deadlock=has_deadlock,
            availability=availability,
        )

    @staticmethod
    def _node(positioned: PositionedNode) -> GraphNode:
        node = positioned.node
        if node.kind == NodeKind.PROCESS:
            node_type, shape, border, fill = "processNode", "circle", PROCESS_BORDER, PROCESS_FILL
        else:
            node_type, shape, border, fill = "resourceNode", "rectangle", RESOURCE_BORDER, RESOURCE_FILL
        return GraphNode(
            node_id=node.node_id,
            node_type=node_type,
            x=positioned.x,
            y=positioned.y,
            label=node.label,
            shape=shape,
            border_color=DEADLOCK_BORDER if node.emphasized else border,
            fill_color=fill,
            emphasized=node.emphasized,
        )

    @staticmethod
    def _edge(edge: ModelEdge) -> GraphEdge:
        style: EdgeStyle = _EDGE_STYLES[edge.kind]
        return GraphEdge(
            edge_id=edge.edge_id,
            source_id=edge.source_id,
            target_id=edge.target_id,
            kind=edge.kind.value,
            style=style,
            label=f"{edge.units} units" if edge.units > 1 else None,
        )
