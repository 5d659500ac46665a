"""
Visualization Layer

Renderable contracts and the Layout Engine.
"""

from .graph import (
    PositionedNode, GraphNode, GraphEdge, EdgeStyle, NetworkGraphView,
    HOLD_STYLE, REQUEST_STYLE, WAIT_FOR_STYLE, DEADLOCK_BORDER,
)
from .timeline import RenderedCell, RenderedRow, TimeAxis, TimelineView
from .layout import LayoutEngine, layout_rag, layout_wfg

__all__ = [
    'PositionedNode', 'GraphNode', 'GraphEdge', 'EdgeStyle', 'NetworkGraphView',
    'HOLD_STYLE', 'REQUEST_STYLE', 'WAIT_FOR_STYLE', 'DEADLOCK_BORDER',
    'RenderedCell', 'RenderedRow', 'TimeAxis', 'TimelineView',
    'LayoutEngine', 'layout_rag', 'layout_wfg',
]
