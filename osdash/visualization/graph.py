"""
Graph Visualization Contracts

Responsibility:
Renderable, pre-layouted RAG/WFG views. The renderer draws them as-is;
no layout or styling decision is left to the page.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from ..contracts.base import AvailabilityState
from ..core.graph_builder import ModelNode


# =============================================================================
# PALETTE
# =============================================================================

HOLD_STROKE = "#9333ea"        # purple
REQUEST_STROKE = "#ea580c"     # orange
WAIT_FOR_STROKE = "#dc2626"    # red

PROCESS_BORDER = "#16a34a"
PROCESS_FILL = "#dcfce7"
RESOURCE_BORDER = "#2563eb"
RESOURCE_FILL = "#dbeafe"
DEADLOCK_BORDER = "#ef4444"


@dataclass(frozen=True)
class PositionedNode:
    """Output of the layout functions: a model node plus its coordinates."""
    node: ModelNode
    x: float
    y: float

    @property
    def node_id(self) -> str:
        return self.node.node_id


@dataclass(frozen=True)
class GraphNode:
    """Renderable graph node."""
    node_id: str
    node_type: str      # processNode, resourceNode
    x: float
    y: float
    label: str
    shape: str          # circle, rectangle
    border_color: str
    fill_color: str
    emphasized: bool

    def to_dict(self) -> dict:
        return {
            'id': self.node_id,
            'type': self.node_type,
            'position': {'x': self.x, 'y': self.y},
            'label': self.label,
            'shape': self.shape,
            'borderColor': self.border_color,
            'fillColor': self.fill_color,
            'emphasized': self.emphasized,
        }


@dataclass(frozen=True)
class EdgeStyle:
    stroke: str
    stroke_width: int
    animated: bool
    marker: str = "arrow_closed"
    path_type: str = "smoothstep"

    def to_dict(self) -> dict:
        return {
            'stroke': self.stroke,
            'strokeWidth': self.stroke_width,
            'animated': self.animated,
            'marker': self.marker,
            'pathType': self.path_type,
        }


HOLD_STYLE = EdgeStyle(stroke=HOLD_STROKE, stroke_width=3, animated=False)
REQUEST_STYLE = EdgeStyle(stroke=REQUEST_STROKE, stroke_width=3, animated=True)
WAIT_FOR_STYLE = EdgeStyle(stroke=WAIT_FOR_STROKE, stroke_width=3, animated=True)


@dataclass(frozen=True)
class GraphEdge:
    """Renderable directed graph edge."""
    edge_id: str
    source_id: str
    target_id: str
    kind: str           # hold, request, wfg
    style: EdgeStyle
    label: Optional[str]

    def to_dict(self) -> dict:
        return {
            'id': self.edge_id,
            'source': self.source_id,
            'target': self.target_id,
            'kind': self.kind,
            'style': self.style.to_dict(),
            'label': self.label,
        }


@dataclass(frozen=True)
class NetworkGraphView:
    """
    Pre-layouted network graph.
    Same GraphModel + same LayoutConfig = identical view.
    """
    view_id: str
    nodes: Tuple[GraphNode, ...]
    edges: Tuple[GraphEdge, ...]
    has_deadlock: bool
    availability: AvailabilityState

    def node(self, node_id: str) -> Optional[GraphNode]:
        for node in self.nodes:
            if node.node_id == node_id:
                return node
        return None

    def to_dict(self) -> dict:
        return {
            'viewId': self.view_id,
            'nodes': [n.to_dict() for n in self.nodes],
            'edges': [e.to_dict() for e in self.edges],
            'hasDeadlock': self.has_deadlock,
            'availability': self.availability.value,
        }
