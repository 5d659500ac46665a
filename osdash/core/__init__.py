"""
Core Layer

RESPONSIBILITY: Graph model construction, timeline reconstruction, structural metrics.
MUST NOT: Fetch data, recompute deadlock verdicts, keep state between snapshots.
"""

from .graph_builder import (
    GraphModelBuilder, GraphModel, ModelNode, ModelEdge, NodeKind, RelationKind,
    build_graphs,
)
from .timeline import (
    TimelineReconstructor, TimelineModel, TimelineRow, TimelineCell, CellKind,
    reconstruct_timeline,
)
from .topology import TopologyEngine, GraphMetrics, summarize

__all__ = [
    'GraphModelBuilder', 'GraphModel', 'ModelNode', 'ModelEdge', 'NodeKind', 'RelationKind',
    'build_graphs',
    'TimelineReconstructor', 'TimelineModel', 'TimelineRow', 'TimelineCell', 'CellKind',
    'reconstruct_timeline',
    'TopologyEngine', 'GraphMetrics', 'summarize',
]
