"""
Topology Engine
===============

Structural summary of the built RAG/WFG graphs for the dashboard summary card.

FENCE POST:
===========
This engine computes TOPOLOGY (counts, density, components), not VERDICTS.

ALLOWED:
- Graph construction from a GraphModel
- Connected components (weak, since edges are directed)
- Structural metrics (density, blocked process count)

FORBIDDEN:
- Deadlock detection: the backend's hasDeadlock is ground truth
- Safe-state analysis
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Set, Tuple

import networkx as nx

from .graph_builder import GraphModel, ModelEdge, ModelNode, RelationKind


@dataclass(frozen=True)
class GraphMetrics:
    """Immutable structural metrics for one graph."""
    node_count: int
    edge_count: int
    density: float
    component_count: int
    blocked_process_count: int

    def to_dict(self) -> dict:
        return {
            'node_count': self.node_count,
            'edge_count': self.edge_count,
            'density': round(self.density, 4),
            'component_count': self.component_count,
            'blocked_process_count': self.blocked_process_count,
        }


class TopologyEngine:
    """
    Wraps NetworkX for structural operations on one built graph.

    `build_graph` replaces the internal graph; the engine keeps nothing else.
    """

    def __init__(self):
        self._graph = nx.DiGraph()

    def build_graph(
        self,
        nodes: Tuple[ModelNode, ...],
        edges: Tuple[ModelEdge, ...]
    ) -> None:
        """
        Build graph from model nodes and edges.

        Replaces internal graph state.
        """
        self._graph = nx.DiGraph()
        for node in nodes:
            self._graph.add_node(node.node_id, kind=node.kind.value)
        for edge in edges:
            self._graph.add_edge(
                edge.source_id,
                edge.target_id,
                edge_id=edge.edge_id,
                relation=edge.kind.value,
                units=edge.units,
            )

    def get_connected_components(self) -> List[Set[str]]:
        """Weakly connected components as sets of node ids."""
        if not self._graph:
            return []
        return [set(c) for c in nx.weakly_connected_components(self._graph)]

    def compute_metrics(self) -> GraphMetrics:
        """Compute purely structural metrics."""
        if not self._graph:
            return GraphMetrics(0, 0, 0.0, 0, 0)

        # A process is blocked when it has an outgoing request or wait-for edge.
        blocked = {
            source for source, _, relation in self._graph.edges(data="relation")
            if relation in (RelationKind.REQUEST.value, RelationKind.WAIT_FOR.value)
        }
        return GraphMetrics(
            node_count=self._graph.number_of_nodes(),
            edge_count=self._graph.number_of_edges(),
            density=nx.density(self._graph),
            component_count=len(self.get_connected_components()),
            blocked_process_count=len(blocked),
        )


def summarize(model: GraphModel) -> Tuple[GraphMetrics, GraphMetrics]:
    """(RAG metrics, WFG metrics) for one built model."""
    engine = TopologyEngine()
    engine.build_graph(model.rag_nodes, model.rag_edges)
    rag = engine.compute_metrics()
    engine.build_graph(model.wfg_nodes, model.wfg_edges)
    wfg = engine.compute_metrics()
    return rag, wfg
