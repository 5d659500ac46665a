"""
Graph Model Builder
===================

Converts a DeadlockSnapshot into two typed graphs ready for layout:
the Resource Allocation Graph (RAG) and the Wait-For Graph (WFG).

IDENTITY RULES:
===============
- RAG nodes:  process-<id>, resource-<id>
- WFG nodes:  wfg-process-<id>
- RAG edges:  hold-<i>, request-<i>  (i = index within the kind partition of the input)
- WFG edges:  wfg-edge-<outer>-<inner>  (wait-for entry index, waitingFor index)

Edge indices are taken BEFORE validation, so dropping a bad edge never
renumbers its neighbours. Same input order always yields the same ids.

DUPLICATE IDS:
==============
A repeated process/resource id collapses to one node that keeps the position
of its first occurrence and the attributes of its last occurrence.

The builder never raises for a normalized snapshot. Anything it cannot
place in a graph is dropped and reported as a Diagnostic.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Set, Tuple

from ..contracts.base import Diagnostic, DiagnosticCode
from ..contracts.snapshot import (
    DeadlockSnapshot, EdgeKind, EndpointType, Process, RAGEdge, Resource,
)
from ..observability import log_diagnostic

logger = logging.getLogger(__name__)


class NodeKind(Enum):
    PROCESS = "process"
    RESOURCE = "resource"


class RelationKind(Enum):
    HOLD = "hold"
    REQUEST = "request"
    WAIT_FOR = "wfg"


@dataclass(frozen=True)
class ModelNode:
    """A graph node before layout."""
    node_id: str
    kind: NodeKind
    entity_id: int
    label: str
    emphasized: bool


@dataclass(frozen=True)
class ModelEdge:
    """A directed graph edge before styling."""
    edge_id: str
    kind: RelationKind
    source_id: str
    target_id: str
    source_entity_id: int
    target_entity_id: int
    units: int = 1


@dataclass(frozen=True)
class GraphModel:
    """
    Both dependency graphs derived from one snapshot.

    `has_deadlock` is copied from the snapshot untouched.
    """
    rag_nodes: Tuple[ModelNode, ...] = field(default_factory=tuple)
    rag_edges: Tuple[ModelEdge, ...] = field(default_factory=tuple)
    wfg_nodes: Tuple[ModelNode, ...] = field(default_factory=tuple)
    wfg_edges: Tuple[ModelEdge, ...] = field(default_factory=tuple)
    has_deadlock: bool = False
    diagnostics: Tuple[Diagnostic, ...] = field(default_factory=tuple)

    @property
    def hold_edges(self) -> Tuple[ModelEdge, ...]:
        return tuple(e for e in self.rag_edges if e.kind == RelationKind.HOLD)

    @property
    def request_edges(self) -> Tuple[ModelEdge, ...]:
        return tuple(e for e in self.rag_edges if e.kind == RelationKind.REQUEST)

    @property
    def process_nodes(self) -> Tuple[ModelNode, ...]:
        return tuple(n for n in self.rag_nodes if n.kind == NodeKind.PROCESS)

    @property
    def resource_nodes(self) -> Tuple[ModelNode, ...]:
        return tuple(n for n in self.rag_nodes if n.kind == NodeKind.RESOURCE)


# Expected (source, target) endpoint types per RAG edge kind
_EXPECTED_ENDPOINTS = {
    EdgeKind.HOLD: (EndpointType.RESOURCE, EndpointType.PROCESS),
    EdgeKind.REQUEST: (EndpointType.PROCESS, EndpointType.RESOURCE),
}


class GraphModelBuilder:
    """
    Pure snapshot -> GraphModel transformation.

    Holds no state between calls; every build starts from scratch.
    """

    def build(self, snapshot: DeadlockSnapshot) -> GraphModel:
        diagnostics: List[Diagnostic] = []

        processes = self._index_processes(snapshot.processes, diagnostics)
        resources = self._index_resources(snapshot.resources, diagnostics)

        rag_edges = self._build_rag_edges(snapshot.rag_edges, processes, resources, diagnostics)
        wfg_edges = self._build_wfg_edges(snapshot, processes, diagnostics)

        rag_nodes = self._build_rag_nodes(snapshot, processes, resources, rag_edges)
        wfg_nodes = tuple(
            ModelNode(
                node_id=f"wfg-process-{pid}",
                kind=NodeKind.PROCESS,
                entity_id=pid,
                label=proc.label,
                emphasized=self._process_emphasized(snapshot, pid),
            )
            for pid, proc in processes.items()
        )

        for diagnostic in diagnostics:
            log_diagnostic(logger, diagnostic)

        return GraphModel(
            rag_nodes=rag_nodes,
            rag_edges=rag_edges,
            wfg_nodes=wfg_nodes,
            wfg_edges=wfg_edges,
            has_deadlock=snapshot.has_deadlock,
            diagnostics=tuple(diagnostics),
        )

    # =========================================================================
    # NODES
    # =========================================================================

    @staticmethod
    def _index_processes(processes: Tuple[Process, ...], diagnostics: List[Diagnostic]) -> Dict[int, Process]:
        index: Dict[int, Process] = {}
        for proc in processes:
            if proc.process_id in index:
                diagnostics.append(Diagnostic.warning(
                    DiagnosticCode.DUPLICATE_ID,
                    "duplicate process id, last entry wins",
                    process_id=proc.process_id,
                ))
            index[proc.process_id] = proc
        return index

    @staticmethod
    def _index_resources(resources: Tuple[Resource, ...], diagnostics: List[Diagnostic]) -> Dict[int, Resource]:
        index: Dict[int, Resource] = {}
        for res in resources:
            if res.resource_id in index:
                diagnostics.append(Diagnostic.warning(
                    DiagnosticCode.DUPLICATE_ID,
                    "duplicate resource id, last entry wins",
                    resource_id=res.resource_id,
                ))
            index[res.resource_id] = res
        return index

    @staticmethod
    def _process_emphasized(snapshot: DeadlockSnapshot, process_id: int) -> bool:
        if not snapshot.has_deadlock:
            return False
        if snapshot.deadlocked_process_ids is None:
            return True
        return process_id in snapshot.deadlocked_process_ids

    def _build_rag_nodes(
        self,
        snapshot: DeadlockSnapshot,
        processes: Dict[int, Process],
        resources: Dict[int, Resource],
        rag_edges: Tuple[ModelEdge, ...],
    ) -> Tuple[ModelNode, ...]:
        nodes = [
            ModelNode(
                node_id=f"process-{pid}",
                kind=NodeKind.PROCESS,
                entity_id=pid,
                label=proc.label,
                emphasized=self._process_emphasized(snapshot, pid),
            )
            for pid, proc in processes.items()
        ]

        # With a named cycle, a resource is on it when a deadlocked process
        # holds it and a different deadlocked process requests it.
        holders: Dict[int, Set[int]] = {}
        requesters: Dict[int, Set[int]] = {}
        cycle = snapshot.deadlocked_process_ids
        if snapshot.has_deadlock and cycle is not None:
            for edge in rag_edges:
                if edge.kind == RelationKind.HOLD and edge.target_entity_id in cycle:
                    holders.setdefault(edge.source_entity_id, set()).add(edge.target_entity_id)
                elif edge.kind == RelationKind.REQUEST and edge.source_entity_id in cycle:
                    requesters.setdefault(edge.target_entity_id, set()).add(edge.source_entity_id)

        for rid, res in resources.items():
            if cycle is None:
                emphasized = snapshot.has_deadlock
            else:
                emphasized = self._joins_cycle(holders.get(rid, set()), requesters.get(rid, set()))
            nodes.append(ModelNode(
                node_id=f"resource-{rid}",
                kind=NodeKind.RESOURCE,
                entity_id=rid,
                label=res.label,
                emphasized=emphasized,
            ))
        return tuple(nodes)

    @staticmethod
    def _joins_cycle(holders: Set[int], requesters: Set[int]) -> bool:
        return any(h != r for h in holders for r in requesters)

    # =========================================================================
    # EDGES
    # =========================================================================

    def _build_rag_edges(
        self,
        edges: Tuple[RAGEdge, ...],
        processes: Dict[int, Process],
        resources: Dict[int, Resource],
        diagnostics: List[Diagnostic],
    ) -> Tuple[ModelEdge, ...]:
        hold_edges = [e for e in edges if e.kind == EdgeKind.HOLD]
        request_edges = [e for e in edges if e.kind == EdgeKind.REQUEST]

        for position, edge in enumerate(edges):
            if edge.kind is None:
                diagnostics.append(Diagnostic.warning(
                    DiagnosticCode.UNKNOWN_EDGE_KIND,
                    "RAG edge kind not recognised, dropped",
                    position=position,
                    kind=edge.raw_kind or "<empty>",
                ))

        built: List[ModelEdge] = []
        for kind, partition in ((EdgeKind.HOLD, hold_edges), (EdgeKind.REQUEST, request_edges)):
            for idx, edge in enumerate(partition):
                edge_id = f"{kind.value}-{idx}"
                problem = self._check_rag_edge(edge, processes, resources)
                if problem is not None:
                    diagnostics.append(problem.with_context("edge_id", edge_id))
                    continue
                built.append(ModelEdge(
                    edge_id=edge_id,
                    kind=RelationKind(kind.value),
                    source_id=edge.source.node_id,
                    target_id=edge.target.node_id,
                    source_entity_id=edge.source.entity_id,
                    target_entity_id=edge.target.entity_id,
                    units=edge.units,
                ))
        return tuple(built)

    @staticmethod
    def _check_rag_edge(
        edge: RAGEdge,
        processes: Dict[int, Process],
        resources: Dict[int, Resource],
    ) -> Optional[Diagnostic]:
        expected = _EXPECTED_ENDPOINTS[edge.kind]
        actual = (edge.source.entity_type, edge.target.entity_type)
        if actual != expected:
            return Diagnostic.warning(
                DiagnosticCode.ENDPOINT_TYPE_MISMATCH,
                f"{edge.kind.value} edge must run {expected[0].value} -> {expected[1].value}",
                source=edge.source.node_id,
                target=edge.target.node_id,
            )
        if edge.units <= 0:
            return Diagnostic.warning(
                DiagnosticCode.NON_POSITIVE_UNITS,
                "edge units must be positive",
                units=edge.units,
            )
        for endpoint in (edge.source, edge.target):
            known = processes if endpoint.entity_type == EndpointType.PROCESS else resources
            if endpoint.entity_id not in known:
                return Diagnostic.warning(
                    DiagnosticCode.DANGLING_REFERENCE,
                    f"edge references unknown {endpoint.entity_type.value}",
                    endpoint=endpoint.node_id,
                )
        return None

    @staticmethod
    def _build_wfg_edges(
        snapshot: DeadlockSnapshot,
        processes: Dict[int, Process],
        diagnostics: List[Diagnostic],
    ) -> Tuple[ModelEdge, ...]:
        built: List[ModelEdge] = []
        for outer, entry in enumerate(snapshot.wait_for):
            for inner, target in enumerate(entry.waiting_for):
                edge_id = f"wfg-edge-{outer}-{inner}"
                missing = [pid for pid in (entry.process_id, target.process_id) if pid not in processes]
                if missing:
                    diagnostics.append(Diagnostic.warning(
                        DiagnosticCode.DANGLING_REFERENCE,
                        "wait-for edge references unknown process",
                        edge_id=edge_id,
                        process_id=missing[0],
                    ))
                    continue
                built.append(ModelEdge(
                    edge_id=edge_id,
                    kind=RelationKind.WAIT_FOR,
                    source_id=f"wfg-process-{entry.process_id}",
                    target_id=f"wfg-process-{target.process_id}",
                    source_entity_id=entry.process_id,
                    target_entity_id=target.process_id,
                ))
        return tuple(built)


def build_graphs(snapshot: DeadlockSnapshot) -> GraphModel:
    """Build RAG and WFG models from one snapshot (pure)."""
    return GraphModelBuilder().build(snapshot)
