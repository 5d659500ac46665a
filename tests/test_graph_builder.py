"""
Graph Model Builder Tests
=========================

Verifies that the builder:
1. Produces one node per process/resource with stable ids
2. Partitions RAG edges stably and numbers them per partition
3. Drops malformed edges with a diagnostic instead of raising
4. Copies the deadlock verdict without recomputing it
"""

import pytest

from osdash.contracts import DiagnosticCode, Endpoint, EndpointType, RAGEdge, EdgeKind
from osdash.core import build_graphs, GraphModelBuilder, NodeKind, RelationKind
from osdash.ingestion import SnapshotNormalizer

from .fixtures import (
    hold, payload_hold_and_request, payload_two_process_cycle, process,
    request, resource, snapshot, waits,
)


def codes(model):
    return [d.code for d in model.diagnostics]


class TestEmptyInput:

    def test_empty_snapshot_builds_empty_graphs(self):
        model = build_graphs(snapshot())
        assert model.rag_nodes == ()
        assert model.rag_edges == ()
        assert model.wfg_nodes == ()
        assert model.wfg_edges == ()
        assert model.diagnostics == ()

    def test_processes_without_edges(self):
        model = build_graphs(snapshot(processes=[process(1), process(2)]))
        assert [n.node_id for n in model.wfg_nodes] == ["wfg-process-1", "wfg-process-2"]
        assert model.wfg_edges == ()


class TestNodeIdentity:

    def test_rag_node_ids(self):
        model = build_graphs(snapshot(
            processes=[process(3, "A"), process(7, "B")],
            resources=[resource(1, "R1")],
        ))
        assert [n.node_id for n in model.rag_nodes] == ["process-3", "process-7", "resource-1"]
        assert [n.kind for n in model.rag_nodes] == [NodeKind.PROCESS, NodeKind.PROCESS, NodeKind.RESOURCE]

    def test_empty_names_get_synthesized_labels(self):
        model = build_graphs(snapshot(processes=[process(4)], resources=[resource(9)]))
        assert [n.label for n in model.rag_nodes] == ["P4", "R9"]
        assert model.wfg_nodes[0].label == "P4"

    def test_duplicate_process_keeps_first_position_and_last_name(self):
        model = build_graphs(snapshot(
            processes=[process(1, "old"), process(2, "B"), process(1, "new")],
        ))
        assert [n.node_id for n in model.process_nodes] == ["process-1", "process-2"]
        assert model.process_nodes[0].label == "new"
        assert DiagnosticCode.DUPLICATE_ID in codes(model)

    def test_duplicate_resource_collapses(self):
        model = build_graphs(snapshot(resources=[resource(1, "X"), resource(1, "Y")]))
        assert len(model.resource_nodes) == 1
        assert model.resource_nodes[0].label == "Y"


class TestRagEdges:

    def test_hold_and_request_direction(self):
        model = build_graphs(snapshot(
            processes=[process(1)],
            resources=[resource(1)],
            rag_edges=[hold(1, 1), request(1, 1)],
        ))
        hold_edge, request_edge = model.rag_edges
        assert hold_edge.edge_id == "hold-0"
        assert (hold_edge.source_id, hold_edge.target_id) == ("resource-1", "process-1")
        assert request_edge.edge_id == "request-0"
        assert (request_edge.source_id, request_edge.target_id) == ("process-1", "resource-1")

    def test_partition_indices_are_per_kind_and_preserve_order(self):
        model = build_graphs(snapshot(
            processes=[process(1), process(2), process(3)],
            resources=[resource(1), resource(2)],
            rag_edges=[request(3, 2), hold(1, 1), request(2, 1), hold(2, 2)],
        ))
        assert [e.edge_id for e in model.hold_edges] == ["hold-0", "hold-1"]
        assert [e.edge_id for e in model.request_edges] == ["request-0", "request-1"]
        assert model.request_edges[0].source_id == "process-3"
        assert model.request_edges[1].source_id == "process-2"

    def test_dangling_process_reference_is_dropped(self):
        model = build_graphs(snapshot(
            processes=[process(1)],
            resources=[resource(1)],
            rag_edges=[hold(1, 1), request(99, 1)],
        ))
        assert [e.edge_id for e in model.rag_edges] == ["hold-0"]
        assert DiagnosticCode.DANGLING_REFERENCE in codes(model)

    def test_dropped_edge_does_not_renumber_neighbours(self):
        model = build_graphs(snapshot(
            processes=[process(1), process(2)],
            resources=[resource(1)],
            rag_edges=[request(42, 1), request(2, 1)],
        ))
        assert [e.edge_id for e in model.rag_edges] == ["request-1"]

    def test_non_positive_units_is_dropped(self):
        model = build_graphs(snapshot(
            processes=[process(1)],
            resources=[resource(1)],
            rag_edges=[hold(1, 1, units=0)],
        ))
        assert model.rag_edges == ()
        assert codes(model) == [DiagnosticCode.NON_POSITIVE_UNITS]

    def test_endpoint_type_mismatch_is_dropped(self):
        # A hold edge drawn process -> resource contradicts its kind
        backwards = RAGEdge(
            kind=EdgeKind.HOLD,
            source=Endpoint(1, EndpointType.PROCESS),
            target=Endpoint(1, EndpointType.RESOURCE),
            units=1,
        )
        model = build_graphs(snapshot(
            processes=[process(1)], resources=[resource(1)], rag_edges=[backwards],
        ))
        assert model.rag_edges == ()
        assert codes(model) == [DiagnosticCode.ENDPOINT_TYPE_MISMATCH]

    def test_unknown_kind_is_reported(self):
        odd = RAGEdge(
            kind=None,
            source=Endpoint(1, EndpointType.PROCESS),
            target=Endpoint(1, EndpointType.RESOURCE),
            units=1,
            raw_kind="borrow",
        )
        model = build_graphs(snapshot(
            processes=[process(1)], resources=[resource(1)], rag_edges=[odd, request(1, 1)],
        ))
        assert [e.edge_id for e in model.rag_edges] == ["request-0"]
        assert DiagnosticCode.UNKNOWN_EDGE_KIND in codes(model)


class TestWaitForEdges:

    def test_cycle_yields_two_edges(self):
        model = build_graphs(snapshot(
            processes=[process(1), process(2)],
            wait_for=[waits(1, 2), waits(2, 1)],
            has_deadlock=True,
        ))
        assert [(e.edge_id, e.source_id, e.target_id) for e in model.wfg_edges] == [
            ("wfg-edge-0-0", "wfg-process-1", "wfg-process-2"),
            ("wfg-edge-1-0", "wfg-process-2", "wfg-process-1"),
        ]
        assert all(e.kind == RelationKind.WAIT_FOR for e in model.wfg_edges)

    def test_inner_index_follows_waiting_for_order(self):
        model = build_graphs(snapshot(
            processes=[process(1), process(2), process(3)],
            wait_for=[waits(1, 3, 2)],
        ))
        assert [(e.edge_id, e.target_id) for e in model.wfg_edges] == [
            ("wfg-edge-0-0", "wfg-process-3"),
            ("wfg-edge-0-1", "wfg-process-2"),
        ]

    def test_dangling_wait_target_is_dropped(self):
        model = build_graphs(snapshot(
            processes=[process(1), process(2)],
            wait_for=[waits(1, 2, 7)],
        ))
        assert [e.edge_id for e in model.wfg_edges] == ["wfg-edge-0-0"]
        assert codes(model) == [DiagnosticCode.DANGLING_REFERENCE]

    def test_unknown_waiter_drops_all_its_edges(self):
        model = build_graphs(snapshot(processes=[process(1)], wait_for=[waits(5, 1)]))
        assert model.wfg_edges == ()


class TestDeadlockEmphasis:

    def test_no_deadlock_no_emphasis(self):
        model = build_graphs(snapshot(processes=[process(1)], resources=[resource(1)]))
        assert not any(n.emphasized for n in model.rag_nodes + model.wfg_nodes)

    def test_deadlock_emphasizes_every_node(self):
        model = build_graphs(snapshot(
            processes=[process(1), process(2), process(3)],
            resources=[resource(1)],
            has_deadlock=True,
        ))
        assert all(n.emphasized for n in model.rag_nodes + model.wfg_nodes)
        assert model.has_deadlock is True

    def test_named_cycle_emphasizes_only_its_nodes(self):
        model = build_graphs(snapshot(
            processes=[process(1), process(2), process(3)],
            resources=[resource(1), resource(2), resource(3)],
            rag_edges=[hold(1, 1), hold(2, 2), request(1, 2), request(2, 1), hold(3, 3)],
            has_deadlock=True,
            deadlocked_process_ids=frozenset({1, 2}),
        ))
        emphasized = {n.node_id for n in model.rag_nodes if n.emphasized}
        assert emphasized == {"process-1", "process-2", "resource-1", "resource-2"}

    def test_resource_held_and_requested_by_one_process_is_not_on_the_cycle(self):
        model = build_graphs(snapshot(
            processes=[process(1), process(2)],
            resources=[resource(1, total=2), resource(2), resource(3)],
            rag_edges=[
                hold(1, 1), request(1, 1),
                hold(2, 1), hold(3, 2), request(1, 3), request(2, 2),
            ],
            has_deadlock=True,
            deadlocked_process_ids=frozenset({1, 2}),
        ))
        emphasized = {n.node_id for n in model.resource_nodes if n.emphasized}
        assert emphasized == {"resource-2", "resource-3"}

    def test_edges_carry_entity_ids(self):
        model = build_graphs(snapshot(
            processes=[process(10), process(20)],
            resources=[resource(7)],
            rag_edges=[hold(7, 10), request(20, 7)],
            wait_for=[waits(20, 10)],
        ))
        assert [(e.source_entity_id, e.target_entity_id) for e in model.rag_edges] == [(7, 10), (20, 7)]
        assert [(e.source_entity_id, e.target_entity_id) for e in model.wfg_edges] == [(20, 10)]

    def test_verdict_is_not_recomputed(self):
        # A cycle without the backend's verdict stays un-emphasized
        model = build_graphs(snapshot(
            processes=[process(1), process(2)],
            wait_for=[waits(1, 2), waits(2, 1)],
            has_deadlock=False,
        ))
        assert model.has_deadlock is False
        assert not any(n.emphasized for n in model.wfg_nodes)


class TestEndToEnd:

    @pytest.fixture
    def normalizer(self):
        return SnapshotNormalizer()

    def test_hold_and_request_scenario(self, normalizer):
        snap = normalizer.normalize_deadlock(payload_hold_and_request()).value
        model = build_graphs(snap)

        assert len(model.process_nodes) == 2
        assert len(model.resource_nodes) == 1
        assert [(e.edge_id, e.source_id, e.target_id) for e in model.rag_edges] == [
            ("hold-0", "resource-1", "process-1"),
            ("request-0", "process-2", "resource-1"),
        ]
        assert model.wfg_edges == ()

    def test_cycle_scenario(self, normalizer):
        snap = normalizer.normalize_deadlock(payload_two_process_cycle()).value
        model = build_graphs(snap)
        assert len(model.wfg_nodes) == 2
        assert len(model.wfg_edges) == 2
        assert all(n.emphasized for n in model.wfg_nodes)

    def test_builder_is_deterministic(self, normalizer):
        snap = normalizer.normalize_deadlock(payload_two_process_cycle()).value
        builder = GraphModelBuilder()
        assert builder.build(snap) == builder.build(snap)
