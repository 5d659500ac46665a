"""
Snapshot Normalizer Tests

The normalizer is the only layer allowed to tolerate loose payloads.
Everything it drops must be accounted for by a diagnostic.
"""

import pytest

from osdash.contracts import DiagnosticCode, EdgeKind, EndpointType, Severity
from osdash.ingestion import SnapshotNormalizer

from .fixtures import payload_hold_and_request, payload_schedule_fcfs


@pytest.fixture
def normalizer():
    return SnapshotNormalizer()


def codes(report):
    return [d.code for d in report.diagnostics]


class TestDeadlockPayload:

    def test_well_formed_payload(self, normalizer):
        report = normalizer.normalize_deadlock(payload_hold_and_request())
        snap = report.value

        assert report.diagnostics == ()
        assert [p.label for p in snap.processes] == ["A", "B"]
        assert snap.resources[0].available == 0
        assert [e.kind for e in snap.rag_edges] == [EdgeKind.HOLD, EdgeKind.REQUEST]
        assert snap.rag_edges[0].source.entity_type == EndpointType.RESOURCE
        assert snap.has_deadlock is False
        assert snap.deadlocked_process_ids is None

    @pytest.mark.parametrize("payload", [{}, {"processes": None, "resources": None,
                                              "ragEdges": None, "waitForGraph": None,
                                              "hasDeadlock": None}])
    def test_missing_collections_become_empty(self, normalizer, payload):
        report = normalizer.normalize_deadlock(payload)
        snap = report.value
        assert snap.processes == ()
        assert snap.resources == ()
        assert snap.rag_edges == ()
        assert snap.wait_for == ()
        assert snap.has_deadlock is False
        assert set(codes(report)) == {DiagnosticCode.MISSING_COLLECTION}
        assert all(d.severity == Severity.INFO for d in report.diagnostics)
        assert report.dropped_count == 0

    @pytest.mark.parametrize("payload", [None, [], "deadlock", 42])
    def test_non_object_payload(self, normalizer, payload):
        report = normalizer.normalize_deadlock(payload)
        assert report.value.processes == ()
        assert codes(report) == [DiagnosticCode.MALFORMED_PAYLOAD]
        assert report.diagnostics[0].severity == Severity.ERROR

    def test_process_fields(self, normalizer):
        report = normalizer.normalize_deadlock({
            "processes": [
                {"id": "3", "name": None,
                 "allocated": [{"id": 1, "name": "R1", "amount": 2}],
                 "needed": [{"id": 2, "name": "R2", "amount": 1}, "junk"]},
                {"name": "no id"},
                {"id": True, "name": "bool id"},
                "not an object",
            ],
        })
        (proc,) = report.value.processes
        assert proc.process_id == 3
        assert proc.label == "P3"
        assert proc.allocated[0].amount == 2
        assert [a.resource_id for a in proc.needed] == [2]
        assert codes(report).count(DiagnosticCode.MALFORMED_PAYLOAD) == 3

    def test_resource_available_is_clamped(self, normalizer):
        report = normalizer.normalize_deadlock({
            "resources": [
                {"id": 1, "name": "R1", "total": 2, "available": 5},
                {"id": 2, "name": "R2", "total": 2, "available": -1},
                {"id": 3, "name": "R3", "total": 4},
            ],
        })
        assert [(r.total, r.available) for r in report.value.resources] == [(2, 2), (2, 0), (4, 4)]

    def test_edge_with_unknown_kind_is_kept_for_the_builder(self, normalizer):
        report = normalizer.normalize_deadlock({
            "ragEdges": [{
                "type": "borrow",
                "from": {"id": 1, "type": "process"},
                "to": {"id": 1, "type": "resource"},
                "units": 1,
            }],
        })
        (edge,) = report.value.rag_edges
        assert edge.kind is None
        assert edge.raw_kind == "borrow"

    def test_edge_without_endpoint_type_is_dropped(self, normalizer):
        report = normalizer.normalize_deadlock({
            "ragEdges": [
                {"type": "hold", "from": {"id": 1}, "to": {"id": 1, "type": "process"}, "units": 1},
                {"type": "hold", "from": {"id": 1, "type": "resource"}, "to": {"id": 1, "type": "process"}},
            ],
        })
        assert report.value.rag_edges == ()
        assert codes(report).count(DiagnosticCode.MALFORMED_PAYLOAD) == 2

    def test_wait_for_entries(self, normalizer):
        report = normalizer.normalize_deadlock({
            "waitForGraph": [
                {"processId": 1, "processName": "P1",
                 "waitingFor": [{"processId": 2, "processName": "P2"}, {"processName": "?"}]},
                {"processId": 2, "waitingFor": None},
                {"processName": "orphan"},
            ],
        })
        first, second = report.value.wait_for
        assert [t.process_id for t in first.waiting_for] == [2]
        assert second.waiting_for == ()
        assert codes(report).count(DiagnosticCode.MALFORMED_PAYLOAD) == 2

    def test_deadlocked_processes(self, normalizer):
        report = normalizer.normalize_deadlock({
            "hasDeadlock": True,
            "deadlockedProcesses": [1, {"processId": 2}, {"id": "3"}, "x"],
        })
        assert report.value.has_deadlock is True
        assert report.value.deadlocked_process_ids == frozenset({1, 2, 3})


class TestSchedulePayload:

    def test_well_formed_schedule(self, normalizer):
        report = normalizer.normalize_schedule(payload_schedule_fcfs())
        result = report.value
        assert report.diagnostics == ()
        assert result.algorithm == "FCFS"
        assert result.process_count == 2
        assert result.average_waiting_time == 1.5
        assert [p.pid for p in result.processes] == [1, 2]
        assert [(g.process_id, g.start_time, g.end_time) for g in result.gantt_chart] == [(1, 0, 3), (2, 3, 5)]

    def test_empty_schedule(self, normalizer):
        report = normalizer.normalize_schedule({"algorithm": "RR"})
        assert report.value.gantt_chart == ()
        assert report.value.process_count == 0

    def test_gantt_entry_validation(self, normalizer):
        report = normalizer.normalize_schedule({
            "ganttChart": [
                {"processId": 1, "startTime": -2, "endTime": 3},
                {"processId": 2, "startTime": 5, "endTime": 4},
                {"processId": 3, "startTime": 4, "endTime": 4},
                {"processId": 4, "startTime": 4},
            ],
        })
        assert [(g.process_id, g.start_time, g.end_time) for g in report.value.gantt_chart] == [
            (1, 0, 3), (3, 4, 4),
        ]
        assert DiagnosticCode.INVALID_INTERVAL in codes(report)
        assert DiagnosticCode.MALFORMED_PAYLOAD in codes(report)


class TestStatusPayload:

    def test_status(self, normalizer):
        status = normalizer.normalize_status({"hasDeadlock": True, "safeState": False, "status": "deadlocked"}).value
        assert status.has_deadlock is True
        assert status.safe_state is False
        assert status.status == "deadlocked"

    def test_status_defaults(self, normalizer):
        status = normalizer.normalize_status({}).value
        assert status.has_deadlock is False
        assert status.safe_state is True
        assert status.status == "unknown"
