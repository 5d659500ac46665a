"""
Test Fixtures

Explicit simulator payloads and snapshot builders.
All fixtures are explicit - no random generation.
"""

from typing import Iterable, Tuple

from osdash.contracts import (
    DeadlockSnapshot, EdgeKind, Endpoint, EndpointType, Process, RAGEdge,
    Resource, TimelineEntry, WaitForEntry, WaitTarget,
)


# =============================================================================
# RAW PAYLOADS (as the simulator sends them)
# =============================================================================

def payload_hold_and_request() -> dict:
    """A holds R1, B requests R1. No deadlock."""
    return {
        "processes": [{"id": 1, "name": "A"}, {"id": 2, "name": "B"}],
        "resources": [{"id": 1, "name": "R1", "total": 1, "available": 0}],
        "ragEdges": [
            {
                "type": "hold",
                "from": {"id": 1, "type": "resource", "name": "R1"},
                "to": {"id": 1, "type": "process", "name": "A"},
                "units": 1,
            },
            {
                "type": "request",
                "from": {"id": 2, "type": "process", "name": "B"},
                "to": {"id": 1, "type": "resource", "name": "R1"},
                "units": 1,
            },
        ],
        "waitForGraph": [],
        "hasDeadlock": False,
    }


def payload_two_process_cycle() -> dict:
    """P1 waits for P2 and P2 waits for P1."""
    return {
        "processes": [{"id": 1, "name": "P1"}, {"id": 2, "name": "P2"}],
        "resources": [
            {"id": 1, "name": "R1", "total": 1, "available": 0},
            {"id": 2, "name": "R2", "total": 1, "available": 0},
        ],
        "ragEdges": [
            {"type": "hold", "from": {"id": 1, "type": "resource", "name": "R1"},
             "to": {"id": 1, "type": "process", "name": "P1"}, "units": 1},
            {"type": "hold", "from": {"id": 2, "type": "resource", "name": "R2"},
             "to": {"id": 2, "type": "process", "name": "P2"}, "units": 1},
            {"type": "request", "from": {"id": 1, "type": "process", "name": "P1"},
             "to": {"id": 2, "type": "resource", "name": "R2"}, "units": 1},
            {"type": "request", "from": {"id": 2, "type": "process", "name": "P2"},
             "to": {"id": 1, "type": "resource", "name": "R1"}, "units": 1},
        ],
        "waitForGraph": [
            {"processId": 1, "processName": "P1", "waitingFor": [{"processId": 2, "processName": "P2"}]},
            {"processId": 2, "processName": "P2", "waitingFor": [{"processId": 1, "processName": "P1"}]},
        ],
        "hasDeadlock": True,
    }


def payload_schedule_fcfs() -> dict:
    return {
        "algorithm": "FCFS",
        "processCount": 2,
        "averageWaitingTime": 1.5,
        "averageTurnaroundTime": 4.0,
        "processes": [
            {"pid": 1, "processName": "P1", "arrivalTime": 0, "burstTime": 3, "priority": 1,
             "startTime": 0, "completionTime": 3, "waitingTime": 0, "turnaroundTime": 3},
            {"pid": 2, "processName": "P2", "arrivalTime": 0, "burstTime": 2, "priority": 2,
             "startTime": 3, "completionTime": 5, "waitingTime": 3, "turnaroundTime": 5},
        ],
        "ganttChart": [
            {"processId": 1, "processName": "P1", "startTime": 0, "endTime": 3},
            {"processId": 2, "processName": "P2", "startTime": 3, "endTime": 5},
        ],
    }


# =============================================================================
# STRICT SNAPSHOT BUILDERS
# =============================================================================

def process(pid: int, name: str = "") -> Process:
    return Process(process_id=pid, name=name)


def resource(rid: int, name: str = "", total: int = 1, available: int = 0) -> Resource:
    return Resource(resource_id=rid, name=name, total=total, available=available)


def hold(rid: int, pid: int, units: int = 1) -> RAGEdge:
    return RAGEdge(
        kind=EdgeKind.HOLD,
        source=Endpoint(rid, EndpointType.RESOURCE),
        target=Endpoint(pid, EndpointType.PROCESS),
        units=units,
        raw_kind="hold",
    )


def request(pid: int, rid: int, units: int = 1) -> RAGEdge:
    return RAGEdge(
        kind=EdgeKind.REQUEST,
        source=Endpoint(pid, EndpointType.PROCESS),
        target=Endpoint(rid, EndpointType.RESOURCE),
        units=units,
        raw_kind="request",
    )


def waits(pid: int, *held_by: int) -> WaitForEntry:
    return WaitForEntry(
        process_id=pid,
        process_name=f"P{pid}",
        waiting_for=tuple(WaitTarget(h, f"P{h}") for h in held_by),
    )


def snapshot(
    processes: Iterable[Process] = (),
    resources: Iterable[Resource] = (),
    rag_edges: Iterable[RAGEdge] = (),
    wait_for: Iterable[WaitForEntry] = (),
    has_deadlock: bool = False,
    deadlocked_process_ids=None,
) -> DeadlockSnapshot:
    return DeadlockSnapshot(
        processes=tuple(processes),
        resources=tuple(resources),
        rag_edges=tuple(rag_edges),
        wait_for=tuple(wait_for),
        has_deadlock=has_deadlock,
        deadlocked_process_ids=deadlocked_process_ids,
    )


def entries(*spans: Tuple[int, int, int]) -> Tuple[TimelineEntry, ...]:
    """entries((pid, start, end), ...)"""
    return tuple(TimelineEntry(pid, f"P{pid}", start, end) for pid, start, end in spans)
