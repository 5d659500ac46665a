"""
Snapshot Contracts

Strict value types for everything the simulator backend reports.

OWNERSHIP:
==========
Snapshots are owned by the rendering cycle that received them.
They are created on each fetch, never patched, and discarded on the next one.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Optional, Tuple


class EdgeKind(Enum):
    """Kind of a Resource Allocation Graph edge."""
    HOLD = "hold"         # resource -> process
    REQUEST = "request"   # process -> resource


class EndpointType(Enum):
    PROCESS = "process"
    RESOURCE = "resource"


# =============================================================================
# PROCESSES AND RESOURCES
# =============================================================================

@dataclass(frozen=True)
class ResourceAmount:
    """Units of one resource allocated to, or still needed by, a process."""
    resource_id: int
    resource_name: str
    amount: int

    @property
    def label(self) -> str:
        return self.resource_name or f"R{self.resource_id}"


@dataclass(frozen=True)
class Process:
    """A simulated process. Identity is the id; name is display-only."""
    process_id: int
    name: str
    allocated: Tuple[ResourceAmount, ...] = field(default_factory=tuple)
    needed: Tuple[ResourceAmount, ...] = field(default_factory=tuple)

    @property
    def label(self) -> str:
        return self.name or f"P{self.process_id}"


@dataclass(frozen=True)
class Resource:
    """A resource type with total and currently free units."""
    resource_id: int
    name: str
    total: int
    available: int

    @property
    def label(self) -> str:
        return self.name or f"R{self.resource_id}"

    @property
    def allocated(self) -> int:
        return self.total - self.available


# =============================================================================
# GRAPH RELATIONS
# =============================================================================

@dataclass(frozen=True)
class Endpoint:
    """One end of a RAG edge."""
    entity_id: int
    entity_type: EndpointType
    name: str = ""

    @property
    def node_id(self) -> str:
        return f"{self.entity_type.value}-{self.entity_id}"


@dataclass(frozen=True)
class RAGEdge:
    """
    Directed process/resource relation.

    hold:    source=resource, target=process
    request: source=process,  target=resource

    `kind` is None when the backend sent a kind this dashboard does not know;
    `raw_kind` keeps the payload string for diagnostics.
    """
    kind: Optional[EdgeKind]
    source: Endpoint
    target: Endpoint
    units: int
    raw_kind: str = ""


@dataclass(frozen=True)
class WaitTarget:
    process_id: int
    process_name: str = ""


@dataclass(frozen=True)
class WaitForEntry:
    """Process `process_id` is blocked on resources held by every process in `waiting_for`."""
    process_id: int
    process_name: str
    waiting_for: Tuple[WaitTarget, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class DeadlockSnapshot:
    """
    Everything `/os/deadlock/visualize` reports.

    `has_deadlock` is ground truth from the backend.
    `deadlocked_process_ids` is only set when the backend names the processes
    on the cycle; when None, deadlock emphasis applies to every node.
    """
    processes: Tuple[Process, ...] = field(default_factory=tuple)
    resources: Tuple[Resource, ...] = field(default_factory=tuple)
    rag_edges: Tuple[RAGEdge, ...] = field(default_factory=tuple)
    wait_for: Tuple[WaitForEntry, ...] = field(default_factory=tuple)
    has_deadlock: bool = False
    deadlocked_process_ids: Optional[FrozenSet[int]] = None

    @staticmethod
    def empty() -> DeadlockSnapshot:
        return DeadlockSnapshot()


@dataclass(frozen=True)
class DeadlockStatus:
    """Summary from `/os/deadlock`."""
    has_deadlock: bool
    safe_state: bool
    status: str


# =============================================================================
# SCHEDULING
# =============================================================================

@dataclass(frozen=True)
class TimelineEntry:
    """One execution interval [start_time, end_time) of a process."""
    process_id: int
    process_name: str
    start_time: int
    end_time: int

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time

    @property
    def label(self) -> str:
        return self.process_name or f"P{self.process_id}"


@dataclass(frozen=True)
class ProcessDetail:
    """Per-process scheduling metrics computed by the backend."""
    pid: int
    process_name: str
    arrival_time: int
    burst_time: int
    priority: int
    start_time: int
    completion_time: int
    waiting_time: int
    turnaround_time: int

    @property
    def label(self) -> str:
        return self.process_name or f"Process {self.pid}"


@dataclass(frozen=True)
class ScheduleResult:
    """A completed scheduling run."""
    algorithm: str
    process_count: int
    average_waiting_time: float
    average_turnaround_time: float
    processes: Tuple[ProcessDetail, ...] = field(default_factory=tuple)
    gantt_chart: Tuple[TimelineEntry, ...] = field(default_factory=tuple)

    @staticmethod
    def empty() -> ScheduleResult:
        return ScheduleResult(
            algorithm="",
            process_count=0,
            average_waiting_time=0.0,
            average_turnaround_time=0.0,
        )
