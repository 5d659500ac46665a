"""
Contracts Package

Immutable value types shared by every layer of the dashboard core.
"""

from .base import (
    DiagnosticCode,
    Severity,
    Diagnostic,
    SimulatorError,
    AvailabilityState,
)
from .snapshot import (
    EdgeKind,
    EndpointType,
    ResourceAmount,
    Process,
    Resource,
    Endpoint,
    RAGEdge,
    WaitTarget,
    WaitForEntry,
    DeadlockSnapshot,
    DeadlockStatus,
    TimelineEntry,
    ProcessDetail,
    ScheduleResult,
)

__all__ = [
    # Diagnostics
    'DiagnosticCode',
    'Severity',
    'Diagnostic',
    'SimulatorError',
    'AvailabilityState',
    # Deadlock snapshot
    'EdgeKind',
    'EndpointType',
    'ResourceAmount',
    'Process',
    'Resource',
    'Endpoint',
    'RAGEdge',
    'WaitTarget',
    'WaitForEntry',
    'DeadlockSnapshot',
    'DeadlockStatus',
    # Scheduling
    'TimelineEntry',
    'ProcessDetail',
    'ScheduleResult',
]
