"""
Snapshot Normalizer
===================

Converts raw simulator JSON payloads into strict snapshot values.

GUARANTEES:
- This is the ONLY place that tolerates missing, null or oddly typed fields
- Every input item is either kept or recorded as a diagnostic
- Never raises for a payload that was parsed as JSON
- No graph logic: referential checks belong to the builder
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, FrozenSet, Generic, List, Optional, Tuple, TypeVar

from ..contracts.base import Diagnostic, DiagnosticCode
from ..contracts.snapshot import (
    DeadlockSnapshot, DeadlockStatus, EdgeKind, Endpoint, EndpointType,
    Process, ProcessDetail, RAGEdge, Resource, ResourceAmount,
    ScheduleResult, TimelineEntry, WaitForEntry, WaitTarget,
)
from ..observability import log_diagnostic

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class NormalizationReport(Generic[T]):
    """
    Normalized value plus everything that had to be dropped or repaired.

    TRACEABLE:
    Every raw item ends up in `value` or in `diagnostics`.
    """
    value: T
    diagnostics: Tuple[Diagnostic, ...] = field(default_factory=tuple)

    @property
    def dropped_count(self) -> int:
        return sum(1 for d in self.diagnostics if d.code != DiagnosticCode.MISSING_COLLECTION)

    def to_dict(self) -> dict:
        return {
            'dropped_count': self.dropped_count,
            'diagnostics': [d.to_dict() for d in self.diagnostics],
        }


# =============================================================================
# FIELD COERCION
# =============================================================================

def _as_int(value: Any) -> Optional[int]:
    """Integer, integral float or numeric string; anything else is None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _as_float(value: Any, default: float = 0.0) -> float:
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return default
    return default


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    if isinstance(value, (int, float)):
        return value != 0
    return False


class SnapshotNormalizer:
    """
    Normalizes simulator payloads.

    NO GRAPH LOGIC:
    - Does not check that edges reference known processes
    - Does not deduplicate ids
    - Does not reorder anything

    EXPLICIT LOGGING:
    - Every drop has a diagnostic
    - Every diagnostic is logged
    """

    def normalize_deadlock(self, payload: Any) -> NormalizationReport[DeadlockSnapshot]:
        """Normalize a `/os/deadlock/visualize` payload."""
        diagnostics: List[Diagnostic] = []
        if not isinstance(payload, dict):
            diagnostics.append(Diagnostic.error(
                DiagnosticCode.MALFORMED_PAYLOAD,
                "deadlock payload is not an object",
                payload_type=type(payload).__name__,
            ))
            return self._finish(DeadlockSnapshot.empty(), diagnostics)

        processes = tuple(
            p for p in (self._process(raw, i, diagnostics)
                        for i, raw in enumerate(self._collection(payload, "processes", diagnostics)))
            if p is not None
        )
        resources = tuple(
            r for r in (self._resource(raw, i, diagnostics)
                        for i, raw in enumerate(self._collection(payload, "resources", diagnostics)))
            if r is not None
        )
        rag_edges = tuple(
            e for e in (self._rag_edge(raw, i, diagnostics)
                        for i, raw in enumerate(self._collection(payload, "ragEdges", diagnostics)))
            if e is not None
        )
        wait_for = tuple(
            w for w in (self._wait_for(raw, i, diagnostics)
                        for i, raw in enumerate(self._collection(payload, "waitForGraph", diagnostics)))
            if w is not None
        )

        snapshot = DeadlockSnapshot(
            processes=processes,
            resources=resources,
            rag_edges=rag_edges,
            wait_for=wait_for,
            has_deadlock=_as_bool(payload.get("hasDeadlock")),
            deadlocked_process_ids=self._deadlocked_ids(payload.get("deadlockedProcesses"), diagnostics),
        )
        return self._finish(snapshot, diagnostics)

    def normalize_schedule(self, payload: Any) -> NormalizationReport[ScheduleResult]:
        """Normalize a scheduling result (`/os/processes` or `/os/processes/schedule`)."""
        diagnostics: List[Diagnostic] = []
        if not isinstance(payload, dict):
            diagnostics.append(Diagnostic.error(
                DiagnosticCode.MALFORMED_PAYLOAD,
                "schedule payload is not an object",
                payload_type=type(payload).__name__,
            ))
            return self._finish(ScheduleResult.empty(), diagnostics)

        details = tuple(
            d for d in (self._process_detail(raw, i, diagnostics)
                        for i, raw in enumerate(self._collection(payload, "processes", diagnostics)))
            if d is not None
        )
        gantt = tuple(
            g for g in (self._timeline_entry(raw, i, diagnostics)
                        for i, raw in enumerate(self._collection(payload, "ganttChart", diagnostics)))
            if g is not None
        )
        process_count = _as_int(payload.get("processCount"))

        result = ScheduleResult(
            algorithm=_as_str(payload.get("algorithm")),
            process_count=process_count if process_count is not None else len(details),
            average_waiting_time=_as_float(payload.get("averageWaitingTime")),
            average_turnaround_time=_as_float(payload.get("averageTurnaroundTime")),
            processes=details,
            gantt_chart=gantt,
        )
        return self._finish(result, diagnostics)

    def normalize_status(self, payload: Any) -> NormalizationReport[DeadlockStatus]:
        """Normalize a `/os/deadlock` summary payload."""
        diagnostics: List[Diagnostic] = []
        if not isinstance(payload, dict):
            diagnostics.append(Diagnostic.error(
                DiagnosticCode.MALFORMED_PAYLOAD,
                "status payload is not an object",
                payload_type=type(payload).__name__,
            ))
            payload = {}
        has_deadlock = _as_bool(payload.get("hasDeadlock"))
        safe_state = payload.get("safeState")
        status = DeadlockStatus(
            has_deadlock=has_deadlock,
            safe_state=_as_bool(safe_state) if safe_state is not None else not has_deadlock,
            status=_as_str(payload.get("status")) or "unknown",
        )
        return self._finish(status, diagnostics)

    # =========================================================================
    # COLLECTIONS
    # =========================================================================

    def _collection(self, payload: dict, key: str, diagnostics: List[Diagnostic]) -> list:
        raw = payload.get(key)
        if raw is None:
            diagnostics.append(Diagnostic.info(
                DiagnosticCode.MISSING_COLLECTION,
                "collection absent, treated as empty",
                field=key,
            ))
            return []
        if not isinstance(raw, list):
            diagnostics.append(Diagnostic.warning(
                DiagnosticCode.MALFORMED_PAYLOAD,
                "collection is not a list, treated as empty",
                field=key,
                value_type=type(raw).__name__,
            ))
            return []
        return raw

    @staticmethod
    def _malformed(diagnostics: List[Diagnostic], where: str, index: int, reason: str) -> None:
        diagnostics.append(Diagnostic.warning(
            DiagnosticCode.MALFORMED_PAYLOAD,
            reason,
            field=where,
            index=index,
        ))

    # =========================================================================
    # DEADLOCK ITEMS
    # =========================================================================

    def _amounts(self, raw: Any) -> Tuple[ResourceAmount, ...]:
        if not isinstance(raw, list):
            return ()
        amounts = []
        for item in raw:
            if not isinstance(item, dict):
                continue
            resource_id = _as_int(item.get("id"))
            amount = _as_int(item.get("amount"))
            if resource_id is None or amount is None:
                continue
            amounts.append(ResourceAmount(
                resource_id=resource_id,
                resource_name=_as_str(item.get("name")),
                amount=amount,
            ))
        return tuple(amounts)

    def _process(self, raw: Any, index: int, diagnostics: List[Diagnostic]) -> Optional[Process]:
        if not isinstance(raw, dict):
            self._malformed(diagnostics, "processes", index, "process entry is not an object")
            return None
        process_id = _as_int(raw.get("id"))
        if process_id is None:
            self._malformed(diagnostics, "processes", index, "process entry has no integer id")
            return None
        return Process(
            process_id=process_id,
            name=_as_str(raw.get("name")),
            allocated=self._amounts(raw.get("allocated")),
            needed=self._amounts(raw.get("needed")),
        )

    def _resource(self, raw: Any, index: int, diagnostics: List[Diagnostic]) -> Optional[Resource]:
        if not isinstance(raw, dict):
            self._malformed(diagnostics, "resources", index, "resource entry is not an object")
            return None
        resource_id = _as_int(raw.get("id"))
        if resource_id is None:
            self._malformed(diagnostics, "resources", index, "resource entry has no integer id")
            return None
        total = max(_as_int(raw.get("total")) or 0, 0)
        available = _as_int(raw.get("available"))
        if available is None:
            available = total
        return Resource(
            resource_id=resource_id,
            name=_as_str(raw.get("name")),
            total=total,
            available=min(max(available, 0), total),
        )

    def _endpoint(self, raw: Any) -> Optional[Endpoint]:
        if not isinstance(raw, dict):
            return None
        entity_id = _as_int(raw.get("id"))
        try:
            entity_type = EndpointType(_as_str(raw.get("type")).strip().lower())
        except ValueError:
            return None
        if entity_id is None:
            return None
        return Endpoint(entity_id=entity_id, entity_type=entity_type, name=_as_str(raw.get("name")))

    def _rag_edge(self, raw: Any, index: int, diagnostics: List[Diagnostic]) -> Optional[RAGEdge]:
        if not isinstance(raw, dict):
            self._malformed(diagnostics, "ragEdges", index, "edge entry is not an object")
            return None
        source = self._endpoint(raw.get("from"))
        target = self._endpoint(raw.get("to"))
        if source is None or target is None:
            self._malformed(diagnostics, "ragEdges", index, "edge endpoint missing id or type")
            return None
        units = _as_int(raw.get("units"))
        if units is None:
            self._malformed(diagnostics, "ragEdges", index, "edge has no integer units")
            return None
        raw_kind = _as_str(raw.get("type")).strip().lower()
        try:
            kind: Optional[EdgeKind] = EdgeKind(raw_kind)
        except ValueError:
            # The builder reports unknown kinds; keep the edge so it can.
            kind = None
        return RAGEdge(kind=kind, source=source, target=target, units=units, raw_kind=raw_kind)

    def _wait_for(self, raw: Any, index: int, diagnostics: List[Diagnostic]) -> Optional[WaitForEntry]:
        if not isinstance(raw, dict):
            self._malformed(diagnostics, "waitForGraph", index, "wait-for entry is not an object")
            return None
        process_id = _as_int(raw.get("processId"))
        if process_id is None:
            self._malformed(diagnostics, "waitForGraph", index, "wait-for entry has no integer processId")
            return None
        targets = []
        waiting_for = raw.get("waitingFor")
        for inner, item in enumerate(waiting_for if isinstance(waiting_for, list) else []):
            target_id = _as_int(item.get("processId")) if isinstance(item, dict) else None
            if target_id is None:
                self._malformed(diagnostics, "waitForGraph.waitingFor", index,
                                f"waitingFor[{inner}] has no integer processId")
                continue
            targets.append(WaitTarget(process_id=target_id, process_name=_as_str(item.get("processName"))))
        return WaitForEntry(
            process_id=process_id,
            process_name=_as_str(raw.get("processName")),
            waiting_for=tuple(targets),
        )

    def _deadlocked_ids(self, raw: Any, diagnostics: List[Diagnostic]) -> Optional[FrozenSet[int]]:
        if raw is None:
            return None
        if not isinstance(raw, list):
            diagnostics.append(Diagnostic.warning(
                DiagnosticCode.MALFORMED_PAYLOAD,
                "deadlockedProcesses is not a list, ignored",
                field="deadlockedProcesses",
            ))
            return None
        ids = set()
        for item in raw:
            value = item.get("processId", item.get("id")) if isinstance(item, dict) else item
            process_id = _as_int(value)
            if process_id is not None:
                ids.add(process_id)
        return frozenset(ids)

    # =========================================================================
    # SCHEDULE ITEMS
    # =========================================================================

    def _process_detail(self, raw: Any, index: int, diagnostics: List[Diagnostic]) -> Optional[ProcessDetail]:
        if not isinstance(raw, dict):
            self._malformed(diagnostics, "processes", index, "process detail is not an object")
            return None
        pid = _as_int(raw.get("pid"))
        if pid is None:
            self._malformed(diagnostics, "processes", index, "process detail has no integer pid")
            return None

        def number(key: str) -> int:
            return _as_int(raw.get(key)) or 0

        return ProcessDetail(
            pid=pid,
            process_name=_as_str(raw.get("processName")),
            arrival_time=number("arrivalTime"),
            burst_time=number("burstTime"),
            priority=number("priority"),
            start_time=number("startTime"),
            completion_time=number("completionTime"),
            waiting_time=number("waitingTime"),
            turnaround_time=number("turnaroundTime"),
        )

    def _timeline_entry(self, raw: Any, index: int, diagnostics: List[Diagnostic]) -> Optional[TimelineEntry]:
        if not isinstance(raw, dict):
            self._malformed(diagnostics, "ganttChart", index, "gantt entry is not an object")
            return None
        process_id = _as_int(raw.get("processId"))
        start = _as_int(raw.get("startTime"))
        end = _as_int(raw.get("endTime"))
        if process_id is None or start is None or end is None:
            self._malformed(diagnostics, "ganttChart", index, "gantt entry missing processId/startTime/endTime")
            return None
        start, end = max(start, 0), max(end, 0)
        if end < start:
            diagnostics.append(Diagnostic.warning(
                DiagnosticCode.INVALID_INTERVAL,
                "gantt entry ends before it starts",
                index=index,
                process_id=process_id,
                start_time=start,
                end_time=end,
            ))
            return None
        return TimelineEntry(
            process_id=process_id,
            process_name=_as_str(raw.get("processName")),
            start_time=start,
            end_time=end,
        )

    @staticmethod
    def _finish(value: T, diagnostics: List[Diagnostic]) -> NormalizationReport[T]:
        for diagnostic in diagnostics:
            log_diagnostic(logger, diagnostic)
        return NormalizationReport(value=value, diagnostics=tuple(diagnostics))
