"""
Presentation Contracts

Responsibility:
ViewModels for the pure UI pieces around the graphs and the Gantt chart:
banners, legends, placeholders, summary cards, the resource allocation
analysis and the per-process scheduling table.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple

from ..contracts.base import AvailabilityState, Diagnostic
from ..contracts.snapshot import DeadlockStatus, Process, ProcessDetail, ResourceAmount, ScheduleResult
from ..core.topology import GraphMetrics
from ..visualization.graph import (
    HOLD_STROKE, PROCESS_BORDER, REQUEST_STROKE, RESOURCE_BORDER, WAIT_FOR_STROKE,
    NetworkGraphView,
)
from ..visualization.timeline import IDLE_TOKEN, TimelineView

ALLOCATED_FILL = "#3b82f6"
NEEDED_FILL = "#f97316"


@dataclass(frozen=True)
class BannerViewModel:
    """Deadlock status banner under a graph."""
    tone: str       # danger, success
    message: str

    def to_dict(self) -> dict:
        return {'tone': self.tone, 'message': self.message}


@dataclass(frozen=True)
class PlaceholderViewModel:
    message: str

    def to_dict(self) -> dict:
        return {'message': self.message}


@dataclass(frozen=True)
class LegendEntry:
    label: str
    swatch: str     # colour or token
    glyph: str      # circle, rectangle, line, cell

    def to_dict(self) -> dict:
        return {'label': self.label, 'swatch': self.swatch, 'glyph': self.glyph}


@dataclass(frozen=True)
class GraphCardViewModel:
    title: str
    description: str
    border_tone: str
    legend: Tuple[LegendEntry, ...]
    view: NetworkGraphView
    banner: Optional[BannerViewModel]
    placeholder: Optional[PlaceholderViewModel]
    metrics: Optional[GraphMetrics]

    def to_dict(self) -> dict:
        return {
            'title': self.title,
            'description': self.description,
            'borderTone': self.border_tone,
            'legend': [e.to_dict() for e in self.legend],
            'graph': self.view.to_dict(),
            'banner': self.banner.to_dict() if self.banner else None,
            'placeholder': self.placeholder.to_dict() if self.placeholder else None,
            'metrics': self.metrics.to_dict() if self.metrics else None,
        }


@dataclass(frozen=True)
class AllocationRowViewModel:
    """One process in the allocation analysis: bar totals plus the Holds/Needs lines."""
    process_id: int
    name: str
    allocated_units: int
    needed_units: int
    holds: str      # "R1(2), R2(1)"; empty when nothing is held
    needs: str

    def to_dict(self) -> dict:
        return {
            'processId': self.process_id,
            'name': self.name,
            'allocated': self.allocated_units,
            'needed': self.needed_units,
            'holds': self.holds,
            'needs': self.needs,
        }


@dataclass(frozen=True)
class AllocationCardViewModel:
    title: str
    description: str
    legend: Tuple[LegendEntry, ...]
    rows: Tuple[AllocationRowViewModel, ...]

    def to_dict(self) -> dict:
        return {
            'title': self.title,
            'description': self.description,
            'legend': [e.to_dict() for e in self.legend],
            'rows': [r.to_dict() for r in self.rows],
        }


@dataclass(frozen=True)
class DeadlockPageViewModel:
    rag: GraphCardViewModel
    wfg: GraphCardViewModel
    allocation: Optional[AllocationCardViewModel]
    diagnostics: Tuple[Diagnostic, ...]

    def to_dict(self) -> dict:
        return {
            'rag': self.rag.to_dict(),
            'wfg': self.wfg.to_dict(),
            'allocation': self.allocation.to_dict() if self.allocation else None,
            'diagnostics': [d.to_dict() for d in self.diagnostics],
        }


@dataclass(frozen=True)
class StatCardViewModel:
    """Big value with a caption, e.g. "Detected" / "Deadlock Status"."""
    value: str
    caption: str
    tone: str       # danger, warning, success

    def to_dict(self) -> dict:
        return {'value': self.value, 'caption': self.caption, 'tone': self.tone}


@dataclass(frozen=True)
class DeadlockStatusViewModel:
    deadlock: StatCardViewModel
    system_state: StatCardViewModel
    status: str
    diagnostics: Tuple[Diagnostic, ...]

    def to_dict(self) -> dict:
        return {
            'deadlock': self.deadlock.to_dict(),
            'systemState': self.system_state.to_dict(),
            'status': self.status,
            'diagnostics': [d.to_dict() for d in self.diagnostics],
        }


@dataclass(frozen=True)
class ScheduleSummaryViewModel:
    algorithm: str
    process_count: int
    average_waiting_time: str
    average_turnaround_time: str

    def to_dict(self) -> dict:
        return {
            'algorithm': self.algorithm,
            'processCount': self.process_count,
            'averageWaitingTime': self.average_waiting_time,
            'averageTurnaroundTime': self.average_turnaround_time,
        }


@dataclass(frozen=True)
class ProcessRowViewModel:
    """One row of the per-process scheduling table."""
    pid: int
    badge: str
    name: str
    arrival_time: int
    burst_time: int
    priority: int
    priority_tone: str      # destructive below 3, secondary otherwise
    start_time: int
    completion_time: int
    waiting_time: int
    turnaround_time: int

    def to_dict(self) -> dict:
        return {
            'pid': self.pid,
            'badge': self.badge,
            'name': self.name,
            'arrivalTime': self.arrival_time,
            'burstTime': self.burst_time,
            'priority': self.priority,
            'priorityTone': self.priority_tone,
            'startTime': self.start_time,
            'completionTime': self.completion_time,
            'waitingTime': self.waiting_time,
            'turnaroundTime': self.turnaround_time,
        }


@dataclass(frozen=True)
class SchedulePageViewModel:
    summary: ScheduleSummaryViewModel
    processes: Tuple[ProcessRowViewModel, ...]
    timeline: TimelineView
    legend: Tuple[LegendEntry, ...]
    placeholder: Optional[PlaceholderViewModel]
    diagnostics: Tuple[Diagnostic, ...]

    def to_dict(self) -> dict:
        return {
            'summary': self.summary.to_dict(),
            'processes': [p.to_dict() for p in self.processes],
            'timeline': self.timeline.to_dict(),
            'legend': [e.to_dict() for e in self.legend],
            'placeholder': self.placeholder.to_dict() if self.placeholder else None,
            'diagnostics': [d.to_dict() for d in self.diagnostics],
        }


RAG_LEGEND: Tuple[LegendEntry, ...] = (
    LegendEntry("Process (Circle)", PROCESS_BORDER, "circle"),
    LegendEntry("Resource (Rectangle)", RESOURCE_BORDER, "rectangle"),
    LegendEntry("Holding", HOLD_STROKE, "line"),
    LegendEntry("Waiting", REQUEST_STROKE, "line"),
)

WFG_LEGEND: Tuple[LegendEntry, ...] = (
    LegendEntry("Process (Circle)", PROCESS_BORDER, "circle"),
    LegendEntry("Waiting For", WAIT_FOR_STROKE, "line"),
)

GANTT_LEGEND: Tuple[LegendEntry, ...] = (
    LegendEntry("CPU Idle", IDLE_TOKEN, "cell"),
    LegendEntry("Process Executing", "blue-500", "cell"),
)

ALLOCATION_LEGEND: Tuple[LegendEntry, ...] = (
    LegendEntry("Allocated Resources", ALLOCATED_FILL, "bar"),
    LegendEntry("Needed Resources", NEEDED_FILL, "bar"),
)


class DashboardPresenter:
    """Assembles page view models from rendered views. Holds no state."""

    def present_deadlock(
        self,
        rag_view: NetworkGraphView,
        wfg_view: NetworkGraphView,
        rag_metrics: Optional[GraphMetrics] = None,
        wfg_metrics: Optional[GraphMetrics] = None,
        diagnostics: Tuple[Diagnostic, ...] = (),
        processes: Tuple[Process, ...] = (),
    ) -> DeadlockPageViewModel:
        rag = GraphCardViewModel(
            title="Resource Allocation Graph (RAG)",
            description=(
                "Visual representation showing which processes hold which resources "
                "and which resources they're waiting for"
            ),
            border_tone="danger" if rag_view.has_deadlock else "info",
            legend=RAG_LEGEND,
            view=rag_view,
            banner=self._banner(
                rag_view,
                deadlock="DEADLOCK DETECTED: Circular wait condition exists in the system!",
                clear="NO DEADLOCK: System is in a safe state",
            ),
            placeholder=self._placeholder(rag_view, "No processes or resources to display"),
            metrics=rag_metrics,
        )
        wfg = GraphCardViewModel(
            title="Wait-For Graph (WFG)",
            description=(
                "Simplified graph showing only processes. Edge from Pi to Pj means Pi is "
                "waiting for a resource held by Pj (cycle = deadlock)"
            ),
            border_tone="danger" if wfg_view.has_deadlock else "success",
            legend=WFG_LEGEND,
            view=wfg_view,
            banner=self._banner(
                wfg_view,
                deadlock="DEADLOCK DETECTED: Circular wait dependency exists in the Wait-For Graph!",
                clear="NO DEADLOCK: No circular wait condition detected",
            ),
            placeholder=self._placeholder(wfg_view, "No processes to display"),
            metrics=wfg_metrics,
        )
        return DeadlockPageViewModel(
            rag=rag,
            wfg=wfg,
            allocation=self._allocation(processes),
            diagnostics=tuple(diagnostics),
        )

    def present_status(
        self,
        status: DeadlockStatus,
        diagnostics: Tuple[Diagnostic, ...] = (),
    ) -> DeadlockStatusViewModel:
        deadlock = StatCardViewModel(
            value="Detected" if status.has_deadlock else "None",
            caption="Deadlock Status",
            tone="danger" if status.has_deadlock else "success",
        )
        system_state = StatCardViewModel(
            value="Safe" if status.safe_state else "Unsafe",
            caption="System State",
            tone="success" if status.safe_state else "warning",
        )
        return DeadlockStatusViewModel(
            deadlock=deadlock,
            system_state=system_state,
            status=status.status,
            diagnostics=tuple(diagnostics),
        )

    def present_schedule(
        self,
        result: ScheduleResult,
        timeline: TimelineView,
        diagnostics: Tuple[Diagnostic, ...] = (),
    ) -> SchedulePageViewModel:
        summary = ScheduleSummaryViewModel(
            algorithm=result.algorithm or "N/A",
            process_count=result.process_count,
            average_waiting_time=f"{result.average_waiting_time:.2f}",
            average_turnaround_time=f"{result.average_turnaround_time:.2f}",
        )
        placeholder = None
        if timeline.availability == AvailabilityState.MISSING:
            placeholder = PlaceholderViewModel("No schedule yet")
        return SchedulePageViewModel(
            summary=summary,
            processes=tuple(self._process_row(p) for p in result.processes),
            timeline=timeline,
            legend=GANTT_LEGEND,
            placeholder=placeholder,
            diagnostics=tuple(diagnostics),
        )

    @staticmethod
    def _banner(view: NetworkGraphView, deadlock: str, clear: str) -> Optional[BannerViewModel]:
        if view.has_deadlock:
            return BannerViewModel(tone="danger", message=deadlock)
        if view.edges:
            return BannerViewModel(tone="success", message=clear)
        return None

    @staticmethod
    def _placeholder(view: NetworkGraphView, message: str) -> Optional[PlaceholderViewModel]:
        if view.availability == AvailabilityState.MISSING:
            return PlaceholderViewModel(message)
        return None

    @staticmethod
    def _allocation(processes: Tuple[Process, ...]) -> Optional[AllocationCardViewModel]:
        if not processes:
            return None

        def listing(amounts: Tuple[ResourceAmount, ...]) -> str:
            return ", ".join(f"{a.label}({a.amount})" for a in amounts)

        rows = tuple(
            AllocationRowViewModel(
                process_id=proc.process_id,
                name=proc.label,
                allocated_units=sum(a.amount for a in proc.allocated),
                needed_units=sum(a.amount for a in proc.needed),
                holds=listing(proc.allocated),
                needs=listing(proc.needed),
            )
            for proc in processes
        )
        return AllocationCardViewModel(
            title="Resource Allocation Analysis",
            description="Visual representation of allocated and needed resources per process",
            legend=ALLOCATION_LEGEND,
            rows=rows,
        )

    @staticmethod
    def _process_row(detail: ProcessDetail) -> ProcessRowViewModel:
        return ProcessRowViewModel(
            pid=detail.pid,
            badge=f"P{detail.pid}",
            name=detail.label,
            arrival_time=detail.arrival_time,
            burst_time=detail.burst_time,
            priority=detail.priority,
            priority_tone="destructive" if detail.priority < 3 else "secondary",
            start_time=detail.start_time,
            completion_time=detail.completion_time,
            waiting_time=detail.waiting_time,
            turnaround_time=detail.turnaround_time,
        )
