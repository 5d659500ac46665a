"""
Render Pipeline

payload -> normalize -> build -> layout -> present

The `/os/deadlock` status summary skips build and layout.

Every call rebuilds everything from the given payload; nothing is cached
between calls.
"""

from __future__ import annotations
from typing import Any, Optional

from .config import LayoutConfig
from .core.graph_builder import GraphModelBuilder
from .core.timeline import TimelineReconstructor
from .core.topology import summarize
from .ingestion.normalizer import SnapshotNormalizer
from .presentation.viewmodels import (
    DashboardPresenter, DeadlockPageViewModel, DeadlockStatusViewModel, SchedulePageViewModel,
)
from .visualization.layout import LayoutEngine


class RenderPipeline:
    """Stateless composition of the dashboard layers."""

    def __init__(self, layout: Optional[LayoutConfig] = None):
        self._normalizer = SnapshotNormalizer()
        self._builder = GraphModelBuilder()
        self._reconstructor = TimelineReconstructor()
        self._layout = LayoutEngine(layout)
        self._presenter = DashboardPresenter()

    def render_deadlock(self, payload: Any) -> DeadlockPageViewModel:
        report = self._normalizer.normalize_deadlock(payload)
        model = self._builder.build(report.value)
        rag_metrics, wfg_metrics = summarize(model)
        return self._presenter.present_deadlock(
            rag_view=self._layout.render_rag(model),
            wfg_view=self._layout.render_wfg(model),
            rag_metrics=rag_metrics,
            wfg_metrics=wfg_metrics,
            diagnostics=report.diagnostics + model.diagnostics,
            processes=report.value.processes,
        )

    def render_schedule(self, payload: Any) -> SchedulePageViewModel:
        report = self._normalizer.normalize_schedule(payload)
        timeline = self._reconstructor.reconstruct(report.value.gantt_chart)
        return self._presenter.present_schedule(
            result=report.value,
            timeline=self._layout.render_timeline(timeline),
            diagnostics=report.diagnostics + timeline.diagnostics,
        )

    def render_status(self, payload: Any) -> DeadlockStatusViewModel:
        report = self._normalizer.normalize_status(payload)
        return self._presenter.present_status(report.value, report.diagnostics)
