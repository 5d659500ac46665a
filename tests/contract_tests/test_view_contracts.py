"""
View Contract Tests

Views handed to the page are immutable and serialize to plain JSON types.
"""

import json
from dataclasses import FrozenInstanceError

import pytest

from osdash.contracts import Diagnostic, DiagnosticCode
from osdash.pipeline import RenderPipeline

from ..fixtures import payload_schedule_fcfs, payload_two_process_cycle


@pytest.fixture
def deadlock_page():
    return RenderPipeline().render_deadlock(payload_two_process_cycle())


@pytest.fixture
def schedule_page():
    return RenderPipeline().render_schedule(payload_schedule_fcfs())


class TestImmutability:

    def test_graph_view_is_frozen(self, deadlock_page):
        with pytest.raises(FrozenInstanceError):
            deadlock_page.rag.view.has_deadlock = False

    def test_graph_node_is_frozen(self, deadlock_page):
        with pytest.raises(FrozenInstanceError):
            deadlock_page.rag.view.nodes[0].x = 0

    def test_timeline_cell_is_frozen(self, schedule_page):
        with pytest.raises(FrozenInstanceError):
            schedule_page.timeline.rows[0].cells[0].width = 2.0

    def test_diagnostic_is_frozen(self):
        diagnostic = Diagnostic.warning(DiagnosticCode.DANGLING_REFERENCE, "missing")
        with pytest.raises(FrozenInstanceError):
            diagnostic.message = "changed"

    def test_with_context_returns_new_instance(self):
        original = Diagnostic.warning(DiagnosticCode.DANGLING_REFERENCE, "missing", process_id=3)
        extended = original.with_context("edge_id", "request-0")
        assert original.context_dict() == {"process_id": "3"}
        assert extended.context_dict() == {"process_id": "3", "edge_id": "request-0"}


class TestSerialization:

    def test_deadlock_page_is_json(self, deadlock_page):
        data = json.loads(json.dumps(deadlock_page.to_dict()))
        node = data["rag"]["graph"]["nodes"][0]
        assert set(node) == {"id", "type", "position", "label", "shape", "borderColor", "fillColor", "emphasized"}
        edge = data["wfg"]["graph"]["edges"][0]
        assert edge["style"] == {
            "stroke": "#dc2626",
            "strokeWidth": 3,
            "animated": True,
            "marker": "arrow_closed",
            "pathType": "smoothstep",
        }

    def test_schedule_page_is_json(self, schedule_page):
        data = json.loads(json.dumps(schedule_page.to_dict(), ensure_ascii=False))
        assert data["timeline"]["maxTime"] == 5
        assert data["timeline"]["availability"] == "present"
