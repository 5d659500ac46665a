"""
Dashboard Orchestrator
======================

Polls the simulator and keeps the last applied page for each stream.

ORDERING:
=========
Every refresh takes a ticket from one monotonically increasing counter
before its request goes out. A response is applied only if its ticket is
newer than the last one applied to the same stream; otherwise it is stale
and discarded (STALE_SNAPSHOT). The render pipeline itself has no notion
of "newest" and is only ever called with the response being applied.
"""

from __future__ import annotations
import asyncio
import itertools
import logging
from typing import Any, Dict, Optional

from .client import SimulatorClient
from .config import DashboardConfig
from .contracts.base import Diagnostic, DiagnosticCode, SimulatorError
from .observability import DiagnosticCollector
from .pipeline import RenderPipeline
from .presentation.viewmodels import (
    DeadlockPageViewModel, DeadlockStatusViewModel, SchedulePageViewModel,
)

logger = logging.getLogger(__name__)

DEADLOCK_STREAM = "deadlock"
SCHEDULE_STREAM = "schedule"
STATUS_STREAM = "status"


class DashboardOrchestrator:
    """Holds the latest rendered pages; rebuilds them from scratch on every applied response."""

    def __init__(
        self,
        client: SimulatorClient,
        config: Optional[DashboardConfig] = None,
        pipeline: Optional[RenderPipeline] = None,
    ):
        self._client = client
        self._config = config or DashboardConfig()
        self._pipeline = pipeline or RenderPipeline(self._config.layout)
        self._tickets = itertools.count(1)
        self._applied: Dict[str, int] = {DEADLOCK_STREAM: 0, SCHEDULE_STREAM: 0, STATUS_STREAM: 0}
        self._deadlock_page: Optional[DeadlockPageViewModel] = None
        self._schedule_page: Optional[SchedulePageViewModel] = None
        self._status_page: Optional[DeadlockStatusViewModel] = None
        self._collector = DiagnosticCollector("orchestrator", logger)

    # =========================================================================
    # STATE
    # =========================================================================

    @property
    def deadlock_page(self) -> Optional[DeadlockPageViewModel]:
        return self._deadlock_page

    @property
    def schedule_page(self) -> Optional[SchedulePageViewModel]:
        return self._schedule_page

    @property
    def status_page(self) -> Optional[DeadlockStatusViewModel]:
        return self._status_page

    @property
    def diagnostics(self) -> DiagnosticCollector:
        return self._collector

    def issue_ticket(self) -> int:
        return next(self._tickets)

    # =========================================================================
    # APPLYING RESPONSES
    # =========================================================================

    def apply_deadlock(self, ticket: int, payload: Any) -> bool:
        """Render and keep `payload` unless a newer deadlock response was already applied."""
        if not self._accept(DEADLOCK_STREAM, ticket):
            return False
        self._deadlock_page = self._pipeline.render_deadlock(payload)
        return True

    def apply_schedule(self, ticket: int, payload: Any) -> bool:
        if not self._accept(SCHEDULE_STREAM, ticket):
            return False
        self._schedule_page = self._pipeline.render_schedule(payload)
        return True

    def apply_status(self, ticket: int, payload: Any) -> bool:
        if not self._accept(STATUS_STREAM, ticket):
            return False
        self._status_page = self._pipeline.render_status(payload)
        return True

    def _accept(self, stream: str, ticket: int) -> bool:
        if ticket <= self._applied[stream]:
            self._collector.collect(Diagnostic.info(
                DiagnosticCode.STALE_SNAPSHOT,
                "response older than the applied one, discarded",
                stream=stream,
                ticket=ticket,
                applied=self._applied[stream],
            ))
            return False
        self._applied[stream] = ticket
        return True

    # =========================================================================
    # REFRESHING
    # =========================================================================

    async def refresh_deadlock(self) -> bool:
        ticket = self.issue_ticket()
        payload = await self._client.fetch_deadlock_snapshot()
        return self.apply_deadlock(ticket, payload)

    async def refresh_schedule(self) -> bool:
        ticket = self.issue_ticket()
        payload = await self._client.fetch_schedule()
        return self.apply_schedule(ticket, payload)

    async def refresh_status(self) -> bool:
        """On-demand `/os/deadlock` summary; not part of the polling cycle."""
        ticket = self.issue_ticket()
        payload = await self._client.fetch_deadlock_status()
        return self.apply_status(ticket, payload)

    async def run_schedule(self, algorithm: str, quantum: int = 2, process_count: int = 5) -> bool:
        """User-triggered scheduling run; its result replaces the schedule page."""
        ticket = self.issue_ticket()
        payload = await self._client.run_schedule(algorithm, quantum, process_count)
        return self.apply_schedule(ticket, payload)

    async def refresh_all(self) -> None:
        """Refresh both streams. A failed stream keeps its last applied page."""
        results = await asyncio.gather(
            self.refresh_deadlock(),
            self.refresh_schedule(),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, SimulatorError):
                self._collector.collect(result.diagnostic)
            elif isinstance(result, BaseException):
                raise result

    async def poll(self, ticks: Optional[int] = None) -> None:
        """Refresh every poll interval; forever when `ticks` is None."""
        interval = self._config.polling.poll_interval_seconds
        for tick in itertools.count(1):
            if ticks is not None and tick > ticks:
                break
            await self.refresh_all()
            logger.debug("poll tick %d complete", tick)
            if ticks is None or tick < ticks:
                await asyncio.sleep(interval)
