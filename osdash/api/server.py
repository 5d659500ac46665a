"""
OS Simulator Dashboard: Read API
================================

Serves laid-out dashboard views built from the simulator's latest answers.

Endpoints:
- GET  /health                      -> Liveness
- GET  /api/v1/deadlock/graphs      -> RAG + WFG cards
- GET  /api/v1/deadlock/status      -> Deadlock / system state stat cards
- GET  /api/v1/schedule/timeline    -> Gantt chart + summary of the last run
- POST /api/v1/schedule             -> Run a scheduling algorithm, return its Gantt chart
- GET  /api/v1/diagnostics          -> Diagnostics recorded by the orchestrator

Usage:
    uvicorn osdash.api.server:app --reload
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from .. import __version__
from ..client import ALGORITHMS, SimulatorClient
from ..config import DashboardConfig
from ..contracts.base import SimulatorError
from ..orchestrator import DashboardOrchestrator

logger = logging.getLogger(__name__)


class ScheduleRequest(BaseModel):
    algorithm: str = "FCFS"
    quantum: int = Field(default=2, ge=1)
    processCount: int = Field(default=5, ge=1, le=50)


def create_app(
    config: Optional[DashboardConfig] = None,
    client: Optional[SimulatorClient] = None,
) -> FastAPI:
    """Build the API. `client` is injectable so tests can stub the simulator."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        resolved = config or DashboardConfig.from_env()
        logger.info("Dashboard API using simulator at %s", resolved.simulator.base_url)
        app.state.orchestrator = DashboardOrchestrator(
            client=client or SimulatorClient(resolved.simulator),
            config=resolved,
        )
        yield
        logger.info("Dashboard API shutting down")
        app.state.orchestrator = None

    app = FastAPI(
        title="OS Simulator Dashboard API",
        version=__version__,
        description="Laid-out RAG/WFG graphs and Gantt charts for the OS simulator",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    def orchestrator() -> DashboardOrchestrator:
        instance = getattr(app.state, "orchestrator", None)
        if instance is None:
            raise HTTPException(status_code=503, detail="Orchestrator not initialized")
        return instance

    def bad_gateway(e: SimulatorError) -> HTTPException:
        return HTTPException(status_code=502, detail=e.diagnostic.to_dict())

    @app.get("/health")
    async def health_check():
        orchestrator()
        return {"status": "online"}

    @app.get("/api/v1/deadlock/graphs")
    async def get_deadlock_graphs():
        instance = orchestrator()
        try:
            await instance.refresh_deadlock()
        except SimulatorError as e:
            instance.diagnostics.collect(e.diagnostic)
            raise bad_gateway(e)
        return instance.deadlock_page.to_dict()

    @app.get("/api/v1/deadlock/status")
    async def get_deadlock_status():
        instance = orchestrator()
        try:
            await instance.refresh_status()
        except SimulatorError as e:
            instance.diagnostics.collect(e.diagnostic)
            raise bad_gateway(e)
        return instance.status_page.to_dict()

    @app.get("/api/v1/schedule/timeline")
    async def get_schedule_timeline():
        instance = orchestrator()
        try:
            await instance.refresh_schedule()
        except SimulatorError as e:
            instance.diagnostics.collect(e.diagnostic)
            raise bad_gateway(e)
        return instance.schedule_page.to_dict()

    @app.post("/api/v1/schedule")
    async def run_schedule(request: ScheduleRequest):
        algorithm = request.algorithm.upper()
        if algorithm not in ALGORITHMS:
            raise HTTPException(
                status_code=422,
                detail=f"Unknown algorithm {request.algorithm!r}; expected one of {', '.join(ALGORITHMS)}",
            )
        instance = orchestrator()
        try:
            await instance.run_schedule(algorithm, request.quantum, request.processCount)
        except SimulatorError as e:
            instance.diagnostics.collect(e.diagnostic)
            raise bad_gateway(e)
        return instance.schedule_page.to_dict()

    @app.get("/api/v1/diagnostics")
    async def get_diagnostics():
        instance = orchestrator()
        return {"diagnostics": [d.to_dict() for d in instance.diagnostics.get_entries()]}

    return app


app = create_app()
