"""
Dashboard Configuration

Dataclass configuration for every layer, with environment overrides for the
values an operator changes between deployments.

ENVIRONMENT:
============
- OSDASH_SIMULATOR_URL            base URL of the simulator API (default http://localhost:8080/api)
- OSDASH_TIMEOUT_SECONDS          per-request timeout
- OSDASH_POLL_INTERVAL_SECONDS    orchestrator refresh period
"""

from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Mapping, Optional


DEFAULT_SIMULATOR_URL = "http://localhost:8080/api"


@dataclass(frozen=True)
class LayoutConfig:
    """Fixed layout constants. Changing them changes every rendered picture."""
    # Row layout (RAG)
    rag_start_x: float = 100.0
    rag_spacing: float = 200.0
    process_row_y: float = 80.0
    resource_row_y: float = 280.0

    # Circular layout (WFG)
    wfg_center_x: float = 400.0
    wfg_center_y: float = 250.0
    wfg_radius: float = 150.0

    def __post_init__(self):
        if self.resource_row_y <= self.process_row_y:
            raise ValueError("resource row must sit below the process row")
        if self.rag_spacing <= 0:
            raise ValueError("rag_spacing must be positive")
        if self.wfg_radius <= 0:
            raise ValueError("wfg_radius must be positive")


@dataclass(frozen=True)
class SimulatorConfig:
    base_url: str = DEFAULT_SIMULATOR_URL
    timeout_seconds: float = 10.0
    user_agent: str = "OSDash/0.1"


@dataclass(frozen=True)
class PollingConfig:
    poll_interval_seconds: float = 2.0


@dataclass
class DashboardConfig:
    """Unified configuration for the dashboard."""
    simulator: SimulatorConfig = None
    layout: LayoutConfig = None
    polling: PollingConfig = None

    def __post_init__(self):
        self.simulator = self.simulator or SimulatorConfig()
        self.layout = self.layout or LayoutConfig()
        self.polling = self.polling or PollingConfig()

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> DashboardConfig:
        env = os.environ if environ is None else environ
        simulator = SimulatorConfig(
            base_url=env.get("OSDASH_SIMULATOR_URL", DEFAULT_SIMULATOR_URL).rstrip("/"),
            timeout_seconds=float(env.get("OSDASH_TIMEOUT_SECONDS", "10")),
        )
        polling = PollingConfig(
            poll_interval_seconds=float(env.get("OSDASH_POLL_INTERVAL_SECONDS", "2")),
        )
        return cls(simulator=simulator, polling=polling)
