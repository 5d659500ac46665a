"""
Simulator Client

Fetches raw payloads from the OS simulator HTTP API.

PRINCIPLES:
===========
1. Plain request/response, no retries
2. Transport failures and non-2xx answers raise SimulatorError
3. Payloads are returned raw; normalization happens in the ingestion layer
"""

from __future__ import annotations
import logging
from typing import Any, Optional

import httpx

from .config import SimulatorConfig
from .contracts.base import Diagnostic, DiagnosticCode, SimulatorError

logger = logging.getLogger(__name__)

ALGORITHMS = ("FCFS", "SJF", "RR", "PRIORITY")


class SimulatorClient:
    """
    Async client for the simulator API.

    An `httpx.AsyncClient` may be injected (tests pass one built on
    `httpx.MockTransport`); otherwise one is created per request.
    """

    def __init__(
        self,
        config: Optional[SimulatorConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None
    ):
        self._config = config or SimulatorConfig()
        self._http_client = http_client

    async def fetch_deadlock_snapshot(self) -> Any:
        """GET /os/deadlock/visualize"""
        return await self._request("GET", "/os/deadlock/visualize")

    async def fetch_deadlock_status(self) -> Any:
        """GET /os/deadlock"""
        return await self._request("GET", "/os/deadlock")

    async def fetch_schedule(self) -> Any:
        """GET /os/processes: last scheduling result, without re-running it."""
        return await self._request("GET", "/os/processes")

    async def run_schedule(self, algorithm: str, quantum: int = 2, process_count: int = 5) -> Any:
        """POST /os/processes/schedule"""
        body = {"algorithm": algorithm, "quantum": quantum, "processCount": process_count}
        return await self._request("POST", "/os/processes/schedule", json=body)

    async def _request(self, method: str, path: str, json: Any = None) -> Any:
        url = f"{self._config.base_url.rstrip('/')}{path}"
        headers = {"User-Agent": self._config.user_agent}
        try:
            if self._http_client is not None:
                response = await self._http_client.request(method, url, json=json, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=self._config.timeout_seconds) as client:
                    response = await client.request(method, url, json=json, headers=headers)
        except httpx.HTTPError as e:
            diagnostic = Diagnostic.error(
                DiagnosticCode.BACKEND_UNREACHABLE,
                f"simulator request failed: {e}",
                method=method,
                path=path,
            )
            logger.error("%s %s failed: %s", method, url, e)
            raise SimulatorError(diagnostic) from e

        if response.status_code // 100 != 2:
            diagnostic = Diagnostic.error(
                DiagnosticCode.BACKEND_UNREACHABLE,
                f"simulator answered HTTP {response.status_code}",
                method=method,
                path=path,
            )
            logger.error("%s %s -> HTTP %d", method, url, response.status_code)
            raise SimulatorError(diagnostic, status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            diagnostic = Diagnostic.error(
                DiagnosticCode.MALFORMED_PAYLOAD,
                "simulator answered with invalid JSON",
                method=method,
                path=path,
            )
            logger.error("%s %s returned invalid JSON", method, url)
            raise SimulatorError(diagnostic, status_code=response.status_code) from e
