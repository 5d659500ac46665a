"""
Observability Layer

RESPONSIBILITY: Record diagnostics emitted by every layer and mirror them to `logging`.

WHAT THIS LAYER MUST NOT DO:
============================
- Modify system behavior
- Filter or reinterpret diagnostics (only record them)
- Decide anything based on recorded data
"""

from __future__ import annotations
import logging
from typing import Dict, Iterable, List, Optional

from .contracts.base import Diagnostic, DiagnosticCode, Severity


_LEVELS: Dict[Severity, int] = {
    Severity.INFO: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.ERROR,
}


def log_diagnostic(logger: logging.Logger, diagnostic: Diagnostic) -> None:
    """Emit one diagnostic on `logger` at the level matching its severity."""
    context = ", ".join(f"{k}={v}" for k, v in diagnostic.context)
    if context:
        logger.log(_LEVELS[diagnostic.severity], "%s: %s (%s)",
                   diagnostic.code.name, diagnostic.message, context)
    else:
        logger.log(_LEVELS[diagnostic.severity], "%s: %s",
                   diagnostic.code.name, diagnostic.message)


class DiagnosticCollector:
    """
    Append-only diagnostic collector.

    One collector per layer; each collected record is also logged on the
    layer's logger so operators see drops without querying the collector.
    """

    def __init__(self, layer_name: str, logger: Optional[logging.Logger] = None):
        self._layer_name = layer_name
        self._logger = logger or logging.getLogger(f"osdash.{layer_name}")
        self._entries: List[Diagnostic] = []

    def collect(self, diagnostic: Diagnostic) -> None:
        """Collect a diagnostic (append-only)."""
        self._entries.append(diagnostic)
        log_diagnostic(self._logger, diagnostic)

    def extend(self, diagnostics: Iterable[Diagnostic]) -> None:
        for diagnostic in diagnostics:
            self.collect(diagnostic)

    def get_entries(
        self,
        code: Optional[DiagnosticCode] = None,
        severity: Optional[Severity] = None
    ) -> List[Diagnostic]:
        """Get entries, optionally filtered."""
        entries = self._entries
        if code:
            entries = [d for d in entries if d.code == code]
        if severity:
            entries = [d for d in entries if d.severity == severity]
        return list(entries)

    def snapshot(self) -> tuple:
        return tuple(self._entries)

    @property
    def layer_name(self) -> str:
        return self._layer_name

    @property
    def entry_count(self) -> int:
        return len(self._entries)
