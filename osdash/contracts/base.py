"""
Base Contracts and Shared Types

Foundational diagnostic types used across all layers.
All types here are IMMUTABLE and represent pure data.

BOUNDARY ENFORCEMENT:
=====================
- Diagnostics are data, not exceptions
- The pure core reports problems through these records and keeps going
- Only the network boundary raises (SimulatorError)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, Tuple


# =============================================================================
# DIAGNOSTIC CODES (Explicit, never silent)
# =============================================================================

class DiagnosticCode(Enum):
    """
    Explicit diagnostic codes.
    Every dropped or repaired input item maps to exactly one code.
    """
    # Ingestion
    MALFORMED_PAYLOAD = auto()
    MISSING_COLLECTION = auto()

    # Graph construction
    UNKNOWN_EDGE_KIND = auto()
    ENDPOINT_TYPE_MISMATCH = auto()
    NON_POSITIVE_UNITS = auto()
    DANGLING_REFERENCE = auto()
    DUPLICATE_ID = auto()

    # Timeline
    INVALID_INTERVAL = auto()
    OUT_OF_ORDER_ENTRY = auto()
    OVERLAPPING_ENTRY = auto()

    # Boundary
    STALE_SNAPSHOT = auto()
    BACKEND_UNREACHABLE = auto()


class Severity(Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Diagnostic:
    """
    Immutable diagnostic record with context.
    Diagnostics can be stored, queried and shipped to the orchestrator.
    """
    code: DiagnosticCode
    severity: Severity
    message: str
    context: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)

    def with_context(self, key: str, value: object) -> Diagnostic:
        """Return new Diagnostic with additional context (immutable)."""
        return Diagnostic(
            code=self.code,
            severity=self.severity,
            message=self.message,
            context=self.context + ((key, str(value)),)
        )

    @staticmethod
    def warning(code: DiagnosticCode, message: str, **context: object) -> Diagnostic:
        return Diagnostic(
            code=code,
            severity=Severity.WARNING,
            message=message,
            context=tuple((k, str(v)) for k, v in context.items())
        )

    @staticmethod
    def info(code: DiagnosticCode, message: str, **context: object) -> Diagnostic:
        return Diagnostic(
            code=code,
            severity=Severity.INFO,
            message=message,
            context=tuple((k, str(v)) for k, v in context.items())
        )

    @staticmethod
    def error(code: DiagnosticCode, message: str, **context: object) -> Diagnostic:
        return Diagnostic(
            code=code,
            severity=Severity.ERROR,
            message=message,
            context=tuple((k, str(v)) for k, v in context.items())
        )

    def context_dict(self) -> Dict[str, str]:
        return dict(self.context)

    def to_dict(self) -> dict:
        return {
            'code': self.code.name,
            'severity': self.severity.value,
            'message': self.message,
            'context': self.context_dict(),
        }


class SimulatorError(Exception):
    """Raised by the HTTP boundary when the simulator cannot be reached or answers non-2xx."""

    def __init__(self, diagnostic: Diagnostic, status_code: int = 0):
        super().__init__(diagnostic.message)
        self.diagnostic = diagnostic
        self.status_code = status_code


# =============================================================================
# AVAILABILITY (Explicit Absence)
# =============================================================================

class AvailabilityState(Enum):
    """
    Availability of a rendered view.

    MISSING tells the caller to draw its "nothing to display" placeholder.
    """
    PRESENT = "present"
    MISSING = "missing"
