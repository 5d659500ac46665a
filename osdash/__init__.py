"""
OS Simulator Dashboard Core

This package turns snapshots served by the OS simulator backend into
renderable, positioned structures for the monitoring dashboard.

LAYER STRUCTURE:
================

1. CONTRACTS (contracts/)
   - Immutable value types shared by every layer
   - Diagnostic vocabulary (errors are data)

2. INGESTION (ingestion/)
   - The ONLY place loose backend payloads are tolerated
   - Outputs: DeadlockSnapshot, ScheduleResult + diagnostics

3. CORE (core/)
   - Graph Model Builder (RAG + WFG)
   - Timeline Reconstructor (Gantt rows)
   - Topology metrics (structural only)

4. VISUALIZATION (visualization/)
   - Layout Engine: row layout (RAG), circular layout (WFG)
   - Renderable node/edge/cell contracts

5. PRESENTATION (presentation/)
   - Banners, legends, placeholders, summary cards

6. BOUNDARY (client, orchestrator, api/)
   - Simulator HTTP client, polling orchestrator, read API

CONSTRAINTS ENFORCED:
=====================
- Immutability-first: all derived structures are frozen
- Deterministic: identical snapshots always produce identical views
- No incremental patching: every snapshot is rebuilt from scratch
- The deadlock verdict is never recomputed, only rendered
"""

__version__ = "0.1.0"
