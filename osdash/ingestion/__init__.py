"""
Ingestion Layer

RESPONSIBILITY: Turn raw simulator JSON into strict snapshot values.
MUST NOT: Validate graph references, deduplicate, reorder.
"""

from .normalizer import SnapshotNormalizer, NormalizationReport

__all__ = ['SnapshotNormalizer', 'NormalizationReport']
