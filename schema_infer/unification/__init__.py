"""
Unification of runtime schema samples.
"""

from __future__ import annotations

from .merger import DEFAULT_EXAMPLES, SchemaMerger
from .occurrence import FieldOccurrence, FieldOccurrenceAnalyzer, OccurrenceReport
from .snapshot import MergedSnapshot, Snapshot

__all__ = [
    "SchemaMerger",
    "DEFAULT_EXAMPLES",
    "FieldOccurrenceAnalyzer",
    "FieldOccurrence",
    "OccurrenceReport",
    "Snapshot",
    "MergedSnapshot",
]
