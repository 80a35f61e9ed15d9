"""
Field occurrence analysis.

Flattens schema samples to dotted field paths (`user.name`, `items[].id`) and
reports how many samples contain each path and which example values were
seen there:

  - present in every sample       -> required field
  - missing from at least one     -> optional field
  - 2 to 10 distinct example values -> enum candidate

The analysis is diagnostic. Required properties in merged schemas come from
SchemaMerger, which decides per nested object rather than per flattened path.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from ..config import InferenceConfig
from ..errors import SchemaLoadError
from ..schema_ast.loader import SchemaLoader
from ..schema_ast.nodes import SchemaKind, SchemaNode
from .snapshot import Snapshot


@dataclass
class FieldOccurrence:
    """Occurrence count and observed values for one field path."""

    path: str
    count: int  # samples containing this path
    total: int  # total samples analyzed
    values: list[Any] = field(default_factory=list)  # distinct examples, first-seen order

    @property
    def share(self) -> float:
        """Fraction of samples containing this path, from 0.0 to 1.0."""
        return self.count / self.total if self.total else 0.0


@dataclass
class OccurrenceReport:
    """Complete analysis result."""

    total_samples: int
    required_fields: list[str] = field(default_factory=list)
    optional_fields: list[str] = field(default_factory=list)
    enum_candidates: dict[str, list[Any]] = field(default_factory=dict)
    occurrences: list[FieldOccurrence] = field(default_factory=list)


class FieldOccurrenceAnalyzer:
    """Counts field paths and example values across schema samples."""

    def __init__(self, config: InferenceConfig | None = None):
        self.config = config or InferenceConfig()
        self.loader = SchemaLoader(self.config.ref_prefix)

    def analyze(self, samples: Sequence[SchemaNode | dict[str, Any]]) -> OccurrenceReport:
        """
        Analyze top-level schema samples, e.g. one per captured response.

        Dict samples are loaded first. Samples that cannot be loaded give an
        empty report, as SchemaMerger.merge gives an empty object.
        """
        nodes: list[SchemaNode] = []
        for i, sample in enumerate(samples):
            if isinstance(sample, SchemaNode):
                nodes.append(sample)
                continue
            try:
                nodes.append(self.loader.load(sample, f"#/{i}"))
            except SchemaLoadError as e:
                logger.warning(f"Cannot analyze malformed samples: {e}")
                return OccurrenceReport(total_samples=0)
        return self._analyze([[node] for node in nodes])

    def analyze_snapshots(self, snapshots: Sequence[Snapshot]) -> OccurrenceReport:
        """Analyze request and response schemas, counting each snapshot once."""
        return self._analyze(
            [[s for s in (snapshot.request_schema, snapshot.response_schema) if s is not None] for snapshot in snapshots]
        )

    def _analyze(self, samples: list[list[SchemaNode]]) -> OccurrenceReport:
        total = len(samples)
        occurrences: dict[str, FieldOccurrence] = {}

        for schemas in samples:
            # A path counts once per sample, even if it appears in several schemas
            seen: dict[str, list[Any]] = {}
            for schema in schemas:
                self._collect(schema, seen, "")

            for path, values in seen.items():
                occurrence = occurrences.setdefault(path, FieldOccurrence(path=path, count=0, total=total))
                occurrence.count += 1
                for value in values:
                    if value not in occurrence.values:
                        occurrence.values.append(value)

        report = OccurrenceReport(total_samples=total, occurrences=list(occurrences.values()))
        for occurrence in report.occurrences:
            if occurrence.count == total:
                report.required_fields.append(occurrence.path)
            else:
                report.optional_fields.append(occurrence.path)

            if self.config.enum_min_values <= len(occurrence.values) <= self.config.enum_max_values:
                report.enum_candidates[occurrence.path] = list(occurrence.values)

        return report

    def _collect(self, schema: SchemaNode, seen: dict[str, list[Any]], prefix: str) -> None:
        """Record every property path below `schema` with its example, if any."""
        if schema.kind is SchemaKind.OBJECT:
            for name, prop in schema.properties.items():
                path = f"{prefix}.{name}" if prefix else name
                values = seen.setdefault(path, [])

                example = getattr(prop, "example", None)
                if example is not None and example not in values:
                    values.append(example)

                self._collect(prop, seen, path)

        elif schema.kind is SchemaKind.ARRAY and schema.items is not None:
            self._collect(schema.items, seen, f"{prefix}[]")
