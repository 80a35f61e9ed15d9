"""
Schema unification engine.

Merges schemas observed for the same field or route into one generalized
schema:

  - object properties present in every sample become required
  - string samples with a small set of distinct examples become an enum
  - numeric samples get a minimum/maximum range from their examples
  - samples of different kinds become a oneOf, without structural merging
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace
from typing import Any

from loguru import logger

from ..config import InferenceConfig
from ..errors import SchemaLoadError
from ..schema_ast.loader import SchemaLoader
from ..schema_ast.nodes import (
    PRIMITIVE_KINDS,
    ArrayNode,
    BooleanNode,
    NumberNode,
    ObjectNode,
    OneOfNode,
    SchemaKind,
    SchemaNode,
    StringNode,
)
from .snapshot import MergedSnapshot, Snapshot

# Representative examples filled in by enrich()
DEFAULT_EXAMPLES: dict[SchemaKind, Any] = {
    SchemaKind.STRING: "example",
    SchemaKind.NUMBER: 42,
    SchemaKind.INTEGER: 1,
    SchemaKind.BOOLEAN: True,
}


class SchemaMerger:
    """Merges schema samples into a single schema."""

    def __init__(self, config: InferenceConfig | None = None):
        self.config = config or InferenceConfig()
        self.loader = SchemaLoader(self.config.ref_prefix)

    def merge(self, samples: Sequence[SchemaNode | dict[str, Any]]) -> SchemaNode:
        """
        Merge samples of the same logical value.

        Args:
            samples: Schema nodes, or OpenAPI schema dicts which are loaded first

        Returns:
            The merged schema. No samples (or samples that cannot be loaded)
            give an empty object schema.
        """
        nodes: list[SchemaNode] = []
        for i, sample in enumerate(samples):
            if isinstance(sample, SchemaNode):
                nodes.append(sample)
                continue
            try:
                nodes.append(self.loader.load(sample, f"#/{i}"))
            except SchemaLoadError as e:
                logger.warning(f"Cannot merge malformed samples: {e}")
                return ObjectNode()
        return self._merge(nodes)

    def enrich(self, schema: SchemaNode) -> SchemaNode:
        """
        Fill a representative example on every leaf lacking an example and an enum.

        Recurses into object properties and array items. Applying it twice
        changes nothing.
        """
        kind = schema.kind

        if kind in PRIMITIVE_KINDS:
            if schema.example is None and getattr(schema, "enum", None) is None:
                return replace(schema, example=DEFAULT_EXAMPLES[kind])
            return schema

        if kind is SchemaKind.OBJECT and schema.properties:
            return replace(
                schema,
                properties={name: self.enrich(prop) for name, prop in schema.properties.items()},
            )

        if kind is SchemaKind.ARRAY and schema.items is not None:
            return replace(schema, items=self.enrich(schema.items))

        return schema

    def merge_snapshots(self, snapshots: Sequence[Snapshot]) -> MergedSnapshot:
        """Merge request and response schemas of route snapshots separately."""
        requests = [s.request_schema for s in snapshots if s.request_schema is not None]
        responses = [s.response_schema for s in snapshots if s.response_schema is not None]

        return MergedSnapshot(
            request_schema=self._merge(requests) if requests else None,
            response_schema=self._merge(responses) if responses else None,
        )

    def _merge(self, samples: list[SchemaNode]) -> SchemaNode:
        if not samples:
            return ObjectNode()

        if len(samples) == 1:
            return self._finish(samples[0])

        kinds = {s.kind for s in samples}
        if len(kinds) == 1:
            kind = kinds.pop()

            if kind is SchemaKind.OBJECT:
                return self._merge_objects(samples)

            if kind is SchemaKind.ARRAY:
                return self._merge_arrays(samples)

            if kind in PRIMITIVE_KINDS:
                return self._merge_primitives(samples, kind)

        logger.debug(f"Merging {len(samples)} samples of kinds {sorted(k.value for k in kinds)} as oneOf")
        return OneOfNode(variants=[self._finish(s) for s in samples])

    def _finish(self, schema: SchemaNode) -> SchemaNode:
        return self.enrich(schema) if self.config.include_examples else schema

    def _merge_objects(self, samples: list[ObjectNode]) -> ObjectNode:
        """Merge object samples; a property is required only if every sample has it."""
        total = len(samples)
        collected: dict[str, list[SchemaNode]] = {}

        for sample in samples:
            for name, prop in sample.properties.items():
                collected.setdefault(name, []).append(prop)

        properties = {name: self._merge(props) for name, props in collected.items()}
        required = [name for name, props in collected.items() if len(props) == total]

        additional = [s.additional_properties for s in samples if s.additional_properties is not None]

        return ObjectNode(
            properties=properties,
            required=required,
            additional_properties=self._merge(additional) if additional else None,
            nullable=any(s.nullable for s in samples),
        )

    def _merge_arrays(self, samples: list[ArrayNode]) -> ArrayNode:
        items = [s.items for s in samples if s.items is not None]
        if not items:
            return ArrayNode()
        return ArrayNode(items=self._merge(items))

    def _merge_primitives(self, samples: list[SchemaNode], kind: SchemaKind) -> SchemaNode:
        """Merge same-kind primitive samples from their example values."""
        values: list[Any] = []
        for sample in samples:
            if sample.example is not None and sample.example not in values:
                values.append(sample.example)

        nullable = any(s.nullable for s in samples)
        formats = {getattr(s, "format", None) for s in samples}
        common_format = formats.pop() if len(formats) == 1 else None

        if kind is SchemaKind.STRING:
            # Values of samples that already carry an enum count as observed values
            candidates = list(values)
            for sample in samples:
                for value in sample.enum or ():
                    if value not in candidates:
                        candidates.append(value)

            if self.config.enum_min_values <= len(candidates) <= self.config.enum_max_values:
                return StringNode(format=common_format, enum=tuple(sorted(candidates, key=str)), nullable=nullable)
            return StringNode(format=common_format, example=values[0] if values else None, nullable=nullable)

        if kind is SchemaKind.BOOLEAN:
            return BooleanNode(example=values[0] if values else None, nullable=nullable)

        numbers = [v for v in values if isinstance(v, (int, float)) and not isinstance(v, bool)]
        return NumberNode(
            integer=kind is SchemaKind.INTEGER,
            format=common_format,
            minimum=min(numbers) if numbers else None,
            maximum=max(numbers) if numbers else None,
            example=values[0] if values else None,
            nullable=nullable,
        )
