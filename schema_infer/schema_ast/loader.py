"""
Loader that builds schema nodes from JSON-compatible dicts.

Samples captured at runtime and type overrides from configuration arrive as
OpenAPI-shaped dicts; the loader turns them into nodes by dispatching on the
discriminating keys (`$ref`, `oneOf`/`anyOf`, `allOf`, `type`).
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any

from loguru import logger

from ..errors import SchemaLoadError
from .nodes import (
    DEFAULT_REF_PREFIX,
    AllOfNode,
    ArrayNode,
    BooleanNode,
    EmptyNode,
    NumberNode,
    ObjectNode,
    OneOfNode,
    RefNode,
    SchemaNode,
    StringNode,
)


class SchemaLoader:
    """Loads OpenAPI schema dicts into schema nodes."""

    def __init__(self, ref_prefix: str = DEFAULT_REF_PREFIX):
        self.ref_prefix = ref_prefix

    def load(self, data: Any, path: str = "#") -> SchemaNode:
        """
        Load a single schema dict.

        Args:
            data: The schema dictionary
            path: Location of the schema (for error messages)

        Returns:
            The matching SchemaNode subclass

        Raises:
            SchemaLoadError: If the value, or a nested schema, is not structurally a schema.
                Inconsistent constraints (duplicate enum values, inverted bounds)
                are dropped instead.
        """
        if not isinstance(data, dict):
            raise SchemaLoadError(f"Expected a schema object, got {type(data).__name__}", path)
        return self._load_node(data, path)

    def load_many(self, items: Any, path: str = "#") -> list[SchemaNode]:
        """Load a list of schema dicts."""
        if not isinstance(items, list):
            raise SchemaLoadError(f"Expected a list of schemas, got {type(items).__name__}", path)
        return [self.load(item, f"{path}/{i}") for i, item in enumerate(items)]

    def _load_node(self, data: dict[str, Any], path: str) -> SchemaNode:
        # Handle $ref
        if "$ref" in data:
            return self._load_ref_node(data, path)

        # Handle oneOf/anyOf
        if "oneOf" in data or "anyOf" in data:
            key = "oneOf" if "oneOf" in data else "anyOf"
            return OneOfNode(variants=self._load_children(data[key], f"{path}/{key}"))

        # Handle allOf
        if "allOf" in data:
            return AllOfNode(parts=self._load_children(data["allOf"], f"{path}/allOf"))

        if "type" in data:
            return self._load_type_node(data, data["type"], path)

        # Object with properties but no type
        if "properties" in data:
            return self._load_object_node(data, path)

        return EmptyNode()

    def _load_children(self, items: Any, path: str) -> list[SchemaNode]:
        if not isinstance(items, list):
            raise SchemaLoadError("Expected a list of schemas", path)
        return [self.load(item, f"{path}/{i}") for i, item in enumerate(items)]

    def _load_ref_node(self, data: dict[str, Any], path: str) -> RefNode:
        ref = data["$ref"]
        if not isinstance(ref, str) or not ref:
            raise SchemaLoadError("$ref must be a non-empty string", path)
        if ref.startswith(self.ref_prefix):
            name = ref[len(self.ref_prefix) :]
        else:
            name = ref.rsplit("/", 1)[-1]
        return RefNode(name=name)

    def _load_type_node(self, data: dict[str, Any], type_value: Any, path: str) -> SchemaNode:
        nullable = bool(data.get("nullable", False))

        # Handle array of types, e.g. ["string", "null"]
        if isinstance(type_value, list):
            non_null = [t for t in type_value if t != "null"]
            nullable = nullable or len(non_null) != len(type_value)
            if len(non_null) == 1:
                type_value = non_null[0]
            elif not non_null:
                type_value = "null"
            else:
                variants = [self._load_type_node({**data, "type": t}, t, f"{path}/type/{t}") for t in non_null]
                return OneOfNode(variants=variants)

        if type_value == "object":
            node = self._load_object_node(data, path)
        elif type_value == "array":
            node = self._load_array_node(data, path)
        elif type_value == "string":
            min_length, max_length = self._load_bounds(data, "minLength", "maxLength", path)
            node = StringNode(
                format=data.get("format"),
                enum=self._load_enum(data, path),
                example=data.get("example"),
                min_length=min_length,
                max_length=max_length,
            )
        elif type_value in ("number", "integer"):
            minimum, maximum = self._load_bounds(data, "minimum", "maximum", path)
            node = NumberNode(
                integer=type_value == "integer",
                format=data.get("format"),
                minimum=minimum,
                maximum=maximum,
                example=data.get("example"),
            )
        elif type_value == "boolean":
            node = BooleanNode(example=data.get("example"))
        elif type_value == "null":
            return StringNode(nullable=True)
        else:
            logger.debug(f"Unknown schema type {type_value!r} at {path}, loading as empty schema")
            return EmptyNode()

        if nullable and not isinstance(node, ArrayNode):
            return replace(node, nullable=True)
        return node

    def _load_object_node(self, data: dict[str, Any], path: str) -> ObjectNode:
        raw_properties = data.get("properties") or {}
        if not isinstance(raw_properties, dict):
            raise SchemaLoadError("properties must be an object", f"{path}/properties")

        properties = {
            name: self.load(prop, f"{path}/properties/{name}") for name, prop in raw_properties.items()
        }

        required = []
        for name in data.get("required") or []:
            if name in properties:
                required.append(name)
            else:
                logger.debug(f"Dropping required name {name!r} with no property at {path}")

        additional = data.get("additionalProperties")
        additional_properties = None
        if isinstance(additional, dict):
            additional_properties = self.load(additional, f"{path}/additionalProperties")

        return ObjectNode(
            properties=properties,
            required=required,
            additional_properties=additional_properties,
            nullable=bool(data.get("nullable", False)),
        )

    def _load_array_node(self, data: dict[str, Any], path: str) -> ArrayNode:
        items = data.get("items")
        min_items, max_items = self._load_bounds(data, "minItems", "maxItems", path)
        return ArrayNode(
            items=self.load(items, f"{path}/items") if items is not None else None,
            min_items=min_items,
            max_items=max_items,
            unique_items=bool(data.get("uniqueItems", False)),
        )

    # Inconsistent constraints from captured samples are dropped, not raised

    def _load_enum(self, data: dict[str, Any], path: str) -> tuple[Any, ...] | None:
        raw = data.get("enum")
        if not raw:
            return None
        if not isinstance(raw, list):
            logger.debug(f"Ignoring non-list enum at {path}")
            return None

        values: list[Any] = []
        for value in raw:
            if value not in values:
                values.append(value)
        if len(values) != len(raw):
            logger.debug(f"Dropping duplicate enum values at {path}")
        return tuple(values)

    def _load_bounds(self, data: dict[str, Any], low_key: str, high_key: str, path: str) -> tuple[Any, Any]:
        low = _number_or_none(data.get(low_key), low_key, path)
        high = _number_or_none(data.get(high_key), high_key, path)
        if low is not None and high is not None and low > high:
            logger.debug(f"Dropping inverted {low_key}/{high_key} ({low} > {high}) at {path}")
            return None, None
        return low, high


def _number_or_none(value: Any, key: str, path: str) -> Any:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        logger.debug(f"Ignoring non-numeric {key} {value!r} at {path}")
        return None
    return value
