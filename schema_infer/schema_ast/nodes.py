"""
Node definitions for inferred schemas.

Every schema produced by the type expression parser or the schema merger is
a tree of these nodes. Each node class describes exactly one kind, and nodes
are frozen so parsed results can be cached and shared between callers.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

from ..errors import SchemaError

DEFAULT_REF_PREFIX = "#/components/schemas/"


class SchemaKind(str, Enum):
    """Discriminant shared by all schema nodes."""

    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"
    ONE_OF = "oneOf"
    ALL_OF = "allOf"
    REFERENCE = "$ref"
    EMPTY = "empty"


PRIMITIVE_KINDS = frozenset({SchemaKind.STRING, SchemaKind.NUMBER, SchemaKind.INTEGER, SchemaKind.BOOLEAN})

# Kinds that carry a `nullable` flag
NULLABLE_KINDS = PRIMITIVE_KINDS | {SchemaKind.OBJECT}


def _distinct(values: tuple[Any, ...]) -> bool:
    seen: list[Any] = []
    for value in values:
        if value in seen:
            return False
        seen.append(value)
    return True


def _check_bounds(low: Any, high: Any, low_name: str, high_name: str) -> None:
    if low is not None and high is not None and low > high:
        raise SchemaError(f"{low_name} ({low}) is greater than {high_name} ({high})")


@dataclass(frozen=True)
class SchemaNode:
    """Base class for all schema nodes."""

    @property
    def kind(self) -> SchemaKind:
        raise NotImplementedError

    def to_dict(self, ref_prefix: str = DEFAULT_REF_PREFIX) -> dict[str, Any]:
        """Convert the node to an OpenAPI-compatible JSON dict."""
        raise NotImplementedError


@dataclass(frozen=True)
class StringNode(SchemaNode):
    """A string value, optionally restricted to a closed set of values."""

    format: str | None = None
    enum: tuple[Any, ...] | None = None
    example: Any = None
    min_length: int | None = None
    max_length: int | None = None
    nullable: bool = False

    def __post_init__(self):
        if self.enum is not None:
            enum = tuple(self.enum)
            if not enum:
                raise SchemaError("enum must not be empty")
            if not _distinct(enum):
                raise SchemaError(f"enum values must be distinct: {list(enum)}")
            object.__setattr__(self, "enum", enum)
        _check_bounds(self.min_length, self.max_length, "minLength", "maxLength")

    @property
    def kind(self) -> SchemaKind:
        return SchemaKind.STRING

    def to_dict(self, ref_prefix: str = DEFAULT_REF_PREFIX) -> dict[str, Any]:
        result: dict[str, Any] = {"type": "string"}
        if self.format is not None:
            result["format"] = self.format
        if self.enum is not None:
            result["enum"] = list(self.enum)
        if self.example is not None:
            result["example"] = self.example
        if self.min_length is not None:
            result["minLength"] = self.min_length
        if self.max_length is not None:
            result["maxLength"] = self.max_length
        if self.nullable:
            result["nullable"] = True
        return result


@dataclass(frozen=True)
class NumberNode(SchemaNode):
    """A `number`, or an `integer` when `integer` is set."""

    integer: bool = False
    format: str | None = None  # "int64" for 64-bit integers
    minimum: float | None = None
    maximum: float | None = None
    example: Any = None
    nullable: bool = False

    def __post_init__(self):
        _check_bounds(self.minimum, self.maximum, "minimum", "maximum")

    @property
    def kind(self) -> SchemaKind:
        return SchemaKind.INTEGER if self.integer else SchemaKind.NUMBER

    def to_dict(self, ref_prefix: str = DEFAULT_REF_PREFIX) -> dict[str, Any]:
        result: dict[str, Any] = {"type": self.kind.value}
        if self.format is not None:
            result["format"] = self.format
        if self.minimum is not None:
            result["minimum"] = self.minimum
        if self.maximum is not None:
            result["maximum"] = self.maximum
        if self.example is not None:
            result["example"] = self.example
        if self.nullable:
            result["nullable"] = True
        return result


@dataclass(frozen=True)
class BooleanNode(SchemaNode):
    """A boolean value."""

    example: Any = None
    nullable: bool = False

    @property
    def kind(self) -> SchemaKind:
        return SchemaKind.BOOLEAN

    def to_dict(self, ref_prefix: str = DEFAULT_REF_PREFIX) -> dict[str, Any]:
        result: dict[str, Any] = {"type": "boolean"}
        if self.example is not None:
            result["example"] = self.example
        if self.nullable:
            result["nullable"] = True
        return result


@dataclass(frozen=True)
class ObjectNode(SchemaNode):
    """An object with named properties.

    A property missing from `required` is optional, never forbidden.
    """

    properties: Mapping[str, SchemaNode] = field(default_factory=dict)
    required: tuple[str, ...] = ()
    additional_properties: SchemaNode | None = None
    nullable: bool = False

    def __post_init__(self):
        object.__setattr__(self, "properties", MappingProxyType(dict(self.properties)))
        required = tuple(self.required)
        unknown = [name for name in required if name not in self.properties]
        if unknown:
            raise SchemaError(f"required names unknown properties: {unknown}")
        object.__setattr__(self, "required", required)

    @property
    def kind(self) -> SchemaKind:
        return SchemaKind.OBJECT

    def to_dict(self, ref_prefix: str = DEFAULT_REF_PREFIX) -> dict[str, Any]:
        result: dict[str, Any] = {"type": "object"}
        if self.properties:
            result["properties"] = {name: prop.to_dict(ref_prefix) for name, prop in self.properties.items()}
        if self.required:
            result["required"] = list(self.required)
        if self.additional_properties is not None:
            result["additionalProperties"] = self.additional_properties.to_dict(ref_prefix)
        if self.nullable:
            result["nullable"] = True
        return result


@dataclass(frozen=True)
class ArrayNode(SchemaNode):
    """An array; tuples are arrays with `min_items == max_items`."""

    items: SchemaNode | None = None
    min_items: int | None = None
    max_items: int | None = None
    unique_items: bool = False

    def __post_init__(self):
        _check_bounds(self.min_items, self.max_items, "minItems", "maxItems")

    @property
    def kind(self) -> SchemaKind:
        return SchemaKind.ARRAY

    def to_dict(self, ref_prefix: str = DEFAULT_REF_PREFIX) -> dict[str, Any]:
        result: dict[str, Any] = {"type": "array"}
        if self.items is not None:
            result["items"] = self.items.to_dict(ref_prefix)
        if self.min_items is not None:
            result["minItems"] = self.min_items
        if self.max_items is not None:
            result["maxItems"] = self.max_items
        if self.unique_items:
            result["uniqueItems"] = True
        return result


@dataclass(frozen=True)
class OneOfNode(SchemaNode):
    """Heterogeneous alternatives with no implied discriminant."""

    variants: tuple[SchemaNode, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "variants", tuple(self.variants))

    @property
    def kind(self) -> SchemaKind:
        return SchemaKind.ONE_OF

    def to_dict(self, ref_prefix: str = DEFAULT_REF_PREFIX) -> dict[str, Any]:
        return {"oneOf": [variant.to_dict(ref_prefix) for variant in self.variants]}


@dataclass(frozen=True)
class AllOfNode(SchemaNode):
    """Structural merge of all parts."""

    parts: tuple[SchemaNode, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "parts", tuple(self.parts))

    @property
    def kind(self) -> SchemaKind:
        return SchemaKind.ALL_OF

    def to_dict(self, ref_prefix: str = DEFAULT_REF_PREFIX) -> dict[str, Any]:
        return {"allOf": [part.to_dict(ref_prefix) for part in self.parts]}


@dataclass(frozen=True)
class RefNode(SchemaNode):
    """An unresolved named type. Never expanded."""

    name: str = ""

    @property
    def kind(self) -> SchemaKind:
        return SchemaKind.REFERENCE

    def to_dict(self, ref_prefix: str = DEFAULT_REF_PREFIX) -> dict[str, Any]:
        return {"$ref": f"{ref_prefix}{self.name}"}


@dataclass(frozen=True)
class EmptyNode(SchemaNode):
    """A type with no further information (any, unknown, void...)."""

    @property
    def kind(self) -> SchemaKind:
        return SchemaKind.EMPTY

    def to_dict(self, ref_prefix: str = DEFAULT_REF_PREFIX) -> dict[str, Any]:
        return {}
