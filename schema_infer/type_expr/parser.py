"""
Type expression parser.

Converts type expressions such as `string[]`, `'a' | 'b'`,
`{ id: number; tags?: Set<string> }` or `Record<string, User>` into schema
nodes. The grammar is a fixed, self-contained subset:

  primitive names        string, number, boolean, Date, bigint, any, ...
  arrays                 T[], Array<T>, ReadonlyArray<T>
  unions                 A | B | null
  intersections          A & B
  object literals        { name: T; other?: U }
  tuples                 [A, B]
  generic applications   Promise<T>, Record<K, V>, Set<T>, Partial<T>, ...
  named references       User

Parsing never raises. Anything the grammar cannot represent exactly is
simplified, and the simplification is reported as a warning.
"""

from __future__ import annotations

import re
import threading
from dataclasses import dataclass, field, replace
from typing import Any

from loguru import logger

from ..config import InferenceConfig
from ..schema_ast.loader import SchemaLoader
from ..schema_ast.nodes import (
    NULLABLE_KINDS,
    AllOfNode,
    ArrayNode,
    BooleanNode,
    EmptyNode,
    NumberNode,
    ObjectNode,
    OneOfNode,
    RefNode,
    SchemaKind,
    SchemaNode,
    StringNode,
)
from .splitter import has_top_level, is_wrapped, split_top_level

# Fixed confidence reported for cached results
CACHED_CONFIDENCE = 0.9

_IDENTIFIER = re.compile(r"^[A-Za-z_$][\w$]*(?:\.[A-Za-z_$][\w$]*)*$")
_MEMBER = re.compile(
    r"""^(?:readonly\s+)?(?P<name>[\w$]+|'[^']*'|"[^"]*")(?P<optional>\?)?\s*:\s*(?P<type>.+)$""",
    re.DOTALL,
)
_INDEX_SIGNATURE = re.compile(r"^(?:readonly\s+)?\[\s*\w+\s*:\s*(?:string|number)\s*\]\s*:\s*(?P<type>.+)$", re.DOTALL)


@dataclass
class ParseResult:
    """Result of parsing a type expression."""

    schema: SchemaNode
    confidence: float
    warnings: list[str] = field(default_factory=list)


@dataclass
class CacheStats:
    """Snapshot of the parser cache, for diagnostics."""

    size: int
    keys: list[str]


@dataclass
class TypeDefinition:
    """A structured type description, e.g. produced from doc comments."""

    name: str
    type: str
    properties: dict[str, TypeDefinition] | None = None
    element_type: TypeDefinition | None = None
    optional: bool = False
    description: str | None = None
    enum_values: list[Any] | None = None


class TypeExpressionParser:
    """Parses type expressions into schema nodes, caching results per instance."""

    PRIMITIVE_TYPES: dict[str, SchemaNode] = {
        "string": StringNode(),
        "number": NumberNode(),
        "boolean": BooleanNode(),
        "Date": StringNode(format="date-time"),
        "null": StringNode(nullable=True),
        "undefined": StringNode(),
        "symbol": StringNode(),
        "any": EmptyNode(),
        "unknown": EmptyNode(),
        "void": EmptyNode(),
        "never": EmptyNode(),
        "object": ObjectNode(),
        "bigint": NumberNode(integer=True, format="int64"),
    }

    NULL_MEMBERS = frozenset({"null", "undefined"})

    # Generic names, grouped by how their arguments are interpreted
    ARRAY_GENERICS = frozenset({"Array", "ReadonlyArray"})
    UNWRAP_GENERICS = frozenset({"Promise", "Awaited", "Response"})
    DICTIONARY_GENERICS = frozenset({"Record", "Map"})
    SET_GENERICS = frozenset({"Set", "ReadonlySet"})
    MODIFIER_GENERICS = frozenset({"Partial", "Required", "Readonly"})
    SELECTION_GENERICS = frozenset({"Pick", "Omit"})

    def __init__(
        self,
        config: InferenceConfig | None = None,
        *,
        max_depth: int | None = None,
        type_overrides: dict[str, SchemaNode | dict[str, Any]] | None = None,
    ):
        """
        Initialize the parser.

        Args:
            config: Inference configuration (defaults are used when omitted)
            max_depth: Overrides `config.max_depth`
            type_overrides: Extra overrides, merged over `config.type_overrides`.
                Values may be schema nodes or OpenAPI schema dicts.
        """
        self.config = config or InferenceConfig()
        self.max_depth = max_depth if max_depth is not None else self.config.max_depth

        loader = SchemaLoader(self.config.ref_prefix)
        overrides = {**self.config.type_overrides, **(type_overrides or {})}
        self.type_overrides: dict[str, SchemaNode] = {
            name: value if isinstance(value, SchemaNode) else loader.load(value, f"type_overrides/{name}")
            for name, value in overrides.items()
        }

        self._cache: dict[str, SchemaNode] = {}
        self._lock = threading.Lock()

    def parse(self, expr: str) -> ParseResult:
        """
        Parse a type expression.

        Args:
            expr: The type expression

        Returns:
            ParseResult with the schema, a confidence in [0.1, 1.0] and the
            warnings recorded while parsing. Cached results report a fixed
            confidence of 0.9 and no warnings.
        """
        key = expr.strip()

        with self._lock:
            cached = self._cache.get(key)
            if cached is not None:
                logger.debug(f"Type expression cache hit: {key!r}")
                return ParseResult(schema=cached, confidence=CACHED_CONFIDENCE, warnings=[])

            warnings: list[str] = []
            schema = self._parse(key, 0, warnings)
            self._cache[key] = schema

        for warning in warnings:
            logger.debug(f"{key!r}: {warning}")

        return ParseResult(
            schema=schema,
            confidence=self._calculate_confidence(schema, warnings),
            warnings=warnings,
        )

    def clear_cache(self) -> None:
        """Empty the parse cache."""
        with self._lock:
            self._cache.clear()

    def cache_stats(self) -> CacheStats:
        """Report cache size and keys."""
        with self._lock:
            return CacheStats(size=len(self._cache), keys=list(self._cache))

    def type_definition_to_schema(self, type_def: TypeDefinition) -> SchemaNode:
        """Convert a structured type definition into a schema node."""
        if type_def.enum_values:
            values: list[Any] = []
            for value in type_def.enum_values:
                if value not in values:
                    values.append(value)
            return StringNode(enum=tuple(values))

        if type_def.properties:
            properties = {name: self.type_definition_to_schema(prop) for name, prop in type_def.properties.items()}
            required = [name for name, prop in type_def.properties.items() if not prop.optional]
            return ObjectNode(properties=properties, required=required)

        if type_def.element_type is not None:
            return ArrayNode(items=self.type_definition_to_schema(type_def.element_type))

        return self.parse(type_def.type).schema

    # --- Dispatch ---

    def _parse(self, expr: str, depth: int, warnings: list[str]) -> SchemaNode:
        if depth > self.max_depth:
            warnings.append(f"Maximum type depth ({self.max_depth}) exceeded")
            return ObjectNode()

        expr = expr.strip()
        if not expr:
            warnings.append("Empty type expression")
            return EmptyNode()

        # Custom overrides take absolute priority
        if expr in self.type_overrides:
            return self.type_overrides[expr]

        if expr in self.PRIMITIVE_TYPES:
            return self.PRIMITIVE_TYPES[expr]

        # (A | B) grouping
        if is_wrapped(expr, "(", ")"):
            return self._parse(expr[1:-1], depth + 1, warnings)

        element = self._match_array(expr)
        if element is not None:
            return ArrayNode(items=self._parse(element, depth + 1, warnings))

        if has_top_level(expr, "|"):
            return self._parse_union(expr, depth, warnings)

        if has_top_level(expr, "&"):
            parts = split_top_level(expr, "&")
            return AllOfNode(parts=[self._parse(part, depth + 1, warnings) for part in parts])

        if is_wrapped(expr, "{", "}"):
            return self._parse_object_literal(expr[1:-1], depth, warnings)

        if is_wrapped(expr, "[", "]"):
            return self._parse_tuple(expr[1:-1], depth, warnings)

        generic = self._match_generic(expr)
        if generic is not None:
            base, args = generic
            return self._parse_generic(base, args, depth, warnings)

        if _is_string_literal(expr):
            return StringNode(enum=(expr[1:-1],))

        if _IDENTIFIER.match(expr):
            return RefNode(name=expr)

        warnings.append(f"Unrecognized type expression {expr!r}")
        return EmptyNode()

    def _match_array(self, expr: str) -> str | None:
        """Return the element type of `T[]` or `Array<T>`, or None."""
        # `A | B[]` is a union whose last member is an array
        if has_top_level(expr, "|") or has_top_level(expr, "&"):
            return None

        if expr.endswith("[]") and expr[:-2].strip():
            return expr[:-2]

        generic = self._match_generic(expr)
        if generic is not None:
            base, args = generic
            if base in self.ARRAY_GENERICS and len(args) == 1:
                return args[0]

        return None

    def _match_generic(self, expr: str) -> tuple[str, list[str]] | None:
        """Split `Base<A, B>` into its base name and arguments."""
        start = expr.find("<")
        if start <= 0:
            return None

        base = expr[:start].strip()
        if not _IDENTIFIER.match(base) or not is_wrapped(expr[start:], "<", ">"):
            return None

        args = split_top_level(expr[start + 1 : -1], ",")
        if not args:
            return None
        return base, args

    # --- Unions ---

    def _parse_union(self, expr: str, depth: int, warnings: list[str]) -> SchemaNode:
        members = split_top_level(expr, "|")

        # 'a' | 'b' -> string enum
        if members and all(_is_string_literal(m) for m in members):
            values: list[str] = []
            for member in members:
                if member[1:-1] not in values:
                    values.append(member[1:-1])
            return StringNode(enum=tuple(values))

        non_null = [m for m in members if m not in self.NULL_MEMBERS]
        is_nullable = len(non_null) != len(members)

        if not non_null:
            return self.PRIMITIVE_TYPES["null"]

        if len(non_null) == 1:
            schema = self._parse(non_null[0], depth + 1, warnings)
            if is_nullable:
                schema = self._make_nullable(schema, non_null[0], warnings)
            return schema

        if is_nullable:
            warnings.append(f"Null members dropped from union {expr}")
        return OneOfNode(variants=[self._parse(m, depth + 1, warnings) for m in non_null])

    def _make_nullable(self, schema: SchemaNode, expr: str, warnings: list[str]) -> SchemaNode:
        if schema.kind in NULLABLE_KINDS:
            return replace(schema, nullable=True)
        warnings.append(f"Nullability of {expr} dropped")
        return schema

    # --- Object literals and tuples ---

    def _parse_object_literal(self, content: str, depth: int, warnings: list[str]) -> ObjectNode:
        content = content.strip()
        if not content:
            return ObjectNode()

        properties: dict[str, SchemaNode] = {}
        required: list[str] = []
        additional_properties = None

        members = [m for part in split_top_level(content, ";") for m in split_top_level(part, ",")]
        for member in members:
            match = _MEMBER.match(member)
            if match:
                name = match.group("name")
                if _is_string_literal(name):
                    name = name[1:-1]
                properties[name] = self._parse(match.group("type"), depth + 1, warnings)
                if not match.group("optional") and name not in required:
                    required.append(name)
                continue

            # [key: string]: T
            index = _INDEX_SIGNATURE.match(member)
            if index:
                additional_properties = self._parse(index.group("type"), depth + 1, warnings)

        return ObjectNode(properties=properties, required=required, additional_properties=additional_properties)

    def _parse_tuple(self, content: str, depth: int, warnings: list[str]) -> ArrayNode:
        elements = split_top_level(content, ",")
        if not elements:
            return ArrayNode(min_items=0, max_items=0)

        return ArrayNode(
            items=OneOfNode(variants=[self._parse(e, depth + 1, warnings) for e in elements]),
            min_items=len(elements),
            max_items=len(elements),
        )

    # --- Generic applications ---

    def _parse_generic(self, base: str, args: list[str], depth: int, warnings: list[str]) -> SchemaNode:
        if base in self.UNWRAP_GENERICS:
            return self._parse(args[0], depth + 1, warnings)

        if base in self.DICTIONARY_GENERICS and len(args) >= 2:
            return ObjectNode(additional_properties=self._parse(args[1], depth + 1, warnings))

        if base in self.SET_GENERICS:
            return ArrayNode(items=self._parse(args[0], depth + 1, warnings), unique_items=True)

        if base in self.ARRAY_GENERICS:
            return ArrayNode(items=self._parse(args[0], depth + 1, warnings))

        if base in self.MODIFIER_GENERICS:
            warnings.append(f"Utility type {base}<{args[0]}> simplified to base type")
            return self._parse(args[0], depth + 1, warnings)

        if base in self.SELECTION_GENERICS:
            warnings.append(f"Utility type {base}<{', '.join(args)}> simplified to base type, field selection dropped")
            return self._parse(args[0], depth + 1, warnings)

        warnings.append(f"Generic type {base}<{', '.join(args)}> simplified, type arguments discarded")
        return RefNode(name=base)

    # --- Confidence ---

    def _calculate_confidence(self, schema: SchemaNode, warnings: list[str]) -> float:
        confidence = 1.0
        confidence -= len(warnings) * 0.1

        # References are not resolved
        if schema.kind is SchemaKind.REFERENCE:
            confidence -= 0.2

        if schema.kind is SchemaKind.EMPTY:
            confidence -= 0.3

        return round(max(0.1, min(1.0, confidence)), 4)


def _is_string_literal(text: str) -> bool:
    return len(text) >= 2 and text[0] in "'\"" and text[-1] == text[0]
