"""Schema inference from type expressions and runtime samples

A Python package that turns type expressions (`string[]`, `'a' | 'b'`,
`Record<string, User>`) into OpenAPI-style schemas, and merges schemas
observed at runtime into one schema with required fields, enums and
numeric ranges.
"""

__version__ = "0.1.0"

from .config import InferenceConfig
from .errors import SchemaError, SchemaInferError, SchemaLoadError
from .report import ReportRenderer, render_report
from .schema_ast import (
    AllOfNode,
    ArrayNode,
    BooleanNode,
    EmptyNode,
    NumberNode,
    ObjectNode,
    OneOfNode,
    RefNode,
    SchemaKind,
    SchemaLoader,
    SchemaNode,
    StringNode,
)
from .type_expr import CacheStats, ParseResult, TypeDefinition, TypeExpressionParser
from .unification import (
    FieldOccurrence,
    FieldOccurrenceAnalyzer,
    MergedSnapshot,
    OccurrenceReport,
    SchemaMerger,
    Snapshot,
)

__all__ = [
    "InferenceConfig",
    "SchemaInferError",
    "SchemaError",
    "SchemaLoadError",
    "SchemaKind",
    "SchemaNode",
    "StringNode",
    "NumberNode",
    "BooleanNode",
    "ObjectNode",
    "ArrayNode",
    "OneOfNode",
    "AllOfNode",
    "RefNode",
    "EmptyNode",
    "SchemaLoader",
    "TypeExpressionParser",
    "ParseResult",
    "CacheStats",
    "TypeDefinition",
    "SchemaMerger",
    "FieldOccurrenceAnalyzer",
    "FieldOccurrence",
    "OccurrenceReport",
    "Snapshot",
    "MergedSnapshot",
    "ReportRenderer",
    "render_report",
]
