"""
Schema AST module.

Contains the schema node definitions and the loader for JSON schema dicts.
"""

from __future__ import annotations

from .loader import SchemaLoader
from .nodes import (
    DEFAULT_REF_PREFIX,
    NULLABLE_KINDS,
    PRIMITIVE_KINDS,
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

__all__ = [
    "DEFAULT_REF_PREFIX",
    "NULLABLE_KINDS",
    "PRIMITIVE_KINDS",
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
]
