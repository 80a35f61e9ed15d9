"""
Type expression parsing.
"""

from __future__ import annotations

from .parser import CacheStats, ParseResult, TypeDefinition, TypeExpressionParser
from .splitter import has_top_level, is_wrapped, split_top_level

__all__ = [
    "TypeExpressionParser",
    "ParseResult",
    "CacheStats",
    "TypeDefinition",
    "split_top_level",
    "has_top_level",
    "is_wrapped",
]
