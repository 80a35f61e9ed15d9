"""
Runtime snapshot values.

A snapshot pairs the request and response schemas observed for one call to a
route. Storing, deduplicating and selecting snapshots is left to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..errors import SchemaLoadError
from ..schema_ast.loader import SchemaLoader
from ..schema_ast.nodes import SchemaNode


@dataclass(frozen=True)
class Snapshot:
    """Schemas observed for one request/response exchange."""

    method: str = ""
    path: str = ""
    request_schema: SchemaNode | None = None
    response_schema: SchemaNode | None = None

    @staticmethod
    def from_dict(d: Any, loader: SchemaLoader | None = None, location: str = "#") -> Snapshot:
        """Create a snapshot from its JSON form (`requestSchema`/`responseSchema` keys)."""
        if not isinstance(d, dict):
            raise SchemaLoadError(f"Expected a snapshot object, got {type(d).__name__}", location)
        loader = loader or SchemaLoader()
        request = d.get("requestSchema")
        response = d.get("responseSchema")
        return Snapshot(
            method=d.get("method", ""),
            path=d.get("path", ""),
            request_schema=loader.load(request, f"{location}/requestSchema") if request is not None else None,
            response_schema=loader.load(response, f"{location}/responseSchema") if response is not None else None,
        )


@dataclass(frozen=True)
class MergedSnapshot:
    """Request and response schemas merged across snapshots."""

    request_schema: SchemaNode | None = None
    response_schema: SchemaNode | None = None
