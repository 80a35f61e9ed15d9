"""
Configuration for type expression parsing and sample unification.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .schema_ast.nodes import DEFAULT_REF_PREFIX


@dataclass
class InferenceConfig:
    """Configuration options for schema inference."""

    # Nesting depth after which the parser returns an object placeholder
    max_depth: int = 10

    # Exact type strings mapped to schema dicts, checked before built-in types
    type_overrides: dict[str, dict[str, Any]] = field(default_factory=dict)

    # Prefix used when serializing references
    ref_prefix: str = DEFAULT_REF_PREFIX

    # Distinct sample values needed for a string to be inferred as an enum
    enum_min_values: int = 2
    enum_max_values: int = 10

    # Fill representative examples on single samples and mixed-kind variants
    include_examples: bool = True

    @staticmethod
    def from_dict(d: dict) -> InferenceConfig:
        """Create a config from a dictionary."""
        config = InferenceConfig()
        for k, v in d.items():
            if hasattr(config, k):
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "max_depth": self.max_depth,
            "type_overrides": self.type_overrides,
            "ref_prefix": self.ref_prefix,
            "enum_min_values": self.enum_min_values,
            "enum_max_values": self.enum_max_values,
            "include_examples": self.include_examples,
        }
