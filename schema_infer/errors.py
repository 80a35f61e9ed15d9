"""
Exceptions raised by schema_infer.

The type expression parser and the schema merger never raise; these are
reserved for invalid node construction and for loading malformed JSON input.
"""


class SchemaInferError(Exception):
    """Base exception for all schema_infer errors."""

    pass


class SchemaError(SchemaInferError, ValueError):
    """Raised when a schema node is built with inconsistent fields.

    This can happen when:
    - `required` names a property that does not exist
    - `enum` is empty or contains duplicate values
    - a lower bound is greater than its upper bound
    """

    pass


class SchemaLoadError(SchemaInferError):
    """Raised when a JSON value cannot be loaded as a schema."""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        location = f" at {path}" if path else ""
        super().__init__(f"{message}{location}")
