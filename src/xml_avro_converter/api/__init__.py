"""Public conversion API.

Provides module-level conversion functions and the reusable
``XMLAvroConverter`` class.
"""

from .converter import (
    ConversionResult,
    SchemaInput,
    XMLAvroConverter,
    build_tree,
    convert,
    convert_file,
    convert_string,
    resolve_schema,
)

__all__ = [
    "ConversionResult",
    "SchemaInput",
    "XMLAvroConverter",
    "build_tree",
    "convert",
    "convert_file",
    "convert_string",
    "resolve_schema",
]
