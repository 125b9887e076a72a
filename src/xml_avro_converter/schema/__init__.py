"""Avro schema model and parser.

Key Components:
    Schema: Union of PrimitiveSchema, RecordSchema, ArraySchema, UnionSchema
        and OpaqueSchema
    parse_schema: Parses Avro JSON schema documents
"""

from .parser import SchemaSource, load_schema, parse_schema
from .types import (
    COMPLEX_MATCH_KINDS,
    NO_DEFAULT,
    PRIMITIVE_KINDS,
    PRIMITIVE_MATCH_KINDS,
    ArraySchema,
    FieldSchema,
    OpaqueSchema,
    PrimitiveSchema,
    RecordSchema,
    Schema,
    SchemaKind,
    UnionSchema,
)

__all__ = [
    "COMPLEX_MATCH_KINDS",
    "NO_DEFAULT",
    "PRIMITIVE_KINDS",
    "PRIMITIVE_MATCH_KINDS",
    "ArraySchema",
    "FieldSchema",
    "OpaqueSchema",
    "PrimitiveSchema",
    "RecordSchema",
    "Schema",
    "SchemaKind",
    "SchemaSource",
    "UnionSchema",
    "load_schema",
    "parse_schema",
]
