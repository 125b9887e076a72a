"""Schema-driven encoding of document trees.

Key Components:
    SchemaEncoder: Walks a DocumentTree with a record schema
    RecordValue, ArrayValue: Value graph containers bound to their schemas
    coerce_primitive: Text to typed scalar rules, including date-time parsing
    write_container: Optional Avro object container output (needs fastavro)
"""

from .coercion import (
    COERCIBLE_KINDS,
    DateTimeRule,
    coerce_boolean,
    coerce_float,
    coerce_int,
    coerce_long,
    coerce_primitive,
    parse_datetime_millis,
)
from .container import CODECS, write_container
from .encoder import SchemaEncoder, is_appropriate_schema, resolve_union
from .values import ArrayValue, RecordValue, to_plain

__all__ = [
    "CODECS",
    "COERCIBLE_KINDS",
    "ArrayValue",
    "DateTimeRule",
    "RecordValue",
    "SchemaEncoder",
    "coerce_boolean",
    "coerce_float",
    "coerce_int",
    "coerce_long",
    "coerce_primitive",
    "is_appropriate_schema",
    "parse_datetime_millis",
    "resolve_union",
    "to_plain",
    "write_container",
]
