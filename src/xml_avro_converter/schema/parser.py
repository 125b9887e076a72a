"""Parsing of Avro JSON schema documents into the schema model.

Supports primitive names, the ``{"type": ...}`` object form, records with
namespaces and defaults, arrays, unions, named type references (including
self-references) and enum/map/fixed declarations. Deeper validation of the
schema, such as checking defaults against field types, is left to the binary
writer.
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

from xml_avro_converter.schema.types import (
    NO_DEFAULT,
    ArraySchema,
    FieldSchema,
    OpaqueSchema,
    PrimitiveSchema,
    RecordSchema,
    Schema,
    SchemaKind,
    UnionSchema,
)
from xml_avro_converter.shared import SchemaParseError, get_logger

_PRIMITIVE_NAMES = {
    kind.value: kind
    for kind in (
        SchemaKind.STRING,
        SchemaKind.INT,
        SchemaKind.LONG,
        SchemaKind.FLOAT,
        SchemaKind.DOUBLE,
        SchemaKind.BOOLEAN,
        SchemaKind.NULL,
    )
}

SchemaSource = Union[str, Dict[str, Any], list]


class _SchemaParser:
    """Stateful parser holding the named types seen so far."""

    def __init__(self) -> None:
        self.names: Dict[str, Schema] = {}

    def parse(self, obj: Any, namespace: Optional[str]) -> Schema:
        if isinstance(obj, str):
            return self._parse_name(obj, namespace)
        if isinstance(obj, list):
            if not obj:
                raise SchemaParseError("Union must have at least one candidate")
            return UnionSchema(tuple(self.parse(item, namespace) for item in obj))
        if isinstance(obj, dict):
            return self._parse_object(obj, namespace)
        raise SchemaParseError(f"Unsupported schema element: {obj!r}")

    def _parse_name(self, name: str, namespace: Optional[str]) -> Schema:
        if name in _PRIMITIVE_NAMES:
            return PrimitiveSchema(_PRIMITIVE_NAMES[name])
        if name == SchemaKind.BYTES.value:
            return OpaqueSchema(SchemaKind.BYTES)

        candidates = [name]
        if namespace and "." not in name:
            candidates.insert(0, f"{namespace}.{name}")
        for candidate in candidates:
            if candidate in self.names:
                return self.names[candidate]
        raise SchemaParseError(f"Unknown type: {name}")

    def _register(self, full_name: str, schema: Schema) -> None:
        if full_name in self.names:
            raise SchemaParseError(f"Duplicate definition of type {full_name}")
        self.names[full_name] = schema

    @staticmethod
    def _split_name(obj: Dict[str, Any], namespace: Optional[str]):
        name = obj.get("name")
        if not isinstance(name, str) or not name:
            raise SchemaParseError(f"Named type without a name: {obj!r}")
        if "." in name:
            space, _, short = name.rpartition(".")
            return short, space
        return name, obj.get("namespace", namespace) or None

    def _parse_object(self, obj: Dict[str, Any], namespace: Optional[str]) -> Schema:
        type_name = obj.get("type")
        if type_name is None:
            raise SchemaParseError(f"Schema object without a type: {obj!r}")
        if not isinstance(type_name, str):
            # {"type": [...]} or {"type": {...}} wrap another schema
            return self.parse(type_name, namespace)

        if type_name in _PRIMITIVE_NAMES:
            return PrimitiveSchema(
                _PRIMITIVE_NAMES[type_name], obj.get("logicalType")
            )
        if type_name in (SchemaKind.RECORD.value, "error"):
            return self._parse_record(obj, namespace)
        if type_name == SchemaKind.ARRAY.value:
            if "items" not in obj:
                raise SchemaParseError("Array schema without items")
            return ArraySchema(self.parse(obj["items"], namespace))
        if type_name == SchemaKind.MAP.value:
            if "values" not in obj:
                raise SchemaParseError("Map schema without values")
            self.parse(obj["values"], namespace)
            return OpaqueSchema(SchemaKind.MAP)
        if type_name in (SchemaKind.ENUM.value, SchemaKind.FIXED.value):
            name, space = self._split_name(obj, namespace)
            kind = SchemaKind(type_name)
            attributes = tuple(
                (key, tuple(value) if isinstance(value, list) else value)
                for key, value in obj.items()
                if key in ("symbols", "size", "default")
            )
            schema = OpaqueSchema(kind, name, attributes)
            self._register(f"{space}.{name}" if space else name, schema)
            return schema
        if type_name == SchemaKind.BYTES.value:
            return OpaqueSchema(SchemaKind.BYTES)

        # A reference to a named type written in object form
        return self._parse_name(type_name, namespace)

    def _parse_record(self, obj: Dict[str, Any], namespace: Optional[str]) -> RecordSchema:
        name, space = self._split_name(obj, namespace)
        record = RecordSchema(name=name, namespace=space, doc=obj.get("doc"))
        self._register(record.full_name, record)

        raw_fields = obj.get("fields")
        if not isinstance(raw_fields, list):
            raise SchemaParseError(f"Record {record.full_name} has no field list")

        seen = set()
        for raw_field in raw_fields:
            if not isinstance(raw_field, dict) or "name" not in raw_field:
                raise SchemaParseError(
                    f"Malformed field in record {record.full_name}: {raw_field!r}"
                )
            if "type" not in raw_field:
                raise SchemaParseError(
                    f"Field {raw_field['name']} in record {record.full_name} "
                    "has no type"
                )
            field_name = raw_field["name"]
            if field_name in seen:
                raise SchemaParseError(
                    f"Duplicate field {field_name} in record {record.full_name}"
                )
            seen.add(field_name)
            record.fields.append(
                FieldSchema(
                    name=field_name,
                    schema=self.parse(raw_field["type"], space),
                    default=raw_field.get("default", NO_DEFAULT),
                    doc=raw_field.get("doc"),
                )
            )
        return record


def parse_schema(source: SchemaSource) -> Schema:
    """Parse an Avro schema.

    Args:
        source: JSON text, an already decoded JSON value, or a bare type name

    Returns:
        The parsed schema

    Raises:
        SchemaParseError: if the schema cannot be parsed
    """
    obj: Any = source
    if isinstance(source, str):
        stripped = source.strip()
        if stripped[:1] in ("{", "[", '"'):
            try:
                obj = json.loads(stripped)
            except json.JSONDecodeError as e:
                raise SchemaParseError(f"Invalid schema JSON: {e}") from e
        else:
            obj = stripped

    schema = _SchemaParser().parse(obj, None)
    get_logger(__name__, component="schema_parser").debug(
        "Schema parsed",
        extra={"schema_kind": schema.kind.value},
    )
    return schema


def load_schema(path: Union[str, Path]) -> Schema:
    """Read and parse an ``.avsc`` file."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise SchemaParseError(f"Cannot read schema file {path}: {e}") from e
    return parse_schema(text)
