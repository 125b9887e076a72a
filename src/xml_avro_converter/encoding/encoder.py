"""Schema-driven encoding of document trees into Avro value graphs.

The encoder walks a ``DocumentTree`` and a record schema together:

- union fields are narrowed to one candidate by looking at the first tree
  value only (no backtracking, no deep shape check);
- fields missing from the tree but declaring a default receive the default
  as-is;
- array fields fan out over every tree value under the key;
- record fields recurse and must have exactly one tree value;
- everything else is coerced from the node's scalar text.

Tree keys without a schema field are dropped and reported, never raised.
"""

import copy
import time
from typing import Any, List, Optional

from xml_avro_converter.encoding.coercion import (
    COERCIBLE_KINDS,
    DateTimeRule,
    coerce_primitive,
)
from xml_avro_converter.encoding.values import ArrayValue, RecordValue
from xml_avro_converter.schema.types import (
    COMPLEX_MATCH_KINDS,
    PRIMITIVE_MATCH_KINDS,
    ArraySchema,
    FieldSchema,
    RecordSchema,
    Schema,
    SchemaKind,
    UnionSchema,
)
from xml_avro_converter.shared import (
    ConversionMetrics,
    DiagnosticCode,
    DiagnosticEntry,
    DiagnosticSeverity,
    EncoderConfig,
    SchemaParseError,
    get_logger,
)
from xml_avro_converter.tree.nodes import DocumentTree, ensure_single


def is_appropriate_schema(node: DocumentTree, candidate: Schema) -> bool:
    """Check whether a union candidate can hold a tree value.

    The first text-carrying primitive wins for a node with a scalar. Arrays
    and records are accepted for any node without looking at their shape.
    """
    if candidate.kind in PRIMITIVE_MATCH_KINDS and node.scalar is not None:
        return True
    return candidate.kind in COMPLEX_MATCH_KINDS


def resolve_union(values: List[DocumentTree], candidates: List[Schema]) -> Optional[Schema]:
    """Choose the union candidate for the tree values of one field.

    Returns the first candidate for a field with no values (defaults are
    conventionally typed by the first branch), otherwise the first candidate
    appropriate for the first value, or None when nothing matches.
    """
    if not values:
        return candidates[0]
    for candidate in candidates:
        if is_appropriate_schema(values[0], candidate):
            return candidate
    return None


def _join(path: str, name: str) -> str:
    return f"{path}.{name}" if path else name


class SchemaEncoder:
    """Encodes document trees into value graphs for one record schema.

    Non-fatal events are collected in ``diagnostics`` and counted in
    ``metrics``; both are reset at the start of every ``encode`` call.
    """

    def __init__(
        self,
        config: Optional[EncoderConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        self.config = config or EncoderConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "schema_encoder")
        self.datetime_rule = (
            DateTimeRule(self.config.datetime_marker)
            if self.config.enable_datetime_heuristic
            else None
        )
        self.diagnostics: List[DiagnosticEntry] = []
        self.metrics = ConversionMetrics()

    def encode(self, node: DocumentTree, schema: Schema) -> RecordValue:
        """Encode a document tree against a record schema.

        Args:
            node: Document tree, usually from ``TreeBuilder.build``
            schema: Top-level record schema

        Returns:
            RecordValue matching the schema

        Raises:
            SchemaParseError: if the top-level schema is not a record
            StructuralAmbiguityError: if a singular slot has several values
            MalformedScalarError: if scalar text does not parse
        """
        if not isinstance(schema, RecordSchema):
            raise SchemaParseError(
                f"Top-level schema must be a record, got {schema.kind.value}"
            )

        start_time = time.time()
        self.diagnostics = []
        self.metrics = ConversionMetrics()

        record = self.encode_record(node, schema, "")

        self.metrics.processing_time_ms = (time.time() - start_time) * 1000
        self.logger.debug(
            "Record encoded",
            extra={
                "schema": schema.full_name,
                "fields_encoded": self.metrics.fields_encoded,
                "fields_dropped": self.metrics.fields_dropped,
                "processing_time_ms": self.metrics.processing_time_ms,
            },
        )
        return record

    def encode_record(
        self, node: DocumentTree, schema: RecordSchema, path: str = ""
    ) -> RecordValue:
        """Encode one tree node as a record of ``schema``."""
        record = RecordValue(schema)
        schema_fields = schema.field_map()

        # Avro does not populate defaults itself, so default-only fields are
        # visited alongside the keys present in the tree.
        node_keys = node.keys()
        keys = node_keys + [
            name for name in schema.default_field_names() if name not in node
        ]

        for key in keys:
            field_path = _join(path, key)
            field = schema_fields.get(key)
            if field is None:
                self._drop_unschematized(key, field_path)
                continue

            values = node.values(key)
            field_schema = field.schema
            if isinstance(field_schema, UnionSchema):
                field_schema = self._resolve(values, field_schema, field_path)

            if key not in node:
                record.put(key, copy.deepcopy(field.default))
                self.metrics.defaults_applied += 1
                continue

            value = self._encode_field(node, field, field_schema, field_path)
            if value is not None:
                record.put(key, value)
                self.metrics.fields_encoded += 1

        return record

    def _encode_field(
        self,
        node: DocumentTree,
        field: FieldSchema,
        field_schema: Schema,
        path: str,
    ) -> Any:
        if isinstance(field_schema, ArraySchema):
            return self.encode_array(node.values(field.name), field_schema, path)
        if isinstance(field_schema, RecordSchema):
            child = node.value(field.name, path)
            return self.encode_record(child, field_schema, path)
        child = ensure_single(node.values(field.name), field.name, path)
        return self.encode_primitive(child.scalar, field_schema, path)

    def encode_array(
        self, values: List[DocumentTree], schema: ArraySchema, path: str = ""
    ) -> ArrayValue:
        """Encode every tree value under one key as an array item."""
        items = ArrayValue(schema)
        item_schema = schema.items

        if isinstance(item_schema, RecordSchema):
            for index, value in enumerate(values):
                items.append(
                    self.encode_record(value, item_schema, f"{path}[{index}]")
                )
            return items

        for index, value in enumerate(values):
            item = self.encode_primitive(value.scalar, item_schema, f"{path}[{index}]")
            if item is not None:
                items.append(item)
        return items

    def encode_primitive(self, text: Optional[str], schema: Schema, path: str = "") -> Any:
        """Coerce scalar text for a primitive slot; None means no value."""
        kind = schema.kind
        if kind not in COERCIBLE_KINDS:
            self._report(
                DiagnosticCode.UNSUPPORTED_COERCION,
                f"Unsupported type '{kind.value}' for field '{path}'",
                path,
                {"schema_kind": kind.value},
            )
            self.metrics.unsupported_coercions += 1
            return None

        if kind is SchemaKind.NULL:
            # Usually a union whose match failed and fell back to a null branch
            self.logger.debug(
                "Null type selected, value omitted", extra={"path": path}
            )
            return None

        value = coerce_primitive(text, kind, self.datetime_rule, path)
        if value is None:
            self._report(
                DiagnosticCode.MISSING_SCALAR,
                f"Field '{path}' has no text for type '{kind.value}'",
                path,
                {"schema_kind": kind.value},
            )
        return value

    def _resolve(
        self, values: List[DocumentTree], union: UnionSchema, path: str
    ) -> Schema:
        self.metrics.unions_resolved += 1
        chosen = resolve_union(values, list(union.types))
        if chosen is not None:
            return chosen

        # No candidate fits; the first branch is conventionally null.
        first = union.types[0]
        self.metrics.union_fallbacks += 1
        self._report(
            DiagnosticCode.UNSUPPORTED_COERCION,
            f"No union candidate matches field '{path}', "
            f"falling back to '{first.kind.value}'",
            path,
            {"candidates": [t.kind.value for t in union.types]},
        )
        return first

    def _drop_unschematized(self, key: str, path: str) -> None:
        self.metrics.fields_dropped += 1
        if self.config.report_unschematized_fields:
            self._report(
                DiagnosticCode.UNSCHEMATIZED_FIELD,
                f"Field '{key}' isn't present in the schema and will be dropped",
                path,
            )

    def _report(
        self,
        code: DiagnosticCode,
        message: str,
        path: str,
        details: Optional[dict] = None,
    ) -> None:
        self.logger.warning(message, extra={"path": path, "code": code.name})
        if self.config.record_diagnostics:
            self.diagnostics.append(
                DiagnosticEntry(
                    severity=DiagnosticSeverity.WARNING,
                    code=code,
                    message=message,
                    component="schema_encoder",
                    path=path,
                    details=details,
                    correlation_id=self.correlation_id,
                )
            )
