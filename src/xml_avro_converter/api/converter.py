"""Conversion API with progressive disclosure.

Level 1 is the module functions ``convert``, ``convert_string`` and
``convert_file`` for one-off conversions. Level 2 is ``XMLAvroConverter``,
which parses its schema once and reuses it across documents.

Unlike diagnostics, structural and scalar errors are not absorbed: a
conversion either produces a complete record or raises.
"""

import time
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from xml_avro_converter.encoding import RecordValue, SchemaEncoder
from xml_avro_converter.readers import SourceType, get_reader
from xml_avro_converter.schema import (
    ArraySchema,
    OpaqueSchema,
    PrimitiveSchema,
    RecordSchema,
    Schema,
    SchemaSource,
    UnionSchema,
    load_schema,
    parse_schema,
)
from xml_avro_converter.shared import (
    ConversionMetrics,
    ConverterConfig,
    DiagnosticEntry,
    DiagnosticSeverity,
    SchemaParseError,
    get_logger,
)
from xml_avro_converter.tree import DocumentTree, TreeBuilder

SchemaInput = Union[Schema, SchemaSource, Path]

MS_PER_SECOND = 1000  # Milliseconds per second conversion

_SCHEMA_TYPES = (PrimitiveSchema, RecordSchema, ArraySchema, UnionSchema, OpaqueSchema)


@dataclass
class ConversionResult:
    """Outcome of converting one document."""

    record: RecordValue
    tree: DocumentTree
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    metrics: ConversionMetrics = field(default_factory=ConversionMetrics)
    correlation_id: Optional[str] = None

    @property
    def is_lossless(self) -> bool:
        """True when every tree value found a place in the record."""
        return not self.metrics.has_data_loss

    @property
    def warnings(self) -> List[DiagnosticEntry]:
        return [
            d for d in self.diagnostics if d.severity is DiagnosticSeverity.WARNING
        ]

    def to_dict(self) -> Dict[str, Any]:
        """Convert the result to a JSON-friendly dictionary."""
        return {
            "record": self.record.to_dict(),
            "diagnostics": [d.to_dict() for d in self.diagnostics],
            "metrics": self.metrics.to_dict(),
            "correlation_id": self.correlation_id,
        }


def resolve_schema(schema: SchemaInput) -> Schema:
    """Accept a parsed schema, an Avro JSON value or text, or an ``.avsc`` path."""
    if isinstance(schema, _SCHEMA_TYPES):
        return schema
    if isinstance(schema, Path):
        return load_schema(schema)
    if isinstance(schema, (str, dict, list)):
        return parse_schema(schema)
    raise SchemaParseError(f"Unsupported schema input: {type(schema).__name__}")


class XMLAvroConverter:
    """Converter bound to one record schema and configuration.

    Example:
        >>> converter = XMLAvroConverter(schema_json)
        >>> result = converter.convert('<Order id="7"><Total>9.5</Total></Order>')
        >>> result.record["Order"]["Total"]
        9.5
    """

    def __init__(
        self,
        schema: SchemaInput,
        config: Optional[ConverterConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        self.config = config or ConverterConfig()
        self.schema = resolve_schema(schema)
        if not isinstance(self.schema, RecordSchema):
            raise SchemaParseError(
                f"Top-level schema must be a record, got {self.schema.kind.value}"
            )
        self.correlation_id = correlation_id

    def _correlation_id(self, override: Optional[str]) -> Optional[str]:
        if override is not None:
            return override
        if self.correlation_id is not None:
            return self.correlation_id
        if self.config.global_.enable_correlation_tracking:
            return uuid.uuid4().hex
        return None

    def build_tree(
        self, xml_input: SourceType, correlation_id: Optional[str] = None
    ) -> DocumentTree:
        """Read markup and build its document tree without encoding it."""
        tree, _ = self._build(xml_input, correlation_id or self.correlation_id)
        return tree

    def _build(self, xml_input: SourceType, correlation_id: Optional[str]):
        reader = get_reader(self.config.tree.reader, correlation_id)
        root = reader.read(xml_input)
        builder = TreeBuilder(self.config.tree, correlation_id)
        return builder.build(root), builder.metrics

    def encode_tree(
        self, tree: DocumentTree, correlation_id: Optional[str] = None
    ) -> ConversionResult:
        """Encode an already built tree against the converter's schema."""
        correlation_id = correlation_id or self.correlation_id
        encoder = SchemaEncoder(self.config.encoder, correlation_id)
        record = encoder.encode(tree, self.schema)
        return ConversionResult(
            record=record,
            tree=tree,
            diagnostics=list(encoder.diagnostics),
            metrics=encoder.metrics,
            correlation_id=correlation_id,
        )

    def convert(
        self, xml_input: SourceType, correlation_id: Optional[str] = None
    ) -> ConversionResult:
        """Read, build and encode one document.

        Args:
            xml_input: Markup as string or bytes, a Path, or a file-like object
            correlation_id: Optional correlation ID for request tracking

        Returns:
            ConversionResult with the record, tree, diagnostics and metrics

        Raises:
            MarkupReadError: if the markup is malformed
            StructuralAmbiguityError: if the schema under-models cardinality
            MalformedScalarError: if scalar text does not parse
        """
        start_time = time.time()
        correlation_id = self._correlation_id(correlation_id)

        tree, build_metrics = self._build(xml_input, correlation_id)
        result = self.encode_tree(tree, correlation_id)

        result.metrics.elements_processed = build_metrics.elements_processed
        result.metrics.attributes_processed = build_metrics.attributes_processed
        result.metrics.processing_time_ms = (time.time() - start_time) * MS_PER_SECOND

        get_logger(__name__, correlation_id, "converter").info(
            "Conversion completed",
            extra={
                "schema": self.schema.full_name,
                "elements": result.metrics.elements_processed,
                "warnings": len(result.warnings),
                "processing_time_ms": result.metrics.processing_time_ms,
            },
        )
        return result


def convert(
    xml_input: SourceType,
    schema: SchemaInput,
    config: Optional[ConverterConfig] = None,
    correlation_id: Optional[str] = None,
) -> ConversionResult:
    """Convert XML from any supported source into an Avro value graph.

    This is the primary entry point for one-off conversions.

    Args:
        xml_input: XML content as string, bytes, file-like object, or Path
        schema: Parsed schema, Avro JSON (text or decoded), or ``.avsc`` Path
        config: Optional converter configuration
        correlation_id: Optional correlation ID for request tracking

    Returns:
        ConversionResult containing the record, tree, diagnostics and metrics

    Examples:
        >>> schema = {
        ...     "type": "record", "name": "Doc",
        ...     "fields": [{"name": "root", "type": {
        ...         "type": "record", "name": "Root",
        ...         "fields": [{"name": "item", "type": "int"}]}}],
        ... }
        >>> convert("<root><item>42</item></root>", schema).record.to_dict()
        {'root': {'item': 42}}
    """
    converter = XMLAvroConverter(schema, config, correlation_id)
    return converter.convert(xml_input)


def convert_string(
    xml_string: str,
    schema: SchemaInput,
    config: Optional[ConverterConfig] = None,
    correlation_id: Optional[str] = None,
) -> ConversionResult:
    """Convert XML held in a string."""
    if not isinstance(xml_string, str):
        raise TypeError("xml_string must be a str")
    return convert(xml_string, schema, config, correlation_id)


def convert_file(
    file_path: Union[str, Path],
    schema: SchemaInput,
    config: Optional[ConverterConfig] = None,
    correlation_id: Optional[str] = None,
) -> ConversionResult:
    """Convert the XML file at ``file_path``."""
    return convert(Path(file_path), schema, config, correlation_id)


def build_tree(
    xml_input: SourceType,
    config: Optional[ConverterConfig] = None,
    correlation_id: Optional[str] = None,
) -> DocumentTree:
    """Read markup and return its document tree; no schema is involved."""
    config = config or ConverterConfig()
    reader = get_reader(config.tree.reader, correlation_id)
    return TreeBuilder(config.tree, correlation_id).build(reader.read(xml_input))
