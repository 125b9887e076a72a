"""Tests for the encoded value graph containers."""

from xml_avro_converter.encoding import ArrayValue, RecordValue, to_plain
from xml_avro_converter.schema import ArraySchema, PrimitiveSchema, RecordSchema, SchemaKind


class TestRecordValue:
    """Test RecordValue mapping behaviour."""

    def test_put_and_get(self) -> None:
        """Test values are stored by field name in insertion order."""
        record = RecordValue(RecordSchema("Order"))
        record.put("id", 7)
        record.put("note", None)

        assert record["id"] == 7
        assert record.get("missing", "fallback") == "fallback"
        assert record.keys() == ["id", "note"]
        assert "note" in record
        assert len(record) == 2
        assert list(record) == ["id", "note"]

    def test_equality(self) -> None:
        """Test records compare by schema identity and values."""
        schema = RecordSchema("Order")

        assert RecordValue(schema, {"a": 1}) == RecordValue(schema, {"a": 1})
        assert RecordValue(schema, {"a": 1}) != RecordValue(RecordSchema("Order"), {"a": 1})
        assert RecordValue(schema, {"a": 1}) == {"a": 1}

    def test_repr_names_schema(self) -> None:
        """Test the repr shows the full schema name."""
        record = RecordValue(RecordSchema("Order", namespace="com.example"), {"a": 1})
        assert repr(record) == "RecordValue('com.example.Order', {'a': 1})"


class TestToPlain:
    """Test conversion to JSON-friendly values."""

    def test_nested_graph(self) -> None:
        """Test records and arrays become dicts and lists."""
        line = RecordSchema("Line")
        items = ArrayValue(ArraySchema(line), [RecordValue(line, {"sku": "a"})])
        order = RecordValue(RecordSchema("Order"), {"Line": items, "total": 9.5})

        plain = order.to_dict()

        assert plain == {"Line": [{"sku": "a"}], "total": 9.5}
        assert type(plain["Line"]) is list
        assert type(plain["Line"][0]) is dict

    def test_array_keeps_schema(self) -> None:
        """Test arrays behave as lists bound to their schema."""
        schema = ArraySchema(PrimitiveSchema(SchemaKind.INT))
        items = ArrayValue(schema, [1, 2])

        assert items == [1, 2]
        assert items.schema is schema

    def test_scalars_unchanged(self) -> None:
        """Test plain values pass through."""
        assert to_plain(5) == 5
        assert to_plain({"a": [1]}) == {"a": [1]}
