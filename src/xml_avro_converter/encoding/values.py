"""Value graph produced by the encoder.

Records and arrays keep a reference to the schema they were built against so
a binary writer can serialize them without guessing types. Scalars are plain
Python values.
"""

from typing import Any, Dict, Iterable, Iterator, List, Optional

from xml_avro_converter.schema.types import ArraySchema, RecordSchema


class RecordValue:
    """A record instance: field name to value, absent fields omitted."""

    __slots__ = ("schema", "_values")

    def __init__(
        self, schema: RecordSchema, values: Optional[Dict[str, Any]] = None
    ) -> None:
        self.schema = schema
        self._values: Dict[str, Any] = dict(values or {})

    def put(self, name: str, value: Any) -> None:
        self._values[name] = value

    def get(self, name: str, default: Any = None) -> Any:
        return self._values.get(name, default)

    def keys(self) -> List[str]:
        return list(self._values)

    def items(self) -> Iterable:
        return self._values.items()

    def __getitem__(self, name: str) -> Any:
        return self._values[name]

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, RecordValue):
            return self.schema is other.schema and self._values == other._values
        if isinstance(other, dict):
            return self._values == other
        return NotImplemented

    def to_dict(self) -> Dict[str, Any]:
        """Recursively convert to plain dictionaries and lists."""
        return {name: to_plain(value) for name, value in self._values.items()}

    def __repr__(self) -> str:
        return f"RecordValue({self.schema.full_name!r}, {self._values!r})"


class ArrayValue(list):
    """A list of encoded items bound to its array schema."""

    def __init__(self, schema: ArraySchema, items: Iterable[Any] = ()) -> None:
        super().__init__(items)
        self.schema = schema


def to_plain(value: Any) -> Any:
    """Convert a value graph into JSON-serializable plain values."""
    if isinstance(value, RecordValue):
        return value.to_dict()
    if isinstance(value, list):
        return [to_plain(item) for item in value]
    if isinstance(value, dict):
        return {key: to_plain(item) for key, item in value.items()}
    return value
