"""Schema model: a closed set of Avro schema variants.

Each variant is a frozen dataclass tagged with a ``SchemaKind``. Only
primitives, records, arrays and unions take part in encoding; enums, maps,
fixed and bytes are parsed so that they can be reported as unsupported.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Tuple, Union


class SchemaKind(Enum):
    """Avro schema types, valued by their Avro type name."""

    STRING = "string"
    INT = "int"
    LONG = "long"
    FLOAT = "float"
    DOUBLE = "double"
    BOOLEAN = "boolean"
    NULL = "null"
    BYTES = "bytes"
    RECORD = "record"
    ARRAY = "array"
    UNION = "union"
    ENUM = "enum"
    MAP = "map"
    FIXED = "fixed"


PRIMITIVE_KINDS: FrozenSet[SchemaKind] = frozenset({
    SchemaKind.STRING,
    SchemaKind.INT,
    SchemaKind.LONG,
    SchemaKind.FLOAT,
    SchemaKind.DOUBLE,
    SchemaKind.BOOLEAN,
    SchemaKind.NULL,
})

# A union candidate of these kinds matches a tree value that carries text.
PRIMITIVE_MATCH_KINDS: FrozenSet[SchemaKind] = PRIMITIVE_KINDS - {SchemaKind.NULL}

# A union candidate of these kinds matches any tree value.
COMPLEX_MATCH_KINDS: FrozenSet[SchemaKind] = frozenset({
    SchemaKind.ARRAY,
    SchemaKind.RECORD,
})


class _NoDefault:
    """Marker for a field without a declared default (``null`` is a default)."""

    _instance: Optional["_NoDefault"] = None

    def __new__(cls) -> "_NoDefault":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NO_DEFAULT"

    def __bool__(self) -> bool:
        return False


NO_DEFAULT = _NoDefault()


@dataclass(frozen=True)
class PrimitiveSchema:
    """A primitive type, optionally annotated with a logical type."""

    kind: SchemaKind
    logical_type: Optional[str] = None

    def __post_init__(self) -> None:
        if self.kind not in PRIMITIVE_KINDS:
            raise ValueError(f"{self.kind.value} is not a primitive type")


@dataclass(frozen=True)
class FieldSchema:
    """A named record field with its schema and optional default."""

    name: str
    schema: "Schema"
    default: Any = NO_DEFAULT
    doc: Optional[str] = None

    @property
    def has_default(self) -> bool:
        return self.default is not NO_DEFAULT


@dataclass(eq=False)
class RecordSchema:
    """A named record with ordered fields.

    Not frozen: recursive records are registered before their fields are
    parsed, and the fields are filled in afterwards. Equality is identity,
    which keeps comparisons of self-referencing records finite.
    """

    name: str
    namespace: Optional[str] = None
    fields: List[FieldSchema] = field(default_factory=list)
    doc: Optional[str] = None
    kind: SchemaKind = field(default=SchemaKind.RECORD, init=False)

    @property
    def full_name(self) -> str:
        if self.namespace:
            return f"{self.namespace}.{self.name}"
        return self.name

    def field_map(self) -> Dict[str, FieldSchema]:
        """Fields keyed by name."""
        return {f.name: f for f in self.fields}

    def default_field_names(self) -> List[str]:
        """Names of fields with a declared default, in declaration order."""
        return [f.name for f in self.fields if f.has_default]

    def __repr__(self) -> str:
        return f"RecordSchema({self.full_name!r}, fields={[f.name for f in self.fields]!r})"


@dataclass(frozen=True)
class ArraySchema:
    """An array of a single element schema."""

    items: "Schema"
    kind: SchemaKind = field(default=SchemaKind.ARRAY, init=False)


@dataclass(frozen=True)
class UnionSchema:
    """An ordered list of candidate schemas."""

    types: Tuple["Schema", ...]
    kind: SchemaKind = field(default=SchemaKind.UNION, init=False)

    def __post_init__(self) -> None:
        if not self.types:
            raise ValueError("Union must have at least one candidate")


@dataclass(frozen=True)
class OpaqueSchema:
    """A schema kind the encoder has no coercion rule for."""

    kind: SchemaKind
    name: Optional[str] = None
    attributes: Tuple[Tuple[str, Any], ...] = ()


Schema = Union[PrimitiveSchema, RecordSchema, ArraySchema, UnionSchema, OpaqueSchema]
