"""Generic document tree used between markup reading and schema encoding.

Tags and attributes are treated equally: both become named fields of the
parent node. Repeated names are appended to the same list, so a list longer
than one is what the schema has to model as an array. Whether a node is a
text leaf, a record, or (ambiguously) both is only decided by the encoder,
which has the schema.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from xml_avro_converter.shared.errors import StructuralAmbiguityError


@dataclass(eq=False)
class DocumentTree:
    """A node of the document tree.

    Attributes:
        scalar: Text value, set only for pure text elements and attributes
            (``<a>42</a>`` and ``<a><![CDATA[42]]></a>`` both give "42").
        fields: Named child nodes in insertion order. Every list is non-empty.
    """

    scalar: Optional[str] = None
    fields: Dict[str, List["DocumentTree"]] = field(default_factory=dict)

    def add_field(
        self,
        name: str,
        node: "DocumentTree",
        alternate_name: Optional[str] = None,
    ) -> str:
        """Attach a child node under ``name``.

        When ``alternate_name`` is given and ``name`` is already occupied, the
        node is stored under ``alternate_name`` instead. Returns the key the
        node was stored under.
        """
        if not name:
            raise ValueError("Field name cannot be empty")
        if not isinstance(node, DocumentTree):
            raise TypeError("Field value must be a DocumentTree instance")

        key = name
        if alternate_name is not None and name in self.fields:
            key = alternate_name
        self.fields.setdefault(key, []).append(node)
        return key

    def keys(self) -> List[str]:
        """Field names of this node in insertion order."""
        return list(self.fields)

    def values(self, name: str) -> List["DocumentTree"]:
        """All nodes stored under ``name``; empty when the key is absent."""
        return list(self.fields.get(name, ()))

    def value(self, name: str, path: Optional[str] = None) -> "DocumentTree":
        """The single node stored under ``name``.

        Raises:
            StructuralAmbiguityError: if the key holds zero or several nodes
        """
        return ensure_single(self.fields.get(name, []), name, path)

    @property
    def is_leaf(self) -> bool:
        """True when the node carries text and no fields."""
        return self.scalar is not None and not self.fields

    @property
    def has_fields(self) -> bool:
        return bool(self.fields)

    def __contains__(self, name: object) -> bool:
        return name in self.fields

    def __len__(self) -> int:
        return len(self.fields)

    def __iter__(self) -> Iterator[str]:
        return iter(self.fields)

    def walk(self) -> Iterator["DocumentTree"]:
        """Yield this node and every descendant, depth first."""
        yield self
        for children in self.fields.values():
            for child in children:
                yield from child.walk()

    def render(self, prefix: str = "| ") -> str:
        """Format the subtree as indented ``key : value`` lines."""
        lines: List[str] = []
        for key, children in self.fields.items():
            for child in children:
                lines.append(f"{prefix}{key} : {child.scalar}")
                nested = child.render(prefix + "  ")
                if nested:
                    lines.append(nested)
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"DocumentTree(scalar={self.scalar!r}, keys={self.keys()!r})"


def ensure_single(
    nodes: List[DocumentTree], field_name: str, path: Optional[str] = None
) -> DocumentTree:
    """Return the only node of ``nodes``.

    Several tags for one field name mean the document holds an array where
    the schema has a single value; that cannot be resolved automatically.
    """
    if len(nodes) != 1:
        raise StructuralAmbiguityError(field_name, len(nodes), path)
    return nodes[0]
